"""
Async HTTP client for talking to the ESPN passthrough proxy.
Maps every transport problem onto TransportError and records metrics.
"""
from __future__ import annotations

import time
from typing import Any, Optional

import httpx

from shared.config import get_settings
from shared.errors import TransportError
from shared.utils.logging import get_logger
from shared.utils.metrics import SCOREBOARD_REQUESTS

logger = get_logger(__name__)


class ProxyHTTPClient:
    """
    Async client for the allowlisted proxy endpoint.

    Every request is ``GET <proxy_url>?path=<segment>&<query>``. The proxy
    returns the upstream body verbatim, so the caller gets raw JSON back.
    """

    def __init__(
        self,
        proxy_url: str | None = None,
        timeout_s: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        settings = get_settings()
        self._proxy_url = proxy_url or settings.proxy_url
        self._timeout = timeout_s or settings.request_timeout_s
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def start(self) -> None:
        """Initialize the underlying httpx client."""
        self._client = httpx.AsyncClient(
            headers={"accept": "application/json"},
            timeout=httpx.Timeout(self._timeout, connect=5.0),
            follow_redirects=True,
            transport=self._transport,
        )

    async def close(self) -> None:
        """Close the underlying httpx client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "ProxyHTTPClient":
        await self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def get_json(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """
        Fetch one proxied endpoint and decode its JSON body.

        Args:
            path: Allowlisted upstream segment, e.g. ``basketball/nba/scoreboard``.
            params: Extra query parameters forwarded by the proxy.

        Raises:
            TransportError: Non-2xx status, connection failure, or a body that
                is not JSON.
        """
        if not self._client:
            raise RuntimeError("ProxyHTTPClient not started. Call start() first.")

        query: dict[str, Any] = {"path": path}
        if params:
            query.update(params)
        endpoint = path.rsplit("/", 1)[-1]

        start_time = time.perf_counter()
        try:
            resp = await self._client.get(self._proxy_url, params=query)
        except httpx.HTTPError as exc:
            SCOREBOARD_REQUESTS.labels(endpoint=endpoint, status="error").inc()
            logger.warning("proxy_request_error", path=path, error=str(exc))
            raise TransportError(str(exc) or exc.__class__.__name__) from exc

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        SCOREBOARD_REQUESTS.labels(endpoint=endpoint, status=str(resp.status_code)).inc()

        if not resp.is_success:
            logger.warning(
                "proxy_http_error",
                path=path,
                status=resp.status_code,
                latency_ms=round(elapsed_ms, 2),
            )
            raise TransportError.from_status(resp.status_code)

        try:
            data = resp.json()
        except ValueError as exc:
            logger.warning("proxy_invalid_json", path=path, status=resp.status_code)
            raise TransportError("Invalid JSON body", status_code=resp.status_code) from exc

        logger.debug(
            "proxy_request_success",
            path=path,
            status=resp.status_code,
            latency_ms=round(elapsed_ms, 2),
        )
        return data
