"""
Proxy middleware: request context and access logging, the JSON 500 handler,
and browser CORS for the static pages.
"""
from __future__ import annotations

import time
import uuid

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from shared.config import get_settings
from shared.utils.logging import get_logger, request_context

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class ProxyRequestMiddleware(BaseHTTPMiddleware):
    """
    Assigns a request id, binds it (and the requested upstream path) into the
    logging context, and writes one access line per proxied call.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:16]
        request.state.request_id = request_id
        start = time.monotonic()

        with request_context(request_id, request.query_params.get("path")):
            response = await call_next(request)
            if request.url.path != "/health":
                logger.info(
                    "proxy_request",
                    method=request.method,
                    route=request.url.path,
                    status=response.status_code,
                    duration_ms=round((time.monotonic() - start) * 1000, 2),
                )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response


async def unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    """Anything a route did not turn into a response becomes ``{"error": ...}``."""
    request_id = getattr(request.state, "request_id", None)
    logger.error(
        "unhandled_exception",
        route=request.url.path,
        request_id=request_id,
        error=str(exc),
        exc_info=True,
    )
    return JSONResponse(
        status_code=500,
        content={"error": str(exc) or exc.__class__.__name__},
        headers={REQUEST_ID_HEADER: request_id} if request_id else None,
    )


def setup_middleware(app: FastAPI) -> None:
    """Install middleware; the last one added is the outermost."""
    app.add_exception_handler(Exception, unhandled_error)
    app.add_middleware(ProxyRequestMiddleware)
    # Outermost, so preflight requests are answered before anything else runs
    app.add_middleware(
        CORSMiddleware,
        allow_origins=get_settings().cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER, "Cache-Control"],
    )
