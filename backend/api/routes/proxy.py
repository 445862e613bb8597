"""
Passthrough proxy endpoints.

GET /v1/proxy/espn?path=basketball/nba/scoreboard&dates=20251224-20251230
GET /v1/proxy/sportsdb?endpoint=eventsnextleague&id=4516

Both forward a restricted request server-side so browsers avoid CORS, and
return the upstream body verbatim with the upstream status code.
"""
from __future__ import annotations

from typing import Any, Mapping

import httpx
from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

from shared.config import Settings, get_settings
from shared.utils.logging import get_logger
from shared.utils.metrics import PROXY_REQUESTS, UPSTREAM_LATENCY, atrack_latency

from api.dependencies import get_upstream_client

logger = get_logger(__name__)
router = APIRouter(prefix="/v1/proxy", tags=["proxy"])

JSON_CONTENT_TYPE = "application/json; charset=utf-8"

ALLOWED_ESPN_PATHS: frozenset[str] = frozenset({
    "football/nfl/scoreboard",
    # Scoreboards
    "basketball/nba/scoreboard",
    "basketball/wnba/scoreboard",
    "basketball/mens-college-basketball/scoreboard",
    "basketball/womens-college-basketball/scoreboard",
    # Game summaries (leaders / player stats)
    "basketball/nba/summary",
    "basketball/wnba/summary",
    "basketball/mens-college-basketball/summary",
    "basketball/womens-college-basketball/summary",
    # Standings
    "basketball/nba/standings",
    "basketball/wnba/standings",
    "basketball/mens-college-basketball/standings",
    "basketball/womens-college-basketball/standings",
})

ALLOWED_ESPN_QUERY_KEYS: frozenset[str] = frozenset({
    # scoreboards
    "dates", "date", "limit", "groups", "lang", "region",
    # paging / season selection
    "seasontype", "season", "sort", "page", "pagesize",
    # summaries
    "event",
})

ALLOWED_SPORTSDB_ENDPOINTS: frozenset[str] = frozenset({
    "eventsnextleague",
    "eventsround",
    "eventspastleague",
    "lookupleague",
})

ESPN_CACHE_CONTROL = "public, max-age=60"
SPORTSDB_CACHE_CONTROL = "public, max-age=300"


def filter_query(params: Mapping[str, str], allowed: frozenset[str]) -> dict[str, str]:
    """Keep allowlisted, non-blank query parameters; ``path`` is never forwarded."""
    return {
        key: value
        for key, value in params.items()
        if key != "path" and key in allowed and value is not None and value.strip()
    }


def _passthrough(upstream: httpx.Response, cache_control: str) -> Response:
    return Response(
        content=upstream.content,
        status_code=upstream.status_code,
        headers={"cache-control": cache_control},
        media_type=JSON_CONTENT_TYPE,
    )


def _error(status_code: int, body: dict[str, Any]) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body, media_type=JSON_CONTENT_TYPE)


@router.get("/espn")
async def espn_proxy(
    request: Request,
    client: httpx.AsyncClient = Depends(get_upstream_client),
    settings: Settings = Depends(get_settings),
) -> Response:
    """Forward an allowlisted ESPN site API request."""
    path = (request.query_params.get("path") or "").strip()
    if not path or path not in ALLOWED_ESPN_PATHS:
        PROXY_REQUESTS.labels(route="espn", status="400").inc()
        logger.info("proxy_path_rejected", path=path)
        return _error(400, {"error": "Invalid or disallowed path.", "path": path})

    query = filter_query(request.query_params, ALLOWED_ESPN_QUERY_KEYS)
    url = f"{settings.espn_upstream_base.rstrip('/')}/{path}"

    try:
        async with atrack_latency(UPSTREAM_LATENCY, upstream="espn"):
            upstream = await client.get(
                url,
                params=query or None,
                headers={
                    "user-agent": settings.upstream_user_agent,
                    "accept": "application/json,text/plain,*/*",
                },
            )
    except Exception as exc:
        PROXY_REQUESTS.labels(route="espn", status="500").inc()
        logger.error("proxy_upstream_error", upstream="espn", path=path, error=str(exc))
        return _error(500, {"error": str(exc) or exc.__class__.__name__})

    PROXY_REQUESTS.labels(route="espn", status=str(upstream.status_code)).inc()
    return _passthrough(upstream, ESPN_CACHE_CONTROL)


@router.get("/sportsdb")
async def sportsdb_proxy(
    request: Request,
    client: httpx.AsyncClient = Depends(get_upstream_client),
    settings: Settings = Depends(get_settings),
) -> Response:
    """Forward an allowlisted TheSportsDB lookup."""
    endpoint = (request.query_params.get("endpoint") or "").strip()
    event_id = (request.query_params.get("id") or "").strip()

    if endpoint not in ALLOWED_SPORTSDB_ENDPOINTS or not event_id:
        PROXY_REQUESTS.labels(route="sportsdb", status="400").inc()
        return _error(400, {"error": "Bad request", "endpoint": endpoint, "id": event_id})

    base = settings.sportsdb_upstream_base.rstrip("/")
    url = f"{base}/{settings.thesportsdb_api_key}/{endpoint}.php"

    try:
        async with atrack_latency(UPSTREAM_LATENCY, upstream="sportsdb"):
            upstream = await client.get(
                url,
                params={"id": event_id},
                headers={"accept": "application/json", "user-agent": settings.upstream_user_agent},
            )
    except Exception as exc:
        PROXY_REQUESTS.labels(route="sportsdb", status="500").inc()
        logger.error("proxy_upstream_error", upstream="sportsdb", endpoint=endpoint, error=str(exc))
        return _error(500, {"error": str(exc) or exc.__class__.__name__})

    PROXY_REQUESTS.labels(route="sportsdb", status=str(upstream.status_code)).inc()
    return _passthrough(upstream, SPORTSDB_CACHE_CONTROL)
