"""
Dependency injection for the proxy service.
Provides the shared upstream HTTP client to route handlers.
"""
from __future__ import annotations

import httpx

from shared.config import get_settings

# Module-level singleton, opened at startup and closed at shutdown
_upstream: httpx.AsyncClient | None = None


def build_upstream_client() -> httpx.AsyncClient:
    settings = get_settings()
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.request_timeout_s, connect=5.0),
        follow_redirects=True,
    )


def init_dependencies(client: httpx.AsyncClient) -> None:
    """Install the upstream client. Called once at startup."""
    global _upstream
    _upstream = client


async def close_dependencies() -> None:
    global _upstream
    if _upstream is not None:
        await _upstream.aclose()
        _upstream = None


def get_upstream_client() -> httpx.AsyncClient:
    """FastAPI dependency: returns the shared upstream client, opening it on first use."""
    global _upstream
    if _upstream is None:
        _upstream = build_upstream_client()
    return _upstream
