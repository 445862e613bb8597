"""
FastAPI application factory for the Hardwood passthrough proxy.

Creates the app with:
- ESPN and TheSportsDB passthrough routes
- Middleware stack
- Health check endpoint
- Lifespan management for the shared upstream client
"""
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from shared.utils.logging import get_logger, setup_logging

from api.dependencies import build_upstream_client, close_dependencies, init_dependencies
from api.middleware import setup_middleware
from api.routes.proxy import router as proxy_router

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Open the upstream client on startup and close it on shutdown."""
    setup_logging("proxy")
    init_dependencies(build_upstream_client())
    logger.info("proxy_started")
    try:
        yield
    finally:
        await close_dependencies()
        logger.info("proxy_stopped")


@asynccontextmanager
async def _noop_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    yield


def create_app(*, use_lifespan: bool = True) -> FastAPI:
    """Create and configure the FastAPI application. Set use_lifespan=False for tests."""
    app = FastAPI(
        title="Hardwood Proxy",
        description="Allowlisted passthrough to public sports data APIs",
        version="1.0.0",
        lifespan=lifespan if use_lifespan else _noop_lifespan,
        docs_url="/docs",
        redoc_url=None,
    )

    setup_middleware(app)
    app.include_router(proxy_router)

    @app.get("/health", tags=["system"])
    async def health() -> dict[str, str]:
        return {"status": "ok", "service": "proxy"}

    return app


app = create_app()
