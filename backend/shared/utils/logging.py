"""
structlog setup shared by the proxy and the scheduler.

Records from uvicorn and httpx go through the stdlib root logger, so they are
rendered by the same formatter as our own events. Per-load and per-request
fields (``league``, ``request_id``) travel in contextvars and are merged into
every line logged while they are bound.
"""
from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from typing import Iterator

import structlog

from shared.config import Environment, Settings, get_settings

_QUIET_LOGGERS = ("uvicorn.access", "httpx", "httpcore")


def _renderer(settings: Settings) -> structlog.types.Processor:
    if settings.environment == Environment.DEV:
        return structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
    return structlog.processors.JSONRenderer()


def setup_logging(service_name: str) -> None:
    """Route structlog and stdlib logging to stdout, tagged with ``service_name``."""
    settings = get_settings()
    pre_chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            _renderer(settings),
        ],
        foreign_pre_chain=pre_chain,
    ))
    logging.basicConfig(handlers=[handler], level=settings.log_level.upper(), force=True)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(
        service=service_name,
        environment=settings.environment.value,
    )


@contextmanager
def league_context(league_key: str) -> Iterator[None]:
    """Tag everything logged during one league load with its key."""
    with structlog.contextvars.bound_contextvars(league=league_key):
        yield


@contextmanager
def request_context(request_id: str, upstream_path: str | None = None) -> Iterator[None]:
    """Tag everything logged while serving one proxy request."""
    with structlog.contextvars.bound_contextvars(request_id=request_id, upstream_path=upstream_path):
        yield


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
