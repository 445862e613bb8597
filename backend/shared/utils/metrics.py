"""
Lightweight metrics collection for the Hardwood services.
Wraps prometheus_client with async-safe patterns.
"""
from __future__ import annotations

import time
from contextlib import asynccontextmanager
from typing import AsyncIterator

from prometheus_client import Counter, Histogram, start_http_server

from shared.config import get_settings
from shared.utils.logging import get_logger

logger = get_logger(__name__)

# ── Counters ────────────────────────────────────────────────────────────
PROXY_REQUESTS = Counter(
    "hh_proxy_requests_total",
    "Requests served by the passthrough proxy",
    ["route", "status"],
)
SCOREBOARD_REQUESTS = Counter(
    "hh_scoreboard_requests_total",
    "Requests issued by the scoreboard client through the proxy",
    ["endpoint", "status"],
)
LEAGUE_LOADS = Counter(
    "hh_league_loads_total",
    "League load cycles by outcome",
    ["league", "outcome"],
)
LEADER_DETAIL_FAILURES = Counter(
    "hh_leader_detail_failures_total",
    "Per-event summary fetches skipped by the leaders aggregator",
    ["league"],
)

# ── Histograms ──────────────────────────────────────────────────────────
UPSTREAM_LATENCY = Histogram(
    "hh_upstream_latency_seconds",
    "Upstream request latency seen by the proxy",
    ["upstream"],
    buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)
LEAGUE_LOAD_DURATION = Histogram(
    "hh_league_load_seconds",
    "Wall time of one league load cycle",
    ["league"],
    buckets=(0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0),
)


@asynccontextmanager
async def atrack_latency(histogram: Histogram, **labels: str) -> AsyncIterator[None]:
    """Async context manager to track operation latency."""
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed = time.perf_counter() - start
        histogram.labels(**labels).observe(elapsed)


def start_metrics_server(port: int | None = None) -> None:
    """Start the Prometheus metrics HTTP server."""
    settings = get_settings()
    if not settings.metrics_enabled:
        return
    metrics_port = port or settings.metrics_port
    try:
        start_http_server(metrics_port)
        logger.info("metrics_server_started", port=metrics_port)
    except OSError as exc:
        logger.warning("metrics_server_failed", error=str(exc), port=metrics_port)
