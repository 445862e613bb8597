"""
Refresh scheduler for the Hardwood scoreboards.
Loads every configured league in page order at startup, then again on a
fixed timer. Manual refreshes run alongside without cancelling anything.
"""
from __future__ import annotations

import asyncio
import signal
from typing import Any, Optional

from shared.config import Settings, get_settings
from shared.leagues import LEAGUES, resolve_league
from shared.models.domain import LeaguePanel
from shared.utils.http_client import ProxyHTTPClient
from shared.utils.logging import get_logger, setup_logging
from shared.utils.metrics import start_metrics_server

from builder.service import LeagueLoader, PanelWriter
from ingest.providers.espn import ESPNScoreboardClient

logger = get_logger(__name__)


class RefreshScheduler:
    """
    Drives league loads.

    Leagues are loaded one after another, never in parallel. An in-flight
    load is never cancelled; when a manual refresh overlaps a timed one, the
    load that finishes last overwrites the panel.
    """

    def __init__(
        self,
        loader: LeagueLoader,
        writer: PanelWriter,
        league_keys: list[str],
        interval_s: float,
    ) -> None:
        self._loader = loader
        self._writer = writer
        self._league_keys = list(league_keys)
        self._interval_s = interval_s
        self._shutdown = asyncio.Event()
        self._manual: set[asyncio.Task[Any]] = set()

    @property
    def league_keys(self) -> list[str]:
        return list(self._league_keys)

    async def load_and_write(self, league_key: str) -> LeaguePanel:
        panel = await self._loader.load_league(league_key)
        path = self._writer.write(panel)
        logger.debug("panel_written", league=league_key, path=str(path), ok=panel.ok)
        return panel

    async def refresh_all(self) -> list[LeaguePanel]:
        """One pass over every league, in configured order."""
        panels: list[LeaguePanel] = []
        for key in self._league_keys:
            try:
                panels.append(await self.load_and_write(key))
            except Exception as exc:
                logger.error("league_refresh_error", league=key, error=str(exc), exc_info=True)
        return panels

    def trigger_refresh(self, league_key: Optional[str] = None) -> asyncio.Task[Any]:
        """
        Start a manual refresh alongside whatever is already running.

        With a key, that one league is reloaded. Without one, a full pass runs
        in page order, one league at a time.
        """
        if league_key:
            task = asyncio.create_task(self.load_and_write(league_key), name=f"refresh:{league_key}")
        else:
            task = asyncio.create_task(self.refresh_all(), name="refresh:all")
        self._manual.add(task)
        task.add_done_callback(self._manual_done)
        logger.info("manual_refresh_triggered", league=league_key or "all")
        return task

    def _manual_done(self, task: asyncio.Task[Any]) -> None:
        self._manual.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("manual_refresh_error", task=task.get_name(), error=str(task.exception()))

    async def run(self) -> None:
        """Startup pass, then one pass per interval until shutdown."""
        while not self._shutdown.is_set():
            try:
                await self.refresh_all()
            except asyncio.CancelledError:
                break
            try:
                await asyncio.wait_for(self._shutdown.wait(), timeout=self._interval_s)
            except asyncio.TimeoutError:
                continue
        if self._manual:
            await asyncio.gather(*self._manual, return_exceptions=True)

    def request_shutdown(self) -> None:
        self._shutdown.set()


def build_scheduler(http: ProxyHTTPClient, settings: Settings) -> RefreshScheduler:
    for key in settings.leagues:
        resolve_league(LEAGUES, key)
    client = ESPNScoreboardClient(http, LEAGUES, settings)
    return RefreshScheduler(
        loader=LeagueLoader(client, settings),
        writer=PanelWriter(settings.output_dir),
        league_keys=settings.leagues,
        interval_s=settings.refresh_interval_s,
    )


async def main() -> None:
    """Scheduler service entrypoint."""
    settings = get_settings()
    setup_logging("scheduler")
    start_metrics_server()

    async with ProxyHTTPClient(settings.proxy_url, settings.request_timeout_s) as http:
        service = build_scheduler(http, settings)

        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, service.request_shutdown)
        loop.add_signal_handler(signal.SIGHUP, service.trigger_refresh)

        logger.info("scheduler_service_started", leagues=service.league_keys)
        try:
            await service.run()
        finally:
            logger.info("scheduler_service_stopped")


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
