"""
League panel builder.
Responsibilities:
1. Load one league's events, standings and leaders through the ESPN client.
2. Render every display region, substituting explicit fallbacks on failure.
3. Write the finished panel where the static page picks it up.
"""
from __future__ import annotations

import os
import tempfile
import time
from datetime import datetime
from pathlib import Path
from typing import Optional

from shared.config import Settings, get_settings
from shared.errors import HardwoodError
from shared.models.domain import Event, LeaguePanel
from shared.models.enums import Region
from shared.utils.logging import get_logger, league_context
from shared.utils.metrics import LEAGUE_LOAD_DURATION, LEAGUE_LOADS

from builder import fragments
from ingest.providers.espn import ESPNScoreboardClient

logger = get_logger(__name__)


def fallback_regions(message: str) -> dict[str, str]:
    """Every region in its empty/unavailable state."""
    return {
        Region.SCOREBOARD.value: fragments.render_scoreboard([]),
        Region.FEATURED.value: fragments.render_featured([]),
        Region.RECENT.value: fragments.render_recent([]),
        Region.UPCOMING.value: fragments.render_upcoming([]),
        Region.STANDINGS.value: fragments.STANDINGS_UNAVAILABLE,
        Region.LEADERS.value: fragments.LEADERS_UNAVAILABLE,
        Region.STATUS.value: message,
    }


class LeagueLoader:
    """
    Builds a LeaguePanel for one league per call.

    Events are required; standings and leaders are best effort and fall back
    to their "unavailable" fragments without failing the panel.
    """

    def __init__(self, client: ESPNScoreboardClient, settings: Optional[Settings] = None) -> None:
        self._client = client
        self._settings = settings or get_settings()

    async def load_league(self, league_key: str) -> LeaguePanel:
        with league_context(league_key):
            return await self._load(league_key)

    async def _load(self, league_key: str) -> LeaguePanel:
        cfg = self._client.league(league_key)
        start = time.perf_counter()
        try:
            events = await self._client.get_events(league_key)
        except HardwoodError as exc:
            LEAGUE_LOADS.labels(league=league_key, outcome="failed").inc()
            logger.warning("league_load_failed", error=str(exc))
            return LeaguePanel(
                league=league_key,
                label=cfg.label,
                ok=False,
                status=fragments.status_failed(exc),
                regions=fallback_regions(fragments.status_failed(exc)),
            )

        regions = self._event_regions(events)
        if self._settings.load_standings:
            regions[Region.STANDINGS.value] = await self._standings_region(league_key)
        if self._settings.load_leaders:
            regions[Region.LEADERS.value] = await self._leaders_region(league_key, events)

        now = datetime.now(self._client.timezone)
        status = fragments.status_updated(now)
        regions[Region.STATUS.value] = status

        LEAGUE_LOADS.labels(league=league_key, outcome="ok").inc()
        LEAGUE_LOAD_DURATION.labels(league=league_key).observe(time.perf_counter() - start)
        logger.info("league_loaded", events=len(events))
        return LeaguePanel(
            league=league_key,
            label=cfg.label,
            ok=True,
            status=status,
            updated_at=now,
            regions=regions,
        )

    @staticmethod
    def _event_regions(events: list[Event]) -> dict[str, str]:
        return {
            Region.SCOREBOARD.value: fragments.render_scoreboard(events),
            Region.FEATURED.value: fragments.render_featured(events),
            Region.RECENT.value: fragments.render_recent(events),
            Region.UPCOMING.value: fragments.render_upcoming(events),
        }

    async def _standings_region(self, league_key: str) -> str:
        try:
            rows = await self._client.get_standings(league_key)
        except HardwoodError as exc:
            logger.warning("standings_unavailable", error=str(exc))
            return fragments.STANDINGS_UNAVAILABLE
        return fragments.render_standings(rows)

    async def _leaders_region(self, league_key: str, events: list[Event]) -> str:
        try:
            leaders = await self._client.get_leaders(league_key, events)
        except HardwoodError as exc:
            logger.warning("leaders_unavailable", error=str(exc))
            return fragments.render_leaders(None)
        return fragments.render_leaders(leaders)


class PanelWriter:
    """Writes one JSON document per league into the site's data directory."""

    def __init__(self, output_dir: Path) -> None:
        self._output_dir = Path(output_dir)

    def path_for(self, league_key: str) -> Path:
        return self._output_dir / f"{league_key}.json"

    def write(self, panel: LeaguePanel) -> Path:
        """Replace the league's document atomically; the latest write wins."""
        self._output_dir.mkdir(parents=True, exist_ok=True)
        target = self.path_for(panel.league)
        fd, tmp_name = tempfile.mkstemp(dir=self._output_dir, prefix=f".{panel.league}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(panel.model_dump_json(indent=2))
            os.replace(tmp_name, target)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        return target
