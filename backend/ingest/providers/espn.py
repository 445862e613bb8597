"""
ESPN scoreboard client.
Fetches scoreboard, summary and standings payloads through the passthrough
proxy and reshapes them into canonical records.
"""
from __future__ import annotations

from datetime import date, datetime, timedelta, tzinfo
from typing import Iterable, Mapping, Optional
from zoneinfo import ZoneInfo

from shared.config import Settings, get_settings
from shared.leagues import LEAGUES, resolve_league
from shared.models.domain import Event, LeagueConfig, Leaders, StandingsRow
from shared.utils.http_client import ProxyHTTPClient
from shared.utils.logging import get_logger
from shared.utils.metrics import LEADER_DETAIL_FAILURES

from ingest.extractors.leaders import LeaderBoard, extract_leaders
from ingest.extractors.standings import extract_standings
from ingest.extractors.shapes import as_list, dig
from ingest.normalization.normalizer import dedupe_events, normalize_events

logger = get_logger(__name__)


def date_range(today: date, past_days: int = 3, next_days: int = 3) -> str:
    """Scoreboard ``dates`` window, ``YYYYMMDD-YYYYMMDD``."""
    start = today - timedelta(days=past_days)
    end = today + timedelta(days=next_days)
    return f"{start:%Y%m%d}-{end:%Y%m%d}"


class ESPNScoreboardClient:
    """Scoreboard, leaders and standings for one configured league at a time."""

    def __init__(
        self,
        http: ProxyHTTPClient,
        leagues: Mapping[str, LeagueConfig] = LEAGUES,
        settings: Optional[Settings] = None,
        tz: Optional[tzinfo] = None,
    ) -> None:
        self._http = http
        self._leagues = leagues
        self._settings = settings or get_settings()
        self._tz = tz or ZoneInfo(self._settings.display_timezone)

    @property
    def timezone(self) -> tzinfo:
        return self._tz

    def league(self, league_key: str) -> LeagueConfig:
        return resolve_league(self._leagues, league_key)

    async def get_events(self, league_key: str, today: Optional[date] = None) -> list[Event]:
        """
        Deduplicated events within the scoreboard window around ``today``.

        Ordering is left to the caller.

        Raises:
            TransportError: The proxy answered with a non-success status or
                could not be reached.
            UnknownLeagueError: ``league_key`` is not in the league table.
        """
        cfg = self.league(league_key)
        today = today or self._today()
        dates = date_range(today, self._settings.window_past_days, self._settings.window_next_days)
        data = await self._http.get_json(cfg.endpoint("scoreboard"), {"dates": dates})
        events = dedupe_events(normalize_events(as_list(dig(data, "events")), self._tz))
        logger.debug("events_fetched", league=league_key, dates=dates, count=len(events))
        return events

    async def get_leaders(self, league_key: str, events: Iterable[Event]) -> Leaders:
        """
        Top performers across the most recent completed games.

        Summaries are fetched one at a time. A game whose summary cannot be
        fetched or read is skipped; the others still count.
        """
        cfg = self.league(league_key)
        completed = sorted(
            (e for e in events if e.completed and e.id),
            key=lambda e: e.timestamp,
            reverse=True,
        )
        sample = completed[: self._settings.leaders_sample_size]
        board = LeaderBoard()
        if not sample:
            return board.top(self._settings.leaders_top_n)

        for event in sample:
            try:
                summary = await self._http.get_json(cfg.endpoint("summary"), {"event": event.id})
                board.merge(extract_leaders(summary, top_n=self._settings.leaders_top_n))
            except Exception as exc:
                LEADER_DETAIL_FAILURES.labels(league=league_key).inc()
                logger.warning(
                    "leader_detail_failed",
                    league=league_key,
                    event_id=event.id,
                    error=str(exc),
                )
                continue

        return board.top(self._settings.leaders_top_n)

    async def get_standings(self, league_key: str, limit: Optional[int] = None) -> list[StandingsRow]:
        """Standings rows for the league, best effort."""
        cfg = self.league(league_key)
        data = await self._http.get_json(cfg.endpoint("standings"))
        return extract_standings(data, self._settings.standings_limit if limit is None else limit)

    def _today(self) -> date:
        return datetime.now(self._tz).date()
