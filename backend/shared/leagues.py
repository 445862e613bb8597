"""
League table: league key -> ESPN path segment and display label.

Built once at import and exposed read-only; components receive it through
their constructors rather than importing it directly.
"""
from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from shared.errors import UnknownLeagueError
from shared.models.domain import LeagueConfig

_LEAGUE_ROWS: tuple[tuple[str, str, str], ...] = (
    # key, espn path, label
    ("nba", "basketball/nba", "NBA"),
    ("wnba", "basketball/wnba", "WNBA"),
    ("ncaa", "basketball/mens-college-basketball", "NCAA Men"),
    ("ncaaw", "basketball/womens-college-basketball", "NCAA Women"),
    # The March page is men's college coverage under its own label
    ("mm", "basketball/mens-college-basketball", "March"),
)


def build_league_table(
    rows: tuple[tuple[str, str, str], ...] = _LEAGUE_ROWS,
) -> Mapping[str, LeagueConfig]:
    """Freeze league rows into an immutable key -> LeagueConfig mapping."""
    return MappingProxyType({
        key: LeagueConfig(key=key, espn_path=path, label=label)
        for key, path, label in rows
    })


LEAGUES: Mapping[str, LeagueConfig] = build_league_table()


def resolve_league(leagues: Mapping[str, LeagueConfig], league_key: str) -> LeagueConfig:
    """Look up a league or raise UnknownLeagueError."""
    cfg = leagues.get(league_key)
    if cfg is None:
        raise UnknownLeagueError(league_key)
    return cfg
