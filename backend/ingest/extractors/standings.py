"""
Team win/loss rows from ESPN standings payloads.

The standings endpoint nests groups differently per league (conferences,
divisions, or a flat list). Known layouts are tried in priority order and the
first one that yields rows wins.
"""
from __future__ import annotations

from typing import Any, Callable, Iterator

from shared.models.domain import UNKNOWN_STAT, StandingsRow, StatValue

from ingest.extractors.leaders import to_number
from ingest.extractors.shapes import as_list, dig, first_text

DEFAULT_LIMIT = 10

EntriesMatcher = Callable[[Any], Iterator[list[Any]]]


def _stat(stats: list[Any], name: str, abbreviation: str) -> StatValue:
    for stat in stats:
        if not isinstance(stat, dict):
            continue
        if stat.get("name") == name or stat.get("abbreviation") == abbreviation:
            num = to_number(stat.get("value"))
            return UNKNOWN_STAT if num is None else num
    return UNKNOWN_STAT


def standings_row(entry: Any) -> StandingsRow | None:
    """One row from a standings entry, or None when it names no team."""
    team = first_text(dig(entry, "team"), "displayName", "name", "abbreviation")
    if not team:
        return None
    stats = as_list(dig(entry, "stats"))
    return StandingsRow(
        team=team,
        wins=_stat(stats, "wins", "W"),
        losses=_stat(stats, "losses", "L"),
    )


# ── Shape matchers ──────────────────────────────────────────────────────

def match_nested_children(obj: Any) -> Iterator[list[Any]]:
    """``children[].standings.entries``, then ``children[].children[].standings.entries``."""
    level = as_list(dig(obj, "children"))
    while level:
        next_level: list[Any] = []
        for child in level:
            yield as_list(dig(child, "standings", "entries"))
            next_level.extend(as_list(dig(child, "children")))
        level = next_level


def match_top_level_standings(obj: Any) -> Iterator[list[Any]]:
    yield as_list(dig(obj, "standings", "entries"))


def match_top_level_entries(obj: Any) -> Iterator[list[Any]]:
    yield as_list(dig(obj, "entries"))


SHAPE_MATCHERS: tuple[EntriesMatcher, ...] = (
    match_nested_children,
    match_top_level_standings,
    match_top_level_entries,
)


def extract_standings(obj: Any, limit: int = DEFAULT_LIMIT) -> list[StandingsRow]:
    """Up to ``limit`` rows from the first layout that produces any."""
    for matcher in SHAPE_MATCHERS:
        rows: list[StandingsRow] = []
        for entries in matcher(obj):
            for entry in entries:
                if len(rows) >= limit:
                    return rows
                row = standings_row(entry)
                if row is not None:
                    rows.append(row)
        if rows:
            return rows[:limit]
    return []
