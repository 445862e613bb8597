"""
Statistical leaders from ESPN game summaries.

Summaries come in more than one layout. Each known layout has a matcher that
yields ``(category, athlete, team, raw_value)`` candidates; every matcher runs
and the candidates are folded into a LeaderBoard that keeps the best value per
athlete.
"""
from __future__ import annotations

import math
import re
from typing import Any, Callable, Iterable, Iterator, Optional

from shared.models.domain import LeaderEntry, Leaders
from shared.models.enums import LeaderCategory

from ingest.extractors.shapes import as_list, coalesce, dig, first_text

TOP_N = 5

LeaderCandidate = tuple[LeaderCategory, str, str, Any]
ShapeMatcher = Callable[[Any], Iterator[LeaderCandidate]]

_NON_NUMERIC = re.compile(r"[^0-9.\-]")
_FLOAT_PREFIX = re.compile(r"-?(?:\d+\.?\d*|\.\d+)")

_EXACT_ABBREVIATIONS: dict[str, LeaderCategory] = {
    "pts": LeaderCategory.POINTS,
    "ppg": LeaderCategory.POINTS,
    "reb": LeaderCategory.REBOUNDS,
    "rpg": LeaderCategory.REBOUNDS,
    "ast": LeaderCategory.ASSISTS,
    "apg": LeaderCategory.ASSISTS,
}


def classify_category(name: Any) -> Optional[LeaderCategory]:
    """Map an upstream category name onto a tracked category, or None."""
    if not isinstance(name, str):
        return None
    lowered = name.strip().lower()
    if not lowered:
        return None
    if "point" in lowered:
        return LeaderCategory.POINTS
    if "rebound" in lowered:
        return LeaderCategory.REBOUNDS
    if "assist" in lowered:
        return LeaderCategory.ASSISTS
    return _EXACT_ABBREVIATIONS.get(lowered)


def to_number(value: Any) -> Optional[float]:
    """
    Best-effort numeric value.

    Numbers pass through. Strings such as ``"31 PTS"`` or ``"12.5"`` are
    stripped down to digits, dots and minus signs and the leading float is
    parsed. Returns None when no finite number comes out, including integers
    too large for a float.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        match = _FLOAT_PREFIX.match(_NON_NUMERIC.sub("", value))
        if not match:
            return None
        value = match.group(0)
    elif not isinstance(value, (int, float)):
        return None
    try:
        num = float(value)
    except (OverflowError, ValueError):
        return None
    return num if math.isfinite(num) else None


def _athlete_name(item: Any) -> str:
    return first_text(dig(item, "athlete"), "displayName", "shortName")


def _raw_value(item: Any) -> Any:
    if not isinstance(item, dict):
        return None
    return coalesce(item.get("value"), item.get("displayValue"))


# ── Shape matchers ──────────────────────────────────────────────────────

def match_category_groups(summary: Any) -> Iterator[LeaderCandidate]:
    """``summary.leaders = [{name, leaders: [{athlete, team, value}]}]``"""
    for group in as_list(dig(summary, "leaders")):
        category = classify_category(first_text(group, "name", "abbreviation", "displayName"))
        if category is None:
            continue
        items = coalesce(dig(group, "leaders"), dig(group, "leader"))
        for item in as_list(items):
            yield (
                category,
                _athlete_name(item),
                first_text(dig(item, "team"), "abbreviation"),
                _raw_value(item),
            )


def match_competitor_leaders(summary: Any) -> Iterator[LeaderCandidate]:
    """``summary.header.competitions[0].competitors[].leaders = [{name, leaders}]``"""
    competitors = coalesce(
        dig(summary, "header", "competitions", 0, "competitors"),
        dig(summary, "competitions", 0, "competitors"),
    )
    for competitor in as_list(competitors):
        team_abbr = first_text(dig(competitor, "team"), "abbreviation")
        for group in as_list(dig(competitor, "leaders")):
            category = classify_category(first_text(group, "name", "displayName"))
            if category is None:
                continue
            for item in as_list(dig(group, "leaders")):
                yield (
                    category,
                    _athlete_name(item),
                    team_abbr or first_text(dig(item, "team"), "abbreviation"),
                    _raw_value(item),
                )


SHAPE_MATCHERS: tuple[ShapeMatcher, ...] = (
    match_category_groups,
    match_competitor_leaders,
)


# ── Merge ───────────────────────────────────────────────────────────────

class LeaderBoard:
    """Per-category best value per (athlete, team) seen so far."""

    def __init__(self) -> None:
        self._best: dict[LeaderCategory, dict[tuple[str, str], LeaderEntry]] = {
            category: {} for category in LeaderCategory
        }

    def add(self, category: LeaderCategory, name: str, team: str, value: Any) -> bool:
        """Offer one observation; returns True when it became the best value."""
        if not name:
            return False
        num = to_number(value)
        if num is None:
            return False
        entry = LeaderEntry(name=name, team=team or "", value=num, category=category)
        prev = self._best[category].get(entry.identity)
        if prev is not None and entry.value <= prev.value:
            return False
        self._best[category][entry.identity] = entry
        return True

    def merge(self, leaders: Leaders) -> None:
        """Fold an already-extracted result into this board."""
        for category in LeaderCategory:
            for entry in leaders.for_category(category):
                self.add(category, entry.name, entry.team, entry.value)

    def top(self, n: int = TOP_N) -> Leaders:
        ranked = {
            category.value: sorted(entries.values(), key=lambda e: e.value, reverse=True)[:n]
            for category, entries in self._best.items()
        }
        return Leaders(**ranked)


def extract_leaders(
    summary: Any,
    matchers: Iterable[ShapeMatcher] = SHAPE_MATCHERS,
    top_n: int = TOP_N,
) -> Leaders:
    """Points/rebounds/assists leaders from one game summary, top ``top_n`` each."""
    board = LeaderBoard()
    for matcher in matchers:
        for category, name, team, value in matcher(summary):
            board.add(category, name, team, value)
    return board.top(top_n)
