"""Unit tests for standings extraction across the known payload layouts."""
from __future__ import annotations

from shared.models.domain import UNKNOWN_STAT

from ingest.extractors.standings import extract_standings, standings_row


def _entry(team: str, wins=None, losses=None, key: str = "displayName") -> dict:
    stats = []
    if wins is not None:
        stats.append({"name": "wins", "value": wins})
    if losses is not None:
        stats.append({"abbreviation": "L", "value": losses})
    return {"team": {key: team}, "stats": stats}


def test_nested_children_take_priority() -> None:
    obj = {
        "children": [{"standings": {"entries": [_entry("East Team", 10, 2)]}}],
        "entries": [_entry("Flat Team", 1, 1)],
    }
    rows = extract_standings(obj)
    assert [r.team for r in rows] == ["East Team"]


def test_grandchildren_after_children() -> None:
    obj = {"children": [
        {"standings": {"entries": [_entry("A", 5, 1)]},
         "children": [{"standings": {"entries": [_entry("A1", 4, 2)]}}]},
        {"standings": {"entries": [_entry("B", 3, 3)]}},
    ]}
    rows = extract_standings(obj)
    assert [r.team for r in rows] == ["A", "B", "A1"]


def test_nested_limit_stops_collection() -> None:
    obj = {"children": [
        {"standings": {"entries": [_entry(f"T{i}", i, 0) for i in range(4)]}},
        {"standings": {"entries": [_entry("Late", 1, 1)]}},
    ]}
    rows = extract_standings(obj, limit=3)
    assert [r.team for r in rows] == ["T0", "T1", "T2"]


def test_top_level_standings_entries() -> None:
    rows = extract_standings({"standings": {"entries": [_entry("Solo", 7, 3)]}})
    assert rows[0].team == "Solo"
    assert rows[0].wins == 7.0
    assert rows[0].losses == 3.0


def test_flat_entries() -> None:
    rows = extract_standings({"entries": [_entry("Flat", 0, 4)]})
    assert [(r.team, r.wins, r.losses) for r in rows] == [("Flat", 0.0, 4.0)]


def test_empty_children_fall_through() -> None:
    obj = {"children": [{"standings": {"entries": []}}], "entries": [_entry("Fallback", 2, 2)]}
    assert [r.team for r in extract_standings(obj)] == ["Fallback"]


def test_default_limit_is_ten() -> None:
    rows = extract_standings({"entries": [_entry(f"T{i}", i, i) for i in range(15)]})
    assert len(rows) == 10


def test_missing_stats_are_unknown_not_zero() -> None:
    row = standings_row({"team": {"name": "No Stats"}})
    assert row.wins == UNKNOWN_STAT
    assert row.losses == UNKNOWN_STAT


def test_zero_is_kept_distinct_from_unknown() -> None:
    row = standings_row(_entry("Winless", 0))
    assert row.wins == 0.0
    assert row.losses == UNKNOWN_STAT


def test_null_value_is_unknown() -> None:
    row = standings_row({"team": {"abbreviation": "NYK"}, "stats": [{"name": "wins", "value": None}]})
    assert row.team == "NYK"
    assert row.wins == UNKNOWN_STAT


def test_team_label_preference() -> None:
    entry = {"team": {"displayName": "", "name": "Celtics", "abbreviation": "BOS"}}
    assert standings_row(entry).team == "Celtics"


def test_entries_without_team_are_skipped() -> None:
    rows = extract_standings({"entries": [{"stats": []}, _entry("Real", 1, 0)]})
    assert [r.team for r in rows] == ["Real"]


def test_unknown_layout_is_empty() -> None:
    assert extract_standings({"groups": []}) == []
    assert extract_standings(None) == []
    assert extract_standings([1, 2, 3]) == []


def test_integer_too_large_for_float_is_unknown() -> None:
    obj = {"entries": [{"team": {"name": "X"}, "stats": [{"name": "wins", "value": 10**400}]}]}
    rows = extract_standings(obj)
    assert [(r.team, r.wins) for r in rows] == [("X", UNKNOWN_STAT)]
