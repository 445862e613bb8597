"""
Unit tests for leader extraction: category classification, value parsing,
both summary layouts and the max-per-athlete merge.
"""
from __future__ import annotations

import pytest

from ingest.extractors.leaders import (
    LeaderBoard,
    classify_category,
    extract_leaders,
    to_number,
)
from shared.models.enums import LeaderCategory


def _item(name: str, value=None, display=None, team: str | None = None) -> dict:
    item: dict = {"athlete": {"displayName": name}}
    if value is not None:
        item["value"] = value
    if display is not None:
        item["displayValue"] = display
    if team is not None:
        item["team"] = {"abbreviation": team}
    return item


# ── classify_category ───────────────────────────────────────────────────

class TestClassifyCategory:

    @pytest.mark.parametrize("name", ["Points Per Game", "PPG", "points", "pointsPerGame", "PTS"])
    def test_points(self, name: str) -> None:
        assert classify_category(name) == LeaderCategory.POINTS

    @pytest.mark.parametrize("name", ["REB", "Total Rebounds", "rebounds"])
    def test_rebounds(self, name: str) -> None:
        assert classify_category(name) == LeaderCategory.REBOUNDS

    @pytest.mark.parametrize("name", ["AST", "Assists", "assistsPerGame"])
    def test_assists(self, name: str) -> None:
        assert classify_category(name) == LeaderCategory.ASSISTS

    @pytest.mark.parametrize("name", ["Steals", "Blocks", "", None, 42, "rebs"])
    def test_unrecognized(self, name) -> None:
        assert classify_category(name) is None


# ── to_number ───────────────────────────────────────────────────────────

class TestToNumber:

    def test_numbers_pass_through(self) -> None:
        assert to_number(30) == 30.0
        assert to_number(12.5) == 12.5

    def test_display_strings(self) -> None:
        assert to_number("31 PTS") == 31.0
        assert to_number("12.5") == 12.5
        assert to_number("-3") == -3.0

    def test_leading_float_prefix(self) -> None:
        assert to_number("1.2.3") == 1.2

    @pytest.mark.parametrize("value", [None, "", "--", "abc", True, float("nan"), float("inf"), 10**400, "9" * 400, [], {}])
    def test_rejected(self, value) -> None:
        assert to_number(value) is None


# ── extract_leaders ─────────────────────────────────────────────────────

class TestExtractLeaders:

    def test_category_group_scenario(self) -> None:
        summary = {
            "leaders": [{
                "name": "Points",
                "leaders": [{
                    "athlete": {"displayName": "A. Player"},
                    "team": {"abbreviation": "BOS"},
                    "value": 30,
                }],
            }],
        }
        leaders = extract_leaders(summary)
        assert [(e.name, e.team, e.value) for e in leaders.points] == [("A. Player", "BOS", 30.0)]
        assert leaders.rebounds == []
        assert leaders.assists == []

    def test_competitor_layout(self) -> None:
        summary = {
            "header": {
                "competitions": [{
                    "competitors": [
                        {
                            "team": {"abbreviation": "LAL"},
                            "leaders": [
                                {"name": "rebounds", "leaders": [_item("Big Man", display="14")]},
                                {"name": "assists", "leaders": [_item("Point Guard", value="11")]},
                            ],
                        },
                        {
                            "team": {"abbreviation": "GSW"},
                            "leaders": [{"displayName": "Points", "leaders": [_item("Shooter", 41)]}],
                        },
                    ],
                }],
            },
        }
        leaders = extract_leaders(summary)
        assert [(e.name, e.team, e.value) for e in leaders.rebounds] == [("Big Man", "LAL", 14.0)]
        assert [(e.name, e.team) for e in leaders.assists] == [("Point Guard", "LAL")]
        assert [(e.name, e.team) for e in leaders.points] == [("Shooter", "GSW")]

    def test_top_level_competitions_fallback(self) -> None:
        summary = {"competitions": [{"competitors": [
            {"leaders": [{"name": "points", "leaders": [_item("X", 20, team="MIA")]}]},
        ]}]}
        leaders = extract_leaders(summary)
        assert [(e.name, e.team) for e in leaders.points] == [("X", "MIA")]

    def test_both_layouts_merge(self) -> None:
        summary = {
            "leaders": [{"name": "points", "leaders": [_item("A", 25, team="BOS")]}],
            "header": {"competitions": [{"competitors": [
                {"team": {"abbreviation": "BOS"},
                 "leaders": [{"name": "points", "leaders": [_item("A", 33), _item("B", 28)]}]},
            ]}]},
        }
        leaders = extract_leaders(summary)
        assert [(e.name, e.value) for e in leaders.points] == [("A", 33.0), ("B", 28.0)]

    def test_leader_key_alias_and_short_name(self) -> None:
        summary = {"leaders": [{
            "abbreviation": "AST",
            "leader": [{"athlete": {"shortName": "J. Doe"}, "displayValue": "9 AST"}],
        }]}
        leaders = extract_leaders(summary)
        assert [(e.name, e.team, e.value) for e in leaders.assists] == [("J. Doe", "", 9.0)]

    def test_drops_nameless_and_valueless(self) -> None:
        summary = {"leaders": [{"name": "points", "leaders": [
            {"athlete": {}, "value": 40},
            _item("No Value"),
            _item("Bad Value", display="n/a"),
            "garbage",
            _item("Valid", 12),
        ]}]}
        leaders = extract_leaders(summary)
        assert [e.name for e in leaders.points] == ["Valid"]

    def test_unrecognized_category_is_excluded(self) -> None:
        summary = {"leaders": [{"name": "Steals", "leaders": [_item("Thief", 6)]}]}
        assert extract_leaders(summary).is_empty

    def test_truncates_to_five_sorted(self) -> None:
        items = [_item(f"P{i}", i) for i in range(1, 9)]
        leaders = extract_leaders({"leaders": [{"name": "points", "leaders": items}]})
        assert [e.value for e in leaders.points] == [8.0, 7.0, 6.0, 5.0, 4.0]

    @pytest.mark.parametrize("summary", [None, [], "x", {"leaders": "nope"}, {"header": 5}])
    def test_malformed_summaries(self, summary) -> None:
        assert extract_leaders(summary).is_empty


# ── LeaderBoard ─────────────────────────────────────────────────────────

class TestLeaderBoard:

    def test_keeps_maximum_per_identity(self) -> None:
        board = LeaderBoard()
        board.add(LeaderCategory.POINTS, "A", "BOS", 20)
        board.add(LeaderCategory.POINTS, "A", "BOS", 35)
        board.add(LeaderCategory.POINTS, "A", "BOS", 18)
        assert [e.value for e in board.top().points] == [35.0]

    def test_identity_includes_team(self) -> None:
        board = LeaderBoard()
        board.add(LeaderCategory.POINTS, "A", "BOS", 20)
        board.add(LeaderCategory.POINTS, "A", "NYK", 22)
        assert len(board.top().points) == 2

    def test_merge_is_idempotent(self) -> None:
        summary = {"leaders": [
            {"name": "points", "leaders": [_item(f"P{i}", 10 + i, team="T") for i in range(7)]},
            {"name": "rebounds", "leaders": [_item("R", 12, team="T")]},
        ]}
        extracted = extract_leaders(summary)

        once = LeaderBoard()
        once.merge(extracted)
        twice = LeaderBoard()
        twice.merge(extracted)
        twice.merge(extracted)
        assert once.top() == twice.top()
