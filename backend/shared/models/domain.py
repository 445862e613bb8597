"""
Pydantic v2 domain models shared across the Hardwood services.
These are the canonical records derived from the variable upstream shapes.
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from shared.models.enums import LeaderCategory

# Placeholder for a standings stat the upstream did not provide.
UNKNOWN_STAT = "—"

StatValue = Union[float, str]


# ── Base ────────────────────────────────────────────────────────────────
class DomainModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


# ── League table ────────────────────────────────────────────────────────
class LeagueConfig(DomainModel):
    key: str
    espn_path: str
    label: str

    def endpoint(self, name: str) -> str:
        """Proxy path segment for one ESPN endpoint, e.g. ``basketball/nba/summary``."""
        return f"{self.espn_path}/{name}"


# ── Scoreboard ──────────────────────────────────────────────────────────
class Event(DomainModel):
    """One game from a scoreboard window."""
    id: str = ""
    matchup: str
    score: str = ""
    status: str = ""
    when: str = ""
    timestamp: int = 0
    completed: bool = False
    live: bool = False
    link: str = ""

    @property
    def dedupe_key(self) -> tuple[str, int, str, str]:
        return (self.matchup, self.timestamp, self.score, self.status)


# ── Leaders ─────────────────────────────────────────────────────────────
class LeaderEntry(DomainModel):
    name: str = Field(min_length=1)
    team: str = ""
    value: float
    category: LeaderCategory

    @property
    def identity(self) -> tuple[str, str]:
        return (self.name, self.team)


class Leaders(DomainModel):
    points: list[LeaderEntry] = Field(default_factory=list)
    rebounds: list[LeaderEntry] = Field(default_factory=list)
    assists: list[LeaderEntry] = Field(default_factory=list)

    def for_category(self, category: LeaderCategory) -> list[LeaderEntry]:
        return getattr(self, category.value)

    @property
    def is_empty(self) -> bool:
        return not (self.points or self.rebounds or self.assists)


# ── Standings ───────────────────────────────────────────────────────────
class StandingsRow(DomainModel):
    team: str
    wins: StatValue = UNKNOWN_STAT
    losses: StatValue = UNKNOWN_STAT


# ── Rendered output ─────────────────────────────────────────────────────
class LeaguePanel(DomainModel):
    """Result of one league load cycle, ready for the static page."""
    league: str
    label: str
    ok: bool
    status: str
    updated_at: Optional[datetime] = None
    regions: dict[str, str] = Field(default_factory=dict)
