"""Domain enumerations for the Hardwood scoreboards."""
from __future__ import annotations

from enum import Enum


class LeaderCategory(str, Enum):
    POINTS = "points"
    REBOUNDS = "rebounds"
    ASSISTS = "assists"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class EventState(str, Enum):
    """ESPN `status.type.state` values."""
    PRE = "pre"
    IN = "in"
    POST = "post"


class Region(str, Enum):
    """Display regions a league panel fills on the static page."""
    SCOREBOARD = "scoreboard"
    FEATURED = "featured"
    RECENT = "recent"
    UPCOMING = "upcoming"
    STANDINGS = "standings-body"
    LEADERS = "leaders"
    STATUS = "status"
