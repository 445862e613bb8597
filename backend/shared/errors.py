"""Exception types surfaced by the scoreboard client.

Malformed upstream payloads never raise; they degrade to default values in the
extractors. Only transport-level problems and configuration lookups do.
"""
from __future__ import annotations

from typing import Optional


class HardwoodError(Exception):
    """Base class for errors raised out of fetch-level operations."""


class TransportError(HardwoodError):
    """The proxy answered with a non-success status, or could not be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code

    @classmethod
    def from_status(cls, status_code: int) -> "TransportError":
        return cls(f"HTTP {status_code}", status_code=status_code)


class UnknownLeagueError(HardwoodError, KeyError):
    """A league key that is not present in the league table."""

    def __init__(self, league_key: str) -> None:
        super().__init__(league_key)
        self.league_key = league_key

    def __str__(self) -> str:
        return f"Unknown league: {self.league_key}"
