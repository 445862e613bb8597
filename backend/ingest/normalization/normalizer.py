"""
Scoreboard event normalization.

Maps one raw ESPN scoreboard entry onto the canonical Event record. Missing or
malformed fields degrade to empty strings and zeroes; nothing here raises on
bad upstream data.
"""
from __future__ import annotations

from datetime import datetime, timezone, tzinfo
from typing import Any, Iterable, Optional

from shared.models.domain import Event
from shared.models.enums import EventState

from ingest.extractors.leaders import to_number
from ingest.extractors.shapes import as_list, dig, first_text

AWAY_PLACEHOLDER = "Away"
HOME_PLACEHOLDER = "Home"


def format_status(raw: Any) -> str:
    """FINAL / live short detail / scheduled short detail."""
    status_type = dig(raw, "status", "type")
    if not isinstance(status_type, dict):
        return ""
    if status_type.get("completed"):
        return "FINAL"
    short_detail = first_text(status_type, "shortDetail")
    if status_type.get("state") == EventState.IN.value:
        return short_detail or "LIVE"
    return short_detail or "Scheduled"


def parse_timestamp(value: Any) -> Optional[datetime]:
    """ISO-8601 start time as a UTC datetime, or None when unparseable or out of range."""
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        if parsed.tzinfo is None:
            return parsed.replace(tzinfo=timezone.utc)
        return parsed.astimezone(timezone.utc)
    except (OverflowError, ValueError):
        return None


def epoch_ms(moment: datetime) -> int:
    """Milliseconds since the epoch; 0 when the platform cannot represent it."""
    try:
        return int(moment.timestamp() * 1000)
    except (OverflowError, OSError, ValueError):
        return 0


def format_when(moment: datetime, tz: tzinfo) -> str:
    """Short local display time, e.g. ``Oct 18, 7:30 PM``; empty when out of range."""
    try:
        local = moment.astimezone(tz)
    except (OverflowError, ValueError):
        return ""
    hour = local.hour % 12 or 12
    return f"{local:%b} {local.day}, {hour}:{local:%M} {local:%p}"


def _score_text(competitor: Any) -> str:
    score = dig(competitor, "score")
    if isinstance(score, dict):
        score = score.get("displayValue", score.get("value"))
    if score is None or isinstance(score, bool):
        return ""
    if isinstance(score, float) and score.is_integer():
        return str(int(score))
    return str(score).strip()


def format_score(away: Any, home: Any) -> str:
    """``"{away} - {home}"`` when either side carries a numeric score."""
    away_score = _score_text(away)
    home_score = _score_text(home)
    if to_number(away_score) is None and to_number(home_score) is None:
        return ""
    return f"{away_score} - {home_score}"


def _competitor(competitors: list[Any], side: str) -> Any:
    return next(
        (c for c in competitors if isinstance(c, dict) and c.get("homeAway") == side),
        None,
    )


def normalize_event(raw: Any, tz: tzinfo = timezone.utc) -> Optional[Event]:
    """Canonical Event for one scoreboard entry; None if it is not an object."""
    if not isinstance(raw, dict):
        return None

    competition = dig(raw, "competitions", 0)
    competitors = as_list(dig(competition, "competitors"))
    home = _competitor(competitors, "home")
    away = _competitor(competitors, "away")

    away_name = first_text(dig(away, "team"), "displayName") or AWAY_PLACEHOLDER
    home_name = first_text(dig(home, "team"), "displayName") or HOME_PLACEHOLDER

    started = parse_timestamp(raw.get("date"))
    status_type = dig(raw, "status", "type")

    return Event(
        id=str(raw.get("id") or ""),
        matchup=f"{away_name} @ {home_name}",
        score=format_score(away, home),
        status=format_status(raw),
        when=format_when(started, tz) if started else "",
        timestamp=epoch_ms(started) if started else 0,
        completed=bool(dig(status_type, "completed")),
        live=dig(status_type, "state") == EventState.IN.value,
        link=first_text(dig(raw, "links", 0), "href")
        or first_text(dig(competition, "links", 0), "href"),
    )


def normalize_events(raw_events: Iterable[Any], tz: tzinfo = timezone.utc) -> list[Event]:
    events: list[Event] = []
    for raw in raw_events:
        event = normalize_event(raw, tz)
        if event is not None:
            events.append(event)
    return events


def dedupe_events(events: Iterable[Event]) -> list[Event]:
    """
    Drop undated events and repeats.

    Two events are the same game when matchup, timestamp, score and status
    all agree; the first one seen is kept, whatever its id.
    """
    seen: set[tuple[str, int, str, str]] = set()
    out: list[Event] = []
    for event in events:
        if not event.timestamp:
            continue
        key = event.dedupe_key
        if key in seen:
            continue
        seen.add(key)
        out.append(event)
    return out
