"""HTML fragments for the scoreboard regions of the static pages."""
from __future__ import annotations

from datetime import datetime
from html import escape
from typing import Iterable, Optional, Sequence

from shared.models.domain import Event, LeaderEntry, Leaders, StandingsRow, StatValue
from shared.models.enums import LeaderCategory

SCOREBOARD_LIMIT = 24
RECENT_LIMIT = 5
UPCOMING_LIMIT = 8

NO_GAMES = '<div class="schedule-row"><div class="schedule-matchup">No games found.</div></div>'
NO_FEATURED = '<div class="muted">No games found in this window.</div>'
NO_RECENT = '<div class="muted">No finals in the last 3 days.</div>'
NO_UPCOMING = '<div class="muted">No upcoming games in the next 3 days.</div>'
STANDINGS_UNAVAILABLE = '<tr><td colspan="3" class="muted">Standings unavailable right now.</td></tr>'
LEADERS_UNAVAILABLE = '<div class="muted">Leaders unavailable.</div>'


def by_time_asc(events: Iterable[Event]) -> list[Event]:
    return sorted(events, key=lambda e: e.timestamp)


def by_time_desc(events: Iterable[Event]) -> list[Event]:
    return sorted(events, key=lambda e: e.timestamp, reverse=True)


def espn_link(href: str, css_class: str = "") -> str:
    cls = f' class="{css_class}"' if css_class else ""
    return f'<a{cls} href="{escape(href)}" target="_blank" rel="noopener">ESPN</a>'


def format_stat(value: StatValue) -> str:
    """Whole numbers without a trailing ``.0``; the unknown placeholder as is."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return escape(str(value))


def _meta(event: Event, link: str) -> str:
    parts = [escape(event.status)]
    if event.when:
        parts.append(escape(event.when))
    if link:
        parts.append(link)
    return " · ".join(parts)


def schedule_row(event: Event) -> str:
    score = f'<div class="schedule-score">{escape(event.score)}</div>' if event.score else ""
    link = espn_link(event.link, "schedule-link") if event.link else ""
    return (
        '<div class="schedule-row">'
        f'<div class="schedule-matchup">{escape(event.matchup)}</div>'
        f"{score}"
        f'<div class="schedule-meta">{_meta(event, link)}</div>'
        "</div>"
    )


def render_scoreboard(events: Sequence[Event]) -> str:
    rows = by_time_asc(events)[:SCOREBOARD_LIMIT]
    return "".join(schedule_row(e) for e in rows) if rows else NO_GAMES


def pick_featured(events: Sequence[Event]) -> Optional[Event]:
    """Next game to be played, or the earliest game when all are final."""
    upcoming = by_time_asc(e for e in events if not e.completed)
    if upcoming:
        return upcoming[0]
    ordered = by_time_asc(events)
    return ordered[0] if ordered else None


def render_featured(events: Sequence[Event], wrap: bool = True) -> str:
    pick = pick_featured(events)
    if pick is None:
        return NO_FEATURED
    link = espn_link(pick.link) if pick.link else ""
    inner = (
        f'<div class="row-title">{escape(pick.matchup)}</div>'
        f'<div class="row-sub">{_meta(pick, link)}</div>'
    )
    return f'<div class="row">{inner}</div>' if wrap else inner


def render_recent(events: Sequence[Event]) -> str:
    finals = by_time_desc(e for e in events if e.completed)[:RECENT_LIMIT]
    return "".join(schedule_row(e) for e in finals) if finals else NO_RECENT


def render_upcoming(events: Sequence[Event]) -> str:
    upcoming = by_time_asc(e for e in events if not e.completed)[:UPCOMING_LIMIT]
    return "".join(schedule_row(e) for e in upcoming) if upcoming else NO_UPCOMING


def render_standings(rows: Sequence[StandingsRow]) -> str:
    if not rows:
        return STANDINGS_UNAVAILABLE
    return "".join(
        f"<tr><td>{escape(r.team)}</td><td>{format_stat(r.wins)}</td><td>{format_stat(r.losses)}</td></tr>"
        for r in rows
    )


def _leader_name(entry: LeaderEntry) -> str:
    team = f' <span class="muted">({escape(entry.team)})</span>' if entry.team else ""
    return f"{escape(entry.name)}{team}"


def _leader_column(title: str, entries: Sequence[LeaderEntry]) -> str:
    if not entries:
        return (
            '<div class="leader-col">'
            f'<div class="leader-title">{escape(title)}</div>'
            '<div class="muted">No completed games in window.</div>'
            "</div>"
        )
    rows = "".join(
        '<div class="leader-row">'
        f'<div class="leader-rank">{rank}</div>'
        f'<div class="leader-name">{_leader_name(e)}</div>'
        f'<div class="leader-val">{format_stat(e.value)}</div>'
        "</div>"
        for rank, e in enumerate(entries, start=1)
    )
    return f'<div class="leader-col"><div class="leader-title">{escape(title)}</div>{rows}</div>'


def render_leaders(leaders: Optional[Leaders]) -> str:
    if leaders is None:
        return LEADERS_UNAVAILABLE
    columns = "".join(
        _leader_column(category.label, leaders.for_category(category))
        for category in LeaderCategory
    )
    return (
        f'<div class="leaders-grid">{columns}</div>'
        '<div class="muted" style="margin-top:8px;">'
        "Top performers from completed games in the last 3 days.</div>"
    )


def status_updated(now: datetime) -> str:
    return f"Source: ESPN · Updated {now:%m/%d/%Y}, {now.hour % 12 or 12}:{now:%M:%S %p}"


def status_failed(exc: BaseException) -> str:
    return f"Could not load data ({str(exc) or 'error'})."
