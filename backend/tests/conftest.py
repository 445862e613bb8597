"""Shared fixtures and payload builders for the scoreboard tests."""
from __future__ import annotations

from datetime import timezone
from typing import Any, Callable, Optional

import httpx
import pytest
import pytest_asyncio

from shared.config import Settings
from shared.leagues import LEAGUES
from shared.utils.http_client import ProxyHTTPClient

from ingest.providers.espn import ESPNScoreboardClient

PROXY_URL = "http://proxy.test/v1/proxy/espn"

Handler = Callable[[httpx.Request], httpx.Response]


def make_raw_event(
    event_id: str = "401",
    home: Optional[str] = "Boston Celtics",
    away: Optional[str] = "New York Knicks",
    home_score: Any = None,
    away_score: Any = None,
    date: Optional[str] = "2025-10-21T23:30Z",
    state: str = "pre",
    completed: bool = False,
    short_detail: Optional[str] = None,
    link: Optional[str] = None,
) -> dict[str, Any]:
    """ESPN scoreboard entry in the layout the site API returns."""
    def competitor(side: str, name: Optional[str], score: Any) -> dict[str, Any]:
        c: dict[str, Any] = {"homeAway": side}
        if name is not None:
            c["team"] = {"displayName": name}
        if score is not None:
            c["score"] = score
        return c

    status_type: dict[str, Any] = {"state": state, "completed": completed}
    if short_detail is not None:
        status_type["shortDetail"] = short_detail

    raw: dict[str, Any] = {
        "id": event_id,
        "status": {"type": status_type},
        "competitions": [{
            "competitors": [
                competitor("home", home, home_score),
                competitor("away", away, away_score),
            ],
        }],
    }
    if date is not None:
        raw["date"] = date
    if link is not None:
        raw["links"] = [{"href": link}]
    return raw


def json_response(payload: Any, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code, json=payload)


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        proxy_url=PROXY_URL,
        output_dir=tmp_path / "data",
        display_timezone="UTC",
        metrics_enabled=False,
    )


@pytest_asyncio.fixture
async def make_client(settings: Settings):
    """Factory: ESPNScoreboardClient backed by a MockTransport handler."""
    opened: list[ProxyHTTPClient] = []

    async def factory(handler: Handler) -> ESPNScoreboardClient:
        http = ProxyHTTPClient(PROXY_URL, transport=httpx.MockTransport(handler))
        await http.start()
        opened.append(http)
        return ESPNScoreboardClient(http, LEAGUES, settings, tz=timezone.utc)

    yield factory

    for http in opened:
        await http.close()
