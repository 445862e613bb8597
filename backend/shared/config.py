"""
Central configuration for the Hardwood scoreboard services.
Uses pydantic-settings for env-based config with validation.
"""
from __future__ import annotations

from enum import Enum
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    DEV = "dev"
    STAGING = "staging"
    PRODUCTION = "production"


class Settings(BaseSettings):
    """Root settings shared by the proxy, builder and scheduler."""

    model_config = SettingsConfigDict(
        env_prefix="HH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── General ──────────────────────────────────────────────
    environment: Environment = Environment.DEV
    log_level: str = "INFO"

    # ── Proxy (API) ──────────────────────────────────────────
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    cors_origins: list[str] = ["*"]
    espn_upstream_base: str = "https://site.web.api.espn.com/apis/v2/sports"
    sportsdb_upstream_base: str = "https://www.thesportsdb.com/api/v1/json"
    thesportsdb_api_key: str = "1"
    upstream_user_agent: str = "Mozilla/5.0 (compatible; HardwoodProxy/1.0)"

    # ── Scoreboard client ────────────────────────────────────
    proxy_url: str = Field(
        default="http://localhost:8000/v1/proxy/espn",
        description="ESPN passthrough endpoint the scoreboard client talks to.",
    )
    request_timeout_s: float = 10.0
    window_past_days: int = 3
    window_next_days: int = 3
    leaders_sample_size: int = 10
    leaders_top_n: int = 5
    standings_limit: int = 10
    display_timezone: str = "America/New_York"

    # ── Builder / scheduler ──────────────────────────────────
    leagues: list[str] = Field(
        default=["nba", "wnba", "ncaa", "ncaaw"],
        description="League keys loaded by the scheduler, in page order.",
    )
    refresh_interval_s: float = 180.0
    output_dir: Path = Path("site/data")
    load_standings: bool = True
    load_leaders: bool = True

    # ── Observability ────────────────────────────────────────
    metrics_enabled: bool = True
    metrics_port: int = 9090

    @field_validator("leagues")
    @classmethod
    def normalize_league_keys(cls, value: list[str]) -> list[str]:
        return [key.strip().lower() for key in value if key.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Singleton access to validated settings."""
    return Settings()
