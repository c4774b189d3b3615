# nba_scoreboard/config.py
"""
Configuration for the NBA scoreboard.

This module centralizes all tunable settings (timezones, CDN base URL and proxy,
cache TTLs, HTTP timeout, and display precision).
"""

from __future__ import annotations

from dataclasses import dataclass, field
import os


def _env_int(name: str, default: int) -> int:
    """Read an integer environment variable, returning default on missing/invalid values."""
    try:
        return int(os.getenv(name, str(default)))
    except (TypeError, ValueError):
        return default


def _env_str(name: str, default: str) -> str:
    """Read a string environment variable, treating blank values as missing."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip()


def _env(name: str, default):
    """Dataclass field whose default is read from the environment at construction time."""
    reader = _env_int if isinstance(default, int) else _env_str
    return field(default_factory=lambda: reader(name, default))


@dataclass(frozen=True)
class AppConfig:
    """
    Immutable app configuration.

    Notes on time zones:
      - tz decides what "today" is, i.e. when the live scoreboard is used.
      - display_tz is only used for the box score header (the league publishes ET).
    """

    # Core settings
    tz: str = _env("TZ", "America/New_York")
    display_tz: str = _env("DISPLAY_TZ", "America/New_York")
    display_tz_label: str = _env("DISPLAY_TZ_LABEL", "ET")
    cdn_base: str = _env("NBA_CDN_BASE", "https://cdn.nba.com")
    proxy_url: str = _env("NBA_PROXY_URL", "")
    http_timeout_seconds: int = _env("HTTP_TIMEOUT_SECONDS", 10)

    # Cache controls (0 disables)
    scoreboard_cache_ttl_seconds: int = _env("SCOREBOARD_CACHE_TTL_SECONDS", 15)
    boxscore_cache_ttl_seconds: int = _env("BOXSCORE_CACHE_TTL_SECONDS", 15)

    # Display
    percent_decimals: int = _env("PERCENT_DECIMALS", 2)

    # Flask / process
    secret_key: str = _env("SECRET_KEY", "dev-not-secret")
    log_level: str = _env("LOG_LEVEL", "INFO")
    port: int = _env("PORT", 8000)

    def __post_init__(self):
        """Clamp display precision to the one or two decimals the feeds carry."""
        # dataclass frozen => use object.__setattr__
        if self.percent_decimals not in (1, 2):
            object.__setattr__(self, "percent_decimals", 2)
        object.__setattr__(self, "log_level", self.log_level.upper())
