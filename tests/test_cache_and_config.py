"""Tests for the TTL cache and environment-driven config."""

import pytest

from nba_scoreboard.cache import TTLCache
from nba_scoreboard.config import AppConfig


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


class TestTTLCache:

    def test_hit_within_ttl(self):
        clock = FakeClock()
        cache = TTLCache(clock=clock)
        calls = []
        loader = lambda: calls.append(1) or {"n": len(calls)}
        assert cache.get_or_set("k", 10, loader) == {"n": 1}
        clock.now += 5
        assert cache.get_or_set("k", 10, loader) == {"n": 1}
        clock.now += 6
        assert cache.get_or_set("k", 10, loader) == {"n": 2}

    def test_zero_ttl_bypasses(self):
        cache = TTLCache()
        calls = []
        for _ in range(3):
            cache.get_or_set("k", 0, lambda: calls.append(1) or "v")
        assert len(calls) == 3

    def test_failures_not_cached(self):
        cache = TTLCache()

        def boom():
            raise RuntimeError("nope")

        with pytest.raises(RuntimeError):
            cache.get_or_set("k", 60, boom)
        assert cache.get_or_set("k", 60, lambda: "ok") == "ok"


class TestAppConfig:

    def test_defaults(self, monkeypatch):
        for name in ("TZ", "PERCENT_DECIMALS", "NBA_CDN_BASE", "LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)
        cfg = AppConfig()
        assert cfg.tz == "America/New_York"
        assert cfg.cdn_base == "https://cdn.nba.com"
        assert cfg.percent_decimals == 2
        assert cfg.log_level == "INFO"

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("TZ", "America/Los_Angeles")
        monkeypatch.setenv("PERCENT_DECIMALS", "1")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        cfg = AppConfig()
        assert cfg.tz == "America/Los_Angeles"
        assert cfg.percent_decimals == 1
        assert cfg.log_level == "DEBUG"

    def test_invalid_values_fall_back(self, monkeypatch):
        monkeypatch.setenv("HTTP_TIMEOUT_SECONDS", "soon")
        monkeypatch.setenv("PERCENT_DECIMALS", "5")
        cfg = AppConfig()
        assert cfg.http_timeout_seconds == 10
        assert cfg.percent_decimals == 2
