# nba_scoreboard/nba_client.py
"""
Thin HTTP client wrapper for the NBA CDN endpoints.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Dict

import requests

from .errors import NetworkError

logger = logging.getLogger(__name__)

SCHEDULE_PATH = "/static/json/staticData/scheduleLeagueV2.json"
SCOREBOARD_PATH = "/static/json/liveData/scoreboard/todaysScoreboard_00.json"
BOXSCORE_PATH = "/static/json/liveData/boxscore/boxscore_{game_id}.json"

GAME_ID_RE = re.compile(r"^\d{10}$")


def is_valid_game_id(game_id: str) -> bool:
    """League game ids are ten digits, e.g. 0022500123."""
    return bool(GAME_ID_RE.match(game_id or ""))


class NBAClient:
    """A minimal client for retrieving JSON from the NBA CDN."""

    def __init__(self, base_url: str, proxy_url: str = "", timeout: int = 10) -> None:
        """
        Store the base URL and build request headers.

        proxy_url is a plain prefix (e.g. a CORS relay) prepended to every full URL.
        """
        self.base_url = base_url.rstrip("/")
        self.proxy_url = proxy_url
        self.timeout = timeout
        self._headers = {"User-Agent": "nba-scoreboard/1.0", "Accept": "application/json"}

    def url_for(self, path: str) -> str:
        return f"{self.proxy_url}{self.base_url}{path}"

    def get_json(self, path: str) -> Dict[str, Any]:
        """
        Execute a GET request to base_url + path and return parsed JSON.

        Raises:
            NetworkError on connection failures, non-2xx responses and non-JSON bodies.
        """
        url = self.url_for(path)
        try:
            r = requests.get(url, timeout=self.timeout, headers=self._headers)
            r.raise_for_status()
        except requests.RequestException as e:
            raise NetworkError(f"GET {url} failed: {e}", url=url) from e

        try:
            data = r.json()
        except ValueError as e:
            raise NetworkError(f"GET {url} returned a non-JSON body", url=url) from e

        if not isinstance(data, dict):
            raise NetworkError(f"GET {url} returned {type(data).__name__}, expected an object", url=url)

        logger.debug("GET %s -> %s", url, r.status_code)
        return data

    def season_schedule(self) -> Dict[str, Any]:
        """Fetch the full league schedule for the current season."""
        return self.get_json(SCHEDULE_PATH)

    def todays_scoreboard(self) -> Dict[str, Any]:
        """Fetch the live scoreboard payload (always today's games, league time)."""
        return self.get_json(SCOREBOARD_PATH)

    def box_score(self, game_id: str) -> Dict[str, Any]:
        """Fetch the box score payload for a single game id (e.g. 0022500123)."""
        if not is_valid_game_id(game_id):
            raise ValueError(f"invalid game id {game_id!r}")
        return self.get_json(BOXSCORE_PATH.format(game_id=game_id))
