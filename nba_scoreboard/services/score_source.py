# nba_scoreboard/services/score_source.py
"""
Date -> games resolution.

Responsibilities:
  - decide between the live scoreboard feed (today) and the season schedule (any other day)
  - populate the schedule index lazily, once per process
  - normalize both feeds into NormalizedDay and absorb fetch/shape failures
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Callable, Dict, Optional

from dateutil import tz

from ..cache import TTLCache
from ..errors import MalformedScheduleError, NetworkError
from ..models import NormalizedDay
from ..nba_client import SCHEDULE_PATH, SCOREBOARD_PATH, NBAClient
from .schedule_index import ScheduleIndex, parse_schedule_date

logger = logging.getLogger(__name__)

LIVE = "live"
SCHEDULE = "schedule"

UNAVAILABLE_MESSAGE = "Scores are unavailable right now. Please try again later."


@dataclass
class ScoreSource:
    """Service that maps a calendar date to that day's raw games."""

    client: NBAClient
    cache: TTLCache
    tz_name: str
    scoreboard_ttl: int
    index: ScheduleIndex = field(default_factory=ScheduleIndex)
    clock: Optional[Callable[[], datetime]] = None
    _schedule_lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    @property
    def app_tz(self):
        """Return the configured timezone object used to decide what "today" is."""
        return tz.gettz(self.tz_name)

    def today(self) -> date:
        """Return the current calendar date in the app timezone."""
        now = self.clock() if self.clock else datetime.now(tz=self.app_tz)
        return now.date()

    @property
    def schedule_loaded(self) -> bool:
        return self.index.loaded

    def resolve(self, target: date) -> NormalizedDay:
        """
        Return the games for a calendar date. Never raises for fetch or data errors.

        Today comes from the live scoreboard; any other date comes from the season schedule.
        """
        if target == self.today():
            return self._resolve_live(target)
        return self._resolve_scheduled(target)

    def _scoreboard_payload(self) -> Dict[str, Any]:
        """Fetch today's scoreboard using cached loading."""
        return self.cache.get_or_set(
            key="scoreboard:today",
            ttl_seconds=self.scoreboard_ttl,
            loader=self.client.todays_scoreboard,
        )

    def _resolve_live(self, target: date) -> NormalizedDay:
        try:
            payload = self._scoreboard_payload()
        except NetworkError as e:
            logger.error("live scoreboard fetch failed (endpoint=%s, date=%s): %s", SCOREBOARD_PATH, target, e)
            return NormalizedDay(date=target, games=(), source=LIVE, error=UNAVAILABLE_MESSAGE)

        board = payload.get("scoreboard")
        games = board.get("games") if isinstance(board, dict) else None
        if not isinstance(games, list):
            logger.error("live scoreboard payload has no scoreboard.games (endpoint=%s, date=%s)", SCOREBOARD_PATH, target)
            return NormalizedDay(date=target, games=(), source=LIVE, error=UNAVAILABLE_MESSAGE)

        return NormalizedDay(date=self._board_date(board, target), games=tuple(games), source=LIVE)

    def _board_date(self, board: Dict[str, Any], fallback: date) -> date:
        """The league day the live feed is actually showing (it rolls over late morning ET)."""
        raw = board.get("gameDate")
        if not raw:
            return fallback
        try:
            return parse_schedule_date(raw)
        except ValueError:
            logger.warning("live scoreboard has unparseable gameDate %r", raw)
            return fallback

    def ensure_schedule(self) -> bool:
        """
        Fetch and load the season schedule on first use.

        Returns True when the index is populated. A failure leaves the index empty so the
        next non-today navigation tries again.
        """
        with self._schedule_lock:
            if self.index.loaded:
                return True
            try:
                payload = self.client.season_schedule()
                self.index.load(payload)
            except NetworkError as e:
                logger.error("season schedule fetch failed (endpoint=%s): %s", SCHEDULE_PATH, e)
                return False
            except MalformedScheduleError as e:
                logger.error("season schedule is malformed (endpoint=%s): %s", SCHEDULE_PATH, e)
                return False

        days = self.index.dates()
        if days:
            logger.info("season schedule loaded: %d game days, %s to %s", len(days), days[0], days[-1])
        else:
            logger.info("season schedule loaded: no game days")
        return True

    def _resolve_scheduled(self, target: date) -> NormalizedDay:
        if not self.ensure_schedule():
            logger.warning("no schedule available for %s; rendering an empty day", target)
            return NormalizedDay(date=target, games=(), source=SCHEDULE, error=UNAVAILABLE_MESSAGE)

        games = self.index.lookup(target)
        if not games:
            return NormalizedDay(date=target, games=(), source=SCHEDULE)
        return NormalizedDay(date=target, games=tuple(games), source=SCHEDULE)
