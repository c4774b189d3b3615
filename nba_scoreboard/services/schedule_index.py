# nba_scoreboard/services/schedule_index.py
"""
Season schedule index.

Responsibilities:
  - validate the season schedule payload
  - key each day's games by calendar date (time-of-day stripped)
  - answer "games on date D"
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, List, Optional, Sequence

from ..errors import MalformedScheduleError
from ..models import GameDateEntry, RawGame


def parse_schedule_date(raw: str) -> date:
    """
    Parse a schedule day key into a calendar date.

    The schedule encodes every day at a nominal midnight, e.g. "10/21/2025 00:00:00".
    Only the date part is used; ISO keys ("2025-10-21T00:00:00Z") are accepted as well.

    Raises:
        ValueError if the string is not a recognizable date.
    """
    text = str(raw).strip()
    day_part = text.split(" ", 1)[0].split("T", 1)[0]
    if "/" in day_part:
        return datetime.strptime(day_part, "%m/%d/%Y").date()
    return date.fromisoformat(day_part)


class ScheduleIndex:
    """Date-keyed view of the full-season schedule. Loaded once, then read-only."""

    def __init__(self) -> None:
        self._by_date: Dict[date, GameDateEntry] = {}
        self._loaded = False

    @property
    def loaded(self) -> bool:
        return self._loaded

    def load(self, season_payload: Dict[str, Any]) -> None:
        """
        Populate the index from a scheduleLeagueV2 payload.

        Entries sharing a calendar date are merged in source order. Nothing is
        stored unless the whole payload validates.

        Raises:
            MalformedScheduleError if leagueSchedule.gameDates is missing or malformed.
            RuntimeError if the index was already loaded.
        """
        if self._loaded:
            raise RuntimeError("schedule index is already loaded")

        league = season_payload.get("leagueSchedule") if isinstance(season_payload, dict) else None
        game_dates = league.get("gameDates") if isinstance(league, dict) else None
        if not isinstance(game_dates, list):
            raise MalformedScheduleError("schedule payload has no leagueSchedule.gameDates list")

        merged: Dict[date, List[RawGame]] = {}
        for pos, entry in enumerate(game_dates):
            if not isinstance(entry, dict):
                raise MalformedScheduleError(f"gameDates[{pos}] is not an object")
            raw_date = entry.get("gameDate")
            games = entry.get("games")
            if not raw_date or not isinstance(games, list):
                raise MalformedScheduleError(f"gameDates[{pos}] lacks gameDate or a games list")
            if not all(isinstance(g, dict) for g in games):
                raise MalformedScheduleError(f"gameDates[{pos}] has a game that is not an object")
            try:
                day = parse_schedule_date(raw_date)
            except ValueError as e:
                raise MalformedScheduleError(f"gameDates[{pos}] has unparseable date {raw_date!r}") from e
            merged.setdefault(day, []).extend(games)

        self._by_date = {d: GameDateEntry(date=d, games=tuple(g)) for d, g in merged.items()}
        self._loaded = True

    def lookup(self, day: date) -> Optional[Sequence[RawGame]]:
        """Return the games scheduled on a calendar day, or None when there are none."""
        if isinstance(day, datetime):
            day = day.date()
        entry = self._by_date.get(day)
        return entry.games if entry else None

    def dates(self) -> List[date]:
        """All calendar days with at least one entry, in chronological order."""
        return sorted(self._by_date)

    def __len__(self) -> int:
        return len(self._by_date)
