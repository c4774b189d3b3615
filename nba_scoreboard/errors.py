# nba_scoreboard/errors.py
"""
Error types raised by the client and the view-model pipeline.

None of these are fatal: handlers catch them and render an inline message
for the affected region (scoreboard or detail) only.
"""

from __future__ import annotations

from typing import Optional


class ScoreboardError(Exception):
    """Base class for all recoverable scoreboard errors."""


class NetworkError(ScoreboardError):
    """A fetch failed, returned a non-2xx status, or returned a non-JSON body."""

    def __init__(self, message: str, url: str = "") -> None:
        super().__init__(message)
        self.url = url


class MalformedScheduleError(ScoreboardError):
    """The season schedule payload lacks the expected date-keyed game collection."""


class IncompleteGameDataError(ScoreboardError):
    """A game record is missing a nested field required to build a view model."""

    def __init__(self, message: str, game_id: Optional[str] = None) -> None:
        super().__init__(message)
        self.game_id = game_id
