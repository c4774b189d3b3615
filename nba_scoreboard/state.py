# nba_scoreboard/state.py
"""
Per-viewer UI state: the date being viewed and the open box score.

Nothing here fetches or renders; handlers drive these objects and read them
back when building a page.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Dict, Optional

from .models import GameDetailView


@dataclass
class NavigationState:
    """The currently selected calendar date. Only forward() and reset() move it."""

    current_date: date

    def forward(self, delta: int) -> date:
        """Move one day forward (+1) or back (-1) and return the new date."""
        if delta not in (-1, 1):
            raise ValueError(f"delta must be +1 or -1, got {delta!r}")
        self.current_date = self.current_date + timedelta(days=delta)
        return self.current_date

    def reset(self, today: date) -> date:
        """Jump back to today."""
        self.current_date = today
        return self.current_date


@dataclass
class DetailSession:
    """
    Which game's box score is loaded, plus the toggles drawn on top of it.

    A new selection replaces the previous detail wholesale and resets every
    toggle: all inactive panels closed, the first (away) team's tab active.
    """

    selected_game_id: Optional[str] = None
    detail: Optional[GameDetailView] = None
    error: Optional[str] = None
    inactive_open: Dict[str, bool] = field(default_factory=dict)
    active_tab: Optional[str] = None
    _generation: int = field(default=0, repr=False)

    def begin_request(self, game_id: str) -> int:
        """Start loading a game; responses carrying an older token are stale."""
        # EventDispatcher already serializes events per viewer; this only matters for callers outside it.
        self._generation += 1
        self.selected_game_id = game_id
        return self._generation

    def is_current(self, token: int) -> bool:
        return token == self._generation

    def select_game(
        self,
        game_id: str,
        detail: Optional[GameDetailView] = None,
        error: Optional[str] = None,
    ) -> None:
        """Install the detail (or an error message) for a game and reset all toggles."""
        self.selected_game_id = game_id
        self.detail = detail
        self.error = None if detail is not None else error
        teams = detail.teams if detail is not None else []
        self.inactive_open = {t: False for t in teams}
        self.active_tab = teams[0] if teams else None

    def clear(self) -> None:
        """Close the box score."""
        self._generation += 1
        self.selected_game_id = None
        self.detail = None
        self.error = None
        self.inactive_open = {}
        self.active_tab = None

    def _require_team(self, team: str) -> None:
        if team not in self.inactive_open:
            raise ValueError(f"team {team!r} is not part of the selected game")

    def toggle_inactive(self, team: str) -> bool:
        """Flip one team's inactive-player panel and return its new open state."""
        self._require_team(team)
        self.inactive_open[team] = not self.inactive_open[team]
        return self.inactive_open[team]

    def switch_tab(self, team: str) -> None:
        """Make a team's tab the single active tab."""
        self._require_team(team)
        self.active_tab = team
