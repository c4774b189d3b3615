# nba_scoreboard/models.py
"""
Domain models and view models for the scoreboard.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import IntEnum
from typing import Any, Dict, List, Optional, Sequence

RawGame = Dict[str, Any]

SCORE_PLACEHOLDER = "–"


class GameStatus(IntEnum):
    """Numeric gameStatus codes used by every NBA feed."""
    SCHEDULED = 1
    LIVE = 2
    FINAL = 3

    @classmethod
    def parse(cls, value: Any) -> "GameStatus":
        """Accept 1/2/3, their string forms, or the member names; unknown -> SCHEDULED."""
        if isinstance(value, str):
            v = value.strip().upper()
            if v in cls.__members__:
                return cls[v]
            if v.isdigit():
                value = int(v)
        try:
            return cls(int(value))
        except (TypeError, ValueError):
            return cls.SCHEDULED


@dataclass(frozen=True)
class GameDateEntry:
    """One calendar day of the season schedule."""
    date: date
    games: Sequence[RawGame]


@dataclass(frozen=True)
class NormalizedDay:
    """The games for a day, whichever feed they came from."""
    date: date
    games: Sequence[RawGame]
    source: str             # "live" | "schedule"
    error: Optional[str] = None


@dataclass(frozen=True)
class GameSummaryView:
    """A single game tile on the scoreboard."""
    game_id: str
    away_label: str
    home_label: str
    away_score: str
    home_score: str
    status_text: str
    away_is_winner: bool = False
    home_is_winner: bool = False


@dataclass(frozen=True)
class ScoreboardView:
    """All data needed to render one day's scoreboard."""
    date: date
    display_date: str
    games: Sequence[GameSummaryView]
    notice: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not self.games


@dataclass(frozen=True)
class TeamStatsRow:
    """One row of the team stats table in the box score."""
    tricode: str
    points: str
    field_goals_pct: str
    three_pointers_pct: str
    free_throws_pct: str
    is_winner: bool = False


@dataclass(frozen=True)
class PlayerRow:
    """One player line; starter renders as emphasis on the name."""
    name: str
    starter: bool
    points: int
    rebounds: int
    assists: int
    steals: int
    blocks: int
    turnovers: int


@dataclass(frozen=True)
class Roster:
    """A team's players split by status, each partition in source order."""
    tricode: str
    active: Sequence[PlayerRow]
    inactive: Sequence[PlayerRow]


@dataclass(frozen=True)
class GameDetailView:
    """Box score view model for the selected game."""
    game_id: str
    title: str
    display_time: str
    status: GameStatus
    team_stats_rows: Sequence[TeamStatsRow]
    away_roster: Roster
    home_roster: Roster

    @property
    def teams(self) -> List[str]:
        """Team identifiers in tab order (away first)."""
        return [self.away_roster.tricode, self.home_roster.tricode]


@dataclass
class PageViewModel:
    """Everything the scoreboard page template needs for one render."""
    scoreboard: ScoreboardView
    selected_game_id: Optional[str] = None
    detail: Optional[GameDetailView] = None
    detail_error: Optional[str] = None
    inactive_open: Dict[str, bool] = field(default_factory=dict)
    active_tab: Optional[str] = None
