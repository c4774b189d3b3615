# nba_scoreboard/services/game_view_builder.py
"""
Raw game records -> renderable view models.

Responsibilities:
  - scoreboard tiles (labels, scores, status text, winner flags)
  - box score detail (team stats table, active/inactive roster partitions)
  - date/time and percentage formatting
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Tuple

from dateutil import tz

from ..errors import IncompleteGameDataError
from ..models import (
    SCORE_PLACEHOLDER,
    GameDetailView,
    GameStatus,
    GameSummaryView,
    NormalizedDay,
    PlayerRow,
    RawGame,
    Roster,
    ScoreboardView,
    TeamStatsRow,
)

logger = logging.getLogger(__name__)

PERCENT_FIELDS = ("fieldGoalsPercentage", "threePointersPercentage", "freeThrowsPercentage")


def safe_int(v, default=0) -> int:
    """Convert a value to int safely; return default on failures."""
    try:
        return int(v)
    except (TypeError, ValueError):
        return default


def winner_flags(status: GameStatus, away_score: Optional[int], home_score: Optional[int]) -> Tuple[bool, bool]:
    """
    Return (away_is_winner, home_is_winner).

    Only a FINAL game with two known, different scores has a winner.
    """
    if status != GameStatus.FINAL or away_score is None or home_score is None:
        return False, False
    return away_score > home_score, home_score > away_score


@dataclass
class GameViewModelBuilder:
    """Builds scoreboard and box score view models from raw feed records."""

    tz_name: str
    display_tz_name: str = "America/New_York"
    display_tz_label: str = "ET"
    percent_decimals: int = 2

    @property
    def app_tz(self):
        return tz.gettz(self.tz_name)

    @property
    def display_tz(self):
        return tz.gettz(self.display_tz_name)

    # -------------------------
    # Shared field access
    # -------------------------

    @staticmethod
    def _require_game(game: Any) -> RawGame:
        if not isinstance(game, dict):
            raise IncompleteGameDataError(f"game record is {type(game).__name__}, expected an object")
        return game

    def _team(self, game: RawGame, side: str) -> Dict[str, Any]:
        team = game.get(side)
        if not isinstance(team, dict):
            raise IncompleteGameDataError(f"game is missing {side}", game_id=self._game_id(game))
        return team

    @staticmethod
    def _game_id(game: RawGame) -> str:
        return str(game.get("gameId") or "")

    @staticmethod
    def _score(team: Dict[str, Any]) -> Optional[int]:
        """Return the team score, or None when the feed has no usable score."""
        raw = team.get("score")
        if raw is None or raw == "":
            return None
        try:
            return int(raw)
        except (TypeError, ValueError):
            return None

    def _parse_tipoff(self, game: RawGame) -> datetime | None:
        """
        Parse the tip-off timestamp (UTC) from likely fields.

        Tries keys in order: gameDateTimeUTC, gameTimeUTC.
        """
        for key in ("gameDateTimeUTC", "gameTimeUTC"):
            val = game.get(key)
            if not val:
                continue
            try:
                dt = datetime.fromisoformat(str(val).replace("Z", "+00:00"))
            except ValueError:
                continue
            if dt.tzinfo is None:
                dt = dt.replace(tzinfo=timezone.utc)
            return dt
        return None

    # -------------------------
    # Scoreboard
    # -------------------------

    def format_display_date(self, day: date) -> str:
        """E.g. "Sun, Oct 19, 2026"."""
        return day.strftime("%a, %b %-d, %Y")

    def format_tipoff_time(self, game: RawGame) -> str:
        """Local tip-off time like "7:30 PM", or "" when the game has no timestamp."""
        dt = self._parse_tipoff(game)
        if not dt:
            return ""
        return dt.astimezone(self.app_tz).strftime("%-I:%M %p")

    def build_summary(self, game: RawGame) -> GameSummaryView:
        """
        Build a scoreboard tile for a raw game.

        A game that has not started shows the placeholder instead of 0-0, so
        "not yet played" is never confused with "scored zero".

        Raises:
            IncompleteGameDataError if the game or either team record is not an object.
        """
        game = self._require_game(game)
        away = self._team(game, "awayTeam")
        home = self._team(game, "homeTeam")
        status = GameStatus.parse(game.get("gameStatus"))

        away_score = self._score(away)
        home_score = self._score(home)
        if status == GameStatus.SCHEDULED:
            away_score = home_score = None

        away_win, home_win = winner_flags(status, away_score, home_score)
        status_text = (game.get("gameStatusText") or "").strip() or self.format_tipoff_time(game)

        return GameSummaryView(
            game_id=self._game_id(game),
            away_label=away.get("teamTricode") or "TBD",
            home_label=home.get("teamTricode") or "TBD",
            away_score=SCORE_PLACEHOLDER if away_score is None else str(away_score),
            home_score=SCORE_PLACEHOLDER if home_score is None else str(home_score),
            status_text=status_text,
            away_is_winner=away_win,
            home_is_winner=home_win,
        )

    def build_scoreboard(self, day: NormalizedDay) -> ScoreboardView:
        """Build the scoreboard for a resolved day; tiles that cannot be built are skipped."""
        games: List[GameSummaryView] = []
        for raw in day.games:
            try:
                games.append(self.build_summary(raw))
            except IncompleteGameDataError as e:
                logger.warning("skipping game %s on %s (%s feed): %s", e.game_id, day.date, day.source, e)

        return ScoreboardView(
            date=day.date,
            display_date=self.format_display_date(day.date),
            games=games,
            notice=day.error,
        )

    # -------------------------
    # Box score
    # -------------------------

    def format_percentage(self, value: Any) -> str:
        """Format a feed percentage at the configured precision (no rescaling)."""
        return f"{float(value):.{self.percent_decimals}f}"

    def format_detail_time(self, game: RawGame) -> str:
        """E.g. "Sun 10/19/2026, 7:30 PM ET"."""
        dt = self._parse_tipoff(game)
        if not dt:
            return ""
        local = dt.astimezone(self.display_tz)
        return f"{local.strftime('%a %-m/%-d/%Y, %-I:%M %p')} {self.display_tz_label}".strip()

    def _team_stats_row(self, team: Dict[str, Any], game_id: str, is_winner: bool) -> TeamStatsRow:
        stats = team.get("statistics")
        if not isinstance(stats, dict):
            raise IncompleteGameDataError(f"{team.get('teamTricode')} has no statistics", game_id=game_id)

        pcts = []
        for key in PERCENT_FIELDS:
            raw = stats.get(key)
            try:
                pcts.append(self.format_percentage(raw))
            except (TypeError, ValueError) as e:
                raise IncompleteGameDataError(
                    f"{team.get('teamTricode')} statistics.{key} is missing or not numeric", game_id=game_id
                ) from e

        score = self._score(team)
        return TeamStatsRow(
            tricode=team["teamTricode"],
            points=SCORE_PLACEHOLDER if score is None else str(score),
            field_goals_pct=pcts[0],
            three_pointers_pct=pcts[1],
            free_throws_pct=pcts[2],
            is_winner=is_winner,
        )

    @staticmethod
    def _is_starter(player: Dict[str, Any]) -> bool:
        return str(player.get("starter", "")).strip().lower() in ("1", "true")

    def _player_row(self, player: Dict[str, Any], game_id: str) -> PlayerRow:
        if not isinstance(player, dict):
            raise IncompleteGameDataError(f"player record is {type(player).__name__}, expected an object", game_id=game_id)
        stats = player.get("statistics")
        if not isinstance(stats, dict):
            raise IncompleteGameDataError(f"player {player.get('name')!r} has no statistics", game_id=game_id)
        return PlayerRow(
            name=player.get("name") or player.get("nameI") or "Unknown",
            starter=self._is_starter(player),
            points=safe_int(stats.get("points")),
            rebounds=safe_int(stats.get("reboundsTotal")),
            assists=safe_int(stats.get("assists")),
            steals=safe_int(stats.get("steals")),
            blocks=safe_int(stats.get("blocks")),
            turnovers=safe_int(stats.get("turnovers")),
        )

    def _roster(self, team: Dict[str, Any], game_id: str) -> Roster:
        """Split players into active/inactive, keeping source order in each partition."""
        players: Sequence[Dict[str, Any]] = team.get("players")
        if not isinstance(players, list):
            raise IncompleteGameDataError(f"{team.get('teamTricode')} has no players list", game_id=game_id)

        active: List[PlayerRow] = []
        inactive: List[PlayerRow] = []
        for p in players:
            row = self._player_row(p, game_id)
            (active if p.get("status") == "ACTIVE" else inactive).append(row)
        return Roster(tricode=team["teamTricode"], active=active, inactive=inactive)

    def build_detail(self, game: RawGame) -> GameDetailView:
        """
        Build the box score view for a raw box-score game record.

        Raises:
            IncompleteGameDataError if the game, a team, a player, tricode, statistics block, percentage,
            players list or player statistics block is missing.
        """
        game = self._require_game(game)
        game_id = self._game_id(game)
        away = self._team(game, "awayTeam")
        home = self._team(game, "homeTeam")
        for team in (away, home):
            if not team.get("teamTricode"):
                raise IncompleteGameDataError("team record has no teamTricode", game_id=game_id)

        status = GameStatus.parse(game.get("gameStatus"))
        away_win, home_win = winner_flags(status, self._score(away), self._score(home))

        return GameDetailView(
            game_id=game_id,
            title=f"{away['teamTricode']} @ {home['teamTricode']}",
            display_time=self.format_detail_time(game),
            status=status,
            team_stats_rows=[
                self._team_stats_row(away, game_id, away_win),
                self._team_stats_row(home, game_id, home_win),
            ],
            away_roster=self._roster(away, game_id),
            home_roster=self._roster(home, game_id),
        )
