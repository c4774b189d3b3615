# nba_scoreboard/handlers/scoreboard_handler.py
"""
Handler/controller responsible for turning viewer state into page view models.

Keeps Flask routes simple by concentrating assembly logic here:
  - resolve the viewer's date into a scoreboard
  - fetch + build the selected game's box score
  - dispatch named UI events onto NavigationState / DetailSession
"""

from __future__ import annotations

import logging
import threading
import uuid
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from ..cache import TTLCache
from ..errors import IncompleteGameDataError, NetworkError
from ..models import GameDetailView, PageViewModel, ScoreboardView
from ..nba_client import BOXSCORE_PATH, NBAClient, is_valid_game_id
from ..services.game_view_builder import GameViewModelBuilder
from ..services.score_source import ScoreSource
from ..state import DetailSession, NavigationState

logger = logging.getLogger(__name__)

DETAIL_ERROR_MESSAGE = "Error fetching game details. Please try again later."


@dataclass
class ViewerState:
    """One browser's navigation + detail state. Events for a viewer run one at a time."""

    navigation: NavigationState
    detail: DetailSession = field(default_factory=DetailSession)
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


@dataclass
class ScoreboardHandler:
    """Orchestrates score source, box score fetches and view-model building."""

    score_source: ScoreSource
    builder: GameViewModelBuilder
    client: NBAClient
    cache: TTLCache
    boxscore_ttl: int

    def new_viewer(self) -> ViewerState:
        return ViewerState(navigation=NavigationState(current_date=self.score_source.today()))

    def scoreboard_for(self, day: date) -> ScoreboardView:
        """Resolve a date and build its scoreboard. Never raises for fetch/data errors."""
        return self.builder.build_scoreboard(self.score_source.resolve(day))

    def _box_score_payload(self, game_id: str) -> Dict[str, Any]:
        """Fetch a box score payload using cached loading."""
        return self.cache.get_or_set(
            key=f"boxscore:{game_id}",
            ttl_seconds=self.boxscore_ttl,
            loader=lambda: self.client.box_score(game_id),
        )

    def fetch_detail(self, game_id: str) -> GameDetailView:
        """
        Fetch and build the box score for a game.

        Raises:
            NetworkError if the fetch fails.
            IncompleteGameDataError if the payload lacks required fields.
        """
        payload = self._box_score_payload(game_id)
        game = payload.get("game")
        if not isinstance(game, dict):
            raise IncompleteGameDataError("box score payload has no game object", game_id=game_id)
        return self.builder.build_detail(game)

    def load_detail(self, game_id: str) -> Tuple[Optional[GameDetailView], Optional[str]]:
        """Like fetch_detail, but returns (detail, error message) instead of raising."""
        endpoint = BOXSCORE_PATH.format(game_id=game_id)
        try:
            return self.fetch_detail(game_id), None
        except NetworkError as e:
            logger.error("box score fetch failed (endpoint=%s, gameId=%s): %s", endpoint, game_id, e)
        except IncompleteGameDataError as e:
            logger.error("box score incomplete (endpoint=%s, gameId=%s): %s", endpoint, game_id, e)
        return None, DETAIL_ERROR_MESSAGE

    def select_game(self, viewer: ViewerState, game_id: str) -> None:
        """Load a game's box score into the viewer's detail session, unless superseded meanwhile."""
        session = viewer.detail
        token = session.begin_request(game_id)
        detail, error = self.load_detail(game_id)
        if not session.is_current(token):
            logger.info("dropping stale box score for %s", game_id)
            return
        session.select_game(game_id, detail=detail, error=error)

    def build_page(self, viewer: ViewerState) -> PageViewModel:
        """Build the full page view model from the viewer's current state."""
        session = viewer.detail
        return PageViewModel(
            scoreboard=self.scoreboard_for(viewer.navigation.current_date),
            selected_game_id=session.selected_game_id,
            detail=session.detail,
            detail_error=session.error,
            inactive_open=dict(session.inactive_open),
            active_tab=session.active_tab,
        )


class EventDispatcher:
    """
    Stable mapping of UI event names to state transitions.

    Handlers read the viewer's current state at dispatch time, so nothing has
    to be re-bound when the page is re-rendered.
    """

    def __init__(self, handler: ScoreboardHandler) -> None:
        self.handler = handler
        self._table: Dict[str, Callable[[ViewerState, Mapping[str, str]], None]] = {
            "prev": lambda v, _: self._navigate(v, -1),
            "next": lambda v, _: self._navigate(v, 1),
            "today": lambda v, _: self._today(v),
            "select_game": self._select_game,
            "close_game": lambda v, _: v.detail.clear(),
            "toggle_inactive": lambda v, p: v.detail.toggle_inactive(self._required(p, "team")),
            "switch_tab": lambda v, p: v.detail.switch_tab(self._required(p, "team")),
        }

    @property
    def events(self) -> Tuple[str, ...]:
        return tuple(self._table)

    @staticmethod
    def _required(payload: Mapping[str, str], name: str) -> str:
        value = (payload.get(name) or "").strip()
        if not value:
            raise ValueError(f"missing {name!r}")
        return value

    def _navigate(self, viewer: ViewerState, delta: int) -> None:
        new_date = viewer.navigation.forward(delta)
        logger.debug("navigated to %s", new_date)

    def _today(self, viewer: ViewerState) -> None:
        viewer.navigation.reset(self.handler.score_source.today())

    def _select_game(self, viewer: ViewerState, payload: Mapping[str, str]) -> None:
        game_id = self._required(payload, "game_id")
        if not is_valid_game_id(game_id):
            raise ValueError(f"invalid game id {game_id!r}")
        self.handler.select_game(viewer, game_id)

    def dispatch(self, viewer: ViewerState, event: str, payload: Optional[Mapping[str, str]] = None) -> bool:
        """
        Apply one event to a viewer. Returns False if the event was unknown or invalid.

        Events for the same viewer are serialized, so a slower fetch can never
        land on top of a newer selection.
        """
        action = self._table.get(event)
        if action is None:
            logger.warning("ignoring unknown event %r", event)
            return False

        with viewer.lock:
            try:
                action(viewer, payload or {})
            except ValueError as e:
                logger.warning("ignoring invalid %s event: %s", event, e)
                return False
        return True


class ViewerRegistry:
    """In-memory viewer states keyed by an opaque id; least recently used are evicted."""

    def __init__(self, factory: Callable[[], ViewerState], max_viewers: int = 1000) -> None:
        self._factory = factory
        self._max = max_viewers
        self._viewers: "OrderedDict[str, ViewerState]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, viewer_id: Optional[str]) -> Tuple[str, ViewerState]:
        """Return (id, state), creating a fresh viewer for unknown or missing ids."""
        with self._lock:
            if viewer_id and viewer_id in self._viewers:
                self._viewers.move_to_end(viewer_id)
                return viewer_id, self._viewers[viewer_id]

            new_id = uuid.uuid4().hex
            self._viewers[new_id] = self._factory()
            while len(self._viewers) > self._max:
                self._viewers.popitem(last=False)
            return new_id, self._viewers[new_id]

    def __len__(self) -> int:
        return len(self._viewers)
