# app.py
"""
Flask entrypoint for the NBA scoreboard service.

Routes:
  HTML:
    - /            scoreboard for the viewer's current date (+ selected box score)
    - /events      POST target for every UI interaction (redirects back to /)

  JSON:
    - /api/scoreboard?date=YYYY-MM-DD   (defaults to today)
    - /api/games/<game_id>

Event form fields (POST /events):
  - event=prev|next|today|select_game|close_game|toggle_inactive|switch_tab
  - game_id=0022500123 (select_game)
  - team=LAL (toggle_inactive, switch_tab)

Notes:
  - Navigation and box score state is per browser session; the signed cookie only
    carries an opaque viewer id.
  - The season schedule is fetched once per process and shared by all viewers.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Callable, Dict, Optional

from flask import Flask, jsonify, redirect, render_template, request, session

from nba_scoreboard.cache import TTLCache
from nba_scoreboard.config import AppConfig
from nba_scoreboard.errors import IncompleteGameDataError, NetworkError
from nba_scoreboard.handlers.scoreboard_handler import EventDispatcher, ScoreboardHandler, ViewerRegistry
from nba_scoreboard.models import GameDetailView, GameSummaryView, PlayerRow, ScoreboardView
from nba_scoreboard.nba_client import NBAClient, is_valid_game_id
from nba_scoreboard.services.game_view_builder import GameViewModelBuilder
from nba_scoreboard.services.score_source import ScoreSource

logger = logging.getLogger(__name__)


def create_app(
    cfg: Optional[AppConfig] = None,
    client: Optional[NBAClient] = None,
    clock: Optional[Callable[[], datetime]] = None,
) -> Flask:
    """
    App factory.

    Builds shared dependencies (client + cache + score source + builder) once per process.
    client and clock can be injected for tests.
    """
    cfg = cfg or AppConfig()
    logging.basicConfig(
        level=getattr(logging, cfg.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    cache = TTLCache()
    client = client or NBAClient(cfg.cdn_base, proxy_url=cfg.proxy_url, timeout=cfg.http_timeout_seconds)

    score_source = ScoreSource(
        client=client,
        cache=cache,
        tz_name=cfg.tz,
        scoreboard_ttl=cfg.scoreboard_cache_ttl_seconds,
        clock=clock,
    )
    builder = GameViewModelBuilder(
        tz_name=cfg.tz,
        display_tz_name=cfg.display_tz,
        display_tz_label=cfg.display_tz_label,
        percent_decimals=cfg.percent_decimals,
    )
    handler = ScoreboardHandler(
        score_source=score_source,
        builder=builder,
        client=client,
        cache=cache,
        boxscore_ttl=cfg.boxscore_cache_ttl_seconds,
    )
    dispatcher = EventDispatcher(handler)
    viewers = ViewerRegistry(factory=handler.new_viewer)

    app = Flask(__name__)
    app.secret_key = cfg.secret_key
    app.extensions["scoreboard"] = {"handler": handler, "dispatcher": dispatcher, "viewers": viewers}

    # -------------------------
    # Shared helpers
    # -------------------------

    def current_viewer():
        """Return the viewer state for this browser session, creating one if needed."""
        viewer_id, viewer = viewers.get(session.get("viewer_id"))
        session["viewer_id"] = viewer_id
        return viewer

    def parse_date(raw: Optional[str]) -> date:
        """Parse ?date=YYYY-MM-DD; missing means today. Raises ValueError on bad input."""
        if not raw or not raw.strip():
            return score_source.today()
        return date.fromisoformat(raw.strip())

    # -------------------------
    # HTML routes
    # -------------------------

    @app.get("/")
    def scoreboard_page():
        """Scoreboard for the viewer's date, with the box score of the selected game if any."""
        viewer = current_viewer()
        with viewer.lock:
            page = handler.build_page(viewer)
        return render_template("basketball/scoreboard.html", page=page)

    @app.post("/events")
    def events():
        """
        Single event endpoint for navigation, game selection, tabs and toggles.

        Always redirects back to the page; invalid events are logged and ignored.
        """
        viewer = current_viewer()
        event = (request.form.get("event") or "").strip()
        dispatcher.dispatch(viewer, event, request.form)

        anchor = "#gameDetails" if event in ("select_game", "toggle_inactive", "switch_tab") else ""
        return redirect(f"/{anchor}", code=303)

    # -------------------------
    # JSON routes
    # -------------------------

    def summary_to_dict(g: GameSummaryView) -> Dict[str, Any]:
        """Serialize a GameSummaryView into JSON-safe primitives."""
        return {
            "gameId": g.game_id,
            "awayLabel": g.away_label,
            "homeLabel": g.home_label,
            "awayScore": g.away_score,
            "homeScore": g.home_score,
            "statusText": g.status_text,
            "awayIsWinner": g.away_is_winner,
            "homeIsWinner": g.home_is_winner,
        }

    def scoreboard_to_dict(board: ScoreboardView) -> Dict[str, Any]:
        return {
            "date": board.date.isoformat(),
            "displayDate": board.display_date,
            "games": [summary_to_dict(g) for g in board.games],
            "notice": board.notice,
        }

    def player_to_dict(p: PlayerRow) -> Dict[str, Any]:
        return {
            "name": p.name,
            "starter": p.starter,
            "points": p.points,
            "rebounds": p.rebounds,
            "assists": p.assists,
            "steals": p.steals,
            "blocks": p.blocks,
            "turnovers": p.turnovers,
        }

    def detail_to_dict(d: GameDetailView) -> Dict[str, Any]:
        """Serialize a GameDetailView into JSON-safe primitives."""
        return {
            "gameId": d.game_id,
            "title": d.title,
            "displayTime": d.display_time,
            "status": d.status.name,
            "teamStats": [
                {
                    "team": r.tricode,
                    "points": r.points,
                    "fieldGoalsPct": r.field_goals_pct,
                    "threePointersPct": r.three_pointers_pct,
                    "freeThrowsPct": r.free_throws_pct,
                    "isWinner": r.is_winner,
                }
                for r in d.team_stats_rows
            ],
            "rosters": {
                roster.tricode: {
                    "active": [player_to_dict(p) for p in roster.active],
                    "inactive": [player_to_dict(p) for p in roster.inactive],
                }
                for roster in (d.away_roster, d.home_roster)
            },
        }

    @app.get("/api/scoreboard")
    def api_scoreboard():
        """
        Stateless scoreboard JSON for a date.

        Query:
          - date=YYYY-MM-DD (optional, defaults to today)
        """
        try:
            day = parse_date(request.args.get("date"))
        except ValueError:
            return jsonify({"error": "date must be YYYY-MM-DD"}), 400

        board = handler.scoreboard_for(day)
        out = scoreboard_to_dict(board)
        out["generatedAt"] = datetime.now(tz=score_source.app_tz).isoformat()
        return jsonify(out)

    @app.get("/api/games/<game_id>")
    def api_game(game_id: str):
        """Stateless box score JSON for a game id."""
        if not is_valid_game_id(game_id):
            return jsonify({"error": "game id must be ten digits"}), 400
        try:
            detail = handler.fetch_detail(game_id)
        except NetworkError as e:
            logger.error("box score fetch failed (gameId=%s): %s", game_id, e)
            return jsonify({"error": "box score unavailable, try again later"}), 502
        except IncompleteGameDataError as e:
            logger.error("box score incomplete (gameId=%s): %s", game_id, e)
            return jsonify({"error": "box score data incomplete"}), 502
        return jsonify(detail_to_dict(detail))

    # -------------------------
    # Health
    # -------------------------

    @app.get("/health")
    def health():
        """Simple health endpoint for Docker/monitoring checks."""
        return {"ok": True, "scheduleLoaded": score_source.schedule_loaded}

    return app


# WSGI entrypoint for gunicorn (Docker CMD uses: app:app)
app = create_app()

if __name__ == "__main__":
    # Dev server (not for production).
    app.run(host="0.0.0.0", port=AppConfig().port, debug=True)
