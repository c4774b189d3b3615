"""Shared fixtures: sample NBA payloads, a fake client and a fixed clock."""

from datetime import date, datetime
from unittest.mock import MagicMock

import pytest
from dateutil import tz

from nba_scoreboard.cache import TTLCache
from nba_scoreboard.nba_client import NBAClient
from nba_scoreboard.services.game_view_builder import GameViewModelBuilder
from nba_scoreboard.services.score_source import ScoreSource

NY = tz.gettz("America/New_York")
TODAY = date(2026, 1, 15)


def make_game(game_id, away="LAL", home="BOS", away_score=0, home_score=0, status=1, status_text="7:30 pm ET"):
    return {
        "gameId": game_id,
        "gameStatus": status,
        "gameStatusText": status_text,
        "gameDateTimeUTC": "2026-01-16T00:30:00Z",
        "awayTeam": {"teamTricode": away, "score": away_score},
        "homeTeam": {"teamTricode": home, "score": home_score},
    }


def make_player(name, status="ACTIVE", starter="0", points=0):
    return {
        "name": name,
        "status": status,
        "starter": starter,
        "statistics": {
            "points": points,
            "reboundsTotal": 5,
            "assists": 3,
            "steals": 1,
            "blocks": 0,
            "turnovers": 2,
        },
    }


def make_box_team(tricode, score, players):
    return {
        "teamTricode": tricode,
        "score": score,
        "statistics": {
            "fieldGoalsPercentage": 0.488,
            "threePointersPercentage": 0.375,
            "freeThrowsPercentage": 0.8,
        },
        "players": players,
    }


@pytest.fixture
def fixed_clock():
    return lambda: datetime(2026, 1, 15, 20, 0, tzinfo=NY)


@pytest.fixture
def schedule_payload():
    return {
        "leagueSchedule": {
            "seasonYear": "2025-26",
            "gameDates": [
                {
                    "gameDate": "01/14/2026 00:00:00",
                    "games": [
                        make_game("0022500601", "NYK", "MIA", 110, 104, 3, "Final"),
                        make_game("0022500602", "DEN", "PHX", 99, 99, 3, "Final"),
                    ],
                },
                {
                    "gameDate": "01/15/2026 00:00:00",
                    "games": [make_game("0022500610", "LAL", "BOS")],
                },
                {
                    "gameDate": "01/17/2026 00:00:00",
                    "games": [make_game("0022500620", "GSW", "SAC")],
                },
            ],
        }
    }


@pytest.fixture
def live_payload():
    return {
        "scoreboard": {
            "gameDate": "2026-01-15",
            "games": [make_game("0022500610", "LAL", "BOS", 101, 98, 2, "Q4 2:31")],
        }
    }


@pytest.fixture
def box_score_payload():
    away_players = [
        make_player("LeBron James", starter="1", points=30),
        make_player("Bench Guy", status="INACTIVE"),
        make_player("Austin Reaves", starter="1", points=22),
        make_player("Injured Guy", status="INACTIVE"),
        make_player("Role Player", points=8),
    ]
    home_players = [
        make_player("Jayson Tatum", starter="1", points=35),
        make_player("Sidelined", status="INACTIVE"),
    ]
    game = make_game("0022500610", "LAL", "BOS", 110, 102, 3, "Final")
    game["awayTeam"] = make_box_team("LAL", 110, away_players)
    game["homeTeam"] = make_box_team("BOS", 102, home_players)
    return {"game": game}


@pytest.fixture
def client(schedule_payload, live_payload, box_score_payload):
    c = MagicMock(spec=NBAClient)
    c.season_schedule.return_value = schedule_payload
    c.todays_scoreboard.return_value = live_payload
    c.box_score.return_value = box_score_payload
    return c


@pytest.fixture
def score_source(client, fixed_clock):
    return ScoreSource(
        client=client,
        cache=TTLCache(),
        tz_name="America/New_York",
        scoreboard_ttl=0,
        clock=fixed_clock,
    )


@pytest.fixture
def builder():
    return GameViewModelBuilder(tz_name="America/New_York")
