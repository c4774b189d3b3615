"""Tests for date -> games resolution (live feed vs season schedule)."""

import logging
from datetime import date, timedelta

from conftest import TODAY

from nba_scoreboard.errors import NetworkError
from nba_scoreboard.services.score_source import LIVE, SCHEDULE, UNAVAILABLE_MESSAGE


class TestPathSelection:

    def test_today_uses_live_feed(self, score_source, client):
        day = score_source.resolve(TODAY)
        assert day.source == LIVE
        client.todays_scoreboard.assert_called_once()
        client.season_schedule.assert_not_called()

    def test_live_games_returned_verbatim(self, score_source, live_payload):
        day = score_source.resolve(TODAY)
        assert list(day.games) == live_payload["scoreboard"]["games"]
        assert day.date == TODAY
        assert day.error is None

    def test_other_dates_use_schedule(self, score_source, client):
        for offset in (-1, 1, 2, -30):
            day = score_source.resolve(TODAY + timedelta(days=offset))
            assert day.source == SCHEDULE
        client.todays_scoreboard.assert_not_called()

    def test_past_date_games(self, score_source):
        day = score_source.resolve(date(2026, 1, 14))
        assert [g["gameId"] for g in day.games] == ["0022500601", "0022500602"]

    def test_null_entry_in_schedule_is_malformed(self, score_source, client, schedule_payload):
        schedule_payload["leagueSchedule"]["gameDates"][0]["games"].append(None)
        day = score_source.resolve(date(2026, 1, 14))
        assert day.games == ()
        assert day.error == UNAVAILABLE_MESSAGE

    def test_day_without_games_is_empty_not_error(self, score_source):
        day = score_source.resolve(date(2026, 1, 16))
        assert day.games == ()
        assert day.error is None


class TestScheduleCaching:

    def test_schedule_fetched_once(self, score_source, client):
        score_source.resolve(date(2026, 1, 14))
        score_source.resolve(date(2026, 1, 17))
        score_source.resolve(date(2026, 1, 14))
        assert client.season_schedule.call_count == 1
        assert score_source.schedule_loaded

    def test_failed_schedule_fetch_is_retried_later(self, score_source, client, schedule_payload):
        client.season_schedule.side_effect = [NetworkError("boom"), schedule_payload]
        assert score_source.resolve(date(2026, 1, 14)).games == ()
        assert len(score_source.resolve(date(2026, 1, 14)).games) == 2
        assert client.season_schedule.call_count == 2

    def test_load_logs_schedule_span(self, score_source, caplog):
        with caplog.at_level(logging.INFO):
            score_source.resolve(date(2026, 1, 14))
        assert "3 game days, 2026-01-14 to 2026-01-17" in caplog.text


class TestFailures:

    def test_schedule_network_error_renders_empty_and_logs(self, score_source, client, caplog):
        client.season_schedule.side_effect = NetworkError("connection refused", url="x")
        with caplog.at_level(logging.ERROR):
            day = score_source.resolve(date(2026, 1, 14))
        assert day.games == ()
        assert not score_source.schedule_loaded
        assert day.error == UNAVAILABLE_MESSAGE
        assert "season schedule fetch failed" in caplog.text

    def test_malformed_schedule_renders_empty_and_logs(self, score_source, client, caplog):
        client.season_schedule.return_value = {"oops": True}
        with caplog.at_level(logging.ERROR):
            day = score_source.resolve(date(2026, 1, 14))
        assert day.games == ()
        assert day.error == UNAVAILABLE_MESSAGE
        assert "malformed" in caplog.text

    def test_live_network_error_returns_empty_day(self, score_source, client, caplog):
        client.todays_scoreboard.side_effect = NetworkError("timeout")
        with caplog.at_level(logging.ERROR):
            day = score_source.resolve(TODAY)
        assert day.games == ()
        assert day.date == TODAY
        assert day.error == UNAVAILABLE_MESSAGE
        assert "live scoreboard fetch failed" in caplog.text

    def test_live_payload_without_scoreboard(self, score_source, client):
        client.todays_scoreboard.return_value = {"meta": {}}
        day = score_source.resolve(TODAY)
        assert day.games == ()
        assert day.error == UNAVAILABLE_MESSAGE

    def test_live_feed_date_is_reported(self, score_source, client, live_payload):
        live_payload["scoreboard"]["gameDate"] = "2026-01-14"
        assert score_source.resolve(TODAY).date == date(2026, 1, 14)
