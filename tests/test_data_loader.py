"""Tests for loading league data and reading it back through the repository."""

import logging
from datetime import datetime

import pytest

from footy_league_mcp.data_loader import DataLoader, get_sample_data, load_sample_data
from footy_league_mcp.exceptions import MalformedGameError, MalformedMatchError, MalformedSignupError
from footy_league_mcp.models import ScheduledGame, Signup
from footy_league_mcp.repository import LeagueRepository

from conftest import make_match

WHEN = datetime(2025, 3, 1, 10, 0)


class TestDataLoader:
    def test_load_sample_data_writes_everything(self, mock_db):
        load_sample_data(mock_db)
        data = get_sample_data()
        queries = [query for query, _ in mock_db.writes]

        assert sum("MERGE (p:Player {player_id: $player_id})" in q for q in queries) == 9
        assert sum("MERGE (m:Match {match_id: $match_id})" in q for q in queries) == 4
        assert sum("MERGE (p)-[:MVP_OF]->(m)" in q for q in queries) == 4
        assert sum("MERGE (s:Signup" in q for q in queries) == len(data["signups"])

    def test_match_lineup_carries_sides(self, mock_db):
        DataLoader(mock_db).load_match(make_match("M1", ["A", "B"], ["C"], 1, 0))
        _, params = mock_db.writes[0]
        assert params["lineup"] == [
            {"player_id": "A", "side": "A"},
            {"player_id": "B", "side": "A"},
            {"player_id": "C", "side": "B"},
        ]
        assert len(mock_db.writes) == 1

    def test_profile_written_for_claimed_player(self, mock_db):
        data = get_sample_data()
        DataLoader(mock_db).load_player(data["players"][0], data["profiles"]["P01"])
        _, params = mock_db.writes[-1]
        assert params["pace"] == 92
        assert params["signature_moves"] == ["Rainbow Flick", "Nutmeg"]

    def test_mvp_outside_teams_is_logged(self, mock_db, caplog):
        with caplog.at_level(logging.WARNING):
            DataLoader(mock_db).load_match(make_match("M1", ["A"], ["B"], 1, 0, mvp="Z"))
        assert "played for neither team" in caplog.text

    def test_rejects_malformed_match(self, mock_db):
        with pytest.raises(MalformedMatchError):
            DataLoader(mock_db).load_match(make_match("M1", ["A"], ["A"], 1, 0))
        assert mock_db.writes == []

    def test_rejects_malformed_signup(self, mock_db):
        with pytest.raises(MalformedSignupError):
            DataLoader(mock_db).load_signup(Signup("S1", "G1", WHEN))

    def test_rejects_unknown_pitch(self, mock_db):
        with pytest.raises(MalformedGameError):
            DataLoader(mock_db).load_scheduled_game(ScheduledGame("G1", WHEN, "giant"))

    def test_guest_signup_links_guest(self, mock_db):
        DataLoader(mock_db).load_signup(Signup("S1", "G1", WHEN, guest_id="GU01"))
        query, params = mock_db.writes[-1]
        assert "MATCH (x:Guest {guest_id: $participant_id})" in query
        assert params["participant_id"] == "GU01"

    def test_name_only_signup_has_no_link(self, mock_db):
        DataLoader(mock_db).load_signup(Signup("S1", "G1", WHEN, guest_name="Walk In"))
        assert len(mock_db.writes) == 1


class TestRepository:
    def test_matches_round_trip(self, db_with_sample_data):
        matches = LeagueRepository(db_with_sample_data).list_matches()
        assert matches == get_sample_data()["matches"]

    def test_signups_round_trip(self, db_with_sample_data):
        signups = LeagueRepository(db_with_sample_data).list_signups()
        assert signups == sorted(get_sample_data()["signups"], key=lambda s: s.signed_up_at)

    def test_games_latest_first(self, db_with_sample_data):
        games = LeagueRepository(db_with_sample_data).list_scheduled_games()
        assert [g.game_id for g in games] == ["G02", "G01"]
        assert games[0].capacity == 14

    def test_profile_for_claimed_player(self, db_with_sample_data):
        profile = LeagueRepository(db_with_sample_data).get_profile("P01")
        assert profile.skill_ratings["pace"] == 92
        assert profile.signature_moves == ("Rainbow Flick", "Nutmeg")

    def test_no_profile_for_unclaimed_player(self, db_with_sample_data):
        assert LeagueRepository(db_with_sample_data).get_profile("P03") is None

    def test_players_have_credit(self, db_with_sample_data):
        players = {p.player_id: p for p in LeagueRepository(db_with_sample_data).list_players()}
        assert players["P02"].credit == 20.0
        assert players["P01"].user_id == "U01"
