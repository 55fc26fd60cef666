"""Pytest configuration and fixtures for footy league tests."""

import os
from datetime import datetime

import pytest

# Set up test environment
os.environ.setdefault("NEO4J_URI", "bolt://localhost:7687")
os.environ.setdefault("NEO4J_USER", "neo4j")
os.environ.setdefault("NEO4J_PASSWORD", "password")

from footy_league_mcp.cache import TTLCache
from footy_league_mcp.models import MatchRecord, PlayerAggregate
from footy_league_mcp.repository import LeagueRepository
from footy_league_mcp.service import LeagueService


def _iso(value):
    return value.isoformat() if value else None


class MockNeo4jDatabase:
    """Mock Neo4j database for testing without a real database."""

    def __init__(self):
        self.data = self._load_sample_data()
        self.writes = []
        self._connected = False

    def _load_sample_data(self):
        """Load sample data into memory for mocking."""
        from footy_league_mcp.data_loader import get_sample_data
        return get_sample_data()

    def connect(self):
        self._connected = True

    def close(self):
        self._connected = False

    def execute_query(self, query: str, parameters: dict = None) -> list:
        """Execute a mock query against in-memory data."""
        params = parameters or {}

        # Match log with line-ups
        if "MATCH (m:Match)" in query and "PLAYED_IN" in query:
            matches = sorted(self.data["matches"], key=lambda m: m.played_at)
            return [
                {
                    "match_id": m.match_id,
                    "played_at": _iso(m.played_at),
                    "goals_a": m.goals_a,
                    "goals_b": m.goals_b,
                    "team_a": sorted(m.team_a),
                    "team_b": sorted(m.team_b),
                    "mvp_player": m.mvp_player,
                }
                for m in matches
            ]

        # Player profile
        if "MATCH (p:Player {player_id: $player_id})" in query and "user_id IS NOT NULL" in query:
            player_id = params.get("player_id")
            player = next((p for p in self.data["players"] if p.player_id == player_id), None)
            if player is None or player.user_id is None:
                return []
            profile = self.data["profiles"].get(player_id)
            if profile is None:
                return [{"favorite_club": None, "signature_moves": None}]
            record = {
                "favorite_club": profile.favorite_club,
                "signature_moves": list(profile.signature_moves),
            }
            record.update(profile.skill_ratings)
            return [record]

        # Roster
        if "MATCH (p:Player)" in query and "RETURN p.player_id" in query:
            players = sorted(self.data["players"], key=lambda p: p.name)
            return [
                {"player_id": p.player_id, "name": p.name, "user_id": p.user_id, "credit": p.credit}
                for p in players
            ]

        # Guests
        if "MATCH (g:Guest)" in query:
            guests = sorted(self.data["guests"], key=lambda g: g.name)
            return [{"guest_id": g.guest_id, "name": g.name, "credit": g.credit} for g in guests]

        # Signups
        if "MATCH (s:Signup)-[:FOR_GAME]->(g:ScheduledGame)" in query:
            signups = sorted(self.data["signups"], key=lambda s: s.signed_up_at)
            return [
                {
                    "signup_id": s.signup_id,
                    "game_id": s.game_id,
                    "signed_up_at": _iso(s.signed_up_at),
                    "player_id": s.player_id,
                    "guest_id": s.guest_id,
                    "guest_name": s.guest_name,
                    "last_minute_dropout": s.last_minute_dropout,
                }
                for s in signups
            ]

        # Scheduled games
        if "MATCH (g:ScheduledGame)" in query:
            games = sorted(self.data["games"], key=lambda g: g.scheduled_at, reverse=True)
            return [
                {"game_id": g.game_id, "scheduled_at": _iso(g.scheduled_at), "pitch_size": g.pitch_size}
                for g in games
            ]

        # Default empty result
        return []

    def execute_write(self, query: str, parameters: dict = None) -> None:
        """Record write operations so loader tests can inspect them."""
        self.writes.append((query, parameters or {}))

    def create_constraints(self) -> None:
        pass

    def create_indexes(self) -> None:
        pass


class FakeClock:
    """Manually advanced clock for cache expiry tests."""

    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def mock_db():
    """Provide a mock database for testing."""
    return MockNeo4jDatabase()


@pytest.fixture
def db_with_sample_data(mock_db):
    """Provide a mock database pre-populated with sample data."""
    mock_db.connect()
    return mock_db


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def league_service(db_with_sample_data, clock):
    """A league service over the mock database with controllable caches."""
    return LeagueService(
        LeagueRepository(db_with_sample_data),
        stats_cache=TTLCache(30, clock=clock),
        badge_cache=TTLCache(300, clock=clock),
        total_game_cost=93.6,
    )


def make_match(match_id, team_a, team_b, goals_a, goals_b, mvp=None, played_at=None):
    """Build a MatchRecord from plain lists."""
    return MatchRecord(
        match_id=match_id,
        team_a=frozenset(team_a),
        team_b=frozenset(team_b),
        goals_a=goals_a,
        goals_b=goals_b,
        mvp_player=mvp,
        played_at=played_at,
    )


def stats(wins=0, draws=0, losses=0, mvp=0, gd=0, points=None):
    """Build a PlayerAggregate; points default to the league formula."""
    if points is None:
        points = wins * 3 + draws
    return PlayerAggregate(
        wins=wins, draws=draws, losses=losses, mvp_awards=mvp, goal_difference=gd, points=points
    )


@pytest.fixture
def kickoff():
    return datetime(2025, 3, 1, 10, 0)
