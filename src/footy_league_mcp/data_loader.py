"""Data loader for populating Neo4j with league data."""

import logging
from datetime import datetime, timedelta
from typing import Any, Optional

from .database import Neo4jDatabase
from .models import (
    Guest,
    MatchRecord,
    Player,
    PlayerProfile,
    ScheduledGame,
    Signup,
)
from .validation import mvp_outside_teams, validate_game, validate_match, validate_signup

logger = logging.getLogger(__name__)


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


class DataLoader:
    """Load validated league data into the database."""

    def __init__(self, db: Neo4jDatabase):
        self.db = db

    def load_player(self, player: Player, profile: Optional[PlayerProfile] = None) -> None:
        """Load a player and, for claimed players, their profile."""
        query = """
        MERGE (p:Player {player_id: $player_id})
        SET p.name = $name,
            p.user_id = $user_id,
            p.credit = $credit
        """
        self.db.execute_write(
            query,
            {
                "player_id": player.player_id,
                "name": player.name,
                "user_id": player.user_id,
                "credit": player.credit,
            },
        )
        if profile is not None:
            self.load_profile(player.player_id, profile)

    def load_profile(self, player_id: str, profile: PlayerProfile) -> None:
        """Store profile attributes on the player node."""
        query = """
        MATCH (p:Player {player_id: $player_id})
        SET p.favorite_club = $favorite_club,
            p.signature_moves = $signature_moves,
            p.skill_pace = $pace,
            p.skill_shooting = $shooting,
            p.skill_passing = $passing,
            p.skill_dribbling = $dribbling,
            p.skill_defending = $defending,
            p.skill_physical = $physical
        """
        ratings = profile.skill_ratings
        self.db.execute_write(
            query,
            {
                "player_id": player_id,
                "favorite_club": profile.favorite_club,
                "signature_moves": list(profile.signature_moves),
                "pace": ratings.get("pace"),
                "shooting": ratings.get("shooting"),
                "passing": ratings.get("passing"),
                "dribbling": ratings.get("dribbling"),
                "defending": ratings.get("defending"),
                "physical": ratings.get("physical"),
            },
        )

    def load_guest(self, guest: Guest) -> None:
        """Load a guest into the database."""
        query = """
        MERGE (g:Guest {guest_id: $guest_id})
        SET g.name = $name,
            g.credit = $credit
        """
        self.db.execute_write(
            query,
            {"guest_id": guest.guest_id, "name": guest.name, "credit": guest.credit},
        )

    def load_match(self, match: MatchRecord) -> None:
        """Validate and load a match with both line-ups and its MVP."""
        validate_match(match)
        if mvp_outside_teams(match):
            logger.warning(
                "Match %s names MVP %s who played for neither team; award ignored",
                match.match_id,
                match.mvp_player,
            )

        query = """
        MERGE (m:Match {match_id: $match_id})
        SET m.played_at = $played_at,
            m.goals_a = $goals_a,
            m.goals_b = $goals_b
        WITH m
        UNWIND $lineup as slot
        MERGE (p:Player {player_id: slot.player_id})
        MERGE (p)-[r:PLAYED_IN]->(m)
        SET r.side = slot.side
        """
        lineup = [{"player_id": pid, "side": "A"} for pid in sorted(match.team_a)]
        lineup += [{"player_id": pid, "side": "B"} for pid in sorted(match.team_b)]
        self.db.execute_write(
            query,
            {
                "match_id": match.match_id,
                "played_at": _iso(match.played_at),
                "goals_a": match.goals_a,
                "goals_b": match.goals_b,
                "lineup": lineup,
            },
        )

        if match.mvp_player is not None:
            mvp_query = """
            MATCH (p:Player {player_id: $player_id})
            MATCH (m:Match {match_id: $match_id})
            MERGE (p)-[:MVP_OF]->(m)
            """
            self.db.execute_write(
                mvp_query, {"player_id": match.mvp_player, "match_id": match.match_id}
            )

    def load_scheduled_game(self, game: ScheduledGame) -> None:
        """Load a scheduled game into the database."""
        validate_game(game)
        query = """
        MERGE (g:ScheduledGame {game_id: $game_id})
        SET g.scheduled_at = $scheduled_at,
            g.pitch_size = $pitch_size
        """
        self.db.execute_write(
            query,
            {
                "game_id": game.game_id,
                "scheduled_at": _iso(game.scheduled_at),
                "pitch_size": game.pitch_size,
            },
        )

    def load_signup(self, signup: Signup) -> None:
        """Load a signup and link it to its game and participant."""
        validate_signup(signup)
        query = """
        MATCH (g:ScheduledGame {game_id: $game_id})
        MERGE (s:Signup {signup_id: $signup_id})
        SET s.signed_up_at = $signed_up_at,
            s.guest_name = $guest_name,
            s.last_minute_dropout = $last_minute_dropout
        MERGE (s)-[:FOR_GAME]->(g)
        """
        self.db.execute_write(
            query,
            {
                "signup_id": signup.signup_id,
                "game_id": signup.game_id,
                "signed_up_at": _iso(signup.signed_up_at),
                "guest_name": signup.guest_name,
                "last_minute_dropout": signup.last_minute_dropout,
            },
        )

        if signup.player_id is not None:
            label, id_field, participant_id = "Player", "player_id", signup.player_id
        elif signup.guest_id is not None:
            label, id_field, participant_id = "Guest", "guest_id", signup.guest_id
        else:
            return

        link_query = f"""
        MATCH (x:{label} {{{id_field}: $participant_id}})
        MATCH (s:Signup {{signup_id: $signup_id}})
        MERGE (x)-[:SIGNED_UP]->(s)
        """
        self.db.execute_write(
            link_query, {"participant_id": participant_id, "signup_id": signup.signup_id}
        )


def get_sample_data() -> dict[str, Any]:
    """Get a small sample league for demo purposes."""
    players = [
        Player("P01", "Ade", user_id="U01"),
        Player("P02", "Ben", user_id="U02", credit=20.0),
        Player("P03", "Chidi"),
        Player("P04", "Dan"),
        Player("P05", "Eli"),
        Player("P06", "Femi"),
        Player("P07", "Gus"),
        Player("P08", "Hal"),
        Player("P09", "Ike"),  # on the roster, no matches yet
    ]

    profiles = {
        "P01": PlayerProfile(
            favorite_club="Arsenal",
            skill_ratings={
                "pace": 92,
                "shooting": 88,
                "passing": 80,
                "dribbling": 85,
                "defending": 60,
                "physical": 75,
            },
            signature_moves=("Rainbow Flick", "Nutmeg"),
        ),
        "P02": PlayerProfile(
            favorite_club="Leeds United",
            signature_moves=("Elastico", "Rabona", "Step Over", "Cruyff Turn", "Bicycle Kick"),
        ),
    }

    guests = [
        Guest("GU01", "Sam Jones", credit=10.0),
        Guest("GU02", "Zed"),
        Guest("GU03", "Rob"),
        Guest("GU04", "Tom O'Neil"),
    ]

    def team(*ids: str) -> frozenset[str]:
        return frozenset(ids)

    matches = [
        MatchRecord("M01", team("P01", "P02", "P03", "P04"), team("P05", "P06", "P07", "P08"),
                    3, 1, "P01", datetime(2025, 1, 5, 10, 0)),
        MatchRecord("M02", team("P01", "P05", "P03", "P07"), team("P02", "P06", "P04", "P08"),
                    2, 2, "P06", datetime(2025, 1, 12, 10, 0)),
        MatchRecord("M03", team("P01", "P06", "P02", "P07"), team("P03", "P05", "P04", "P08"),
                    4, 0, "P02", datetime(2025, 1, 19, 10, 0)),
        MatchRecord("M04", team("P02", "P05", "P04", "P08"), team("P01", "P03", "P06", "P07"),
                    1, 2, "P03", datetime(2025, 1, 26, 10, 0)),
    ]

    games = [
        ScheduledGame("G01", datetime(2025, 2, 2, 10, 0), "small"),
        ScheduledGame("G02", datetime(2025, 2, 9, 10, 0), None),
    ]

    opened = datetime(2025, 1, 27, 9, 0)
    queue: list[dict[str, Any]] = [{"player_id": f"P0{i}"} for i in range(1, 10)]
    queue += [
        {"guest_id": "GU01"},
        {"guest_name": "tom oneil"},  # older signup, name only
        {"guest_id": "GU02"},
        {"guest_name": "Late Larry"},  # 13th: reserve, owes nothing
        {"guest_id": "GU03", "last_minute_dropout": True},  # 14th but dropped out late
    ]
    signups = [
        Signup(f"S{index + 1:02d}", "G01", opened + timedelta(minutes=index), **fields)
        for index, fields in enumerate(queue)
    ]
    signups += [
        Signup("S20", "G02", datetime(2025, 2, 3, 8, 0), player_id="P01"),
        Signup("S21", "G02", datetime(2025, 2, 3, 8, 5), player_id="P02"),
        Signup("S22", "G02", datetime(2025, 2, 3, 8, 10), player_id="P03"),
    ]

    return {
        "players": players,
        "profiles": profiles,
        "guests": guests,
        "matches": matches,
        "games": games,
        "signups": signups,
    }


def load_sample_data(db: Neo4jDatabase) -> None:
    """Load all sample data into the database."""
    loader = DataLoader(db)
    data = get_sample_data()

    # Create constraints and indexes first
    db.create_constraints()
    db.create_indexes()

    # Load in order respecting dependencies
    for player in data["players"]:
        loader.load_player(player, data["profiles"].get(player.player_id))

    for guest in data["guests"]:
        loader.load_guest(guest)

    for match in data["matches"]:
        loader.load_match(match)

    for game in data["games"]:
        loader.load_scheduled_game(game)

    for signup in data["signups"]:
        loader.load_signup(signup)

    logger.info(
        "Loaded %d players, %d matches, %d games, %d signups",
        len(data["players"]),
        len(data["matches"]),
        len(data["games"]),
        len(data["signups"]),
    )
