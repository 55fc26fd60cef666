"""Read access to league data stored in Neo4j.

Graph layout:
    (:Player)-[:PLAYED_IN {side}]->(:Match)<-[:MVP_OF]-(:Player)
    (:Player|:Guest)-[:SIGNED_UP]->(:Signup)-[:FOR_GAME]->(:ScheduledGame)
Profile attributes live on claimed Player nodes (those with a user_id).
Timestamps are stored as ISO-8601 strings.
"""

import logging
from datetime import datetime
from typing import Any, Optional

from .database import Neo4jDatabase
from .models import (
    SKILL_NAMES,
    Guest,
    MatchRecord,
    Player,
    PlayerProfile,
    ScheduledGame,
    Signup,
)

logger = logging.getLogger(__name__)


LIST_MATCHES_QUERY = """
MATCH (m:Match)
OPTIONAL MATCH (p:Player)-[r:PLAYED_IN]->(m)
OPTIONAL MATCH (mvp:Player)-[:MVP_OF]->(m)
RETURN m.match_id as match_id, m.played_at as played_at,
       m.goals_a as goals_a, m.goals_b as goals_b,
       collect(DISTINCT CASE WHEN r.side = 'A' THEN p.player_id END) as team_a,
       collect(DISTINCT CASE WHEN r.side = 'B' THEN p.player_id END) as team_b,
       mvp.player_id as mvp_player
ORDER BY m.played_at
"""

LIST_PLAYERS_QUERY = """
MATCH (p:Player)
RETURN p.player_id as player_id, p.name as name, p.user_id as user_id, p.credit as credit
ORDER BY p.name
"""

LIST_GUESTS_QUERY = """
MATCH (g:Guest)
RETURN g.guest_id as guest_id, g.name as name, g.credit as credit
ORDER BY g.name
"""

LIST_SCHEDULED_GAMES_QUERY = """
MATCH (g:ScheduledGame)
RETURN g.game_id as game_id, g.scheduled_at as scheduled_at, g.pitch_size as pitch_size
ORDER BY g.scheduled_at DESC
"""

LIST_SIGNUPS_QUERY = """
MATCH (s:Signup)-[:FOR_GAME]->(g:ScheduledGame)
OPTIONAL MATCH (p:Player)-[:SIGNED_UP]->(s)
OPTIONAL MATCH (gu:Guest)-[:SIGNED_UP]->(s)
RETURN s.signup_id as signup_id, g.game_id as game_id, s.signed_up_at as signed_up_at,
       p.player_id as player_id, gu.guest_id as guest_id, s.guest_name as guest_name,
       s.last_minute_dropout as last_minute_dropout
ORDER BY s.signed_up_at
"""

GET_PROFILE_QUERY = """
MATCH (p:Player {player_id: $player_id})
WHERE p.user_id IS NOT NULL
RETURN p.favorite_club as favorite_club, p.signature_moves as signature_moves,
       p.skill_pace as pace, p.skill_shooting as shooting, p.skill_passing as passing,
       p.skill_dribbling as dribbling, p.skill_defending as defending,
       p.skill_physical as physical
"""


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


def match_from_record(record: dict[str, Any]) -> MatchRecord:
    return MatchRecord(
        match_id=record["match_id"],
        team_a=frozenset(record.get("team_a") or ()),
        team_b=frozenset(record.get("team_b") or ()),
        goals_a=int(record.get("goals_a") or 0),
        goals_b=int(record.get("goals_b") or 0),
        mvp_player=record.get("mvp_player"),
        played_at=_parse_timestamp(record.get("played_at")),
    )


def game_from_record(record: dict[str, Any]) -> ScheduledGame:
    return ScheduledGame(
        game_id=record["game_id"],
        scheduled_at=_parse_timestamp(record["scheduled_at"]),
        pitch_size=record.get("pitch_size"),
    )


def signup_from_record(record: dict[str, Any]) -> Signup:
    return Signup(
        signup_id=record["signup_id"],
        game_id=record["game_id"],
        signed_up_at=_parse_timestamp(record["signed_up_at"]),
        player_id=record.get("player_id"),
        guest_id=record.get("guest_id"),
        guest_name=record.get("guest_name"),
        last_minute_dropout=bool(record.get("last_minute_dropout")),
    )


def profile_from_record(record: dict[str, Any]) -> PlayerProfile:
    ratings = {name: record[name] for name in SKILL_NAMES if record.get(name) is not None}
    return PlayerProfile(
        favorite_club=record.get("favorite_club"),
        skill_ratings=ratings,
        signature_moves=tuple(record.get("signature_moves") or ()),
    )


class LeagueRepository:
    """Read interface the standings, badge and debt engines consume."""

    def __init__(self, db: Neo4jDatabase):
        self.db = db

    def list_matches(self) -> list[MatchRecord]:
        records = self.db.execute_query(LIST_MATCHES_QUERY)
        logger.debug("Fetched %d matches", len(records))
        return [match_from_record(r) for r in records]

    def list_players(self) -> list[Player]:
        return [
            Player(
                player_id=r["player_id"],
                name=r["name"],
                user_id=r.get("user_id"),
                credit=float(r.get("credit") or 0),
            )
            for r in self.db.execute_query(LIST_PLAYERS_QUERY)
        ]

    def list_guests(self) -> list[Guest]:
        return [
            Guest(guest_id=r["guest_id"], name=r["name"], credit=float(r.get("credit") or 0))
            for r in self.db.execute_query(LIST_GUESTS_QUERY)
        ]

    def list_scheduled_games(self) -> list[ScheduledGame]:
        return [game_from_record(r) for r in self.db.execute_query(LIST_SCHEDULED_GAMES_QUERY)]

    def list_signups(self) -> list[Signup]:
        records = self.db.execute_query(LIST_SIGNUPS_QUERY)
        logger.debug("Fetched %d signups", len(records))
        return [signup_from_record(r) for r in records]

    def get_profile(self, player_id: str) -> Optional[PlayerProfile]:
        records = self.db.execute_query(GET_PROFILE_QUERY, {"player_id": player_id})
        if not records:
            return None
        return profile_from_record(records[0])
