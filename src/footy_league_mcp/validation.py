"""Ingestion-boundary checks for match records and signups.

The standings engines trust their input; these checks run once, where data
enters the system (the Neo4j loader and the CSV importer).
"""

from .exceptions import MalformedGameError, MalformedMatchError, MalformedSignupError
from .models import MatchRecord, ScheduledGame, Signup

PITCH_SIZES = ("small", "big")


def mvp_outside_teams(match: MatchRecord) -> bool:
    """True when an MVP is named who played for neither side."""
    if match.mvp_player is None:
        return False
    return match.mvp_player not in match.team_a and match.mvp_player not in match.team_b


def validate_match(match: MatchRecord, strict_mvp: bool = False) -> None:
    """Raise MalformedMatchError if the match cannot be folded into standings."""
    if not match.team_a or not match.team_b:
        raise MalformedMatchError(match.match_id, "both teams need at least one player")

    overlap = match.team_a & match.team_b
    if overlap:
        raise MalformedMatchError(
            match.match_id,
            f"players on both teams: {', '.join(sorted(overlap))}",
        )

    if match.goals_a < 0 or match.goals_b < 0:
        raise MalformedMatchError(match.match_id, "goal counts must be non-negative")

    if strict_mvp and mvp_outside_teams(match):
        raise MalformedMatchError(
            match.match_id, f"MVP '{match.mvp_player}' did not play in this match"
        )


def validate_signup(signup: Signup) -> None:
    """Raise MalformedSignupError for a signup nobody can be charged for."""
    if signup.player_id is None and signup.guest_id is None and not signup.guest_name:
        raise MalformedSignupError(signup.signup_id, "no player or guest reference")
    if signup.player_id is not None and signup.guest_id is not None:
        raise MalformedSignupError(signup.signup_id, "references both a player and a guest")


def validate_game(game: ScheduledGame) -> None:
    if game.pitch_size is not None and game.pitch_size not in PITCH_SIZES:
        raise MalformedGameError(game.game_id, f"unknown pitch size '{game.pitch_size}'")
