"""Fold a match log into per-player standings statistics."""

from collections.abc import Iterable
from typing import Optional

from .models import MatchRecord, PlayerAggregate

WIN_POINTS = 3
DRAW_POINTS = 1

RESULT_WIN = "win"
RESULT_DRAW = "draw"
RESULT_LOSS = "loss"


def points_for(wins: int, draws: int) -> int:
    """League points. MVP awards are tracked separately and never add points."""
    return wins * WIN_POINTS + draws * DRAW_POINTS


def _result(own_goals: int, opponent_goals: int) -> str:
    if own_goals > opponent_goals:
        return RESULT_WIN
    if own_goals < opponent_goals:
        return RESULT_LOSS
    return RESULT_DRAW


def _sides(match: MatchRecord):
    yield match.team_a, match.goals_a, match.goals_b
    yield match.team_b, match.goals_b, match.goals_a


def aggregate(
    matches: Iterable[MatchRecord],
    player_ids: Optional[Iterable[str]] = None,
) -> dict[str, PlayerAggregate]:
    """Compute one PlayerAggregate per player.

    Args:
        matches: The match log, in any order.
        player_ids: Declared roster. Listed players with no matches get a
            zero aggregate; players who only appear in the log are reported too.

    Returns:
        Mapping of player id to aggregate.
    """
    counters: dict[str, dict[str, int]] = {}

    def counter(player_id: str) -> dict[str, int]:
        if player_id not in counters:
            counters[player_id] = {
                RESULT_WIN: 0,
                RESULT_DRAW: 0,
                RESULT_LOSS: 0,
                "mvp": 0,
                "gd": 0,
            }
        return counters[player_id]

    for player_id in player_ids or ():
        counter(player_id)

    for match in matches:
        for team, own_goals, opponent_goals in _sides(match):
            result = _result(own_goals, opponent_goals)
            for player_id in team:
                entry = counter(player_id)
                entry[result] += 1
                entry["gd"] += own_goals - opponent_goals
                if match.mvp_player == player_id:
                    entry["mvp"] += 1

    return {
        player_id: PlayerAggregate(
            wins=entry[RESULT_WIN],
            draws=entry[RESULT_DRAW],
            losses=entry[RESULT_LOSS],
            mvp_awards=entry["mvp"],
            goal_difference=entry["gd"],
            points=points_for(entry[RESULT_WIN], entry[RESULT_DRAW]),
        )
        for player_id, entry in counters.items()
    }


def result_for(match: MatchRecord, player_id: str) -> Optional[str]:
    """The player's result in one match, or None if they did not play."""
    for team, own_goals, opponent_goals in _sides(match):
        if player_id in team:
            return _result(own_goals, opponent_goals)
    return None


def recent_results(
    matches: Iterable[MatchRecord], player_id: str, limit: int = 6
) -> list[str]:
    """The player's latest results, most recent first.

    Matches without a played_at timestamp sort after all dated ones.
    """
    played = [m for m in matches if result_for(m, player_id) is not None]
    played.sort(
        key=lambda m: (m.played_at is not None, m.played_at.timestamp() if m.played_at else 0.0),
        reverse=True,
    )
    return [result_for(m, player_id) for m in played[:limit]]
