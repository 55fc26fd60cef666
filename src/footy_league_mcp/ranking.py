"""Leaderboard ordering for aggregated player statistics."""

from collections.abc import Iterable
from functools import cmp_to_key
from typing import Callable, Optional

from .models import PlayerAggregate

# Points-per-game values closer than this are treated as equal.
PPG_EPSILON = 1e-2

Ranked = tuple[str, PlayerAggregate]

SORT_KEYS: dict[str, Callable[[PlayerAggregate], float]] = {
    "points": lambda agg: agg.points,
    "mvp_awards": lambda agg: agg.mvp_awards,
    "games_played": lambda agg: agg.games_played,
    "goal_difference": lambda agg: agg.goal_difference,
    "points_per_game": lambda agg: agg.points_per_game,
    "win_percentage": lambda agg: agg.win_percentage,
}


def compare_standings(a: PlayerAggregate, b: PlayerAggregate) -> int:
    """Negative when a ranks above b: points, then PPG, then goal difference.

    PPG values within PPG_EPSILON count as equal, and that closeness is not
    transitive. On equal points, players whose PPG values form a chain of
    near-equal steps (100 points over 100, 101 and 102 games, say) can
    compare in a cycle, and their relative order then follows input order.
    Such a chain needs around 100 games per player.
    """
    if a.points != b.points:
        return b.points - a.points

    ppg_gap = b.points_per_game - a.points_per_game
    if abs(ppg_gap) >= PPG_EPSILON:
        return -1 if ppg_gap < 0 else 1

    return b.goal_difference - a.goal_difference


def rank(
    aggregates: Iterable[Ranked],
    key: Optional[str] = None,
    descending: bool = True,
) -> list[Ranked]:
    """Sort (player_id, aggregate) pairs for display.

    With no key, the league table order is used. A named key from SORT_KEYS
    re-sorts on that field alone; equal values keep their input order.
    """
    rows = list(aggregates)

    if key is None:
        sign = 1 if descending else -1
        return sorted(rows, key=cmp_to_key(lambda x, y: sign * compare_standings(x[1], y[1])))

    if key not in SORT_KEYS:
        raise KeyError(f"Unknown sort key '{key}'. Expected one of: {', '.join(SORT_KEYS)}")

    field_value = SORT_KEYS[key]
    return sorted(rows, key=lambda row: field_value(row[1]), reverse=descending)
