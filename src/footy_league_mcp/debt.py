"""Pitch-cost ledger: who owes what for scheduled games.

A game's cost is split into one slot per place on the pitch. Signups are
queued by the time they were made; the first ``capacity`` places pay a slot
each and anyone further down the queue is a reserve who owes nothing.
"""

import re
from collections.abc import Callable, Iterable, Sequence
from typing import Optional

from .models import DebtLine, DebtSummary, GameLineup, Guest, Player, ScheduledGame, Signup

TOTAL_GAME_COST = 93.6


def cost_per_slot(game: ScheduledGame, total_cost: float = TOTAL_GAME_COST) -> float:
    return total_cost / game.capacity


def normalize_guest_name(name: Optional[str]) -> str:
    return re.sub(r"[^a-z0-9]", "", (name or "").lower())


def signups_in_order(game: ScheduledGame, signups: Iterable[Signup]) -> list[Signup]:
    """The game's signups by signup time; simultaneous signups keep input order."""
    return sorted(
        (s for s in signups if s.game_id == game.game_id),
        key=lambda s: s.signed_up_at,
    )


def _position(queue: Sequence[Signup], matches: Callable[[Signup], bool]) -> Optional[int]:
    for index, signup in enumerate(queue):
        if matches(signup):
            return index + 1
    return None


def _debt_across_games(
    games: Iterable[ScheduledGame],
    signups: Sequence[Signup],
    matches: Callable[[Signup], bool],
    total_cost: float,
) -> float:
    debt = 0.0
    for game in games:
        position = _position(signups_in_order(game, signups), matches)
        if position is not None and position <= game.capacity:
            debt += cost_per_slot(game, total_cost)
    return debt


def debt_for(
    participant_id: str,
    games: Iterable[ScheduledGame],
    signups: Iterable[Signup],
    total_cost: float = TOTAL_GAME_COST,
) -> float:
    """Total owed by a player or guest across all games.

    Only the participant's queue position counts here; the last-minute
    dropout penalty is applied by summarize_debts.
    """
    return _debt_across_games(
        games,
        list(signups),
        lambda s: s.participant_id == participant_id,
        total_cost,
    )


def guest_debt_for(
    guest_id: str,
    games: Iterable[ScheduledGame],
    signups: Iterable[Signup],
    guest_name: Optional[str] = None,
    total_cost: float = TOTAL_GAME_COST,
) -> float:
    """Debt for a guest, also matching older signups that only carry a name."""
    normalized = normalize_guest_name(guest_name)

    def matches(signup: Signup) -> bool:
        if signup.guest_id == guest_id:
            return True
        return (
            signup.guest_id is None
            and signup.player_id is None
            and bool(normalized)
            and normalize_guest_name(signup.guest_name) == normalized
        )

    return _debt_across_games(games, list(signups), matches, total_cost)


def owes_for_game(position: int, capacity: int, last_minute_dropout: bool) -> bool:
    return position <= capacity or last_minute_dropout


def summarize_debts(
    games: Iterable[ScheduledGame],
    signups: Iterable[Signup],
    players: Iterable[Player] = (),
    guests: Iterable[Guest] = (),
    total_cost: float = TOTAL_GAME_COST,
) -> list[DebtSummary]:
    """Per-participant debt report, most indebted first.

    A signup owes its slot when it made the paid places or when the
    participant dropped out at the last minute, whatever their position.
    """
    signups = list(signups)
    players_by_id = {p.player_id: p for p in players}
    guests_by_id: dict[str, Guest] = {}
    guests_by_name: dict[str, Guest] = {}
    for guest in guests:
        guests_by_id[guest.guest_id] = guest
        guests_by_name.setdefault(normalize_guest_name(guest.name), guest)

    summaries: dict[str, DebtSummary] = {}

    for game in games:
        queue = signups_in_order(game, signups)
        for index, signup in enumerate(queue):
            position = index + 1
            if not owes_for_game(position, game.capacity, signup.last_minute_dropout):
                continue

            key, summary = _summary_for(signup, players_by_id, guests_by_id, guests_by_name)
            summary = summaries.setdefault(key, summary)

            cost = cost_per_slot(game, total_cost)
            summary.total_debt += cost
            summary.lines.append(
                DebtLine(
                    game_id=game.game_id,
                    scheduled_at=game.scheduled_at,
                    pitch_size=game.pitch_size or "big",
                    position=position,
                    cost=cost,
                    is_dropout=signup.last_minute_dropout,
                    signed_up_at=signup.signed_up_at,
                )
            )

    return sorted(summaries.values(), key=lambda s: s.net_balance)


def _summary_for(signup, players_by_id, guests_by_id, guests_by_name) -> tuple[str, DebtSummary]:
    if not signup.is_guest:
        player = players_by_id.get(signup.player_id)
        return f"player:{signup.player_id}", DebtSummary(
            participant_id=signup.player_id,
            name=player.name if player else "Unknown Player",
            is_guest=False,
            is_verified=bool(player and player.user_id),
            credit=player.credit if player else 0.0,
        )

    guest = guests_by_id.get(signup.guest_id) if signup.guest_id else None
    if guest is None:
        guest = guests_by_name.get(normalize_guest_name(signup.guest_name))

    guest_id = signup.guest_id or (guest.guest_id if guest else None)
    name = guest.name if guest else (signup.guest_name or "Unknown Guest")
    key = f"guest:{guest_id}" if guest_id else f"guest:{normalize_guest_name(name)}"
    return key, DebtSummary(
        participant_id=guest_id,
        name=name,
        is_guest=True,
        credit=guest.credit if guest else 0.0,
    )


def debt_totals(summaries: Iterable[DebtSummary]) -> dict[str, float]:
    totals = {"debt": 0.0, "credit": 0.0, "net_balance": 0.0}
    for summary in summaries:
        totals["debt"] += summary.total_debt
        totals["credit"] += summary.credit
        totals["net_balance"] += summary.net_balance
    return totals


def game_lineup(game: ScheduledGame, signups: Iterable[Signup]) -> GameLineup:
    """Split a game's active signups into the playing squad and the waitlist."""
    queue = [s for s in signups_in_order(game, signups) if not s.last_minute_dropout]
    return GameLineup(
        game=game,
        playing=queue[: game.capacity],
        waitlist=queue[game.capacity:],
    )
