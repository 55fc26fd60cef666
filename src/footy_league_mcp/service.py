"""League service wiring storage reads to the standings, badge and debt engines."""

import logging
from dataclasses import dataclass
from typing import Optional

from .badges import badges_for
from .cache import TTLCache, badge_cache_key
from .config import get_settings
from .debt import game_lineup, summarize_debts
from .models import Badge, DebtSummary, GameLineup, Player, PlayerAggregate, PlayerProfile
from .ranking import Ranked, rank
from .repository import LeagueRepository
from .stats import aggregate, recent_results

logger = logging.getLogger(__name__)

STANDINGS_KEY = "standings"


@dataclass
class PlayerCard:
    player: Player
    aggregate: PlayerAggregate
    profile: Optional[PlayerProfile]
    recent_results: list[str]
    badges: list[Badge]


class LeagueService:
    """Service for computing standings, badges and debts from stored data.

    Caches are owned by the service instance; call invalidate() after
    recording a match or signup.
    """

    def __init__(
        self,
        repository: LeagueRepository,
        stats_cache: Optional[TTLCache] = None,
        badge_cache: Optional[TTLCache] = None,
        total_game_cost: Optional[float] = None,
    ):
        settings = get_settings()
        self.repository = repository
        self.stats_cache = stats_cache or TTLCache(settings.stats_cache_ttl)
        self.badge_cache = badge_cache or TTLCache(settings.badge_cache_ttl)
        self.total_game_cost = (
            total_game_cost if total_game_cost is not None else settings.total_game_cost
        )

    def invalidate(self) -> None:
        self.stats_cache.invalidate()
        self.badge_cache.invalidate()

    def _snapshot(self) -> dict:
        cached = self.stats_cache.get(STANDINGS_KEY)
        if cached is not None:
            return cached

        players = self.repository.list_players()
        matches = self.repository.list_matches()
        snapshot = {
            "players": {p.player_id: p for p in players},
            "matches": matches,
            "aggregates": aggregate(matches, [p.player_id for p in players]),
        }
        self.stats_cache.set(STANDINGS_KEY, snapshot)
        logger.info("Recomputed standings for %d players from %d matches",
                    len(snapshot["aggregates"]), len(matches))
        return snapshot

    def standings(self, sort_by: Optional[str] = None, descending: bool = True) -> list[Ranked]:
        aggregates = self._snapshot()["aggregates"]
        if sort_by is None:
            return rank(aggregates.items(), descending=descending)
        # Re-sorting the table keeps ties in league order.
        return rank(rank(aggregates.items()), key=sort_by, descending=descending)

    def player_name(self, player_id: str) -> str:
        player = self._snapshot()["players"].get(player_id)
        return player.name if player else player_id

    def player_card(self, player_id: str) -> Optional[PlayerCard]:
        snapshot = self._snapshot()
        player = snapshot["players"].get(player_id)
        if player is None:
            return None

        stats = snapshot["aggregates"].get(player_id, PlayerAggregate())
        profile = self.repository.get_profile(player_id)
        recent = recent_results(snapshot["matches"], player_id)

        key = badge_cache_key(player_id, stats, profile, recent)
        badges = self.badge_cache.get(key)
        if badges is None:
            badges = badges_for(stats, profile, recent)
            self.badge_cache.set(key, badges)

        return PlayerCard(player, stats, profile, recent, badges)

    def _reported_debt(self, participant_id: str, is_guest: bool) -> float:
        # Same figure as the participant's debt report line, dropouts included.
        for summary in self.debt_report():
            if summary.participant_id == participant_id and summary.is_guest == is_guest:
                return summary.total_debt
        return 0.0

    def debt_for(self, player_id: str) -> float:
        return self._reported_debt(player_id, is_guest=False)

    def guest_debt_for(self, guest_id: str) -> float:
        return self._reported_debt(guest_id, is_guest=True)

    def debt_report(self) -> list[DebtSummary]:
        return summarize_debts(
            self.repository.list_scheduled_games(),
            self.repository.list_signups(),
            self.repository.list_players(),
            self.repository.list_guests(),
            total_cost=self.total_game_cost,
        )

    def lineup(self, game_id: str) -> Optional[GameLineup]:
        game = next(
            (g for g in self.repository.list_scheduled_games() if g.game_id == game_id), None
        )
        if game is None:
            return None
        return game_lineup(game, self.repository.list_signups())
