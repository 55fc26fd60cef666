"""Caller-owned time-based cache for computed standings and badges."""

import json
import time
from typing import Any, Callable, Hashable, Optional

from .models import PlayerAggregate, PlayerProfile


class TTLCache:
    """A small cache whose entries expire ``ttl`` seconds after being set.

    The clock is injectable so tests can move time forward explicitly.
    """

    def __init__(self, ttl: float, clock: Callable[[], float] = time.monotonic):
        self.ttl = ttl
        self._clock = clock
        self._entries: dict[Hashable, tuple[float, Any]] = {}

    def get(self, key: Hashable) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        stored_at, value = entry
        if self._clock() - stored_at >= self.ttl:
            del self._entries[key]
            return None
        return value

    def set(self, key: Hashable, value: Any) -> None:
        now = self._clock()
        self.prune(now)
        self._entries[key] = (now, value)

    def prune(self, now: Optional[float] = None) -> None:
        """Drop every expired entry."""
        if now is None:
            now = self._clock()
        expired = [k for k, (stored_at, _) in self._entries.items() if now - stored_at >= self.ttl]
        for key in expired:
            del self._entries[key]

    def invalidate(self, key: Optional[Hashable] = None) -> None:
        if key is None:
            self._entries.clear()
        else:
            self._entries.pop(key, None)

    def __len__(self) -> int:
        return len(self._entries)


def badge_cache_key(
    player_id: str,
    aggregate: PlayerAggregate,
    profile: Optional[PlayerProfile] = None,
    recent_results=None,
) -> tuple:
    """Fingerprint of everything that can change a player's badges."""
    if profile is None:
        profile_key = "no-profile"
    else:
        profile_key = json.dumps(
            {
                "ratings": profile.skill_ratings,
                "moves": list(profile.signature_moves),
            },
            sort_keys=True,
        )
    return (
        player_id,
        aggregate.points,
        aggregate.wins,
        aggregate.draws,
        aggregate.losses,
        aggregate.mvp_awards,
        aggregate.goal_difference,
        profile_key,
        tuple(recent_results) if recent_results is not None else None,
    )
