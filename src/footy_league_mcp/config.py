"""Environment configuration for the league server."""

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class Settings:
    neo4j_uri: str
    neo4j_user: str
    neo4j_password: str
    total_game_cost: float
    stats_cache_ttl: float
    badge_cache_ttl: float
    log_level: str


def _float_env(name: str, default: str) -> float:
    raw = os.getenv(name, default)
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got '{raw}'") from None


def get_settings() -> Settings:
    """Read settings from the environment."""
    return Settings(
        neo4j_uri=os.getenv("NEO4J_URI", "bolt://localhost:7687"),
        neo4j_user=os.getenv("NEO4J_USER", "neo4j"),
        neo4j_password=os.getenv("NEO4J_PASSWORD", "password"),
        total_game_cost=_float_env("LEAGUE_TOTAL_GAME_COST", "93.6"),
        stats_cache_ttl=_float_env("LEAGUE_STATS_CACHE_TTL", "30"),
        badge_cache_ttl=_float_env("LEAGUE_BADGE_CACHE_TTL", "300"),
        log_level=os.getenv("LEAGUE_LOG_LEVEL", "INFO").upper(),
    )
