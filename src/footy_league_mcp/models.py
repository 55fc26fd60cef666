"""Data models for the footy league standings, badges and pitch-cost ledger."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

SMALL_PITCH_CAPACITY = 12
BIG_PITCH_CAPACITY = 14

SKILL_NAMES = ("pace", "shooting", "passing", "dribbling", "defending", "physical")


@dataclass(frozen=True)
class MatchRecord:
    match_id: str
    team_a: frozenset[str]
    team_b: frozenset[str]
    goals_a: int
    goals_b: int
    mvp_player: Optional[str] = None
    played_at: Optional[datetime] = None


@dataclass(frozen=True)
class PlayerAggregate:
    wins: int = 0
    draws: int = 0
    losses: int = 0
    mvp_awards: int = 0
    goal_difference: int = 0
    points: int = 0

    @property
    def games_played(self) -> int:
        return self.wins + self.draws + self.losses

    @property
    def points_per_game(self) -> float:
        if self.games_played == 0:
            return 0.0
        return self.points / self.games_played

    @property
    def win_percentage(self) -> float:
        if self.games_played == 0:
            return 0.0
        return self.wins / self.games_played * 100

    @property
    def win_rate(self) -> int:
        """Win percentage rounded half-up to a whole number, as shown to players."""
        return int(self.win_percentage + 0.5)


@dataclass(frozen=True)
class PlayerProfile:
    favorite_club: Optional[str] = None
    skill_ratings: dict[str, float] = field(default_factory=dict)
    signature_moves: tuple[str, ...] = ()


@dataclass(frozen=True)
class Badge:
    icon: str
    name: str
    description: str


@dataclass(frozen=True)
class Player:
    player_id: str
    name: str
    user_id: Optional[str] = None
    credit: float = 0.0


@dataclass(frozen=True)
class Guest:
    guest_id: str
    name: str
    credit: float = 0.0


@dataclass(frozen=True)
class ScheduledGame:
    game_id: str
    scheduled_at: datetime
    pitch_size: Optional[str] = None  # 'small', 'big' or None (treated as big)

    @property
    def capacity(self) -> int:
        return SMALL_PITCH_CAPACITY if self.pitch_size == "small" else BIG_PITCH_CAPACITY


@dataclass(frozen=True)
class Signup:
    signup_id: str
    game_id: str
    signed_up_at: datetime
    player_id: Optional[str] = None
    guest_id: Optional[str] = None
    guest_name: Optional[str] = None
    last_minute_dropout: bool = False

    @property
    def is_guest(self) -> bool:
        return self.player_id is None

    @property
    def participant_id(self) -> Optional[str]:
        return self.player_id if self.player_id is not None else self.guest_id


@dataclass
class DebtLine:
    game_id: str
    scheduled_at: datetime
    pitch_size: str
    position: int
    cost: float
    is_dropout: bool
    signed_up_at: datetime


@dataclass
class DebtSummary:
    participant_id: Optional[str]
    name: str
    is_guest: bool
    is_verified: bool = False
    total_debt: float = 0.0
    credit: float = 0.0
    lines: list[DebtLine] = field(default_factory=list)

    @property
    def net_balance(self) -> float:
        return self.credit - self.total_debt


@dataclass
class GameLineup:
    game: ScheduledGame
    playing: list[Signup]
    waitlist: list[Signup]

    @property
    def capacity(self) -> int:
        return self.game.capacity

    @property
    def signup_count(self) -> int:
        return len(self.playing) + len(self.waitlist)

    @property
    def spots_needed(self) -> int:
        return max(0, self.capacity - self.signup_count)

    @property
    def is_full(self) -> bool:
        return self.signup_count >= self.capacity
