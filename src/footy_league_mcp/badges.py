"""Achievement badges derived from a player's aggregate statistics.

Badges are declared as data. A RuleGroup is a list of tiers checked in order;
the first tier whose conditions all hold awards its badge and ends the group.
Groups are independent of one another, so a player can collect several badges.
Adding a badge means adding a table row, not new code.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Callable, Optional

from .models import SKILL_NAMES, Badge, PlayerAggregate, PlayerProfile

SKILL_ALIASES = {
    "PAC": "pace",
    "SHO": "shooting",
    "PAS": "passing",
    "DRI": "dribbling",
    "DEF": "defending",
    "PHY": "physical",
}

MIN_RECENT_RESULTS = 5
RECENT_FORM_WINDOW = 6


BADGES: dict[str, Badge] = {
    badge.name: badge
    for badge in (
        Badge("🌟", "Legend", "10+ MVP Awards"),
        Badge("👑", "MVP Champion", "5+ MVP Awards"),
        Badge("⚡", "Goal God", "25+ Goal Difference"),
        Badge("🚀", "Goal Machine", "15+ Goal Difference"),
        Badge("🎯", "Sharp Shooter", "10+ Goal Difference"),
        Badge("🥇", "Dominator", "80%+ Win Rate"),
        Badge("🏆", "Champion", "70%+ Win Rate"),
        Badge("🥉", "Winner", "60%+ Win Rate"),
        Badge("🏛️", "Hall of Famer", "50+ Games Played"),
        Badge("⚔️", "Warrior", "30+ Games Played"),
        Badge("🎖️", "Veteran", "20+ Games Played"),
        Badge("💎", "Elite Performer", "2.2+ Points Per Game"),
        Badge("⭐", "Consistent", "1.8+ Points Per Game"),
        Badge("🕳️", "Black Hole", "Goals disappear around you"),
        Badge("🤡", "Goal Leaker", "Conceded 10+ more goals than scored"),
        Badge("🤝", "Diplomat", "8+ drawn games"),
        Badge("⚖️", "Peacekeeper", "5+ drawn games"),
        Badge("💀", "Cursed", "15+ losses"),
        Badge("😤", "Unlucky", "10+ losses"),
        Badge("🎨", "Maestro", "Elite overall skills"),
        Badge("🔥", "Skilled", "High overall skills"),
        Badge("💨", "Speed Demon", "Lightning fast"),
        Badge("🎯", "Sniper", "Deadly finisher"),
        Badge("🛡️", "Wall", "Impenetrable defense"),
        Badge("🕺", "Magician", "Mesmerizing skills"),
        Badge("🎛️", "Playmaker", "Vision master"),
        Badge("💪", "Beast", "Physical powerhouse"),
        Badge("🌈", "Showboat", "Loves fancy skills"),
        Badge("🚲", "Acrobat", "Spectacular finisher"),
        Badge("🥜", "Humiliator", "Nutmeg specialist"),
        Badge("🎭", "Artist", "Technical genius"),
        Badge("🎪", "Swiss Army Knife", "5+ signature moves"),
        Badge("🔥", "On Fire", "5+ recent wins"),
        Badge("🌧️", "Stormy Weather", "Rough patch"),
        Badge("😅", "Trying Hard", "No wins yet but still playing!"),
        Badge("🐐", "Team Player", "No MVPs but always showing up"),
        Badge("🦄", "Unstoppable", "Perfect win record"),
        Badge("⚖️", "Balanced", "Perfectly balanced goal difference"),
        Badge("🆕", "Fresh Meat", "Just getting started"),
        Badge("🎲", "Chaos Agent", "Equal wins, draws, and losses"),
        Badge("🍕", "Participation Trophy", "15+ games with 0 points"),
        Badge("🎭", "Drama Queen", "More draws than wins and losses combined"),
        Badge("🐢", "Slow Starter", "Exactly 1 point after 5+ games"),
        Badge("🎯", "Perfectionist", "Consistent in losing"),
        Badge("👑", "Hero of Lost Causes", "More MVPs than wins"),
        Badge("📊", "Mathematician", "Goal difference equals games played"),
        Badge("🍀", "One Hit Wonder", "Rare moments of glory"),
        Badge("🏃", "Cardio King", "Here for the exercise"),
        Badge("🎪", "Star of the Show", "Individual brilliance in team struggles"),
    )
}


@dataclass(frozen=True)
class BadgeInput:
    aggregate: PlayerAggregate
    profile: Optional[PlayerProfile] = None
    recent_results: Optional[Sequence[str]] = None


def _skill_ratings(profile: Optional[PlayerProfile]) -> dict[str, float]:
    if profile is None:
        return {}
    ratings: dict[str, float] = {}
    for raw_name, value in profile.skill_ratings.items():
        name = SKILL_ALIASES.get(raw_name, raw_name)
        if name in SKILL_NAMES and value is not None:
            ratings.setdefault(name, float(value))
    return ratings


def _skill_average(data: BadgeInput) -> Optional[float]:
    ratings = _skill_ratings(data.profile)
    if not ratings:
        return None
    return sum(ratings.values()) / len(ratings)


def _signature_moves(data: BadgeInput) -> Optional[set[str]]:
    if data.profile is None or not data.profile.signature_moves:
        return None
    return {move.strip().lower() for move in data.profile.signature_moves}


def _recent(data: BadgeInput, outcome: Optional[str] = None) -> Optional[int]:
    if data.recent_results is None:
        return None
    window = list(data.recent_results)[:RECENT_FORM_WINDOW]
    if outcome is None:
        return len(window)
    return sum(1 for result in window if result == outcome)


def _skill(name: str) -> Callable[[BadgeInput], Optional[float]]:
    return lambda data: _skill_ratings(data.profile).get(name)


METRICS: dict[str, Callable[[BadgeInput], Any]] = {
    "wins": lambda d: d.aggregate.wins,
    "draws": lambda d: d.aggregate.draws,
    "losses": lambda d: d.aggregate.losses,
    "games": lambda d: d.aggregate.games_played,
    "points": lambda d: d.aggregate.points,
    "mvp": lambda d: d.aggregate.mvp_awards,
    "gd": lambda d: d.aggregate.goal_difference,
    "abs_gd_minus_games": lambda d: abs(d.aggregate.goal_difference) - d.aggregate.games_played,
    "win_rate": lambda d: d.aggregate.win_rate,
    "ppg": lambda d: d.aggregate.points_per_game,
    "result_spread": lambda d: (
        max(d.aggregate.wins, d.aggregate.draws, d.aggregate.losses)
        - min(d.aggregate.wins, d.aggregate.draws, d.aggregate.losses)
    ),
    "draws_over_rest": lambda d: d.aggregate.draws - (d.aggregate.wins + d.aggregate.losses),
    "mvp_over_wins": lambda d: d.aggregate.mvp_awards - d.aggregate.wins,
    "skill_average": _skill_average,
    "moves": _signature_moves,
    "move_count": lambda d: len(_signature_moves(d) or ()) if d.profile is not None else None,
    "recent_count": _recent,
    "recent_wins": lambda d: _recent(d, "win"),
    "recent_losses": lambda d: _recent(d, "loss"),
}
METRICS.update({f"skill_{name}": _skill(name) for name in SKILL_NAMES})


OPERATORS: dict[str, Callable[[Any, Any], bool]] = {
    ">=": lambda value, target: value >= target,
    "<=": lambda value, target: value <= target,
    ">": lambda value, target: value > target,
    "<": lambda value, target: value < target,
    "==": lambda value, target: value == target,
    "any_of": lambda moves, targets: any(t.lower() in move for t in targets for move in moves),
}


@dataclass(frozen=True)
class Condition:
    metric: str
    op: str
    value: Any

    def holds(self, data: BadgeInput) -> bool:
        measured = METRICS[self.metric](data)
        if measured is None:
            return False
        return OPERATORS[self.op](measured, self.value)


@dataclass(frozen=True)
class Tier:
    badge: str
    conditions: tuple[Condition, ...]


@dataclass(frozen=True)
class RuleGroup:
    name: str
    tiers: tuple[Tier, ...]
    requires: tuple[Condition, ...] = ()


def _c(metric: str, op: str, value: Any) -> Condition:
    return Condition(metric, op, value)


def _threshold(name: str, metric: str, op: str, tiers, requires=()) -> RuleGroup:
    """A group whose tiers differ only in the threshold on a single metric."""
    return RuleGroup(
        name,
        tuple(Tier(badge, (_c(metric, op, value),)) for value, badge in tiers),
        tuple(requires),
    )


def _single(badge: str, *conditions: Condition) -> RuleGroup:
    return RuleGroup(badge, (Tier(badge, conditions),))


GAMES_10 = _c("games", ">=", 10)

RULES: tuple[RuleGroup, ...] = (
    _threshold("mvp", "mvp", ">=", [(10, "Legend"), (5, "MVP Champion")]),
    _threshold(
        "goal_difference", "gd", ">=",
        [(25, "Goal God"), (15, "Goal Machine"), (10, "Sharp Shooter")],
    ),
    _threshold(
        "win_rate", "win_rate", ">=",
        [(80, "Dominator"), (70, "Champion"), (60, "Winner")],
        requires=[GAMES_10],
    ),
    _threshold(
        "experience", "games", ">=",
        [(50, "Hall of Famer"), (30, "Warrior"), (20, "Veteran")],
    ),
    _threshold(
        "points_per_game", "ppg", ">=",
        [(2.2, "Elite Performer"), (1.8, "Consistent")],
        requires=[GAMES_10],
    ),
    _threshold("negative_goal_difference", "gd", "<=", [(-15, "Black Hole"), (-10, "Goal Leaker")]),
    _threshold("draws", "draws", ">=", [(8, "Diplomat"), (5, "Peacekeeper")]),
    _threshold("losses", "losses", ">=", [(15, "Cursed"), (10, "Unlucky")]),
    _threshold("skill_average", "skill_average", ">=", [(85, "Maestro"), (75, "Skilled")]),
    _single("Speed Demon", _c("skill_pace", ">=", 90)),
    _single("Sniper", _c("skill_shooting", ">=", 90)),
    _single("Wall", _c("skill_defending", ">=", 90)),
    _single("Magician", _c("skill_dribbling", ">=", 90)),
    _single("Playmaker", _c("skill_passing", ">=", 90)),
    _single("Beast", _c("skill_physical", ">=", 90)),
    _single("Showboat", _c("moves", "any_of", ("Rainbow Flick", "Elastico"))),
    _single("Acrobat", _c("moves", "any_of", ("Bicycle Kick", "Overhead Kick"))),
    _single("Humiliator", _c("moves", "any_of", ("Nutmeg", "Panna"))),
    _single("Artist", _c("moves", "any_of", ("Rabona", "Trivela"))),
    _single("Swiss Army Knife", _c("move_count", ">=", 5)),
    RuleGroup(
        "recent_form",
        (
            Tier("On Fire", (_c("recent_wins", ">=", 5),)),
            Tier("Stormy Weather", (_c("recent_wins", "==", 0), _c("recent_losses", ">=", 4))),
        ),
        requires=(_c("recent_count", ">=", MIN_RECENT_RESULTS),),
    ),
    _single("Trying Hard", _c("win_rate", "==", 0), _c("games", ">=", 5)),
    _single("Team Player", _c("mvp", "==", 0), GAMES_10),
    _single("Unstoppable", _c("win_rate", "==", 100), _c("games", ">=", 3)),
    _single("Balanced", _c("gd", "==", 0), _c("games", ">=", 5)),
    _single("Fresh Meat", _c("games", "==", 1)),
    _single("Chaos Agent", _c("result_spread", "==", 0), _c("wins", ">=", 2)),
    _single("Participation Trophy", _c("games", ">=", 15), _c("points", "==", 0)),
    _single("Drama Queen", _c("draws_over_rest", ">", 0), _c("draws", ">=", 3)),
    _single("Slow Starter", _c("games", ">=", 5), _c("points", "==", 1)),
    _single("Perfectionist", GAMES_10, _c("wins", "==", 0), _c("draws", "==", 0)),
    _single("Hero of Lost Causes", _c("mvp_over_wins", ">", 0)),
    _single("Mathematician", _c("games", ">=", 5), _c("abs_gd_minus_games", "==", 0)),
    _single(
        "One Hit Wonder",
        _c("games", ">=", 7), _c("wins", "==", 1), _c("draws", "==", 1), _c("losses", ">=", 5),
    ),
    _single("Cardio King", _c("ppg", "<", 1), GAMES_10),
    _single("Star of the Show", _c("mvp", ">=", 3), _c("win_rate", "<", 50)),
)


def evaluate(rules: Sequence[RuleGroup], data: BadgeInput) -> list[Badge]:
    badges = []
    for group in rules:
        if not all(condition.holds(data) for condition in group.requires):
            continue
        for tier in group.tiers:
            if all(condition.holds(data) for condition in tier.conditions):
                badges.append(BADGES[tier.badge])
                break
    return badges


def badges_for(
    aggregate: PlayerAggregate,
    profile: Optional[PlayerProfile] = None,
    recent_results: Optional[Sequence[str]] = None,
) -> list[Badge]:
    """Badges earned by one player, in rule-table order.

    recent_results is most recent first; only the first RECENT_FORM_WINDOW
    entries count towards form.
    """
    return evaluate(RULES, BadgeInput(aggregate, profile, recent_results))


def all_badge_names() -> list[str]:
    return [tier.badge for group in RULES for tier in group.tiers]


BADGE_CATEGORIES: dict[str, tuple[str, ...]] = {
    "Performance": (
        "Legend", "MVP Champion", "Dominator", "Champion", "Winner",
        "Elite Performer", "Consistent",
    ),
    "Skills & Scoring": (
        "Goal God", "Goal Machine", "Sharp Shooter", "Speed Demon", "Sniper", "Wall",
        "Magician", "Playmaker", "Beast", "Maestro", "Skilled",
    ),
    "Experience": ("Hall of Famer", "Warrior", "Veteran"),
    "Special Moves": ("Showboat", "Acrobat", "Humiliator", "Artist", "Swiss Army Knife"),
    "Form & Personality": (
        "On Fire", "Stormy Weather", "Diplomat", "Peacekeeper", "Team Player",
        "Unstoppable", "Balanced",
    ),
}
FALLBACK_CATEGORY = "Quirky & Fun"


def categorize_badges(badges: Sequence[Badge]) -> dict[str, list[Badge]]:
    """Group badges for a legend, dropping repeats and empty categories."""
    unique: dict[str, Badge] = {}
    for badge in badges:
        unique.setdefault(badge.name, badge)

    grouped: dict[str, list[Badge]] = {name: [] for name in (*BADGE_CATEGORIES, FALLBACK_CATEGORY)}
    for badge in unique.values():
        category = next(
            (name for name, members in BADGE_CATEGORIES.items() if badge.name in members),
            FALLBACK_CATEGORY,
        )
        grouped[category].append(badge)

    return {name: members for name, members in grouped.items() if members}
