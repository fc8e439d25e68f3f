"""Character evolution tiers and the badge catalog."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from typing import Iterable, Mapping, Optional, Sequence

EARLY_BIRD_BEFORE = time(7, 0)
NIGHT_OWL_FROM = time(23, 0)


@dataclass(slots=True, frozen=True)
class EvolutionTier:
    stage: int
    name: str
    min_points: int
    icon: str
    description: str


@dataclass(slots=True, frozen=True)
class EvolutionProgress:
    tier: EvolutionTier
    next_tier: Optional[EvolutionTier]
    progress: Optional[float]


EVOLUTIONS: tuple[EvolutionTier, ...] = (
    EvolutionTier(1, "Baby Slash", 0, "⚡", "A tiny spark of potential"),
    EvolutionTier(2, "Spark Slash", 500, "✨", "Growing brighter every day"),
    EvolutionTier(3, "Bolt Slash", 2000, "🌟", "A force to be reckoned with"),
    EvolutionTier(4, "Storm Slash", 5000, "⭐", "Radiating unstoppable energy"),
    EvolutionTier(5, "Thunder Slash", 10000, "👑", "The ultimate habit master"),
)


def evolution_for(points: int, tiers: Sequence[EvolutionTier] = EVOLUTIONS) -> EvolutionProgress:
    """Return the tier reached with ``points`` and progress toward the next one.

    Progress is a 0-100 percentage, or None when there is no higher tier.
    """

    index = 0
    for position, tier in enumerate(tiers):
        if points >= tier.min_points:
            index = position
    current = tiers[index]
    if index + 1 >= len(tiers):
        return EvolutionProgress(tier=current, next_tier=None, progress=None)

    upcoming = tiers[index + 1]
    span = upcoming.min_points - current.min_points
    raw = (points - current.min_points) / span * 100 if span > 0 else 0.0
    return EvolutionProgress(
        tier=current, next_tier=upcoming, progress=min(max(raw, 0.0), 100.0)
    )


@dataclass(slots=True, frozen=True)
class Badge:
    id: str
    name: str
    description: str
    icon: str
    type: str  # streak, habit_count, completions, focus, points, special
    requirement: int
    points: int


BADGES: tuple[Badge, ...] = (
    Badge("streak_3", "Getting Started", "Maintain a 3-day streak", "🔥", "streak", 3, 50),
    Badge("streak_7", "Week Warrior", "Maintain a 7-day streak", "⚡", "streak", 7, 100),
    Badge("streak_14", "Fortnight Fighter", "Maintain a 14-day streak", "💪", "streak", 14, 200),
    Badge("streak_30", "Monthly Master", "Maintain a 30-day streak", "🏆", "streak", 30, 500),
    Badge("streak_100", "Century Legend", "Maintain a 100-day streak", "👑", "streak", 100, 1000),
    Badge("habits_1", "First Step", "Create your first habit", "🌱", "habit_count", 1, 25),
    Badge("habits_5", "Habit Builder", "Create 5 habits", "🏗️", "habit_count", 5, 75),
    Badge("habits_10", "Habit Collector", "Create 10 habits", "📚", "habit_count", 10, 150),
    Badge("completions_10", "Warmed Up", "Complete 10 habits total", "✅", "completions", 10, 50),
    Badge(
        "completions_50", "Getting Consistent", "Complete 50 habits total", "🎯",
        "completions", 50, 150,
    ),
    Badge("completions_100", "Century Club", "Complete 100 habits total", "💯", "completions", 100, 300),
    Badge(
        "completions_500", "Half Millennium", "Complete 500 habits total", "🌟",
        "completions", 500, 750,
    ),
    Badge(
        "completions_1000", "Habit Master", "Complete 1000 habits total", "🏅",
        "completions", 1000, 1500,
    ),
    Badge("focus_60", "Focused Mind", "Complete 60 minutes of focus time", "🧠", "focus", 60, 75),
    Badge("focus_300", "Deep Worker", "Complete 5 hours of focus time", "⏰", "focus", 300, 200),
    Badge(
        "focus_1000", "Focus Champion", "Complete 16+ hours of focus time", "🎖️",
        "focus", 1000, 500,
    ),
    Badge("points_100", "Point Starter", "Earn 100 points", "💎", "points", 100, 25),
    Badge("points_500", "Rising Star", "Earn 500 points", "⭐", "points", 500, 50),
    Badge("points_1000", "Achiever", "Earn 1000 points", "🌠", "points", 1000, 100),
    Badge("points_5000", "Elite Status", "Earn 5000 points", "🎊", "points", 5000, 250),
    Badge("early_bird", "Early Bird", "Complete a habit before 7 AM", "🌅", "special", 1, 50),
    Badge("night_owl", "Night Owl", "Complete a habit after 11 PM", "🦉", "special", 1, 50),
    Badge(
        "perfect_week", "Perfect Week", "Complete all habits for 7 days straight", "💫",
        "special", 7, 200,
    ),
    Badge("template_user", "Pack Adopter", "Add a habit template pack", "📦", "special", 1, 25),
)

BADGES_BY_ID: dict[str, Badge] = {badge.id: badge for badge in BADGES}


@dataclass(slots=True)
class ProgressCounters:
    """Counters that badge requirements are measured against."""

    current_streak: int = 0
    active_habits: int = 0
    completions: int = 0
    focus_minutes: int = 0
    total_points: int = 0
    special: Mapping[str, int] = field(default_factory=dict)

    def value_for(self, badge: Badge) -> Optional[int]:
        if badge.type == "streak":
            return self.current_streak
        if badge.type == "habit_count":
            return self.active_habits
        if badge.type == "completions":
            return self.completions
        if badge.type == "focus":
            return self.focus_minutes
        if badge.type == "points":
            return self.total_points
        if badge.type == "special":
            return self.special.get(badge.id)
        return None


def badge_progress(badge: Badge, counters: ProgressCounters) -> float:
    """Percent toward ``badge``; a missing counter or bad requirement yields 0."""

    value = counters.value_for(badge)
    if value is None or badge.requirement <= 0:
        return 0.0
    return min(max(value, 0) / badge.requirement, 1.0) * 100


def is_unlocked(badge: Badge, counters: ProgressCounters) -> bool:
    return badge_progress(badge, counters) >= 100


def newly_unlocked(
    counters: ProgressCounters,
    unlocked_ids: Iterable[str],
    catalog: Sequence[Badge] = BADGES,
) -> list[Badge]:
    """Badges that reach 100% now but have no unlock record yet."""

    already = set(unlocked_ids)
    return [badge for badge in catalog if badge.id not in already and is_unlocked(badge, counters)]


def is_early_completion(logged_at: datetime) -> bool:
    return logged_at.time() < EARLY_BIRD_BEFORE


def is_late_completion(logged_at: datetime) -> bool:
    return logged_at.time() >= NIGHT_OWL_FROM


def perfect_day_run(
    due_by_day: Mapping[date, set[int]],
    completed_by_day: Mapping[date, set[int]],
    today: date,
) -> int:
    """Consecutive days ending at ``today`` where every due habit was completed.

    An unfinished ``today`` does not break a run that ended yesterday. Days with
    nothing due end the run.
    """

    def _perfect(day: date) -> bool:
        due = due_by_day.get(day)
        return bool(due) and due <= completed_by_day.get(day, set())

    run = 0
    cursor = today if _perfect(today) else today - timedelta(days=1)
    while _perfect(cursor):
        run += 1
        cursor -= timedelta(days=1)
    return run


__all__ = [
    "BADGES",
    "BADGES_BY_ID",
    "EVOLUTIONS",
    "Badge",
    "EvolutionProgress",
    "EvolutionTier",
    "ProgressCounters",
    "badge_progress",
    "evolution_for",
    "is_early_completion",
    "is_late_completion",
    "is_unlocked",
    "newly_unlocked",
    "perfect_day_run",
]
