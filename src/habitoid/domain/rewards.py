"""Streak, points and level bookkeeping."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

BASE_COMPLETION_POINTS = 10
BREAK_SESSION_POINTS = 10
FIRST_LEVEL_POINTS = 100
LEVEL_GROWTH = Decimal("1.1")

# (minimum streak, multiplier), checked top-down
MULTIPLIER_LADDER: tuple[tuple[int, Decimal], ...] = (
    (30, Decimal("2.0")),
    (14, Decimal("1.75")),
    (7, Decimal("1.5")),
    (3, Decimal("1.25")),
)


@dataclass(slots=True, frozen=True)
class UserStats:
    """Gamification counters carried on a user."""

    total_points: int = 0
    current_streak: int = 0
    longest_streak: int = 0
    last_active_on: Optional[date] = None

    @property
    def level(self) -> int:
        return level_for_points(self.total_points)


@dataclass(slots=True, frozen=True)
class RewardOutcome:
    stats: UserStats
    xp_earned: int
    multiplier: float
    streak_extended: bool
    level_before: int
    level_after: int

    @property
    def leveled_up(self) -> bool:
        return self.level_after > self.level_before


@dataclass(slots=True, frozen=True)
class LevelProgress:
    level: int
    level_floor: int
    next_level_at: int
    points_into_level: int
    level_size: int
    percent: float


def _multiplier(streak: int) -> Decimal:
    for minimum, multiplier in MULTIPLIER_LADDER:
        if streak >= minimum:
            return multiplier
    return Decimal("1.0")


def xp_multiplier(streak: int) -> float:
    """Streak-based multiplier applied to completion rewards."""

    return float(_multiplier(streak))


def multiplier_label(streak: int) -> str:
    """Display label such as ``1.5x XP (7+ streak)``; empty below the first rung."""

    for minimum, multiplier in MULTIPLIER_LADDER:
        if streak >= minimum:
            return f"{multiplier.normalize()}x XP ({minimum}+ streak)"
    return ""


def calculate_xp(base_points: int, streak: int) -> int:
    """Apply the streak multiplier to ``base_points`` and round half up."""

    raw = Decimal(base_points) * _multiplier(streak)
    return int(raw.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def effective_streak(stats: UserStats, on: date) -> int:
    """Streak as it stands on ``on``; a full idle day since the last active day breaks it."""

    last = stats.last_active_on
    if last is not None and last < on - timedelta(days=1):
        return 0
    return stats.current_streak


def _next_streak(stats: UserStats, on: date) -> tuple[int, bool]:
    """Return (streak, extended) after a completion on ``on``."""

    last = stats.last_active_on
    if last is None:
        return stats.current_streak + 1, True
    if last >= on:
        # already counted today, or a backdated entry
        return stats.current_streak, False
    if last == on - timedelta(days=1):
        return stats.current_streak + 1, True
    return 1, True


def apply_completion(
    stats: UserStats,
    just_completed: bool,
    *,
    on: date,
    base_points: int = BASE_COMPLETION_POINTS,
) -> RewardOutcome:
    """Fold one completion toggle into ``stats``.

    The reward uses the streak as it stood before this completion. Marking a
    habit not-completed leaves the stats untouched; see ``revert_completion``.
    """

    level_before = level_for_points(stats.total_points)
    if not just_completed:
        return RewardOutcome(
            stats=stats,
            xp_earned=0,
            multiplier=1.0,
            streak_extended=False,
            level_before=level_before,
            level_after=level_before,
        )

    streak_before = effective_streak(stats, on)
    xp = calculate_xp(base_points, streak_before)
    streak, extended = _next_streak(stats, on)
    last_active = on if stats.last_active_on is None else max(stats.last_active_on, on)
    updated = UserStats(
        total_points=stats.total_points + xp,
        current_streak=streak,
        longest_streak=max(stats.longest_streak, streak),
        last_active_on=last_active,
    )
    return RewardOutcome(
        stats=updated,
        xp_earned=xp,
        multiplier=xp_multiplier(streak_before),
        streak_extended=extended,
        level_before=level_before,
        level_after=level_for_points(updated.total_points),
    )


def revert_completion(stats: UserStats, points: int) -> UserStats:
    """Deduct a previously awarded completion reward, never going below zero.

    Streak counters are left as they are.
    """

    return replace(stats, total_points=max(stats.total_points - max(points, 0), 0))


def focus_reward(duration: int, session_type: str, completed: bool) -> int:
    """Points for a finished timer session.

    Completed focus sessions earn one point per minute; completed breaks earn a
    flat amount; abandoned sessions earn nothing.
    """

    if not completed or duration <= 0:
        return 0
    if session_type == "focus":
        return duration
    return BREAK_SESSION_POINTS


def level_thresholds(points: int) -> tuple[int, int, int]:
    """Return (level, floor of that level, points needed for the next level)."""

    level = 1
    floor = 0
    needed = 0
    increment = FIRST_LEVEL_POINTS
    while needed <= points:
        floor = needed
        needed += increment
        if needed <= points:
            level += 1
        increment = int(Decimal(increment) * LEVEL_GROWTH)
    return level, floor, needed


def level_for_points(points: int) -> int:
    """Level 1 at zero points; 100 reaches level 2, 210 level 3, 331 level 4."""

    return level_thresholds(max(points, 0))[0]


def level_progress(points: int) -> LevelProgress:
    points = max(points, 0)
    level, floor, next_at = level_thresholds(points)
    size = next_at - floor
    into = points - floor
    return LevelProgress(
        level=level,
        level_floor=floor,
        next_level_at=next_at,
        points_into_level=into,
        level_size=size,
        percent=round(into / size * 100, 1) if size else 0.0,
    )


def close_day(stats: UserStats, day: date, had_completion: bool) -> UserStats:
    """Daily boundary check: a day with no completions breaks the streak.

    A completion already counted after ``day`` keeps the streak intact.
    """

    if had_completion:
        return stats
    if stats.last_active_on is not None and stats.last_active_on > day:
        return stats
    if stats.current_streak == 0:
        return stats
    return replace(stats, current_streak=0)


def streaks_from_days(days: Iterable[date], today: date) -> tuple[int, int]:
    """Return (current_streak, longest_streak) from a collection of active days.

    The current run may end yesterday since today is not over yet.
    """

    active = set(days)

    current = 0
    cursor = today if today in active else today - timedelta(days=1)
    while cursor in active:
        current += 1
        cursor -= timedelta(days=1)

    longest = 0
    run = 0
    last_day: Optional[date] = None
    for day in sorted(active):
        if last_day is not None and day == last_day + timedelta(days=1):
            run += 1
        else:
            run = 1
        longest = max(longest, run)
        last_day = day

    return current, longest


__all__ = [
    "BASE_COMPLETION_POINTS",
    "LevelProgress",
    "RewardOutcome",
    "UserStats",
    "apply_completion",
    "calculate_xp",
    "close_day",
    "effective_streak",
    "focus_reward",
    "level_for_points",
    "level_progress",
    "level_thresholds",
    "multiplier_label",
    "revert_completion",
    "streaks_from_days",
    "xp_multiplier",
]
