"""Rotating weekly challenges."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, time, timedelta
from typing import Mapping

from .cadence import weekday_of

EARLY_COMPLETION_BEFORE = time(9, 0)
DAILY_MINIMUM_COMPLETIONS = 5


@dataclass(slots=True, frozen=True)
class Challenge:
    id: str
    name: str
    description: str
    type: str
    target: int
    reward: int


WEEKLY_CHALLENGES: tuple[Challenge, ...] = (
    Challenge(
        "daily_5", "Consistent Champion",
        "Complete at least 5 habits daily for 5 days", "daily_minimum", 5, 150,
    ),
    Challenge("focus_3", "Focus Master", "Complete 3 focus sessions this week", "focus_sessions", 3, 100),
    Challenge("streak_builder", "Streak Builder", "Increase your streak by 7 days", "streak_increase", 7, 200),
    Challenge(
        "perfect_day_3", "Triple Perfection",
        "Have 3 perfect days (100% completion)", "perfect_days", 3, 175,
    ),
    Challenge("morning_routine", "Early Riser", "Complete 5 habits before 9 AM", "early_completions", 5, 125),
    Challenge(
        "variety", "Category Explorer",
        "Complete habits from 4 different categories", "category_variety", 4, 100,
    ),
    Challenge("focus_marathon", "Focus Marathon", "Accumulate 2 hours of focus time", "focus_minutes", 120, 150),
    Challenge("new_habit", "Fresh Start", "Create and complete a new habit", "new_habit_complete", 1, 75),
)


@dataclass(slots=True)
class WeekActivity:
    """What a user did during one challenge week."""

    daily_completions: Mapping[date, int] = field(default_factory=dict)
    focus_sessions: int = 0
    focus_minutes: int = 0
    categories: frozenset[str] = frozenset()
    early_completions: int = 0
    perfect_days: int = 0
    streak_gain: int = 0
    new_habits_completed: int = 0


@dataclass(slots=True, frozen=True)
class ChallengeProgress:
    challenge: Challenge
    current: int
    percent: float
    completed: bool


def week_number(day: date) -> int:
    """Week-of-year counting Jan 1's partial week as week one."""

    jan1 = date(day.year, 1, 1)
    elapsed = (day - jan1).days
    return math.ceil((elapsed + weekday_of(jan1) + 1) / 7)


def week_start(day: date) -> date:
    """Sunday that starts the week containing ``day``."""

    return day - timedelta(days=int(weekday_of(day)))


def weekly_challenge(day: date) -> Challenge:
    """Deterministically pick this week's challenge from the catalog."""

    return WEEKLY_CHALLENGES[week_number(day) % len(WEEKLY_CHALLENGES)]


def _measure(challenge: Challenge, week: WeekActivity) -> int:
    kind = challenge.type
    if kind == "daily_minimum":
        return sum(1 for count in week.daily_completions.values() if count >= DAILY_MINIMUM_COMPLETIONS)
    if kind == "focus_sessions":
        return week.focus_sessions
    if kind == "streak_increase":
        return week.streak_gain
    if kind == "perfect_days":
        return week.perfect_days
    if kind == "early_completions":
        return week.early_completions
    if kind == "category_variety":
        return len(week.categories)
    if kind == "focus_minutes":
        return week.focus_minutes
    if kind == "new_habit_complete":
        return week.new_habits_completed
    return 0


def challenge_progress(challenge: Challenge, week: WeekActivity) -> ChallengeProgress:
    current = max(_measure(challenge, week), 0)
    percent = min(current / challenge.target, 1.0) * 100 if challenge.target > 0 else 0.0
    return ChallengeProgress(
        challenge=challenge, current=current, percent=percent, completed=percent >= 100
    )


__all__ = [
    "Challenge",
    "ChallengeProgress",
    "WEEKLY_CHALLENGES",
    "WeekActivity",
    "challenge_progress",
    "week_number",
    "week_start",
    "weekly_challenge",
]
