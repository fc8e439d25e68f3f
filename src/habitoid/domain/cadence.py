"""Cadence policies: which calendar days a habit is due on.

Weekdays use the wire numbering stored in ``frequency_config``:
Sunday=0, Monday=1, ..., Saturday=6.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import date
from enum import IntEnum
from typing import Any, Iterable, Mapping, Protocol, TypeVar, Union


class Weekday(IntEnum):
    SUNDAY = 0
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6


WEEKDAY_LABELS = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")
DEFAULT_WEEKLY_DAY = Weekday.MONDAY
DEFAULT_THREE_PER_WEEK = frozenset({Weekday.MONDAY, Weekday.WEDNESDAY, Weekday.FRIDAY})

FREQUENCY_LABELS = {
    "daily": "Daily",
    "weekdays": "Weekdays",
    "weekends": "Weekends",
    "weekly": "Weekly",
    "3x_week": "3x/week",
    "custom": "Custom",
}


def weekday_of(day: date) -> Weekday:
    """Return the Sunday-based weekday for ``day``."""

    return Weekday((day.weekday() + 1) % 7)


@dataclass(frozen=True, slots=True)
class Daily:
    tag: str = field(default="daily", init=False)


@dataclass(frozen=True, slots=True)
class Weekdays:
    tag: str = field(default="weekdays", init=False)


@dataclass(frozen=True, slots=True)
class Weekends:
    tag: str = field(default="weekends", init=False)


@dataclass(frozen=True, slots=True)
class WeeklyOnDay:
    day: Weekday = DEFAULT_WEEKLY_DAY
    tag: str = field(default="weekly", init=False)


@dataclass(frozen=True, slots=True)
class NDaysPerWeek:
    days: frozenset[Weekday] = DEFAULT_THREE_PER_WEEK
    tag: str = field(default="3x_week", init=False)


@dataclass(frozen=True, slots=True)
class Custom:
    days: frozenset[Weekday] = frozenset()
    tag: str = field(default="custom", init=False)


@dataclass(frozen=True, slots=True)
class Unrecognized:
    """Policy data that could not be interpreted; callers decide whether it is due."""

    raw_tag: str | None = None
    reason: str = "unrecognized"
    tag: str = field(default="unrecognized", init=False)


CadencePolicy = Union[Daily, Weekdays, Weekends, WeeklyOnDay, NDaysPerWeek, Custom, Unrecognized]


def _load_config(config: str | Mapping[str, Any] | None) -> Mapping[str, Any] | None:
    """Decode ``frequency_config``; None when absent or malformed."""

    if config is None:
        return None
    if isinstance(config, Mapping):
        return config
    text = config.strip()
    if not text:
        return None
    try:
        decoded = json.loads(text)
    except (TypeError, ValueError):
        return None
    return decoded if isinstance(decoded, Mapping) else None


def _as_weekday(value: Any) -> Weekday | None:
    if isinstance(value, bool):
        return None
    try:
        number = int(value)
    except (TypeError, ValueError):
        return None
    if 0 <= number <= 6:
        return Weekday(number)
    return None


def _day_set(config: Mapping[str, Any] | None) -> frozenset[Weekday] | None:
    """Return the configured day-set, or None if missing, empty or invalid."""

    if config is None:
        return None
    raw = config.get("days")
    if not isinstance(raw, (list, tuple, set, frozenset)) or not raw:
        return None
    days = [_as_weekday(item) for item in raw]
    if any(day is None for day in days):
        return None
    return frozenset(days)  # type: ignore[arg-type]


def parse_cadence(
    frequency: str | None, frequency_config: str | Mapping[str, Any] | None = None
) -> CadencePolicy:
    """Build a policy from a habit's stored ``frequency`` and ``frequency_config``."""

    tag = (frequency or "daily").strip().lower()
    config = _load_config(frequency_config)

    if tag == "daily":
        return Daily()
    if tag == "weekdays":
        return Weekdays()
    if tag == "weekends":
        return Weekends()
    if tag == "weekly":
        day = _as_weekday(config.get("dayOfWeek")) if config else None
        return WeeklyOnDay(day if day is not None else DEFAULT_WEEKLY_DAY)
    if tag == "3x_week":
        override = _day_set(config)
        return NDaysPerWeek(override or DEFAULT_THREE_PER_WEEK)
    if tag == "custom":
        days = _day_set(config)
        if days is None:
            return Unrecognized(raw_tag=tag, reason="custom cadence without a valid day-set")
        return Custom(days)
    return Unrecognized(raw_tag=frequency, reason="unknown frequency")


def is_due_on(policy: CadencePolicy, day: date, *, unrecognized_due: bool = True) -> bool:
    """Return True when a habit following ``policy`` is due on ``day``.

    Malformed policies never raise: ``Unrecognized`` (and an empty ``Custom``)
    resolve to ``unrecognized_due``, which defaults to fail-open.
    """

    weekday = weekday_of(day)
    if isinstance(policy, Daily):
        return True
    if isinstance(policy, Weekdays):
        return Weekday.MONDAY <= weekday <= Weekday.FRIDAY
    if isinstance(policy, Weekends):
        return weekday in (Weekday.SATURDAY, Weekday.SUNDAY)
    if isinstance(policy, WeeklyOnDay):
        return weekday == policy.day
    if isinstance(policy, NDaysPerWeek):
        return weekday in (policy.days or DEFAULT_THREE_PER_WEEK)
    if isinstance(policy, Custom):
        if not policy.days:
            return unrecognized_due
        return weekday in policy.days
    return unrecognized_due


class HasCadence(Protocol):
    frequency: str
    frequency_config: str | None


H = TypeVar("H", bound=HasCadence)


def habit_is_due(habit: HasCadence, day: date, *, unrecognized_due: bool = True) -> bool:
    policy = parse_cadence(habit.frequency, habit.frequency_config)
    return is_due_on(policy, day, unrecognized_due=unrecognized_due)


def due_habits(habits: Iterable[H], day: date) -> list[H]:
    """Filter ``habits`` down to those due on ``day``, preserving order."""

    return [habit for habit in habits if habit_is_due(habit, day)]


def frequency_label(tag: str | None) -> str:
    return FREQUENCY_LABELS.get(tag or "daily", "Daily")
