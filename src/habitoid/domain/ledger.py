"""Completion ledger aggregation for dashboards and analytics.

Every function here is a pure fold over completion records that the caller has
already scoped to one user and date range. The caller also supplies ``today``.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Iterable, Optional, Protocol, Sequence

from ..constants import category_label
from .cadence import WEEKDAY_LABELS, Weekday, weekday_of

CONTRIBUTION_DAYS = 371


class CompletionRecord(Protocol):
    occurred_on: date
    completed: bool


class CategorizedHabit(Protocol):
    id: Optional[int]
    category: str


@dataclass(slots=True, frozen=True)
class GridCell:
    day: date
    count: int
    level: int


@dataclass(slots=True, frozen=True)
class WeekdayRate:
    weekday: Weekday
    label: str
    completed: int
    total: int
    rate: float


@dataclass(slots=True, frozen=True)
class CategoryRate:
    category: str
    label: str
    completed: int
    total: int
    rate: float


@dataclass(slots=True)
class LedgerSummary:
    """Aggregate analytics bundle used by the analytics endpoint and reports."""

    total_events: int
    total_completed: int
    overall_rate: float
    weekday_rates: list[WeekdayRate] = field(default_factory=list)
    best_day: Optional[WeekdayRate] = None
    worst_day: Optional[WeekdayRate] = None
    category_rates: list[CategoryRate] = field(default_factory=list)
    weekly_series: list[tuple[date, int]] = field(default_factory=list)
    monthly_series: list[tuple[date, int]] = field(default_factory=list)


def _rate(completed: int, total: int) -> float:
    return completed / total if total else 0.0


def daily_counts(events: Iterable[CompletionRecord]) -> dict[date, int]:
    """Map each date to the number of completed events on it."""

    counts: Counter[date] = Counter()
    for event in events:
        if event.completed:
            counts[event.occurred_on] += 1
    return dict(counts)


def heatmap_level(count: int) -> int:
    """Bucket a daily completion count into a 0-4 intensity level."""

    if count <= 0:
        return 0
    if count <= 2:
        return 1
    if count <= 4:
        return 2
    if count <= 7:
        return 3
    return 4


def contribution_grid(
    events: Iterable[CompletionRecord], today: date, *, days: int = CONTRIBUTION_DAYS
) -> list[GridCell]:
    """Return oldest-first cells for the trailing ``days`` window ending at ``today``."""

    counts = daily_counts(events)
    start = today - timedelta(days=days - 1)
    cells: list[GridCell] = []
    for offset in range(days):
        day = start + timedelta(days=offset)
        count = counts.get(day, 0)
        cells.append(GridCell(day=day, count=count, level=heatmap_level(count)))
    return cells


def weekday_rates(events: Iterable[CompletionRecord]) -> list[WeekdayRate]:
    """Completion rate per weekday, always seven rows in Sun..Sat order."""

    completed: Counter[Weekday] = Counter()
    totals: Counter[Weekday] = Counter()
    for event in events:
        weekday = weekday_of(event.occurred_on)
        totals[weekday] += 1
        if event.completed:
            completed[weekday] += 1

    return [
        WeekdayRate(
            weekday=weekday,
            label=WEEKDAY_LABELS[weekday],
            completed=completed[weekday],
            total=totals[weekday],
            rate=_rate(completed[weekday], totals[weekday]),
        )
        for weekday in Weekday
    ]


def best_day(rates: Sequence[WeekdayRate]) -> Optional[WeekdayRate]:
    """Highest rate; ties go to the earliest weekday in Sun..Sat order."""

    best: Optional[WeekdayRate] = None
    for row in rates:
        if best is None or row.rate > best.rate:
            best = row
    return best


def worst_day(rates: Sequence[WeekdayRate]) -> Optional[WeekdayRate]:
    """Lowest rate among weekdays that have at least one event."""

    worst: Optional[WeekdayRate] = None
    for row in rates:
        if row.total == 0:
            continue
        if worst is None or row.rate < worst.rate:
            worst = row
    return worst


def category_rates(
    events: Iterable[CompletionRecord], habits: Iterable[CategorizedHabit]
) -> list[CategoryRate]:
    """Completion rate per habit category, sorted by rate descending.

    Events are matched to categories through their ``habit_id``; every category
    of the given habits is listed even when it has no events yet.
    """

    category_by_habit: dict[Optional[int], str] = {}
    order: list[str] = []
    for habit in habits:
        category_by_habit[habit.id] = habit.category
        if habit.category not in order:
            order.append(habit.category)

    completed: Counter[str] = Counter()
    totals: Counter[str] = Counter()
    for event in events:
        category = category_by_habit.get(getattr(event, "habit_id", None))
        if category is None:
            continue
        totals[category] += 1
        if event.completed:
            completed[category] += 1

    rows = [
        CategoryRate(
            category=category,
            label=category_label(category),
            completed=completed[category],
            total=totals[category],
            rate=_rate(completed[category], totals[category]),
        )
        for category in order
    ]
    # sorted() is stable, so equal rates keep first-seen order
    return sorted(rows, key=lambda row: row.rate, reverse=True)


def overall_rate(events: Iterable[CompletionRecord]) -> float:
    total = 0
    done = 0
    for event in events:
        total += 1
        if event.completed:
            done += 1
    return _rate(done, total)


def recent_series(
    events: Iterable[CompletionRecord], today: date, days: int
) -> list[tuple[date, int]]:
    """Per-day completed counts for the trailing ``days`` ending at ``today``."""

    counts = daily_counts(events)
    start = today - timedelta(days=days - 1)
    return [
        (start + timedelta(days=offset), counts.get(start + timedelta(days=offset), 0))
        for offset in range(days)
    ]


def summarize(
    events: Iterable[CompletionRecord],
    habits: Iterable[CategorizedHabit],
    today: date,
) -> LedgerSummary:
    """Compute every ledger view in one pass over a materialized event list."""

    event_list = list(events)
    rates = weekday_rates(event_list)
    return LedgerSummary(
        total_events=len(event_list),
        total_completed=sum(1 for event in event_list if event.completed),
        overall_rate=overall_rate(event_list),
        weekday_rates=rates,
        best_day=best_day(rates),
        worst_day=worst_day(rates),
        category_rates=category_rates(event_list, habits),
        weekly_series=recent_series(event_list, today, 7),
        monthly_series=recent_series(event_list, today, 30),
    )


def percent(rate: float) -> int:
    """Render a 0-1 rate as a whole percent, rounding halves up."""

    return int(rate * 100 + 0.5)


__all__ = [
    "CONTRIBUTION_DAYS",
    "CategoryRate",
    "GridCell",
    "LedgerSummary",
    "WeekdayRate",
    "best_day",
    "category_rates",
    "contribution_grid",
    "daily_counts",
    "heatmap_level",
    "overall_rate",
    "percent",
    "recent_series",
    "summarize",
    "weekday_rates",
    "worst_day",
]
