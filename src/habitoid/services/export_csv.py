"""CSV export helpers for Habitoid."""

from __future__ import annotations

import csv
import io
from datetime import date, datetime
from pathlib import Path
from typing import Iterable, Mapping, Optional

from ..constants import category_label
from ..context import AppContext
from ..models.habit import Habit, HabitLog

HEADERS = ["Date", "Habit", "Category", "Completed", "Notes"]


def _serialize_value(value):
    if value is None:
        return ""
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, bool):
        return "Yes" if value else "No"
    return str(value)


def _write_logs(fh, logs: Iterable[HabitLog], habits: Mapping[int, Habit]) -> None:
    writer = csv.DictWriter(fh, fieldnames=HEADERS, extrasaction="ignore", quoting=csv.QUOTE_MINIMAL)
    writer.writeheader()
    for log in logs:
        habit = habits.get(log.habit_id)
        writer.writerow(
            {
                "Date": _serialize_value(log.occurred_on),
                "Habit": habit.name if habit else "Unknown",
                "Category": category_label(habit.category) if habit else "",
                "Completed": _serialize_value(log.completed),
                "Notes": _serialize_value(log.notes),
            }
        )


def logs_to_csv(*, logs: Iterable[HabitLog], habits: Iterable[Habit]) -> str:
    """Render completion logs as CSV text, one row per log.

    Columns are deterministic: Date, Habit, Category, Completed, Notes.
    """

    buffer = io.StringIO()
    _write_logs(buffer, logs, {habit.id: habit for habit in habits if habit.id is not None})
    return buffer.getvalue()


def export_logs_csv(*, logs: Iterable[HabitLog], habits: Iterable[Habit], output_path: Path) -> Path:
    """Write completion logs to CSV at `output_path` and return the path."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", newline="", encoding="utf-8") as fh:
        _write_logs(fh, logs, {habit.id: habit for habit in habits if habit.id is not None})
    return output_path


def user_logs_csv(
    ctx: AppContext,
    *,
    user_id: int,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> str:
    """All of a user's logs (optionally within a date range), newest first."""

    habits = ctx.habit_repo.list_all(user_id=user_id, include_inactive=True)
    if start is not None or end is not None:
        logs = ctx.habit_repo.logs_between(start or date.min, end or date.max, user_id=user_id)
    else:
        logs = ctx.habit_repo.all_logs(user_id=user_id)
    logs = sorted(logs, key=lambda log: (log.occurred_on, log.habit_id), reverse=True)
    return logs_to_csv(logs=logs, habits=habits)


__all__ = ["HEADERS", "export_logs_csv", "logs_to_csv", "user_logs_csv"]
