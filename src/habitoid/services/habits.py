"""Habit management: create/edit/soft delete, template packs and today's view."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Mapping, Optional

from ..constants import HABIT_TEMPLATES, category_style
from ..context import AppContext
from ..domain.cadence import frequency_label, habit_is_due
from ..errors import NotFoundError
from ..models.habit import Habit, HabitLog

logger = logging.getLogger("habitoid.habits")

_EDITABLE_FIELDS = (
    "name",
    "description",
    "category",
    "color",
    "icon",
    "frequency",
    "frequency_config",
    "target_value",
    "unit",
    "reminder_time",
    "is_active",
)


class HabitNotFound(NotFoundError):
    """Raised when a habit id does not exist for the requesting user."""


@dataclass(slots=True)
class HabitTodayView:
    habit: Habit
    due: bool
    completed: bool
    log: Optional[HabitLog]
    current_streak: int
    longest_streak: int
    frequency_label: str


def _encode_config(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    if isinstance(value, str):
        return value
    return json.dumps(value)


def _apply_fields(habit: Habit, fields: Mapping[str, Any]) -> Habit:
    for key in _EDITABLE_FIELDS:
        if key not in fields:
            continue
        value = fields[key]
        if key == "frequency_config":
            value = _encode_config(value)
        setattr(habit, key, value)
    return habit


def create_habit(ctx: AppContext, *, user_id: int, fields: Mapping[str, Any]) -> Habit:
    """Create a habit; icon and color fall back to the category's style."""

    category = fields.get("category") or "other"
    icon, color = category_style(category)
    habit = Habit(user_id=user_id, name=fields["name"], category=category, icon=icon, color=color)
    _apply_fields(habit, {key: value for key, value in fields.items() if value is not None})
    created = ctx.habit_repo.create(habit, user_id=user_id)
    logger.info("Habit created", extra={"user_id": user_id, "habit_id": created.id})

    from . import stats

    stats.evaluate_badges(ctx, user_id=user_id)
    return created


def get_habit(ctx: AppContext, *, user_id: int, habit_id: int) -> Habit:
    habit = ctx.habit_repo.get_by_id(habit_id, user_id=user_id)
    if habit is None:
        raise HabitNotFound(f"Habit {habit_id} not found")
    return habit


def update_habit(
    ctx: AppContext, *, user_id: int, habit_id: int, fields: Mapping[str, Any]
) -> Habit:
    habit = get_habit(ctx, user_id=user_id, habit_id=habit_id)
    if "category" in fields and fields["category"] and "icon" not in fields and "color" not in fields:
        habit.icon, habit.color = category_style(fields["category"])
    _apply_fields(habit, fields)
    return ctx.habit_repo.update(habit, user_id=user_id)


def delete_habit(ctx: AppContext, *, user_id: int, habit_id: int) -> None:
    """Soft delete; logs stay for history and analytics."""

    if not ctx.habit_repo.deactivate(habit_id, user_id=user_id):
        raise HabitNotFound(f"Habit {habit_id} not found")
    logger.info("Habit archived", extra={"user_id": user_id, "habit_id": habit_id})


def adopt_template(ctx: AppContext, *, user_id: int, template_id: str) -> list[Habit]:
    """Create every habit of a template pack for the user."""

    if template_id not in HABIT_TEMPLATES:
        raise ValueError(f"Unknown template pack: {template_id}")
    _, _, items = HABIT_TEMPLATES[template_id]
    created: list[Habit] = []
    for name, icon, category, frequency in items:
        _, color = category_style(category)
        habit = Habit(
            user_id=user_id,
            name=name,
            icon=icon,
            category=category,
            color=color,
            frequency=frequency,
        )
        created.append(ctx.habit_repo.create(habit, user_id=user_id))

    from . import stats

    stats.bump_special_counter(ctx, user_id=user_id, key="template_user")
    stats.evaluate_badges(ctx, user_id=user_id)
    logger.info(
        "Template pack adopted",
        extra={"user_id": user_id, "template": template_id, "habits": len(created)},
    )
    return created


def list_templates() -> list[dict[str, Any]]:
    return [
        {
            "id": template_id,
            "name": name,
            "description": description,
            "habits": [
                {"name": habit, "icon": icon, "category": category, "frequency": frequency}
                for habit, icon, category, frequency in items
            ],
        }
        for template_id, (name, description, items) in HABIT_TEMPLATES.items()
    ]


def habits_for_day(ctx: AppContext, *, user_id: int, day: date) -> list[HabitTodayView]:
    """Active habits with due/completed state and per-habit streaks for ``day``."""

    habits = ctx.habit_repo.list_active(user_id=user_id)
    logs = {log.habit_id: log for log in ctx.habit_repo.logs_for_day(day, user_id=user_id)}
    views: list[HabitTodayView] = []
    for habit in habits:
        if habit.id is None:
            continue
        log = logs.get(habit.id)
        current, longest = ctx.habit_repo.habit_streaks(habit.id, user_id=user_id, today=day)
        views.append(
            HabitTodayView(
                habit=habit,
                due=habit_is_due(habit, day),
                completed=bool(log and log.completed),
                log=log,
                current_streak=current,
                longest_streak=longest,
                frequency_label=frequency_label(habit.frequency),
            )
        )
    return views


__all__ = [
    "HabitNotFound",
    "HabitTodayView",
    "adopt_template",
    "create_habit",
    "delete_habit",
    "get_habit",
    "habits_for_day",
    "list_templates",
    "update_habit",
]
