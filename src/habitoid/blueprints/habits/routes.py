"""Habit routes: CRUD, daily logging, templates and the contribution grid."""

from __future__ import annotations

from datetime import date, datetime, timedelta

from flask import jsonify, request

from ...extensions import current_user_id, get_context, login_required
from ...services import habits as habit_service
from ...services import notifications, stats
from ..common import json_body, parse_day, query_day, serialize, serialize_all, serialize_habit
from . import bp
from .forms import HabitForm, HabitLogForm, HabitUpdateForm

# Default window for a habit's log history
HISTORY_DAYS = 30


def _truthy(value: str | None) -> bool:
    return (value or "").strip().lower() in {"1", "true", "yes", "on"}


@bp.get("/habits")
@login_required
def list_habits():
    ctx = get_context()
    habits = ctx.habit_repo.list_all(
        user_id=current_user_id(), include_inactive=_truthy(request.args.get("include_inactive"))
    )
    return jsonify([serialize_habit(habit) for habit in habits])


@bp.post("/habits")
@login_required
def create_habit():
    form = HabitForm.model_validate(json_body())
    habit = habit_service.create_habit(get_context(), user_id=current_user_id(), fields=form.to_fields())
    return jsonify(serialize_habit(habit)), 201


@bp.get("/habits/<int:habit_id>")
@login_required
def get_habit(habit_id: int):
    habit = habit_service.get_habit(get_context(), user_id=current_user_id(), habit_id=habit_id)
    return jsonify(serialize_habit(habit))


@bp.patch("/habits/<int:habit_id>")
@login_required
def update_habit(habit_id: int):
    form = HabitUpdateForm.model_validate(json_body())
    ctx = get_context()
    user_id = current_user_id()
    current = habit_service.get_habit(ctx, user_id=user_id, habit_id=habit_id)
    form.check_cadence(current.frequency)
    habit = habit_service.update_habit(ctx, user_id=user_id, habit_id=habit_id, fields=form.to_fields())
    return jsonify(serialize_habit(habit))


@bp.delete("/habits/<int:habit_id>")
@login_required
def delete_habit(habit_id: int):
    habit_service.delete_habit(get_context(), user_id=current_user_id(), habit_id=habit_id)
    return jsonify(success=True)


@bp.post("/habits/<int:habit_id>/log")
@login_required
def log_habit(habit_id: int):
    """Upsert the day's log; the response carries the reward for toasts."""

    form = HabitLogForm.model_validate(json_body())
    result = stats.log_completion(
        get_context(),
        user_id=current_user_id(),
        habit_id=habit_id,
        occurred_on=form.occurred_on or date.today(),
        completed=form.completed,
        value=form.value,
        notes=form.notes,
        logged_at=datetime.now(),
    )
    payload = serialize(result.log)
    milestone = (
        notifications.streak_milestone(result.streak_milestone) if result.streak_milestone else None
    )
    payload.update(
        xpEarned=result.xp_earned,
        multiplier=result.multiplier,
        leveledUp=result.leveled_up,
        level=result.user.level,
        totalPoints=result.user.total_points,
        currentStreak=result.user.current_streak,
        streakMilestone=milestone.to_dict() if milestone else None,
        unlockedBadges=[
            {"id": badge.id, "name": badge.name, "icon": badge.icon, "points": badge.points}
            for badge in result.unlocked
        ],
    )
    return jsonify(payload)


@bp.get("/habits/<int:habit_id>/logs")
@login_required
def habit_logs(habit_id: int):
    ctx = get_context()
    user_id = current_user_id()
    habit_service.get_habit(ctx, user_id=user_id, habit_id=habit_id)
    end = parse_day(request.args.get("end"))
    start = parse_day(request.args.get("start"), default=end - timedelta(days=HISTORY_DAYS - 1))
    if start > end:
        raise ValueError("start must not be after end")
    logs = ctx.habit_repo.logs_between(start, end, user_id=user_id, habit_id=habit_id)
    return jsonify(serialize_all(logs))


@bp.get("/habits/today")
@login_required
def habits_today():
    """Active habits with whether each is due and done on the given day."""

    day = query_day()
    views = habit_service.habits_for_day(get_context(), user_id=current_user_id(), day=day)
    if not _truthy(request.args.get("all")):
        views = [view for view in views if view.due]
    rows = []
    for view in views:
        row = serialize_habit(view.habit)
        row.update(
            due=view.due,
            completed=view.completed,
            currentStreak=view.current_streak,
            longestStreak=view.longest_streak,
            frequencyLabel=view.frequency_label,
            log=serialize(view.log) if view.log else None,
        )
        rows.append(row)
    return jsonify(date=day.isoformat(), habits=rows)


@bp.get("/habits/templates")
@login_required
def templates():
    return jsonify(habit_service.list_templates())


@bp.post("/habits/templates/<template_id>")
@login_required
def adopt_template(template_id: str):
    created = habit_service.adopt_template(
        get_context(), user_id=current_user_id(), template_id=template_id
    )
    return jsonify([serialize_habit(habit) for habit in created]), 201


@bp.get("/habit-logs/today")
@login_required
def logs_today():
    logs = get_context().habit_repo.logs_for_day(query_day(), user_id=current_user_id())
    return jsonify(serialize_all(logs))


@bp.get("/habit-logs/contribution")
@login_required
def contribution():
    cells = stats.contribution(get_context(), user_id=current_user_id(), today=query_day())
    return jsonify(
        [{"date": cell.day.isoformat(), "count": cell.count, "level": cell.level} for cell in cells]
    )
