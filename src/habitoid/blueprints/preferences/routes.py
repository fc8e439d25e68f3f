"""Preference record and pending notification routes."""

from __future__ import annotations

from datetime import datetime

from flask import jsonify, request

from ...domain import rewards
from ...extensions import current_user_id, get_context, login_required
from ...infra.repositories.user import stats_of
from ...services import habits as habit_service
from ...services import notifications, preferences
from ..common import json_body
from . import bp


@bp.get("/preferences")
@login_required
def get_preferences():
    prefs = preferences.load_preferences(get_context().settings_repo, user_id=current_user_id())
    return jsonify(prefs.model_dump(mode="json"))


@bp.patch("/preferences")
@login_required
def update_preferences():
    prefs = preferences.save_preferences(
        get_context().settings_repo, user_id=current_user_id(), update=json_body()
    )
    return jsonify(prefs.model_dump(mode="json"))


@bp.delete("/preferences")
@login_required
def reset_preferences():
    prefs = preferences.reset_preferences(get_context().settings_repo, user_id=current_user_id())
    return jsonify(prefs.model_dump(mode="json"))


@bp.get("/notifications/pending")
@login_required
def pending_notifications():
    """Notifications the client should show now (``?at=`` overrides the clock)."""

    raw = request.args.get("at")
    try:
        now = datetime.fromisoformat(raw) if raw else datetime.now()
    except ValueError as exc:
        raise ValueError(f"Invalid timestamp: {raw!r}") from exc

    ctx = get_context()
    user_id = current_user_id()
    prefs = preferences.load_preferences(ctx.settings_repo, user_id=user_id)
    views = habit_service.habits_for_day(ctx, user_id=user_id, day=now.date())
    user = ctx.user_repo.get_by_id(user_id)
    payloads = notifications.pending_notifications(
        prefs,
        now=now,
        current_streak=rewards.effective_streak(stats_of(user), now.date()) if user else 0,
        pending_habits=[
            (view.habit.name, view.habit.reminder_time)
            for view in views
            if view.due and not view.completed
        ],
        completed_today=sum(1 for view in views if view.completed),
    )
    return jsonify([payload.to_dict() for payload in payloads])
