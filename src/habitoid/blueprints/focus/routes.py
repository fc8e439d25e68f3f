"""Focus (Pomodoro) session routes."""

from __future__ import annotations

from datetime import date
from typing import Optional

from flask import jsonify
from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from ...extensions import current_user_id, get_context, login_required
from ...models.focus import SessionType
from ...services import notifications, stats
from ..common import json_body, query_day, serialize, serialize_all
from . import bp


class FocusSessionForm(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    duration: int = Field(ge=1, le=24 * 60)
    session_type: SessionType = Field(
        default=SessionType.FOCUS, validation_alias=AliasChoices("sessionType", "type", "session_type")
    )
    completed: bool = True
    habit_id: Optional[int] = Field(default=None, validation_alias=AliasChoices("habitId", "habit_id"))
    occurred_on: Optional[date] = Field(default=None, validation_alias=AliasChoices("date", "occurred_on"))


@bp.post("/focus")
@login_required
def record_session():
    form = FocusSessionForm.model_validate(json_body())
    ctx = get_context()
    user_id = current_user_id()
    result = stats.record_focus_session(
        ctx,
        user_id=user_id,
        duration=form.duration,
        session_type=form.session_type.value,
        completed=form.completed,
        occurred_on=form.occurred_on,
        habit_id=form.habit_id,
    )
    notice = None
    if form.completed and form.session_type is SessionType.FOCUS:
        habit_name = None
        if form.habit_id is not None:
            habit = ctx.habit_repo.get_by_id(form.habit_id, user_id=user_id)
            habit_name = habit.name if habit else None
        notice = notifications.focus_complete(form.duration, habit_name).to_dict()

    payload = serialize(result.session)
    payload.update(
        xpEarned=result.xp_earned,
        totalPoints=result.user.total_points,
        level=result.user.level,
        notification=notice,
        unlockedBadges=[{"id": badge.id, "name": badge.name} for badge in result.unlocked],
    )
    return jsonify(payload), 201


@bp.get("/focus/today")
@login_required
def sessions_today():
    sessions = get_context().focus_repo.list_for_day(query_day(), user_id=current_user_id())
    return jsonify(serialize_all(sessions))
