"""Friends, activity feed, public profiles and mood check-ins."""

from __future__ import annotations

from datetime import date
from typing import Optional

from flask import jsonify
from pydantic import BaseModel, ConfigDict, Field

from ...errors import NotFoundError
from ...extensions import current_user_id, get_context, login_required
from ...services import mood as mood_service
from ...services import social
from ..common import json_body, query_day, serialize
from . import bp


class FriendRequestForm(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    username: str = Field(min_length=1, max_length=64)


class MoodForm(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True, extra="ignore")

    mood: int = Field(ge=1, le=3)
    notes: Optional[str] = Field(default=None, max_length=500)
    occurred_on: Optional[date] = Field(default=None, alias="date")


@bp.get("/friends")
@login_required
def friends():
    return jsonify(social.list_friends(get_context(), user_id=current_user_id()))


@bp.post("/friends/add")
@login_required
def add_friend():
    form = FriendRequestForm.model_validate(json_body())
    social.send_friend_request(get_context(), user_id=current_user_id(), username=form.username)
    return jsonify(success=True, message="Friend request sent"), 201


@bp.delete("/friends/<int:friend_id>")
@login_required
def remove_friend(friend_id: int):
    if not social.remove_friend(get_context(), user_id=current_user_id(), friend_id=friend_id):
        raise NotFoundError("Friend not found")
    return jsonify(success=True)


@bp.get("/friends/requests")
@login_required
def friend_requests():
    return jsonify(social.pending_requests(get_context(), user_id=current_user_id()))


@bp.post("/friends/accept/<int:request_id>")
@login_required
def accept_request(request_id: int):
    social.accept_friend_request(get_context(), user_id=current_user_id(), request_id=request_id)
    return jsonify(success=True)


@bp.post("/friends/reject/<int:request_id>")
@login_required
def reject_request(request_id: int):
    social.reject_friend_request(get_context(), user_id=current_user_id(), request_id=request_id)
    return jsonify(success=True)


@bp.get("/activity")
@login_required
def activity():
    return jsonify(social.activity_feed(get_context(), user_id=current_user_id()))


@bp.get("/user/<int:user_id>")
@login_required
def public_profile(user_id: int):
    return jsonify(social.public_profile(get_context(), user_id))


@bp.post("/mood")
@login_required
def log_mood():
    form = MoodForm.model_validate(json_body())
    entry = mood_service.log_mood(
        get_context(),
        user_id=current_user_id(),
        mood=form.mood,
        occurred_on=form.occurred_on or date.today(),
        notes=form.notes,
    )
    return jsonify(serialize(entry))


@bp.get("/mood/today")
@login_required
def mood_today():
    entry = mood_service.mood_for_day(get_context(), user_id=current_user_id(), day=query_day())
    return jsonify(serialize(entry) if entry else None)
