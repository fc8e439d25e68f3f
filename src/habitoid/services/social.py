"""Friends, activity feed, leaderboard and public profiles."""

from __future__ import annotations

import json
import logging
from typing import Any

from ..context import AppContext
from ..errors import NotFoundError
from ..models.social import ActivityLog, Friendship
from ..models.user import User

logger = logging.getLogger("habitoid.social")

FEED_LIMIT = 20
LEADERBOARD_LIMIT = 50


def _public_user(user: User) -> dict[str, Any]:
    return {
        "id": user.id,
        "username": user.username,
        "firstName": user.first_name,
        "totalPoints": user.total_points,
        "currentStreak": user.current_streak,
    }


def public_profile(ctx: AppContext, user_id: int) -> dict[str, Any]:
    user = ctx.user_repo.get_by_id(user_id)
    if user is None:
        raise NotFoundError("User not found")
    profile = _public_user(user)
    profile.update(longestStreak=user.longest_streak, level=user.level)
    return profile


def send_friend_request(ctx: AppContext, *, user_id: int, username: str) -> Friendship:
    """Create a pending request from ``user_id`` to the user named ``username``."""

    username = (username or "").strip()
    if not username:
        raise ValueError("Username is required")
    friend = ctx.user_repo.get_by_username(username)
    if friend is None or friend.id is None:
        raise NotFoundError("User not found")
    if friend.id == user_id:
        raise ValueError("Cannot add yourself as a friend")
    if ctx.social_repo.find_between(user_id, friend.id) is not None:
        raise ValueError("Friend request already exists")
    request = ctx.social_repo.create(user_id, friend.id)
    logger.info("Friend request sent", extra={"user_id": user_id, "friend_id": friend.id})
    return request


def _incoming_request(ctx: AppContext, *, user_id: int, request_id: int) -> Friendship:
    request = ctx.social_repo.get(request_id)
    if request is None or request.friend_id != user_id or request.status != "pending":
        raise NotFoundError("Friend request not found")
    return request


def accept_friend_request(ctx: AppContext, *, user_id: int, request_id: int) -> Friendship:
    request = _incoming_request(ctx, user_id=user_id, request_id=request_id)
    accepted = ctx.social_repo.set_status(request.id, "accepted")
    if accepted is None:
        raise NotFoundError("Friend request not found")
    return accepted


def reject_friend_request(ctx: AppContext, *, user_id: int, request_id: int) -> None:
    request = _incoming_request(ctx, user_id=user_id, request_id=request_id)
    ctx.social_repo.delete(request.id)


def remove_friend(ctx: AppContext, *, user_id: int, friend_id: int) -> bool:
    """Drop the link with ``friend_id`` in either direction; False when none exists."""

    friendship = ctx.social_repo.find_between(user_id, friend_id)
    if friendship is None or friendship.id is None:
        return False
    ctx.social_repo.delete(friendship.id)
    return True


def friend_ids(ctx: AppContext, *, user_id: int) -> list[int]:
    return [
        row.friend_id if row.user_id == user_id else row.user_id
        for row in ctx.social_repo.list_for_user(user_id, status="accepted")
    ]


def list_friends(ctx: AppContext, *, user_id: int) -> list[dict[str, Any]]:
    friends = []
    for friend_id in friend_ids(ctx, user_id=user_id):
        user = ctx.user_repo.get_by_id(friend_id)
        if user is not None:
            friends.append(_public_user(user))
    return friends


def pending_requests(ctx: AppContext, *, user_id: int) -> list[dict[str, Any]]:
    rows = []
    for request in ctx.social_repo.pending_for(user_id):
        requester = ctx.user_repo.get_by_id(request.user_id)
        rows.append(
            {
                "id": request.id,
                "userId": request.user_id,
                "createdAt": request.created_at.isoformat(),
                "requester": {
                    "username": requester.username,
                    "firstName": requester.first_name,
                    "totalPoints": requester.total_points,
                }
                if requester
                else None,
            }
        )
    return rows


def _activity_dict(entry: ActivityLog, users: dict[int, User]) -> dict[str, Any]:
    data: Any = None
    if entry.action_data:
        try:
            data = json.loads(entry.action_data)
        except ValueError:
            logger.warning("Unreadable activity payload", extra={"activity_id": entry.id})
    user = users.get(entry.user_id)
    return {
        "id": entry.id,
        "userId": entry.user_id,
        "actionType": entry.action_type,
        "actionData": data,
        "createdAt": entry.created_at.isoformat(),
        "user": {"username": user.username, "firstName": user.first_name} if user else None,
    }


def activity_feed(ctx: AppContext, *, user_id: int, limit: int = FEED_LIMIT) -> list[dict[str, Any]]:
    """The user's own activity plus accepted friends', newest first."""

    ids = [user_id, *friend_ids(ctx, user_id=user_id)]
    users = {}
    for uid in ids:
        user = ctx.user_repo.get_by_id(uid)
        if user is not None:
            users[uid] = user
    return [_activity_dict(entry, users) for entry in ctx.social_repo.feed(ids, limit=limit)]


def leaderboard(ctx: AppContext, *, limit: int = LEADERBOARD_LIMIT) -> list[dict[str, Any]]:
    return [
        dict(_public_user(user), rank=rank, level=user.level)
        for rank, user in enumerate(ctx.user_repo.leaderboard(limit=limit), start=1)
    ]


__all__ = [
    "accept_friend_request",
    "activity_feed",
    "friend_ids",
    "leaderboard",
    "list_friends",
    "pending_requests",
    "public_profile",
    "reject_friend_request",
    "remove_friend",
    "send_friend_request",
]
