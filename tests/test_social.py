"""Tests for friends, the activity feed and the leaderboard."""

from __future__ import annotations

from datetime import date

import pytest

from habitoid.services import mood, social


@pytest.fixture
def pair(user_factory):
    return user_factory("ana", first_name="Ana"), user_factory("ben", first_name="Ben")


def test_friend_request_validation(ctx, pair):
    ana, _ = pair
    with pytest.raises(ValueError, match="Username is required"):
        social.send_friend_request(ctx, user_id=ana.id, username="  ")
    with pytest.raises(LookupError):
        social.send_friend_request(ctx, user_id=ana.id, username="ghost")
    with pytest.raises(ValueError, match="yourself"):
        social.send_friend_request(ctx, user_id=ana.id, username="ana")


def test_duplicate_request_in_either_direction(ctx, pair):
    ana, ben = pair
    social.send_friend_request(ctx, user_id=ana.id, username="ben")
    with pytest.raises(ValueError, match="already exists"):
        social.send_friend_request(ctx, user_id=ana.id, username="ben")
    with pytest.raises(ValueError, match="already exists"):
        social.send_friend_request(ctx, user_id=ben.id, username="ana")


def test_only_recipient_can_accept(ctx, pair):
    ana, ben = pair
    request = social.send_friend_request(ctx, user_id=ana.id, username="ben")

    with pytest.raises(LookupError):
        social.accept_friend_request(ctx, user_id=ana.id, request_id=request.id)

    pending = social.pending_requests(ctx, user_id=ben.id)
    assert pending[0]["requester"]["username"] == "ana"

    accepted = social.accept_friend_request(ctx, user_id=ben.id, request_id=request.id)
    assert accepted.status == "accepted"
    assert social.friend_ids(ctx, user_id=ana.id) == [ben.id]
    assert [friend["username"] for friend in social.list_friends(ctx, user_id=ben.id)] == ["ana"]
    assert social.pending_requests(ctx, user_id=ben.id) == []


def test_reject_deletes_request(ctx, pair):
    ana, ben = pair
    request = social.send_friend_request(ctx, user_id=ana.id, username="ben")
    social.reject_friend_request(ctx, user_id=ben.id, request_id=request.id)

    assert ctx.social_repo.get(request.id) is None
    # A fresh request is allowed afterwards
    social.send_friend_request(ctx, user_id=ana.id, username="ben")


def test_remove_friend(ctx, pair):
    ana, ben = pair
    request = social.send_friend_request(ctx, user_id=ana.id, username="ben")
    social.accept_friend_request(ctx, user_id=ben.id, request_id=request.id)

    assert social.remove_friend(ctx, user_id=ben.id, friend_id=ana.id)
    assert social.friend_ids(ctx, user_id=ana.id) == []
    assert not social.remove_friend(ctx, user_id=ben.id, friend_id=ana.id)


def test_feed_includes_accepted_friends_only(ctx, pair, user_factory):
    ana, ben = pair
    carl = user_factory("carl")
    request = social.send_friend_request(ctx, user_id=ana.id, username="ben")
    social.accept_friend_request(ctx, user_id=ben.id, request_id=request.id)

    ctx.social_repo.log_activity(ana.id, "habit_complete", {"habitName": "Water"})
    ctx.social_repo.log_activity(ben.id, "level_up", {"level": 2})
    ctx.social_repo.log_activity(carl.id, "level_up", {"level": 9})

    feed = social.activity_feed(ctx, user_id=ana.id)
    assert [entry["actionType"] for entry in feed] == ["level_up", "habit_complete"]
    assert feed[0]["user"]["username"] == "ben"
    assert feed[0]["actionData"] == {"level": 2}


def test_leaderboard_ranks(ctx, user_factory):
    user_factory("first", total_points=500)
    user_factory("second", total_points=120)

    board = social.leaderboard(ctx)
    assert [(row["rank"], row["username"]) for row in board] == [(1, "first"), (2, "second")]
    assert board[0]["totalPoints"] == 500
    assert "level" in board[0]


def test_public_profile(ctx, pair):
    ana, _ = pair
    profile = social.public_profile(ctx, ana.id)
    assert profile["firstName"] == "Ana"
    assert "passwordHash" not in profile
    with pytest.raises(LookupError):
        social.public_profile(ctx, 999)


def test_mood_check_in_overwrites_day(ctx, user):
    day = date(2024, 3, 13)
    mood.log_mood(ctx, user_id=user.id, mood=1, occurred_on=day)
    mood.log_mood(ctx, user_id=user.id, mood=3, occurred_on=day, notes="better")

    stored = mood.mood_for_day(ctx, user_id=user.id, day=day)
    assert stored.mood == 3
    assert stored.notes == "better"
    with pytest.raises(ValueError):
        mood.log_mood(ctx, user_id=user.id, mood=5, occurred_on=day)
