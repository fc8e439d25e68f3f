"""Tests for completion logging, focus rewards, badges and day closing."""

from __future__ import annotations

import json
from datetime import date, datetime, timedelta

import pytest

from habitoid.services import stats
from habitoid.services.habits import HabitNotFound

TODAY = date(2024, 3, 13)
YESTERDAY = TODAY - timedelta(days=1)
NOON = datetime(2024, 3, 13, 12, 0)


def _complete(ctx, habit, *, day=TODAY, completed=True, at=NOON):
    return stats.log_completion(
        ctx,
        user_id=habit.user_id,
        habit_id=habit.id,
        occurred_on=day,
        completed=completed,
        logged_at=at,
    )


def _activity_types(ctx, user_id):
    return [entry.action_type for entry in ctx.social_repo.feed([user_id], limit=100)]


def test_first_completion_awards_points_and_first_badge(ctx, habit_factory):
    habit = habit_factory()
    result = _complete(ctx, habit)

    assert result.xp_earned == 10
    assert result.multiplier == 1.0
    assert result.user.current_streak == 1
    assert [badge.id for badge in result.unlocked] == ["habits_1"]
    # 10 for the completion plus 25 for the badge
    assert result.user.total_points == 35
    assert result.log.xp_earned == 10
    assert "habit_complete" in _activity_types(ctx, habit.user_id)


def test_saving_a_completed_day_again_awards_nothing(ctx, habit_factory):
    habit = habit_factory()
    _complete(ctx, habit)
    again = _complete(ctx, habit)

    assert again.xp_earned == 0
    assert again.user.total_points == 35


def test_uncomplete_keeps_points_by_default(ctx, habit_factory):
    habit = habit_factory()
    _complete(ctx, habit)

    undone = _complete(ctx, habit, completed=False)
    assert undone.xp_earned == 0
    assert undone.user.total_points == 35
    assert undone.log.completed is False

    redone = _complete(ctx, habit)
    assert redone.xp_earned == 0
    assert redone.user.total_points == 35


def test_symmetric_points_revert_stored_reward(ctx, habit_factory):
    ctx.config.SYMMETRIC_POINTS = True
    habit = habit_factory()
    _complete(ctx, habit)

    undone = _complete(ctx, habit, completed=False)
    assert undone.xp_earned == -10
    assert undone.user.total_points == 25
    assert ctx.habit_repo.get_log(habit.id, TODAY, user_id=habit.user_id).xp_earned == 0

    redone = _complete(ctx, habit)
    assert redone.xp_earned == 10
    assert redone.user.total_points == 35


def test_streak_multiplier_and_milestone(ctx, user_factory, habit_factory):
    owner = user_factory("streaky", total_points=500, current_streak=6, last_active_on=YESTERDAY)
    habit = habit_factory(owner=owner)

    result = _complete(ctx, habit)
    assert result.xp_earned == 13
    assert result.multiplier == 1.25
    assert result.user.current_streak == 7
    assert result.streak_milestone == 7
    assert {"streak_3", "streak_7", "habits_1"} <= {badge.id for badge in result.unlocked}
    assert "streak_milestone" in _activity_types(ctx, owner.id)


def test_level_up_and_points_badge(ctx, user_factory, habit_factory):
    owner = user_factory("climber", total_points=95)
    habit = habit_factory(owner=owner)

    result = _complete(ctx, habit)
    assert result.leveled_up
    assert {badge.id for badge in result.unlocked} == {"habits_1", "points_100"}
    assert result.user.total_points == 155
    assert "level_up" in _activity_types(ctx, owner.id)


@pytest.mark.parametrize(
    ("hour", "badge_id"),
    [(6, "early_bird"), (23, "night_owl")],
)
def test_time_of_day_badges(ctx, habit_factory, hour, badge_id):
    habit = habit_factory()
    result = _complete(ctx, habit, at=datetime(2024, 3, 13, hour, 30))

    assert badge_id in {badge.id for badge in result.unlocked}
    assert stats.special_counters(ctx, user_id=habit.user_id)[badge_id] == 1


def test_backdated_completion_does_not_extend_streak(ctx, user_factory, habit_factory):
    owner = user_factory("late", current_streak=2, last_active_on=TODAY)
    habit = habit_factory(owner=owner)

    result = _complete(ctx, habit, day=TODAY - timedelta(days=5))
    assert result.user.current_streak == 2
    assert result.user.last_active_on == TODAY


def test_logging_someone_elses_habit_is_not_found(ctx, habit_factory, user_factory):
    habit = habit_factory()
    stranger = user_factory("stranger")
    with pytest.raises(HabitNotFound):
        stats.log_completion(
            ctx, user_id=stranger.id, habit_id=habit.id, occurred_on=TODAY, completed=True
        )


def test_perfect_week_badge_from_seven_perfect_days(ctx, habit_factory, log_factory):
    habit = habit_factory()
    for offset in range(1, 7):
        log_factory(habit, TODAY - timedelta(days=offset))

    result = _complete(ctx, habit)
    assert "perfect_week" in {badge.id for badge in result.unlocked}


def test_focus_session_awards_minutes(ctx, user):
    result = stats.record_focus_session(ctx, user_id=user.id, duration=25, occurred_on=TODAY)
    assert result.xp_earned == 25
    assert result.user.total_points == 25
    assert result.unlocked == []
    assert _activity_types(ctx, user.id) == ["focus_session"]


def test_focus_hour_unlocks_focus_and_points_badges(ctx, user):
    result = stats.record_focus_session(ctx, user_id=user.id, duration=60, occurred_on=TODAY)

    assert [badge.id for badge in result.unlocked] == ["focus_60", "points_100"]
    assert result.user.total_points == 60 + 75 + 25


def test_break_and_abandoned_sessions(ctx, user):
    short_break = stats.record_focus_session(
        ctx, user_id=user.id, duration=5, session_type="short_break", occurred_on=TODAY
    )
    abandoned = stats.record_focus_session(
        ctx, user_id=user.id, duration=25, completed=False, occurred_on=TODAY
    )
    assert short_break.xp_earned == 10
    assert abandoned.xp_earned == 0
    assert abandoned.user.total_points == 10
    assert "focus_session" not in _activity_types(ctx, user.id)


def test_focus_session_rejects_unknown_type(ctx, user):
    with pytest.raises(ValueError):
        stats.record_focus_session(ctx, user_id=user.id, duration=5, session_type="nap")


def test_close_day_resets_idle_users_once(ctx, user_factory, habit_factory, log_factory):
    idle = user_factory("idle", current_streak=4, last_active_on=YESTERDAY - timedelta(days=1))
    busy = user_factory("busy", current_streak=3, last_active_on=YESTERDAY)
    log_factory(habit_factory(owner=busy), YESTERDAY)

    assert stats.close_day_for_all(ctx, YESTERDAY) == 1
    assert ctx.user_repo.get_by_id(idle.id).current_streak == 0
    assert ctx.user_repo.get_by_id(idle.id).longest_streak == 4
    assert ctx.user_repo.get_by_id(busy.id).current_streak == 3

    # Second run for the same day is a no-op
    assert stats.close_day_for_all(ctx, YESTERDAY) == 0


def test_special_counters_ignore_corrupt_json(ctx, user):
    ctx.settings_repo.set(stats.SPECIAL_COUNTERS_KEY, "{not json", user_id=user.id)
    assert stats.special_counters(ctx, user_id=user.id) == {}
    assert stats.bump_special_counter(ctx, user_id=user.id, key="early_bird") == 1
    assert json.loads(ctx.settings_repo.get(stats.SPECIAL_COUNTERS_KEY, user_id=user.id)) == {
        "early_bird": 1
    }


def test_dashboard_shape(ctx, habit_factory):
    habit = habit_factory("Water")
    habit_factory("Hike", frequency="weekends")
    _complete(ctx, habit)

    board = stats.dashboard(ctx, user_id=habit.user_id, today=TODAY)
    assert board["stats"]["totalPoints"] == 35
    assert board["stats"]["currentStreak"] == 1
    assert board["today"]["due"] == 1
    assert board["today"]["completed"] == 1
    assert board["evolution"]["name"] == "Baby Slash"
    assert len(board["weekly"]) == 7
    assert board["challenge"]["id"]


def test_badge_overview_marks_unlocks(ctx, habit_factory):
    habit = habit_factory()
    _complete(ctx, habit)

    rows = {row["id"]: row for row in stats.badge_overview(ctx, user_id=habit.user_id, today=TODAY)}
    assert rows["habits_1"]["unlocked"] is True
    assert rows["habits_1"]["unlockedAt"] is not None
    assert rows["habits_5"]["progress"] == 20.0
    assert rows["streak_100"]["unlocked"] is False


def test_week_activity_for_challenges(ctx, habit_factory, log_factory, user):
    work = habit_factory("Inbox zero", category="work")
    health = habit_factory("Walk", category="health")
    log_factory(work, date(2024, 3, 11), created_at=datetime(2024, 3, 11, 8, 0))
    log_factory(health, date(2024, 3, 12))
    log_factory(health, date(2024, 3, 2))
    stats.record_focus_session(ctx, user_id=user.id, duration=30, occurred_on=date(2024, 3, 12))

    week = stats.week_activity(ctx, user_id=user.id, day=TODAY)
    assert week.categories == frozenset({"work", "health"})
    assert week.early_completions == 1
    assert week.focus_sessions == 1
    assert week.focus_minutes == 30
    assert week.daily_completions == {date(2024, 3, 11): 1, date(2024, 3, 12): 1}


def test_aware_timestamps_are_stored_as_local_time(ctx, habit_factory):
    habit = habit_factory()
    local_dawn = datetime(2024, 3, 13, 6, 30).astimezone()

    result = _complete(ctx, habit, at=local_dawn)

    stored = ctx.habit_repo.get_log(habit.id, TODAY, user_id=habit.user_id)
    assert stored.created_at.tzinfo is None
    assert stored.created_at == datetime(2024, 3, 13, 6, 30)
    assert "early_bird" in {badge.id for badge in result.unlocked}


def test_future_dates_are_rejected(ctx, user_factory, habit_factory):
    owner = user_factory("planner", current_streak=5, last_active_on=YESTERDAY)
    habit = habit_factory(owner=owner)

    with pytest.raises(ValueError, match="future"):
        stats.log_completion(
            ctx,
            user_id=owner.id,
            habit_id=habit.id,
            occurred_on=TODAY + timedelta(days=1),
            completed=True,
            today=TODAY,
        )

    user = ctx.user_repo.get_by_id(owner.id)
    assert user.last_active_on == YESTERDAY
    assert ctx.habit_repo.get_log(habit.id, TODAY + timedelta(days=1), user_id=owner.id) is None

    result = stats.log_completion(
        ctx, user_id=owner.id, habit_id=habit.id, occurred_on=TODAY, completed=True, today=TODAY
    )
    assert result.user.current_streak == 6


def test_returning_after_a_break_earns_base_points(ctx, user_factory, habit_factory):
    owner = user_factory("returning", current_streak=30, last_active_on=date(2024, 2, 1))
    habit = habit_factory(owner=owner)

    board = stats.dashboard(ctx, user_id=owner.id, today=TODAY)
    assert board["stats"]["currentStreak"] == 0
    assert board["stats"]["multiplier"] == 1.0

    result = _complete(ctx, habit)
    assert result.xp_earned == 10
    assert result.multiplier == 1.0
    assert result.user.current_streak == 1
    assert not {"streak_3", "streak_7", "streak_30"} & {badge.id for badge in result.unlocked}
