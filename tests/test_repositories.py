"""Unit tests for repository implementations."""

from __future__ import annotations

from datetime import date, timedelta

from habitoid.domain.rewards import UserStats
from habitoid.models import FocusSession, HabitLog

TODAY = date(2024, 3, 13)


def test_habit_lookup_is_scoped_to_owner(ctx, habit_factory, user_factory):
    stranger = user_factory("stranger")
    habit = habit_factory("Read")

    assert ctx.habit_repo.get_by_id(habit.id, user_id=habit.user_id) is not None
    assert ctx.habit_repo.get_by_id(habit.id, user_id=stranger.id) is None
    assert ctx.habit_repo.list_all(user_id=stranger.id) == []


def test_deactivate_hides_habit_from_active_list(ctx, habit_factory):
    habit = habit_factory("Stretch")
    assert ctx.habit_repo.deactivate(habit.id, user_id=habit.user_id)

    assert ctx.habit_repo.list_active(user_id=habit.user_id) == []
    archived = ctx.habit_repo.list_all(user_id=habit.user_id, include_inactive=True)
    assert [h.name for h in archived] == ["Stretch"]
    assert ctx.habit_repo.count_active(user_id=habit.user_id) == 0
    assert not ctx.habit_repo.deactivate(9999, user_id=habit.user_id)


def test_upsert_log_keeps_one_row_per_day(ctx, habit_factory, log_factory):
    habit = habit_factory()
    log_factory(habit, TODAY, completed=True, notes="first")
    log_factory(habit, TODAY, completed=False, notes="second")

    logs = ctx.habit_repo.logs_for_day(TODAY, user_id=habit.user_id)
    assert len(logs) == 1
    assert logs[0].completed is False
    assert logs[0].notes == "second"


def test_completion_counts_and_lookups(ctx, habit_factory, log_factory):
    habit = habit_factory()
    log_factory(habit, TODAY - timedelta(days=1))
    log_factory(habit, TODAY - timedelta(days=2), completed=False)
    log_factory(habit, TODAY - timedelta(days=3))

    assert ctx.habit_repo.count_completed(user_id=habit.user_id) == 2
    assert ctx.habit_repo.has_completion_on(TODAY - timedelta(days=1), user_id=habit.user_id)
    assert not ctx.habit_repo.has_completion_on(TODAY - timedelta(days=2), user_id=habit.user_id)

    window = ctx.habit_repo.logs_between(
        TODAY - timedelta(days=2), TODAY, user_id=habit.user_id, habit_id=habit.id
    )
    assert [log.occurred_on for log in window] == [TODAY - timedelta(days=2), TODAY - timedelta(days=1)]


def test_habit_streaks(ctx, habit_factory, log_factory):
    habit = habit_factory()
    for offset in (1, 2, 5, 6, 7, 8):
        log_factory(habit, TODAY - timedelta(days=offset))

    assert ctx.habit_repo.habit_streaks(habit.id, user_id=habit.user_id, today=TODAY) == (2, 4)


def test_set_log_reward(ctx, habit_factory):
    habit = habit_factory()
    log = ctx.habit_repo.upsert_log(
        HabitLog(habit_id=habit.id, user_id=habit.user_id, occurred_on=TODAY, completed=True),
        user_id=habit.user_id,
    )
    ctx.habit_repo.set_log_reward(log.id, 13, user_id=habit.user_id)
    assert ctx.habit_repo.get_log(habit.id, TODAY, user_id=habit.user_id).xp_earned == 13


def test_save_stats_derives_level(ctx, user):
    saved = ctx.user_repo.save_stats(
        user.id, UserStats(total_points=215, current_streak=4, longest_streak=9, last_active_on=TODAY)
    )
    assert saved.level == 3
    assert saved.current_streak == 4
    assert ctx.user_repo.get_by_id(user.id).last_active_on == TODAY


def test_leaderboard_orders_by_points_then_streak(ctx, user_factory):
    user_factory("low", total_points=10)
    user_factory("tie_short", total_points=300, current_streak=1)
    user_factory("tie_long", total_points=300, current_streak=8)
    user_factory("top", total_points=900)

    names = [u.username for u in ctx.user_repo.leaderboard(limit=3)]
    assert names == ["top", "tie_long", "tie_short"]


def test_focus_minutes_count_completed_focus_only(ctx, user):
    for duration, kind, completed in [(25, "focus", True), (50, "focus", False), (5, "short_break", True)]:
        ctx.focus_repo.create(
            FocusSession(
                user_id=user.id, duration=duration, session_type=kind, completed=completed, occurred_on=TODAY
            ),
            user_id=user.id,
        )
    assert ctx.focus_repo.total_focus_minutes(user_id=user.id) == 25
    assert len(ctx.focus_repo.list_for_day(TODAY, user_id=user.id)) == 3


def test_achievement_unlock_is_recorded_once(ctx, user):
    assert ctx.achievement_repo.unlock("streak_3", user_id=user.id) is not None
    assert ctx.achievement_repo.unlock("streak_3", user_id=user.id) is None
    assert ctx.achievement_repo.unlocked_ids(user_id=user.id) == {"streak_3"}


def test_settings_round_trip(ctx, user):
    repo = ctx.settings_repo
    assert repo.get("theme", user_id=user.id) is None
    repo.set("theme", "dark", user_id=user.id)
    repo.set("theme", "light", user_id=user.id)
    assert repo.get("theme", user_id=user.id) == "light"
    repo.delete("theme", user_id=user.id)
    assert repo.get("theme", user_id=user.id) is None


def test_friendship_lookup_works_in_both_directions(ctx, user_factory):
    a = user_factory("a")
    b = user_factory("b")
    request = ctx.social_repo.create(a.id, b.id)

    assert ctx.social_repo.find_between(b.id, a.id).id == request.id
    assert [row.id for row in ctx.social_repo.pending_for(b.id)] == [request.id]
    assert ctx.social_repo.pending_for(a.id) == []

    ctx.social_repo.set_status(request.id, "accepted")
    assert len(ctx.social_repo.list_for_user(a.id, status="accepted")) == 1


def test_feed_is_newest_first_and_limited(ctx, user):
    for n in range(5):
        ctx.social_repo.log_activity(user.id, "habit_complete", {"n": n})

    feed = ctx.social_repo.feed([user.id], limit=3)
    assert len(feed) == 3
    assert feed[0].id > feed[1].id > feed[2].id
    assert ctx.social_repo.feed([]) == []


def test_insight_upsert_replaces_week(ctx, user):
    from habitoid.models import WeeklyInsight

    week = date(2024, 3, 10)
    ctx.insight_repo.upsert(
        WeeklyInsight(user_id=user.id, week_start=week, insights="a", recommendations="b", motivational_tip="c"),
        user_id=user.id,
    )
    ctx.insight_repo.upsert(
        WeeklyInsight(user_id=user.id, week_start=week, insights="x", recommendations="y", motivational_tip="z"),
        user_id=user.id,
    )
    stored = ctx.insight_repo.get(week, user_id=user.id)
    assert stored.insights == "x"


def test_default_timestamps_are_naive_local(ctx, user, habit_factory):
    habit = habit_factory("Journal")
    entry = ctx.social_repo.log_activity(user.id, "habit_complete", {"habitId": habit.id})

    stored = ctx.user_repo.get_by_id(user.id)
    for moment in (stored.created_at, stored.updated_at, habit.updated_at, entry.created_at):
        assert moment.tzinfo is None
