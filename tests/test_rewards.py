"""Tests for streak, point and level bookkeeping."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from habitoid.domain import rewards
from habitoid.domain.rewards import UserStats

TODAY = date(2024, 3, 13)
YESTERDAY = TODAY - timedelta(days=1)


@pytest.mark.parametrize(
    ("streak", "multiplier"),
    [(0, 1.0), (2, 1.0), (3, 1.25), (6, 1.25), (7, 1.5), (13, 1.5), (14, 1.75), (29, 1.75), (30, 2.0), (400, 2.0)],
)
def test_multiplier_ladder(streak, multiplier):
    assert rewards.xp_multiplier(streak) == multiplier


def test_multiplier_labels():
    assert rewards.multiplier_label(2) == ""
    assert rewards.multiplier_label(7) == "1.5x XP (7+ streak)"
    assert rewards.multiplier_label(30) == "2x XP (30+ streak)"


def test_calculate_xp_rounds_half_up():
    assert rewards.calculate_xp(10, 3) == 13  # 12.5
    assert rewards.calculate_xp(10, 14) == 18  # 17.5
    assert rewards.calculate_xp(10, 30) == 20


def test_streak_two_earns_base_reward():
    stats = UserStats(total_points=500, current_streak=2, longest_streak=2, last_active_on=YESTERDAY)
    outcome = rewards.apply_completion(stats, True, on=TODAY)
    assert outcome.xp_earned == 10
    assert outcome.stats.total_points == 510
    assert outcome.stats.current_streak == 3


def test_streak_six_uses_three_day_rung():
    stats = UserStats(total_points=500, current_streak=6, longest_streak=6, last_active_on=YESTERDAY)
    outcome = rewards.apply_completion(stats, True, on=TODAY)
    assert outcome.xp_earned == 13
    assert outcome.stats.total_points == 513
    assert outcome.stats.current_streak == 7
    assert outcome.multiplier == 1.25


def test_streak_seven_earns_one_and_a_half():
    stats = UserStats(total_points=0, current_streak=7, longest_streak=7, last_active_on=YESTERDAY)
    outcome = rewards.apply_completion(stats, True, on=TODAY)
    assert outcome.xp_earned == 15
    assert outcome.multiplier == 1.5


def test_second_completion_same_day_keeps_streak():
    stats = UserStats(total_points=10, current_streak=1, longest_streak=1, last_active_on=TODAY)
    outcome = rewards.apply_completion(stats, True, on=TODAY)
    assert outcome.stats.current_streak == 1
    assert outcome.streak_extended is False
    assert outcome.stats.total_points == 20


def test_gap_restarts_streak_at_one():
    stats = UserStats(current_streak=5, longest_streak=9, last_active_on=TODAY - timedelta(days=3))
    outcome = rewards.apply_completion(stats, True, on=TODAY)
    assert outcome.stats.current_streak == 1
    assert outcome.stats.longest_streak == 9


def test_first_ever_completion_starts_streak():
    outcome = rewards.apply_completion(UserStats(), True, on=TODAY)
    assert outcome.stats.current_streak == 1
    assert outcome.stats.last_active_on == TODAY


def test_backdated_completion_does_not_move_last_active():
    stats = UserStats(current_streak=2, longest_streak=2, last_active_on=TODAY)
    outcome = rewards.apply_completion(stats, True, on=TODAY - timedelta(days=5))
    assert outcome.stats.last_active_on == TODAY
    assert outcome.stats.current_streak == 2


def test_uncompleting_is_a_no_op():
    stats = UserStats(total_points=40, current_streak=3, last_active_on=TODAY)
    outcome = rewards.apply_completion(stats, False, on=TODAY)
    assert outcome.stats == stats
    assert outcome.xp_earned == 0


def test_revert_completion_floors_at_zero():
    stats = UserStats(total_points=12, current_streak=4)
    assert rewards.revert_completion(stats, 10).total_points == 2
    reverted = rewards.revert_completion(stats, 50)
    assert reverted.total_points == 0
    assert reverted.current_streak == 4


def test_level_up_detected():
    stats = UserStats(total_points=95, current_streak=0)
    outcome = rewards.apply_completion(stats, True, on=TODAY)
    assert outcome.level_before == 1
    assert outcome.level_after == 2
    assert outcome.leveled_up


@pytest.mark.parametrize(
    ("points", "level"),
    [(0, 1), (99, 1), (100, 2), (209, 2), (210, 3), (330, 3), (331, 4), (-5, 1)],
)
def test_level_thresholds(points, level):
    assert rewards.level_for_points(points) == level


def test_level_progress_within_level():
    progress = rewards.level_progress(150)
    assert progress.level == 2
    assert progress.level_floor == 100
    assert progress.next_level_at == 210
    assert progress.points_into_level == 50
    assert progress.percent == pytest.approx(45.5)


@pytest.mark.parametrize(
    ("duration", "session_type", "completed", "points"),
    [
        (25, "focus", True, 25),
        (50, "focus", True, 50),
        (25, "focus", False, 0),
        (5, "short_break", True, 10),
        (15, "long_break", True, 10),
        (5, "short_break", False, 0),
        (0, "focus", True, 0),
    ],
)
def test_focus_reward(duration, session_type, completed, points):
    assert rewards.focus_reward(duration, session_type, completed) == points


def test_close_day_resets_without_completion():
    stats = UserStats(total_points=100, current_streak=5, longest_streak=5, last_active_on=YESTERDAY - timedelta(days=1))
    closed = rewards.close_day(stats, YESTERDAY, had_completion=False)
    assert closed.current_streak == 0
    assert closed.longest_streak == 5
    assert closed.total_points == 100


def test_close_day_keeps_streak_when_day_had_completion():
    stats = UserStats(current_streak=5, last_active_on=YESTERDAY)
    assert rewards.close_day(stats, YESTERDAY, had_completion=True) == stats


def test_close_day_ignores_days_before_last_activity():
    stats = UserStats(current_streak=2, last_active_on=TODAY)
    assert rewards.close_day(stats, YESTERDAY, had_completion=False) == stats


def test_streaks_from_days():
    days = [TODAY - timedelta(days=n) for n in (1, 2, 3)] + [TODAY - timedelta(days=n) for n in (10, 11, 12, 13, 14)]
    assert rewards.streaks_from_days(days, TODAY) == (3, 5)
    assert rewards.streaks_from_days([], TODAY) == (0, 0)
    assert rewards.streaks_from_days([TODAY - timedelta(days=2)], TODAY) == (0, 1)


def test_levels_never_drop_as_points_grow():
    levels = [rewards.level_for_points(points) for points in range(0, 5000, 7)]
    assert levels == sorted(levels)
    assert levels[0] == 1


def test_idle_gap_drops_the_streak_bonus():
    stats = UserStats(total_points=0, current_streak=30, longest_streak=30, last_active_on=date(2024, 1, 1))
    outcome = rewards.apply_completion(stats, True, on=date(2024, 2, 1))
    assert outcome.xp_earned == 10
    assert outcome.multiplier == 1.0
    assert outcome.stats.current_streak == 1
    assert outcome.stats.longest_streak == 30


@pytest.mark.parametrize(
    ("last_active_on", "expected"),
    [(None, 4), (TODAY, 4), (YESTERDAY, 4), (YESTERDAY - timedelta(days=1), 0)],
)
def test_effective_streak(last_active_on, expected):
    stats = UserStats(current_streak=4, last_active_on=last_active_on)
    assert rewards.effective_streak(stats, TODAY) == expected
