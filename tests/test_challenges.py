"""Tests for the rotating weekly challenge."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from habitoid.domain import challenges
from habitoid.domain.challenges import WEEKLY_CHALLENGES, WeekActivity


@pytest.mark.parametrize(
    ("day", "expected"),
    [
        (date(2024, 3, 13), date(2024, 3, 10)),
        (date(2024, 3, 10), date(2024, 3, 10)),
        (date(2024, 3, 16), date(2024, 3, 10)),
        (date(2024, 1, 1), date(2023, 12, 31)),
    ],
)
def test_week_starts_on_sunday(day, expected):
    assert challenges.week_start(day) == expected


def test_week_number_counts_partial_first_week():
    # Jan 1 2024 was a Monday
    assert challenges.week_number(date(2024, 1, 1)) == 1
    assert challenges.week_number(date(2024, 1, 6)) == 1
    assert challenges.week_number(date(2024, 1, 7)) == 2


def test_weekly_challenge_is_stable_within_a_week():
    start = date(2024, 3, 10)
    picks = {challenges.weekly_challenge(start + timedelta(days=n)).id for n in range(7)}
    assert len(picks) == 1


def test_weekly_challenge_rotates_through_catalog():
    start = date(2024, 1, 7)
    picks = [challenges.weekly_challenge(start + timedelta(weeks=n)).id for n in range(len(WEEKLY_CHALLENGES))]
    assert sorted(picks) == sorted(c.id for c in WEEKLY_CHALLENGES)


def _challenge(kind: str) -> challenges.Challenge:
    return next(c for c in WEEKLY_CHALLENGES if c.type == kind)


def test_daily_minimum_counts_days_with_five_completions():
    week = WeekActivity(
        daily_completions={date(2024, 3, 10): 5, date(2024, 3, 11): 4, date(2024, 3, 12): 7}
    )
    state = challenges.challenge_progress(_challenge("daily_minimum"), week)
    assert state.current == 2
    assert state.percent == pytest.approx(40.0)
    assert not state.completed


def test_focus_marathon_completes_and_caps():
    state = challenges.challenge_progress(_challenge("focus_minutes"), WeekActivity(focus_minutes=200))
    assert state.current == 200
    assert state.percent == 100
    assert state.completed


def test_category_variety_counts_distinct_categories():
    week = WeekActivity(categories=frozenset({"health", "work", "learning"}))
    state = challenges.challenge_progress(_challenge("category_variety"), week)
    assert state.current == 3
    assert state.percent == pytest.approx(75.0)


def test_unknown_challenge_type_makes_no_progress():
    odd = challenges.Challenge("odd", "Odd", "", "mystery", 3, 10)
    state = challenges.challenge_progress(odd, WeekActivity(focus_sessions=9))
    assert state.current == 0
    assert not state.completed
