"""Tests for the stored preference record."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from habitoid.services import preferences
from habitoid.services.preferences import PREFERENCES_KEY, UserPreferences


def test_defaults_when_nothing_stored(ctx, user):
    prefs = preferences.load_preferences(ctx.settings_repo, user_id=user.id)
    assert prefs == UserPreferences()
    assert prefs.notifications.enabled is False
    assert prefs.notifications.daily_reminder_time == "09:00"
    assert prefs.goals.daily_habits == 5


@pytest.mark.parametrize("raw", ["{broken", "[1, 2]", '{"goals": {"daily_habits": 0}}'])
def test_unreadable_record_falls_back_to_defaults(ctx, user, raw):
    ctx.settings_repo.set(PREFERENCES_KEY, raw, user_id=user.id)
    assert preferences.load_preferences(ctx.settings_repo, user_id=user.id) == UserPreferences()


def test_partial_update_merges_nested_fields(ctx, user):
    preferences.save_preferences(
        ctx.settings_repo, user_id=user.id, update={"notifications": {"enabled": True}}
    )
    prefs = preferences.save_preferences(
        ctx.settings_repo,
        user_id=user.id,
        update={
            "notifications": {"daily_reminder_time": "7:05"},
            "habit_stacks": [{"trigger": "Coffee", "habit": "Journal"}],
        },
    )
    assert prefs.notifications.enabled is True
    assert prefs.notifications.daily_reminder_time == "07:05"
    assert prefs.notifications.streak_alerts is True
    assert prefs.habit_stacks[0].habit == "Journal"

    reloaded = preferences.load_preferences(ctx.settings_repo, user_id=user.id)
    assert reloaded == prefs


def test_invalid_update_is_rejected_and_not_saved(ctx, user):
    with pytest.raises(ValidationError):
        preferences.save_preferences(
            ctx.settings_repo, user_id=user.id, update={"notifications": {"daily_reminder_time": "25:00"}}
        )
    assert ctx.settings_repo.get(PREFERENCES_KEY, user_id=user.id) is None


def test_reset_restores_defaults(ctx, user):
    preferences.save_preferences(ctx.settings_repo, user_id=user.id, update={"goals": {"daily_habits": 9}})
    assert preferences.reset_preferences(ctx.settings_repo, user_id=user.id) == UserPreferences()
    assert preferences.load_preferences(ctx.settings_repo, user_id=user.id).goals.daily_habits == 5
