"""Per-user preference record: notifications, goals and habit stacks.

The record is stored as one JSON value in ``user_setting`` and always read
through ``load_preferences`` so that missing or corrupt data falls back to the
defaults below.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..infra.repositories.settings import SQLModelSettingsRepository

logger = logging.getLogger("habitoid.preferences")

PREFERENCES_KEY = "preferences"


class NotificationSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    enabled: bool = False
    habit_reminders: bool = True
    streak_alerts: bool = True
    focus_alerts: bool = True
    daily_reminder: bool = True
    daily_reminder_time: str = "09:00"

    @field_validator("daily_reminder_time")
    @classmethod
    def validate_time(cls, value: str) -> str:
        parts = value.split(":")
        if len(parts) != 2 or not all(part.isdigit() for part in parts):
            raise ValueError("Use HH:MM for the reminder time.")
        hours, minutes = int(parts[0]), int(parts[1])
        if not (0 <= hours < 24 and 0 <= minutes < 60):
            raise ValueError("Use HH:MM for the reminder time.")
        return f"{hours:02d}:{minutes:02d}"


class Goals(BaseModel):
    model_config = ConfigDict(extra="ignore")

    daily_habits: int = Field(default=5, ge=1, le=50)
    weekly_points: int = Field(default=500, ge=1)
    weekly_focus_minutes: int = Field(default=120, ge=1)


class HabitStack(BaseModel):
    """A chained habit: after doing ``trigger``, do ``habit``."""

    trigger: str = Field(min_length=1, max_length=120)
    habit: str = Field(min_length=1, max_length=120)


class UserPreferences(BaseModel):
    model_config = ConfigDict(extra="ignore")

    notifications: NotificationSettings = Field(default_factory=NotificationSettings)
    goals: Goals = Field(default_factory=Goals)
    habit_stacks: list[HabitStack] = Field(default_factory=list)


def _deep_merge(base: dict[str, Any], update: Mapping[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in update.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_preferences(repo: SQLModelSettingsRepository, *, user_id: int) -> UserPreferences:
    """Stored preferences merged over defaults; unreadable data yields defaults."""

    raw = repo.get(PREFERENCES_KEY, user_id=user_id)
    if not raw:
        return UserPreferences()
    try:
        stored = json.loads(raw)
        if not isinstance(stored, dict):
            raise ValueError("preferences must be a JSON object")
        merged = _deep_merge(UserPreferences().model_dump(), stored)
        return UserPreferences.model_validate(merged)
    except (ValueError, ValidationError) as exc:
        logger.warning(
            "Discarding unreadable preferences", extra={"user_id": user_id, "error": str(exc)}
        )
        return UserPreferences()


def save_preferences(
    repo: SQLModelSettingsRepository, *, user_id: int, update: Mapping[str, Any]
) -> UserPreferences:
    """Merge a partial update into the current record and persist it.

    Raises pydantic's ``ValidationError`` when the merged record is invalid.
    """

    current = load_preferences(repo, user_id=user_id)
    merged = UserPreferences.model_validate(_deep_merge(current.model_dump(), update))
    repo.set(PREFERENCES_KEY, merged.model_dump_json(), user_id=user_id)
    return merged


def reset_preferences(repo: SQLModelSettingsRepository, *, user_id: int) -> UserPreferences:
    repo.delete(PREFERENCES_KEY, user_id=user_id)
    return UserPreferences()


__all__ = [
    "Goals",
    "HabitStack",
    "NotificationSettings",
    "PREFERENCES_KEY",
    "UserPreferences",
    "load_preferences",
    "reset_preferences",
    "save_preferences",
]
