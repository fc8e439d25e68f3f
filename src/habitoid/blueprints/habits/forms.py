"""Habit form definitions."""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from ...constants import HABIT_CATEGORIES


class HabitFrequency(str, Enum):
    """Supported cadence options for habits."""

    DAILY = "daily"
    WEEKDAYS = "weekdays"
    WEEKENDS = "weekends"
    WEEKLY = "weekly"
    THREE_PER_WEEK = "3x_week"
    CUSTOM = "custom"


def _check_time(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    parts = value.split(":")
    if len(parts) != 2 or not all(part.isdigit() for part in parts):
        raise ValueError("Use HH:MM for the reminder time.")
    hours, minutes = int(parts[0]), int(parts[1])
    if not (0 <= hours < 24 and 0 <= minutes < 60):
        raise ValueError("Use HH:MM for the reminder time.")
    return f"{hours:02d}:{minutes:02d}"


def _check_days(frequency: Optional[HabitFrequency], config: Optional[dict[str, Any]]) -> None:
    if frequency is HabitFrequency.CUSTOM:
        days = (config or {}).get("days")
        if not isinstance(days, list) or not days:
            raise ValueError("Pick at least one day for a custom cadence.")
        if not all(isinstance(day, int) and 0 <= day <= 6 for day in days):
            raise ValueError("Days must be numbers from 0 (Sunday) to 6 (Saturday).")
    if frequency is HabitFrequency.WEEKLY and config and "dayOfWeek" in config:
        day = config["dayOfWeek"]
        if not isinstance(day, int) or not 0 <= day <= 6:
            raise ValueError("dayOfWeek must be a number from 0 (Sunday) to 6 (Saturday).")


class _HabitFields(BaseModel):
    model_config = ConfigDict(
        str_strip_whitespace=True, alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )

    @field_validator("category", check_fields=False)
    @classmethod
    def validate_category(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and value not in HABIT_CATEGORIES:
            raise ValueError(f"Unknown category: {value}")
        return value

    @field_validator("reminder_time", check_fields=False)
    @classmethod
    def validate_reminder(cls, value: Optional[str]) -> Optional[str]:
        return _check_time(value)


class HabitForm(_HabitFields):
    """Payload for creating a habit."""

    name: str = Field(description="Short label for the habit", max_length=80)
    description: Optional[str] = Field(default=None, max_length=255)
    category: str = Field(default="other")
    color: Optional[str] = Field(default=None, max_length=16)
    icon: Optional[str] = Field(default=None, max_length=16)
    frequency: HabitFrequency = Field(default=HabitFrequency.DAILY)
    frequency_config: Optional[dict[str, Any]] = None
    target_value: int = Field(default=1, ge=1, le=10_000)
    unit: str = Field(default="times", max_length=32)
    reminder_time: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        if not value:
            raise ValueError("Please provide a habit name.")
        return value

    @model_validator(mode="after")
    def ensure_cadence_days(self) -> "HabitForm":
        _check_days(self.frequency, self.frequency_config)
        return self

    def to_fields(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


class HabitUpdateForm(_HabitFields):
    """Partial update; only fields present in the payload change."""

    name: Optional[str] = Field(default=None, max_length=80)
    description: Optional[str] = Field(default=None, max_length=255)
    category: Optional[str] = None
    color: Optional[str] = Field(default=None, max_length=16)
    icon: Optional[str] = Field(default=None, max_length=16)
    frequency: Optional[HabitFrequency] = None
    frequency_config: Optional[dict[str, Any]] = None
    target_value: Optional[int] = Field(default=None, ge=1, le=10_000)
    unit: Optional[str] = Field(default=None, max_length=32)
    reminder_time: Optional[str] = None
    is_active: Optional[bool] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value:
            raise ValueError("Please provide a habit name.")
        return value

    @model_validator(mode="after")
    def ensure_cadence_days(self) -> "HabitUpdateForm":
        if self.frequency is not None:
            _check_days(self.frequency, self.frequency_config)
        return self

    def check_cadence(self, stored_frequency: Optional[str]) -> None:
        """Validate a config-only update against the habit's current frequency."""

        if self.frequency is not None or "frequency_config" not in self.model_fields_set:
            return
        try:
            frequency = HabitFrequency(stored_frequency or HabitFrequency.DAILY.value)
        except ValueError:
            return
        _check_days(frequency, self.frequency_config)

    def to_fields(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_unset=True)


class HabitLogForm(BaseModel):
    """Payload for logging a habit on one day."""

    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True, extra="ignore")

    occurred_on: Optional[date] = Field(default=None, alias="date")
    completed: bool = True
    value: int = Field(default=1, ge=0)
    notes: Optional[str] = Field(default=None, max_length=500)


__all__ = ["HabitForm", "HabitFrequency", "HabitLogForm", "HabitUpdateForm"]
