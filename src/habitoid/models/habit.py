"""Habit tracking data structures."""

from __future__ import annotations

from datetime import date, datetime
from typing import ClassVar, Optional

from sqlalchemy import DateTime, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel


def _now() -> datetime:
    """Naive local time; every timestamp column is stored without tzinfo."""
    return datetime.now()


class Habit(SQLModel, table=True):
    """A user-defined habit with a cadence policy."""

    __tablename__: ClassVar[str] = "habit"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    name: str = Field(nullable=False, max_length=80, index=True)
    description: Optional[str] = Field(default=None, max_length=255)
    category: str = Field(default="other", nullable=False, max_length=32)
    color: str = Field(default="#50A65C", max_length=16)
    icon: str = Field(default="📌", max_length=16)
    # daily, weekdays, weekends, weekly, 3x_week, custom
    frequency: str = Field(default="daily", nullable=False, max_length=32)
    # JSON: {"days": [0..6]} or {"dayOfWeek": 0..6}
    frequency_config: Optional[str] = Field(default=None, max_length=255)
    target_value: int = Field(default=1, nullable=False)
    unit: str = Field(default="times", max_length=32)
    reminder_time: Optional[str] = Field(default=None, max_length=5)
    is_active: bool = Field(default=True, nullable=False, index=True)
    created_at: datetime = Field(default_factory=_now, sa_type=DateTime, nullable=False)
    updated_at: datetime = Field(default_factory=_now, sa_type=DateTime, nullable=False)

    logs = Relationship(
        sa_relationship=relationship("HabitLog", cascade="all, delete-orphan"),
    )


class HabitLog(SQLModel, table=True):
    """Completion record for a habit on one calendar day."""

    __tablename__: ClassVar[str] = "habit_log"
    __table_args__ = (UniqueConstraint("habit_id", "occurred_on", name="uq_habit_log_day"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    habit_id: int = Field(foreign_key="habit.id", nullable=False, index=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    occurred_on: date = Field(nullable=False, index=True)
    completed: bool = Field(default=False, nullable=False)
    value: int = Field(default=1, nullable=False)
    notes: Optional[str] = Field(default=None, max_length=500)
    xp_earned: int = Field(default=0, nullable=False)
    created_at: datetime = Field(default_factory=_now, sa_type=DateTime, nullable=False)
