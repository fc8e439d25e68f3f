"""Focus (Pomodoro) session records."""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import ClassVar, Optional

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel


class SessionType(str, Enum):
    """Kinds of timer sessions a user can complete."""

    FOCUS = "focus"
    SHORT_BREAK = "short_break"
    LONG_BREAK = "long_break"


class FocusSession(SQLModel, table=True):
    """A finished timer session; immutable once stored."""

    __tablename__: ClassVar[str] = "focus_session"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    habit_id: Optional[int] = Field(default=None, foreign_key="habit.id")
    duration: int = Field(nullable=False)  # minutes
    session_type: str = Field(default=SessionType.FOCUS.value, nullable=False, max_length=16)
    completed: bool = Field(default=False, nullable=False)
    occurred_on: date = Field(nullable=False, index=True)
    created_at: datetime = Field(
        default_factory=datetime.now, sa_type=DateTime, nullable=False
    )
