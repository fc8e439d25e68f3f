"""Daily mood check-ins."""

from __future__ import annotations

from datetime import date, datetime
from typing import ClassVar, Optional

from sqlalchemy import DateTime, UniqueConstraint
from sqlmodel import Field, SQLModel


class MoodLog(SQLModel, table=True):
    """Mood for a day: 1 = sad, 2 = neutral, 3 = happy."""

    __tablename__: ClassVar[str] = "mood_log"
    __table_args__ = (UniqueConstraint("user_id", "occurred_on", name="uq_mood_day"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    occurred_on: date = Field(nullable=False)
    mood: int = Field(nullable=False)
    notes: Optional[str] = Field(default=None, max_length=500)
    created_at: datetime = Field(
        default_factory=datetime.now, sa_type=DateTime, nullable=False
    )
