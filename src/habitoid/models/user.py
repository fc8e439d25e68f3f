"""User model with credentials and gamification counters."""

from __future__ import annotations

from datetime import date, datetime
from typing import ClassVar, Optional

from sqlalchemy import DateTime
from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel


def _now() -> datetime:
    """Naive local time; every timestamp column is stored without tzinfo."""
    return datetime.now()


class User(SQLModel, table=True):
    """Application user; owns every habit, log, session and unlock record."""

    __tablename__: ClassVar[str] = "user"

    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(nullable=False, unique=True, index=True, max_length=64)
    password_hash: str = Field(nullable=False, max_length=255)
    email: Optional[str] = Field(default=None, unique=True, max_length=255)
    first_name: Optional[str] = Field(default=None, max_length=80)
    last_name: Optional[str] = Field(default=None, max_length=80)

    level: int = Field(default=1, nullable=False)
    total_points: int = Field(default=0, nullable=False, index=True)
    current_streak: int = Field(default=0, nullable=False)
    longest_streak: int = Field(default=0, nullable=False)
    last_active_on: Optional[date] = Field(default=None)

    created_at: datetime = Field(default_factory=_now, sa_type=DateTime, nullable=False)
    updated_at: datetime = Field(default_factory=_now, sa_type=DateTime, nullable=False)

    habits = Relationship(
        sa_relationship=relationship("Habit", cascade="all, delete-orphan"),
    )
    habit_logs = Relationship(
        sa_relationship=relationship("HabitLog", cascade="all, delete-orphan"),
    )
    focus_sessions = Relationship(
        sa_relationship=relationship("FocusSession", cascade="all, delete-orphan"),
    )
    achievements = Relationship(
        sa_relationship=relationship("UserAchievement", cascade="all, delete-orphan"),
    )
    insights = Relationship(
        sa_relationship=relationship("WeeklyInsight", cascade="all, delete-orphan"),
    )
    moods = Relationship(
        sa_relationship=relationship("MoodLog", cascade="all, delete-orphan"),
    )
    activities = Relationship(
        sa_relationship=relationship("ActivityLog", cascade="all, delete-orphan"),
    )
    settings = Relationship(
        sa_relationship=relationship("UserSetting", cascade="all, delete-orphan"),
    )
    sent_friendships = Relationship(
        sa_relationship=relationship(
            "Friendship",
            foreign_keys="[Friendship.user_id]",
            cascade="all, delete-orphan",
        ),
    )
    received_friendships = Relationship(
        sa_relationship=relationship(
            "Friendship",
            foreign_keys="[Friendship.friend_id]",
            cascade="all, delete-orphan",
        ),
    )

    @property
    def display_name(self) -> str:
        if self.first_name:
            return f"{self.first_name} {self.last_name or ''}".strip()
        return self.username
