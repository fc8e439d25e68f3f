"""Friendships and the social activity feed."""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar, Optional

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel


class Friendship(SQLModel, table=True):
    """Friend request from ``user_id`` to ``friend_id``."""

    __tablename__: ClassVar[str] = "friendship"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    friend_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    status: str = Field(default="pending", nullable=False, max_length=16)  # pending, accepted
    created_at: datetime = Field(
        default_factory=datetime.now, sa_type=DateTime, nullable=False
    )


class ActivityLog(SQLModel, table=True):
    """Feed entry: habit_complete, streak_milestone, badge_unlock, focus_session, level_up."""

    __tablename__: ClassVar[str] = "activity_log"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    action_type: str = Field(nullable=False, max_length=32)
    action_data: Optional[str] = Field(default=None, max_length=1000)  # JSON
    created_at: datetime = Field(
        default_factory=datetime.now, sa_type=DateTime, nullable=False, index=True
    )
