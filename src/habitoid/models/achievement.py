"""Badge unlock records; the badge catalog itself lives in code."""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar, Optional

from sqlalchemy import DateTime, UniqueConstraint
from sqlmodel import Field, SQLModel


class UserAchievement(SQLModel, table=True):
    """One-time unlock of a catalog badge by a user."""

    __tablename__: ClassVar[str] = "user_achievement"
    __table_args__ = (UniqueConstraint("user_id", "badge_id", name="uq_user_badge"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    badge_id: str = Field(nullable=False, max_length=32)
    unlocked_at: datetime = Field(
        default_factory=datetime.now, sa_type=DateTime, nullable=False
    )
