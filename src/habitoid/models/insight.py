"""Stored weekly insight text."""

from __future__ import annotations

from datetime import date, datetime
from typing import ClassVar, Optional

from sqlalchemy import Column, DateTime, Text, UniqueConstraint
from sqlmodel import Field, SQLModel


class WeeklyInsight(SQLModel, table=True):
    """Generated (or fallback) coaching text for one user-week."""

    __tablename__: ClassVar[str] = "weekly_insight"
    __table_args__ = (UniqueConstraint("user_id", "week_start", name="uq_insight_week"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    week_start: date = Field(nullable=False)
    insights: str = Field(sa_column=Column(Text, nullable=False))
    recommendations: str = Field(sa_column=Column(Text, nullable=False))
    motivational_tip: str = Field(sa_column=Column(Text, nullable=False))
    source: str = Field(default="fallback", max_length=16)
    created_at: datetime = Field(
        default_factory=datetime.now, sa_type=DateTime, nullable=False
    )
