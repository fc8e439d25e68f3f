"""SQLModel storage for weekly insights and mood check-ins."""

from __future__ import annotations

from datetime import date, datetime
from typing import Callable, Optional

from sqlmodel import Session, select

from ...models.insight import WeeklyInsight
from ...models.mood import MoodLog


class SQLModelInsightRepository:
    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def get(self, week_start: date, *, user_id: int) -> Optional[WeeklyInsight]:
        with self.session_factory() as session:
            obj = session.exec(
                select(WeeklyInsight)
                .where(WeeklyInsight.user_id == user_id)
                .where(WeeklyInsight.week_start == week_start)
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def upsert(self, insight: WeeklyInsight, *, user_id: int) -> WeeklyInsight:
        """Store the insight for its week, replacing any earlier text."""
        with self.session_factory() as session:
            existing = session.exec(
                select(WeeklyInsight)
                .where(WeeklyInsight.user_id == user_id)
                .where(WeeklyInsight.week_start == insight.week_start)
            ).first()
            if existing:
                existing.insights = insight.insights
                existing.recommendations = insight.recommendations
                existing.motivational_tip = insight.motivational_tip
                existing.source = insight.source
                existing.created_at = datetime.now()
                target = existing
            else:
                insight.user_id = user_id
                target = insight
            session.add(target)
            session.commit()
            session.refresh(target)
            session.expunge(target)
            return target


class SQLModelMoodRepository:
    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def get_for_day(self, occurred_on: date, *, user_id: int) -> Optional[MoodLog]:
        with self.session_factory() as session:
            obj = session.exec(
                select(MoodLog)
                .where(MoodLog.user_id == user_id)
                .where(MoodLog.occurred_on == occurred_on)
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def upsert(self, mood: MoodLog, *, user_id: int) -> MoodLog:
        with self.session_factory() as session:
            existing = session.exec(
                select(MoodLog)
                .where(MoodLog.user_id == user_id)
                .where(MoodLog.occurred_on == mood.occurred_on)
            ).first()
            if existing:
                existing.mood = mood.mood
                existing.notes = mood.notes
                target = existing
            else:
                mood.user_id = user_id
                target = mood
            session.add(target)
            session.commit()
            session.refresh(target)
            session.expunge(target)
            return target


__all__ = ["SQLModelInsightRepository", "SQLModelMoodRepository"]
