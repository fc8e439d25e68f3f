"""SQLModel implementation of the habit repository."""

from __future__ import annotations

from datetime import date, datetime
from typing import Callable, Optional

from sqlalchemy import func
from sqlmodel import Session, select

from ...domain.rewards import streaks_from_days
from ...models.habit import Habit, HabitLog


class SQLModelHabitRepository:
    """Habits and their daily completion logs, always scoped by ``user_id``."""

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def get_by_id(self, habit_id: int, *, user_id: int) -> Optional[Habit]:
        with self.session_factory() as session:
            obj = session.exec(
                select(Habit).where(Habit.id == habit_id, Habit.user_id == user_id)
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def list_all(self, *, user_id: int, include_inactive: bool = False) -> list[Habit]:
        with self.session_factory() as session:
            statement = (
                select(Habit).where(Habit.user_id == user_id).order_by(Habit.created_at, Habit.id)  # type: ignore
            )
            if not include_inactive:
                statement = statement.where(Habit.is_active == True)  # noqa: E712

            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def list_active(self, *, user_id: int) -> list[Habit]:
        return self.list_all(user_id=user_id, include_inactive=False)

    def count_active(self, *, user_id: int) -> int:
        with self.session_factory() as session:
            return session.exec(
                select(func.count())
                .select_from(Habit)
                .where(Habit.user_id == user_id, Habit.is_active == True)  # noqa: E712
            ).one()

    def create(self, habit: Habit, *, user_id: int) -> Habit:
        with self.session_factory() as session:
            habit.user_id = user_id
            session.add(habit)
            session.commit()
            session.refresh(habit)
            session.expunge(habit)
            return habit

    def update(self, habit: Habit, *, user_id: int) -> Habit:
        with self.session_factory() as session:
            habit.user_id = user_id
            habit.updated_at = datetime.now()
            merged = session.merge(habit)
            session.commit()
            session.refresh(merged)
            session.expunge(merged)
            return merged

    def deactivate(self, habit_id: int, *, user_id: int) -> bool:
        """Soft delete: flip ``is_active`` off. Returns False when not found."""
        with self.session_factory() as session:
            habit = session.exec(
                select(Habit).where(Habit.id == habit_id, Habit.user_id == user_id)
            ).first()
            if habit is None:
                return False
            habit.is_active = False
            habit.updated_at = datetime.now()
            session.add(habit)
            session.commit()
            return True

    # Completion log operations
    def get_log(self, habit_id: int, occurred_on: date, *, user_id: int) -> Optional[HabitLog]:
        with self.session_factory() as session:
            obj = session.exec(
                select(HabitLog)
                .where(HabitLog.user_id == user_id)
                .where(HabitLog.habit_id == habit_id)
                .where(HabitLog.occurred_on == occurred_on)
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def upsert_log(self, log: HabitLog, *, user_id: int) -> HabitLog:
        """Insert or overwrite the log for (habit, day)."""
        with self.session_factory() as session:
            log.user_id = user_id
            existing = session.exec(
                select(HabitLog)
                .where(HabitLog.user_id == user_id)
                .where(HabitLog.habit_id == log.habit_id)
                .where(HabitLog.occurred_on == log.occurred_on)
            ).first()

            if existing:
                existing.completed = log.completed
                existing.value = log.value
                existing.notes = log.notes
                existing.xp_earned = log.xp_earned
                target = existing
            else:
                target = log
            session.add(target)
            session.commit()
            session.refresh(target)
            session.expunge(target)
            return target

    def set_log_reward(self, log_id: int, xp_earned: int, *, user_id: int) -> None:
        with self.session_factory() as session:
            log = session.exec(
                select(HabitLog).where(HabitLog.id == log_id, HabitLog.user_id == user_id)
            ).first()
            if log:
                log.xp_earned = xp_earned
                session.add(log)
                session.commit()

    def logs_between(
        self,
        start_date: date,
        end_date: date,
        *,
        user_id: int,
        habit_id: Optional[int] = None,
    ) -> list[HabitLog]:
        with self.session_factory() as session:
            statement = (
                select(HabitLog)
                .where(HabitLog.user_id == user_id)
                .where(HabitLog.occurred_on >= start_date)
                .where(HabitLog.occurred_on <= end_date)
                .order_by(HabitLog.occurred_on, HabitLog.id)  # type: ignore
            )
            if habit_id is not None:
                statement = statement.where(HabitLog.habit_id == habit_id)
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def logs_for_day(self, occurred_on: date, *, user_id: int) -> list[HabitLog]:
        return self.logs_between(occurred_on, occurred_on, user_id=user_id)

    def all_logs(self, *, user_id: int, habit_id: Optional[int] = None) -> list[HabitLog]:
        with self.session_factory() as session:
            statement = (
                select(HabitLog)
                .where(HabitLog.user_id == user_id)
                .order_by(HabitLog.occurred_on.desc(), HabitLog.id)  # type: ignore
            )
            if habit_id is not None:
                statement = statement.where(HabitLog.habit_id == habit_id)
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def count_completed(self, *, user_id: int) -> int:
        with self.session_factory() as session:
            return session.exec(
                select(func.count())
                .select_from(HabitLog)
                .where(HabitLog.user_id == user_id, HabitLog.completed == True)  # noqa: E712
            ).one()

    def has_completion_on(self, occurred_on: date, *, user_id: int) -> bool:
        with self.session_factory() as session:
            found = session.exec(
                select(HabitLog.id)
                .where(HabitLog.user_id == user_id)
                .where(HabitLog.occurred_on == occurred_on)
                .where(HabitLog.completed == True)  # noqa: E712
            ).first()
            return found is not None

    def habit_streaks(self, habit_id: int, *, user_id: int, today: date) -> tuple[int, int]:
        """Return (current, longest) completion streak for one habit."""
        with self.session_factory() as session:
            days = session.exec(
                select(HabitLog.occurred_on)
                .where(HabitLog.user_id == user_id)
                .where(HabitLog.habit_id == habit_id)
                .where(HabitLog.completed == True)  # noqa: E712
            ).all()
        return streaks_from_days(days, today)


__all__ = ["SQLModelHabitRepository"]
