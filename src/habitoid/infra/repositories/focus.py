"""SQLModel implementation of the focus-session repository."""

from __future__ import annotations

from datetime import date
from typing import Callable

from sqlalchemy import func
from sqlmodel import Session, select

from ...models.focus import FocusSession, SessionType


class SQLModelFocusRepository:
    """Append-only store of finished timer sessions."""

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def create(self, focus_session: FocusSession, *, user_id: int) -> FocusSession:
        with self.session_factory() as session:
            focus_session.user_id = user_id
            session.add(focus_session)
            session.commit()
            session.refresh(focus_session)
            session.expunge(focus_session)
            return focus_session

    def list_between(self, start_date: date, end_date: date, *, user_id: int) -> list[FocusSession]:
        with self.session_factory() as session:
            rows = list(
                session.exec(
                    select(FocusSession)
                    .where(FocusSession.user_id == user_id)
                    .where(FocusSession.occurred_on >= start_date)
                    .where(FocusSession.occurred_on <= end_date)
                    .order_by(FocusSession.created_at)  # type: ignore
                ).all()
            )
            session.expunge_all()
            return rows

    def list_for_day(self, occurred_on: date, *, user_id: int) -> list[FocusSession]:
        return self.list_between(occurred_on, occurred_on, user_id=user_id)

    def total_focus_minutes(self, *, user_id: int) -> int:
        """Lifetime minutes across completed focus (not break) sessions."""
        with self.session_factory() as session:
            total = session.exec(
                select(func.coalesce(func.sum(FocusSession.duration), 0))
                .where(FocusSession.user_id == user_id)
                .where(FocusSession.session_type == SessionType.FOCUS.value)
                .where(FocusSession.completed == True)  # noqa: E712
            ).one()
            return int(total or 0)


__all__ = ["SQLModelFocusRepository"]
