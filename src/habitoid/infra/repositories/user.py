"""SQLModel implementation of the user repository."""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional

from sqlmodel import Session, select

from ...domain.rewards import UserStats, level_for_points
from ...errors import NotFoundError
from ...models.user import User


class SQLModelUserRepository:
    """Accounts and their gamification counters."""

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with self.session_factory() as session:
            obj = session.get(User, user_id)
            if obj:
                session.expunge(obj)
            return obj

    def get_by_username(self, username: str) -> Optional[User]:
        with self.session_factory() as session:
            obj = session.exec(select(User).where(User.username == username)).first()
            if obj:
                session.expunge(obj)
            return obj

    def create(self, user: User) -> User:
        with self.session_factory() as session:
            session.add(user)
            session.commit()
            session.refresh(user)
            session.expunge(user)
            return user

    def delete(self, user_id: int) -> None:
        """Remove the account; dependent rows go with it through ORM cascades."""
        with self.session_factory() as session:
            user = session.get(User, user_id)
            if user:
                session.delete(user)
                session.commit()

    def list_ids(self) -> list[int]:
        with self.session_factory() as session:
            return [uid for uid in session.exec(select(User.id).order_by(User.id)).all()]  # type: ignore

    def save_stats(self, user_id: int, stats: UserStats) -> User:
        """Persist counters and the level derived from the point total."""
        with self.session_factory() as session:
            user = session.get(User, user_id)
            if user is None:
                raise NotFoundError(f"User {user_id} not found")
            user.total_points = stats.total_points
            user.current_streak = stats.current_streak
            user.longest_streak = stats.longest_streak
            user.last_active_on = stats.last_active_on
            user.level = level_for_points(stats.total_points)
            user.updated_at = datetime.now()
            session.add(user)
            session.commit()
            session.refresh(user)
            session.expunge(user)
            return user

    def leaderboard(self, *, limit: int = 50) -> list[User]:
        with self.session_factory() as session:
            rows = list(
                session.exec(
                    select(User)
                    .order_by(User.total_points.desc(), User.current_streak.desc(), User.id)  # type: ignore
                    .limit(limit)
                ).all()
            )
            session.expunge_all()
            return rows


def stats_of(user: User) -> UserStats:
    return UserStats(
        total_points=user.total_points,
        current_streak=user.current_streak,
        longest_streak=user.longest_streak,
        last_active_on=user.last_active_on,
    )


__all__ = ["SQLModelUserRepository", "stats_of"]
