"""SQLModel implementation of friendships and the activity feed."""

from __future__ import annotations

import json
from typing import Any, Callable, Iterable, Optional

from sqlmodel import Session, or_, select

from ...models.social import ActivityLog, Friendship


class SQLModelSocialRepository:
    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    # Friendships
    def find_between(self, user_id: int, other_id: int) -> Optional[Friendship]:
        """Any friendship row linking the two users, in either direction."""
        with self.session_factory() as session:
            obj = session.exec(
                select(Friendship).where(
                    or_(
                        (Friendship.user_id == user_id) & (Friendship.friend_id == other_id),
                        (Friendship.user_id == other_id) & (Friendship.friend_id == user_id),
                    )
                )
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def get(self, friendship_id: int) -> Optional[Friendship]:
        with self.session_factory() as session:
            obj = session.get(Friendship, friendship_id)
            if obj:
                session.expunge(obj)
            return obj

    def create(self, user_id: int, friend_id: int) -> Friendship:
        with self.session_factory() as session:
            friendship = Friendship(user_id=user_id, friend_id=friend_id, status="pending")
            session.add(friendship)
            session.commit()
            session.refresh(friendship)
            session.expunge(friendship)
            return friendship

    def set_status(self, friendship_id: int, status: str) -> Optional[Friendship]:
        with self.session_factory() as session:
            friendship = session.get(Friendship, friendship_id)
            if friendship is None:
                return None
            friendship.status = status
            session.add(friendship)
            session.commit()
            session.refresh(friendship)
            session.expunge(friendship)
            return friendship

    def delete(self, friendship_id: int) -> None:
        with self.session_factory() as session:
            friendship = session.get(Friendship, friendship_id)
            if friendship:
                session.delete(friendship)
                session.commit()

    def list_for_user(self, user_id: int, *, status: Optional[str] = None) -> list[Friendship]:
        with self.session_factory() as session:
            statement = select(Friendship).where(
                or_(Friendship.user_id == user_id, Friendship.friend_id == user_id)
            )
            if status is not None:
                statement = statement.where(Friendship.status == status)
            rows = list(session.exec(statement.order_by(Friendship.created_at)).all())  # type: ignore
            session.expunge_all()
            return rows

    def pending_for(self, user_id: int) -> list[Friendship]:
        """Requests waiting on ``user_id`` to answer."""
        with self.session_factory() as session:
            rows = list(
                session.exec(
                    select(Friendship)
                    .where(Friendship.friend_id == user_id)
                    .where(Friendship.status == "pending")
                    .order_by(Friendship.created_at)  # type: ignore
                ).all()
            )
            session.expunge_all()
            return rows

    # Activity feed
    def log_activity(
        self, user_id: int, action_type: str, data: dict[str, Any] | None = None
    ) -> ActivityLog:
        with self.session_factory() as session:
            entry = ActivityLog(
                user_id=user_id,
                action_type=action_type,
                action_data=json.dumps(data) if data is not None else None,
            )
            session.add(entry)
            session.commit()
            session.refresh(entry)
            session.expunge(entry)
            return entry

    def feed(self, user_ids: Iterable[int], *, limit: int = 20) -> list[ActivityLog]:
        ids = list(user_ids)
        if not ids:
            return []
        with self.session_factory() as session:
            rows = list(
                session.exec(
                    select(ActivityLog)
                    .where(ActivityLog.user_id.in_(ids))  # type: ignore
                    .order_by(ActivityLog.created_at.desc(), ActivityLog.id.desc())  # type: ignore
                    .limit(limit)
                ).all()
            )
            session.expunge_all()
            return rows


__all__ = ["SQLModelSocialRepository"]
