"""SQLModel implementation of badge unlock storage."""

from __future__ import annotations

from typing import Callable, Optional

from sqlmodel import Session, select

from ...models.achievement import UserAchievement


class SQLModelAchievementRepository:
    """Unlock records; created once per (user, badge) and never removed."""

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def list_for_user(self, *, user_id: int) -> list[UserAchievement]:
        with self.session_factory() as session:
            rows = list(
                session.exec(
                    select(UserAchievement)
                    .where(UserAchievement.user_id == user_id)
                    .order_by(UserAchievement.unlocked_at)  # type: ignore
                ).all()
            )
            session.expunge_all()
            return rows

    def unlocked_ids(self, *, user_id: int) -> set[str]:
        return {row.badge_id for row in self.list_for_user(user_id=user_id)}

    def unlock(self, badge_id: str, *, user_id: int) -> Optional[UserAchievement]:
        """Record the unlock; returns None if the badge was already unlocked."""
        with self.session_factory() as session:
            existing = session.exec(
                select(UserAchievement)
                .where(UserAchievement.user_id == user_id)
                .where(UserAchievement.badge_id == badge_id)
            ).first()
            if existing:
                return None
            record = UserAchievement(user_id=user_id, badge_id=badge_id)
            session.add(record)
            session.commit()
            session.refresh(record)
            session.expunge(record)
            return record


__all__ = ["SQLModelAchievementRepository"]
