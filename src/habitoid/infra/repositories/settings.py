"""Per-user key/value settings repository."""

from __future__ import annotations

from typing import Callable, Optional

from sqlmodel import Session, select

from ...models.settings import UserSetting


class SQLModelSettingsRepository:
    """SQLModel-based settings repository."""

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def get(self, key: str, *, user_id: int) -> Optional[str]:
        with self.session_factory() as session:
            setting = session.exec(
                select(UserSetting).where(UserSetting.user_id == user_id, UserSetting.key == key)
            ).first()
            return setting.value if setting else None

    def set(self, key: str, value: str, *, user_id: int) -> None:
        with self.session_factory() as session:
            setting = session.exec(
                select(UserSetting).where(UserSetting.user_id == user_id, UserSetting.key == key)
            ).first()
            if setting:
                setting.value = value
            else:
                setting = UserSetting(user_id=user_id, key=key, value=value)
            session.add(setting)
            session.commit()

    def delete(self, key: str, *, user_id: int) -> None:
        with self.session_factory() as session:
            setting = session.exec(
                select(UserSetting).where(UserSetting.user_id == user_id, UserSetting.key == key)
            ).first()
            if setting:
                session.delete(setting)
                session.commit()


__all__ = ["SQLModelSettingsRepository"]
