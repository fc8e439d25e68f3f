"""Per-user settings stored in the database."""

from __future__ import annotations

from typing import ClassVar

from sqlalchemy import Column, Text
from sqlmodel import Field, SQLModel


class UserSetting(SQLModel, table=True):
    """Key-value storage for a user's preference records (JSON values)."""

    __tablename__: ClassVar[str] = "user_setting"

    user_id: int = Field(foreign_key="user.id", primary_key=True)
    key: str = Field(primary_key=True, max_length=64)
    value: str = Field(sa_column=Column(Text, nullable=False))
