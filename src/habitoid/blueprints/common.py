"""Request parsing and response shaping shared by the API blueprints."""

from __future__ import annotations

import json
from datetime import date
from typing import Any, Iterable, Optional

from flask import request
from pydantic.alias_generators import to_camel
from sqlmodel import SQLModel

from ..models.habit import Habit
from ..models.user import User

_PRIVATE_FIELDS = {"password_hash"}


def json_body() -> dict[str, Any]:
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


def parse_day(value: Optional[str], *, default: Optional[date] = None) -> date:
    """Parse YYYY-MM-DD; a missing value falls back to ``default`` or today."""

    if not value:
        return default or date.today()
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise ValueError(f"Invalid date: {value!r} (expected YYYY-MM-DD)") from exc


def query_day(name: str = "date") -> date:
    return parse_day(request.args.get(name))


def serialize(model: SQLModel) -> dict[str, Any]:
    """Model fields as camelCase JSON values, private fields dropped."""

    data = model.model_dump(mode="json", exclude=_PRIVATE_FIELDS)
    return {to_camel(key): value for key, value in data.items()}


def serialize_habit(habit: Habit) -> dict[str, Any]:
    data = serialize(habit)
    raw = habit.frequency_config
    try:
        data["frequencyConfig"] = json.loads(raw) if raw else None
    except ValueError:
        data["frequencyConfig"] = None
    return data


def serialize_user(user: User) -> dict[str, Any]:
    data = serialize(user)
    data["displayName"] = user.display_name
    return data


def serialize_all(models: Iterable[SQLModel]) -> list[dict[str, Any]]:
    return [serialize(model) for model in models]


__all__ = [
    "json_body",
    "parse_day",
    "query_day",
    "serialize",
    "serialize_all",
    "serialize_habit",
    "serialize_user",
]
