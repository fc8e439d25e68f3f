"""Daily mood check-ins."""

from __future__ import annotations

from datetime import date
from typing import Optional

from ..context import AppContext
from ..models.mood import MoodLog

MOOD_LABELS = {1: "sad", 2: "neutral", 3: "happy"}


def log_mood(
    ctx: AppContext, *, user_id: int, mood: int, occurred_on: date, notes: Optional[str] = None
) -> MoodLog:
    """Record (or overwrite) the mood for one day."""

    if mood not in MOOD_LABELS:
        raise ValueError("Mood must be 1 (sad), 2 (neutral) or 3 (happy)")
    return ctx.mood_repo.upsert(
        MoodLog(user_id=user_id, occurred_on=occurred_on, mood=mood, notes=notes),
        user_id=user_id,
    )


def mood_for_day(ctx: AppContext, *, user_id: int, day: date) -> Optional[MoodLog]:
    return ctx.mood_repo.get_for_day(day, user_id=user_id)


__all__ = ["MOOD_LABELS", "log_mood", "mood_for_day"]
