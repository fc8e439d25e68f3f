"""Notification payload builders.

Delivery is a client concern; the server only decides what should be shown
and whether the user's preferences allow it.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime, time
from typing import Iterable, Optional

from .preferences import NotificationSettings, UserPreferences

STREAK_MILESTONES: tuple[int, ...] = (3, 7, 14, 21, 30, 60, 90, 100, 365)

_MILESTONE_MESSAGES = {
    3: "3 days strong! You're building momentum!",
    7: "One week streak! You're developing a real habit!",
    14: "Two weeks! This is becoming part of who you are!",
    21: "21 days - the magic habit formation number!",
    30: "One month streak! You're unstoppable!",
    60: "60 days! You've mastered consistency!",
    90: "90 days - this is a lifestyle now!",
    100: "LEGENDARY 100-day streak!",
    365: "ONE YEAR STREAK! You're a habit master!",
}

# Streak-at-risk alerts start this late in the evening
STREAK_ALERT_FROM = time(20, 0)


@dataclass(slots=True, frozen=True)
class NotificationPayload:
    kind: str
    title: str
    body: str
    tag: str
    require_interaction: bool = False

    def to_dict(self) -> dict:
        return asdict(self)


def is_streak_milestone(streak: int) -> bool:
    return streak in _MILESTONE_MESSAGES


def habit_reminder(habit_name: str) -> NotificationPayload:
    return NotificationPayload(
        kind="habit_reminder",
        title=f"Time for: {habit_name}",
        body="Don't break your streak! Complete this habit now.",
        tag=f"habit-reminder-{habit_name}",
    )


def streak_at_risk(streak: int) -> NotificationPayload:
    return NotificationPayload(
        kind="streak_alert",
        title="Your streak is at risk!",
        body=f"You have a {streak} day streak. Complete your habits before midnight!",
        tag="streak-alert",
        require_interaction=True,
    )


def streak_milestone(streak: int) -> Optional[NotificationPayload]:
    message = _MILESTONE_MESSAGES.get(streak)
    if message is None:
        return None
    return NotificationPayload(
        kind="streak_milestone",
        title=f"{streak}-Day Streak Milestone!",
        body=message,
        tag="streak-milestone",
    )


def focus_complete(duration: int, habit_name: Optional[str] = None) -> NotificationPayload:
    if habit_name:
        body = f"Great job! {duration} minutes focused on {habit_name}. +{duration} XP earned!"
    else:
        body = f"Great job! {duration} minutes of focused work. +{duration} XP earned!"
    return NotificationPayload(
        kind="focus_complete",
        title="Focus Session Complete!",
        body=body,
        tag="focus-complete",
    )


def daily_reminder(pending: int) -> NotificationPayload:
    noun = "habits" if pending > 1 else "habit"
    return NotificationPayload(
        kind="daily_reminder",
        title="You have habits waiting!",
        body=f"{pending} {noun} to complete today. Let's go!",
        tag="daily-reminder",
    )


def _parse_hhmm(value: Optional[str]) -> Optional[time]:
    if not value:
        return None
    try:
        hours, minutes = value.split(":", 1)
        return time(int(hours), int(minutes))
    except ValueError:
        return None


def pending_notifications(
    prefs: UserPreferences,
    *,
    now: datetime,
    current_streak: int,
    pending_habits: Iterable[tuple[str, Optional[str]]],
    completed_today: int,
) -> list[NotificationPayload]:
    """Notifications due at ``now`` for the user's preferences.

    ``pending_habits`` holds (name, reminder_time) for habits that are due today
    and not yet completed.
    """

    settings: NotificationSettings = prefs.notifications
    if not settings.enabled:
        return []

    pending = list(pending_habits)
    current = now.time().replace(second=0, microsecond=0)
    payloads: list[NotificationPayload] = []

    if settings.daily_reminder and pending:
        reminder_at = _parse_hhmm(settings.daily_reminder_time)
        if reminder_at is not None and current >= reminder_at:
            payloads.append(daily_reminder(len(pending)))

    if settings.habit_reminders:
        for name, reminder_time in pending:
            at = _parse_hhmm(reminder_time)
            if at is not None and current >= at:
                payloads.append(habit_reminder(name))

    if (
        settings.streak_alerts
        and current_streak > 0
        and completed_today == 0
        and current >= STREAK_ALERT_FROM
    ):
        payloads.append(streak_at_risk(current_streak))

    return payloads


__all__ = [
    "NotificationPayload",
    "STREAK_MILESTONES",
    "daily_reminder",
    "focus_complete",
    "habit_reminder",
    "is_streak_milestone",
    "pending_notifications",
    "streak_at_risk",
    "streak_milestone",
]
