"""Service module exports."""

from . import (
    auth,
    export_csv,
    habits,
    insights,
    mood,
    notifications,
    preferences,
    reports,
    social,
    stats,
)

__all__ = [
    "auth",
    "export_csv",
    "habits",
    "insights",
    "mood",
    "notifications",
    "preferences",
    "reports",
    "social",
    "stats",
]
