"""Concrete repository implementations using SQLModel."""

from .achievement import SQLModelAchievementRepository
from .focus import SQLModelFocusRepository
from .habit import SQLModelHabitRepository
from .insight import SQLModelInsightRepository, SQLModelMoodRepository
from .settings import SQLModelSettingsRepository
from .social import SQLModelSocialRepository
from .user import SQLModelUserRepository

__all__ = [
    "SQLModelAchievementRepository",
    "SQLModelFocusRepository",
    "SQLModelHabitRepository",
    "SQLModelInsightRepository",
    "SQLModelMoodRepository",
    "SQLModelSettingsRepository",
    "SQLModelSocialRepository",
    "SQLModelUserRepository",
]
