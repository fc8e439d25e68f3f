"""SQLModel table exports."""

from .achievement import UserAchievement
from .focus import FocusSession, SessionType
from .habit import Habit, HabitLog
from .insight import WeeklyInsight
from .mood import MoodLog
from .settings import UserSetting
from .social import ActivityLog, Friendship
from .user import User

__all__ = [
    "ActivityLog",
    "FocusSession",
    "Friendship",
    "Habit",
    "HabitLog",
    "MoodLog",
    "SessionType",
    "User",
    "UserAchievement",
    "UserSetting",
    "WeeklyInsight",
]
