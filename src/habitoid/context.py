"""Application context for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from sqlalchemy.engine import Engine
from sqlmodel import Session

from .config import BaseConfig
from .infra.database import bootstrap_database
from .infra.repositories import (
    SQLModelAchievementRepository,
    SQLModelFocusRepository,
    SQLModelHabitRepository,
    SQLModelInsightRepository,
    SQLModelMoodRepository,
    SQLModelSettingsRepository,
    SQLModelSocialRepository,
    SQLModelUserRepository,
)


@dataclass
class AppContext:
    """Configuration, session factory and repositories shared by services."""

    config: BaseConfig
    engine: Engine
    session_factory: Callable[[], Session]

    user_repo: SQLModelUserRepository
    habit_repo: SQLModelHabitRepository
    focus_repo: SQLModelFocusRepository
    achievement_repo: SQLModelAchievementRepository
    insight_repo: SQLModelInsightRepository
    mood_repo: SQLModelMoodRepository
    social_repo: SQLModelSocialRepository
    settings_repo: SQLModelSettingsRepository

    @property
    def base_points(self) -> int:
        return self.config.BASE_POINTS

    @property
    def symmetric_points(self) -> bool:
        return self.config.SYMMETRIC_POINTS


def create_app_context(config: Optional[BaseConfig] = None) -> AppContext:
    """Create the engine, ensure the schema and wire up repositories."""

    if config is None:
        config = BaseConfig()

    engine, session_factory = bootstrap_database(config)

    return AppContext(
        config=config,
        engine=engine,
        session_factory=session_factory,
        user_repo=SQLModelUserRepository(session_factory),
        habit_repo=SQLModelHabitRepository(session_factory),
        focus_repo=SQLModelFocusRepository(session_factory),
        achievement_repo=SQLModelAchievementRepository(session_factory),
        insight_repo=SQLModelInsightRepository(session_factory),
        mood_repo=SQLModelMoodRepository(session_factory),
        social_repo=SQLModelSocialRepository(session_factory),
        settings_repo=SQLModelSettingsRepository(session_factory),
    )
