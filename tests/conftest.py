"""Pytest configuration and shared fixtures for Habitoid tests.

Pure rules are tested without a database; repositories, services and the API
use a fresh SQLite file under ``tmp_path`` for each test.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

import pytest

from habitoid import create_app
from habitoid.config import TestConfig
from habitoid.context import create_app_context
from habitoid.models import Habit, HabitLog, User

# Fixed "today" used by scenario-style tests (a Wednesday)
TODAY = date(2024, 3, 13)
LONG_AGO = datetime(2020, 1, 1, 12, 0)


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture
def config(tmp_path) -> TestConfig:
    """Test configuration pointing at a temporary data directory."""

    return TestConfig(data_dir=tmp_path)


@pytest.fixture
def ctx(config):
    """Application context bound to an isolated SQLite database."""

    context = create_app_context(config)
    yield context
    context.engine.dispose()


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def user_factory(ctx):
    """Factory for persisted users (password hash is a placeholder)."""

    counter = {"n": 0}

    def _create_user(
        username: Optional[str] = None,
        *,
        total_points: int = 0,
        current_streak: int = 0,
        longest_streak: int = 0,
        last_active_on: Optional[date] = None,
        first_name: Optional[str] = None,
    ) -> User:
        counter["n"] += 1
        user = User(
            username=username or f"user{counter['n']}",
            password_hash="dummy-hash",
            first_name=first_name,
            total_points=total_points,
            current_streak=current_streak,
            longest_streak=max(longest_streak, current_streak),
            last_active_on=last_active_on,
        )
        return ctx.user_repo.create(user)

    return _create_user


@pytest.fixture
def user(user_factory) -> User:
    return user_factory("tester")


@pytest.fixture
def habit_factory(ctx, user):
    """Factory for persisted habits, created long ago so every test day counts."""

    def _create_habit(
        name: str = "Test Habit",
        *,
        frequency: str = "daily",
        frequency_config: Optional[str] = None,
        category: str = "health",
        is_active: bool = True,
        created_at: datetime = LONG_AGO,
        owner: Optional[User] = None,
    ) -> Habit:
        owner = owner or user
        habit = Habit(
            user_id=owner.id,
            name=name,
            frequency=frequency,
            frequency_config=frequency_config,
            category=category,
            is_active=is_active,
            created_at=created_at,
        )
        return ctx.habit_repo.create(habit, user_id=owner.id)

    return _create_habit


@pytest.fixture
def log_factory(ctx, user):
    """Factory for raw habit logs that bypass the reward rules."""

    def _create_log(
        habit: Habit,
        occurred_on: date,
        *,
        completed: bool = True,
        notes: Optional[str] = None,
        created_at: Optional[datetime] = None,
    ) -> HabitLog:
        log = HabitLog(
            habit_id=habit.id,
            user_id=habit.user_id,
            occurred_on=occurred_on,
            completed=completed,
            notes=notes,
            created_at=created_at or datetime.combine(occurred_on, datetime.min.time()).replace(hour=12),
        )
        return ctx.habit_repo.upsert_log(log, user_id=habit.user_id)

    return _create_log


# =============================================================================
# Flask Fixtures
# =============================================================================


@pytest.fixture
def app(config):
    flask_app = create_app(config)
    flask_app.config.update(TESTING=True)
    yield flask_app
    flask_app.extensions["habitoid"].engine.dispose()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_client(client):
    """Test client logged in as a freshly registered user."""

    response = client.post(
        "/api/auth/register",
        json={"username": "alice", "password": "secret123", "firstName": "Alice"},
    )
    assert response.status_code == 201
    return client
