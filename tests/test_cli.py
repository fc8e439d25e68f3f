"""Tests for the Flask CLI commands."""

from __future__ import annotations

from habitoid.domain.rewards import UserStats
from habitoid.extensions import EXTENSION_KEY


def test_init_db(app):
    result = app.test_cli_runner().invoke(args=["init-db"])
    assert result.exit_code == 0
    assert "Database ready." in result.output


def test_close_day_for_given_day(app, client):
    client.post("/api/auth/register", json={"username": "sam", "password": "secret123"})
    ctx = app.extensions[EXTENSION_KEY]
    user = ctx.user_repo.get_by_username("sam")
    ctx.user_repo.save_stats(user.id, UserStats(total_points=40, current_streak=4, longest_streak=4))

    runner = app.test_cli_runner()
    result = runner.invoke(args=["close-day", "--day", "2024-03-12"])
    assert result.exit_code == 0
    assert "Closed 2024-03-12: 1 streak(s) reset." in result.output
    assert ctx.user_repo.get_by_id(user.id).current_streak == 0

    repeat = runner.invoke(args=["close-day", "--day", "2024-03-12"])
    assert "0 streak(s) reset." in repeat.output


def test_close_day_rejects_bad_date(app):
    result = app.test_cli_runner().invoke(args=["close-day", "--day", "12/03/2024"])
    assert result.exit_code != 0
