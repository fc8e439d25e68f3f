"""Flask CLI commands for Habitoid."""

from __future__ import annotations

from datetime import date, timedelta

import click


def init_app(app) -> None:
    """Register CLI commands on the Flask app."""

    @app.cli.command("init-db")
    def init_db() -> None:
        """Create any missing tables."""

        from .extensions import get_context
        from .infra.database import init_database

        init_database(get_context().engine)
        click.echo("Database ready.")

    @app.cli.command("close-day")
    @click.option(
        "--day",
        type=click.DateTime(formats=["%Y-%m-%d"]),
        default=None,
        help="Day to close (YYYY-MM-DD); defaults to yesterday",
    )
    def close_day(day) -> None:
        """Reset streaks of users who missed the given day."""

        from .extensions import get_context
        from .services.stats import close_day_for_all

        target = day.date() if day is not None else date.today() - timedelta(days=1)
        resets = close_day_for_all(get_context(), target)
        click.echo(f"Closed {target.isoformat()}: {resets} streak(s) reset.")
