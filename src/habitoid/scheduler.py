"""Background job that closes each calendar day."""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Callable, Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from .context import AppContext
from .services.stats import close_day_for_all

logger = logging.getLogger("habitoid.scheduler")

DAY_CLOSE_JOB_ID = "day_close"


class DayCloseScheduler:
    """Runs ``close_day_for_all`` for the previous day once a night."""

    def __init__(self, ctx: AppContext, *, today: Callable[[], date] = date.today):
        """Initialize the scheduler with app context.

        Args:
            ctx: Application context with repositories and config
            today: Clock used to decide which day just ended
        """
        self.ctx = ctx
        self.today = today
        self.scheduler: Optional[BackgroundScheduler] = None

    @property
    def running(self) -> bool:
        return self.scheduler is not None

    def start(self) -> None:
        """Start the background scheduler."""
        if self.scheduler is not None:
            logger.warning("Scheduler already running")
            return

        self.scheduler = BackgroundScheduler()
        hour = self.ctx.config.DAY_CLOSE_HOUR
        minute = self.ctx.config.DAY_CLOSE_MINUTE
        self.scheduler.add_job(
            func=self.run_day_close,
            trigger=CronTrigger(hour=hour, minute=minute),
            id=DAY_CLOSE_JOB_ID,
            name="Close previous day",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        self.scheduler.start()
        logger.info("Scheduled day close at %02d:%02d", hour, minute)

    def stop(self) -> None:
        """Stop the background scheduler gracefully."""
        if self.scheduler is not None:
            self.scheduler.shutdown(wait=True)
            self.scheduler = None
            logger.info("Background scheduler stopped")

    def run_day_close(self) -> int:
        """Close yesterday for all users; failures are logged and reported as 0 resets."""
        day = self.today() - timedelta(days=1)
        try:
            return close_day_for_all(self.ctx, day)
        except Exception as exc:
            logger.error("Day close for %s failed: %s", day.isoformat(), exc, exc_info=True)
            return 0


def create_scheduler(ctx: AppContext, *, auto_start: bool = False) -> DayCloseScheduler:
    """Create and optionally start the day-close scheduler."""
    scheduler = DayCloseScheduler(ctx)
    if auto_start:
        scheduler.start()
    return scheduler


__all__ = ["DAY_CLOSE_JOB_ID", "DayCloseScheduler", "create_scheduler"]
