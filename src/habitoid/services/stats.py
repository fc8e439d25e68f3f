"""Orchestrates the rules engine over persisted data.

Completion logging, focus rewards, badge unlocking, day closing and the
dashboard/analytics read models all live here.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timedelta
from typing import Any, Optional

from ..context import AppContext
from ..domain import challenges, ledger, progress, rewards
from ..domain.cadence import habit_is_due
from ..errors import NotFoundError
from ..infra.repositories.user import stats_of
from ..models.focus import FocusSession, SessionType
from ..models.habit import Habit, HabitLog
from ..models.user import User
from .habits import get_habit, habits_for_day
from .notifications import is_streak_milestone

logger = logging.getLogger("habitoid.stats")

SPECIAL_COUNTERS_KEY = "special_counters"
LAST_CLOSED_KEY = "last_closed_day"
PERFECT_WEEK_WINDOW = 14


@dataclass(slots=True)
class CompletionResult:
    log: HabitLog
    user: User
    xp_earned: int
    multiplier: float
    leveled_up: bool = False
    streak_milestone: Optional[int] = None
    unlocked: list[progress.Badge] = field(default_factory=list)


@dataclass(slots=True)
class FocusResult:
    session: FocusSession
    user: User
    xp_earned: int
    unlocked: list[progress.Badge] = field(default_factory=list)


def local_time(moment: datetime) -> datetime:
    """Naive local wall-clock time, the form every timestamp column stores."""

    if moment.tzinfo is not None:
        return moment.astimezone().replace(tzinfo=None)
    return moment


def _require_user(ctx: AppContext, user_id: int) -> User:
    user = ctx.user_repo.get_by_id(user_id)
    if user is None:
        raise NotFoundError(f"User {user_id} not found")
    return user


# Special badge counters
def special_counters(ctx: AppContext, *, user_id: int) -> dict[str, int]:
    raw = ctx.settings_repo.get(SPECIAL_COUNTERS_KEY, user_id=user_id)
    if not raw:
        return {}
    try:
        data = json.loads(raw)
    except ValueError:
        logger.warning("Resetting unreadable special counters", extra={"user_id": user_id})
        return {}
    if not isinstance(data, dict):
        return {}
    return {str(key): int(value) for key, value in data.items() if isinstance(value, int)}


def bump_special_counter(ctx: AppContext, *, user_id: int, key: str, amount: int = 1) -> int:
    counters = special_counters(ctx, user_id=user_id)
    counters[key] = counters.get(key, 0) + amount
    ctx.settings_repo.set(SPECIAL_COUNTERS_KEY, json.dumps(counters), user_id=user_id)
    return counters[key]


def _due_and_done(
    habits: list[Habit], logs: list[HabitLog], start: date, end: date
) -> tuple[dict[date, set[int]], dict[date, set[int]]]:
    """Per-day sets of due habit ids and completed habit ids within [start, end]."""

    due: dict[date, set[int]] = {}
    done: dict[date, set[int]] = {}
    day = start
    while day <= end:
        due[day] = {
            habit.id
            for habit in habits
            if habit.id is not None
            and habit.created_at.date() <= day
            and habit_is_due(habit, day)
        }
        day += timedelta(days=1)
    for log in logs:
        if log.completed:
            done.setdefault(log.occurred_on, set()).add(log.habit_id)
    return due, done


def perfect_week_run(ctx: AppContext, *, user_id: int, today: date) -> int:
    start = today - timedelta(days=PERFECT_WEEK_WINDOW - 1)
    habits = ctx.habit_repo.list_active(user_id=user_id)
    logs = ctx.habit_repo.logs_between(start, today, user_id=user_id)
    due, done = _due_and_done(habits, logs, start, today)
    return progress.perfect_day_run(due, done, today)


def progress_counters(
    ctx: AppContext, *, user_id: int, today: Optional[date] = None
) -> progress.ProgressCounters:
    today = today or date.today()
    user = _require_user(ctx, user_id)
    special = dict(special_counters(ctx, user_id=user_id))
    special["perfect_week"] = perfect_week_run(ctx, user_id=user_id, today=today)
    return progress.ProgressCounters(
        current_streak=rewards.effective_streak(stats_of(user), today),
        active_habits=ctx.habit_repo.count_active(user_id=user_id),
        completions=ctx.habit_repo.count_completed(user_id=user_id),
        focus_minutes=ctx.focus_repo.total_focus_minutes(user_id=user_id),
        total_points=user.total_points,
        special=special,
    )


def evaluate_badges(
    ctx: AppContext, *, user_id: int, today: Optional[date] = None
) -> list[progress.Badge]:
    """Unlock every badge that reached its requirement and grant its points.

    Granted points can complete a points badge, so evaluation repeats until no
    new badge unlocks.
    """

    unlocked: list[progress.Badge] = []
    while True:
        counters = progress_counters(ctx, user_id=user_id, today=today)
        already = ctx.achievement_repo.unlocked_ids(user_id=user_id)
        fresh = progress.newly_unlocked(counters, already)
        granted = 0
        for badge in fresh:
            if ctx.achievement_repo.unlock(badge.id, user_id=user_id) is None:
                continue
            granted += 1
            user = _require_user(ctx, user_id)
            stats = stats_of(user)
            ctx.user_repo.save_stats(
                user_id, replace(stats, total_points=stats.total_points + badge.points)
            )
            ctx.social_repo.log_activity(
                user_id,
                "badge_unlock",
                {"badgeId": badge.id, "badgeName": badge.name, "points": badge.points},
            )
            logger.info("Badge unlocked", extra={"user_id": user_id, "badge_id": badge.id})
            unlocked.append(badge)
        if not granted:
            return unlocked


def log_completion(
    ctx: AppContext,
    *,
    user_id: int,
    habit_id: int,
    occurred_on: date,
    completed: bool,
    value: int = 1,
    notes: Optional[str] = None,
    logged_at: Optional[datetime] = None,
    today: Optional[date] = None,
) -> CompletionResult:
    """Upsert the day's log for a habit and fold it into the user's stats.

    Only the first transition to completed earns points; re-saving or
    re-completing a day keeps the earlier reward. Un-completing deducts the
    reward only when symmetric points are enabled. Days after ``today`` are
    rejected.
    """

    today = today or date.today()
    if occurred_on > today:
        raise ValueError("Cannot log a habit for a future date")
    habit = get_habit(ctx, user_id=user_id, habit_id=habit_id)
    logged_at = local_time(logged_at or datetime.now())
    previous = ctx.habit_repo.get_log(habit_id, occurred_on, user_id=user_id)
    was_completed = bool(previous and previous.completed)

    log = HabitLog(
        habit_id=habit_id,
        user_id=user_id,
        occurred_on=occurred_on,
        completed=completed,
        value=value,
        notes=notes,
        xp_earned=previous.xp_earned if previous else 0,
        created_at=logged_at,
    )
    log = ctx.habit_repo.upsert_log(log, user_id=user_id)
    user = _require_user(ctx, user_id)

    already_rewarded = bool(previous and previous.xp_earned)
    if completed and not was_completed and not already_rewarded:
        outcome = rewards.apply_completion(
            stats_of(user), True, on=occurred_on, base_points=ctx.base_points
        )
        user = ctx.user_repo.save_stats(user_id, outcome.stats)
        ctx.habit_repo.set_log_reward(log.id, outcome.xp_earned, user_id=user_id)
        log.xp_earned = outcome.xp_earned

        ctx.social_repo.log_activity(
            user_id,
            "habit_complete",
            {"habitId": habit_id, "habitName": habit.name, "xpEarned": outcome.xp_earned},
        )
        milestone = None
        if outcome.leveled_up:
            ctx.social_repo.log_activity(user_id, "level_up", {"level": outcome.level_after})
        if outcome.streak_extended and is_streak_milestone(outcome.stats.current_streak):
            milestone = outcome.stats.current_streak
            ctx.social_repo.log_activity(user_id, "streak_milestone", {"streak": milestone})

        if progress.is_early_completion(logged_at):
            bump_special_counter(ctx, user_id=user_id, key="early_bird")
        if progress.is_late_completion(logged_at):
            bump_special_counter(ctx, user_id=user_id, key="night_owl")

        unlocked = evaluate_badges(ctx, user_id=user_id, today=occurred_on)
        if unlocked:
            user = _require_user(ctx, user_id)
        logger.info(
            "Completion logged",
            extra={
                "user_id": user_id,
                "habit_id": habit_id,
                "xp_earned": outcome.xp_earned,
                "streak": outcome.stats.current_streak,
            },
        )
        return CompletionResult(
            log=log,
            user=user,
            xp_earned=outcome.xp_earned,
            multiplier=outcome.multiplier,
            leveled_up=outcome.leveled_up,
            streak_milestone=milestone,
            unlocked=unlocked,
        )

    if not completed and was_completed and ctx.symmetric_points:
        reward = previous.xp_earned if previous else 0
        user = ctx.user_repo.save_stats(user_id, rewards.revert_completion(stats_of(user), reward))
        ctx.habit_repo.set_log_reward(log.id, 0, user_id=user_id)
        log.xp_earned = 0
        logger.info(
            "Completion reverted", extra={"user_id": user_id, "habit_id": habit_id, "xp": reward}
        )
        return CompletionResult(log=log, user=user, xp_earned=-reward, multiplier=1.0)

    return CompletionResult(log=log, user=user, xp_earned=0, multiplier=1.0)


def record_focus_session(
    ctx: AppContext,
    *,
    user_id: int,
    duration: int,
    session_type: str = SessionType.FOCUS.value,
    completed: bool = True,
    occurred_on: Optional[date] = None,
    habit_id: Optional[int] = None,
) -> FocusResult:
    """Store a finished timer session and award its points."""

    if habit_id is not None:
        get_habit(ctx, user_id=user_id, habit_id=habit_id)
    session_type = SessionType(session_type).value
    occurred_on = occurred_on or date.today()

    stored = ctx.focus_repo.create(
        FocusSession(
            user_id=user_id,
            habit_id=habit_id,
            duration=duration,
            session_type=session_type,
            completed=completed,
            occurred_on=occurred_on,
        ),
        user_id=user_id,
    )
    points = rewards.focus_reward(duration, session_type, completed)
    user = _require_user(ctx, user_id)
    if points:
        stats = stats_of(user)
        level_before = stats.level
        user = ctx.user_repo.save_stats(
            user_id, replace(stats, total_points=stats.total_points + points)
        )
        if user.level > level_before:
            ctx.social_repo.log_activity(user_id, "level_up", {"level": user.level})
    if completed and session_type == SessionType.FOCUS.value:
        ctx.social_repo.log_activity(
            user_id, "focus_session", {"duration": duration, "xpEarned": points}
        )

    unlocked = evaluate_badges(ctx, user_id=user_id, today=occurred_on)
    if unlocked:
        user = _require_user(ctx, user_id)
    logger.info(
        "Focus session recorded",
        extra={"user_id": user_id, "duration": duration, "type": session_type, "xp": points},
    )
    return FocusResult(session=stored, user=user, xp_earned=points, unlocked=unlocked)


def close_day_for_user(ctx: AppContext, *, user_id: int, day: date) -> bool:
    """Run the daily boundary check once for ``day``; True when the streak reset."""

    last_closed = ctx.settings_repo.get(LAST_CLOSED_KEY, user_id=user_id)
    if last_closed and date.fromisoformat(last_closed) >= day:
        return False

    user = _require_user(ctx, user_id)
    had_completion = ctx.habit_repo.has_completion_on(day, user_id=user_id)
    before = stats_of(user)
    after = rewards.close_day(before, day, had_completion)
    if after != before:
        ctx.user_repo.save_stats(user_id, after)
    ctx.settings_repo.set(LAST_CLOSED_KEY, day.isoformat(), user_id=user_id)
    return after.current_streak < before.current_streak


def close_day_for_all(ctx: AppContext, day: date) -> int:
    """Close ``day`` for every user; returns how many streaks were reset."""

    resets = 0
    for user_id in ctx.user_repo.list_ids():
        if close_day_for_user(ctx, user_id=user_id, day=day):
            resets += 1
    logger.info("Day closed", extra={"day": day.isoformat(), "streak_resets": resets})
    return resets


def week_activity(ctx: AppContext, *, user_id: int, day: date) -> challenges.WeekActivity:
    """Collect the current challenge week's activity (Sunday through ``day``)."""

    start = challenges.week_start(day)
    habits = ctx.habit_repo.list_all(user_id=user_id, include_inactive=True)
    habit_by_id = {habit.id: habit for habit in habits}
    logs = ctx.habit_repo.logs_between(start, day, user_id=user_id)
    completed_logs = [log for log in logs if log.completed]
    sessions = ctx.focus_repo.list_between(start, day, user_id=user_id)
    focus = [s for s in sessions if s.completed and s.session_type == SessionType.FOCUS.value]

    active = [habit for habit in habits if habit.is_active]
    due, done = _due_and_done(active, logs, start, day)
    perfect_days = sum(1 for d, ids in due.items() if ids and ids <= done.get(d, set()))

    all_days = {log.occurred_on for log in ctx.habit_repo.all_logs(user_id=user_id) if log.completed}
    current, _ = rewards.streaks_from_days(all_days, day)
    before, _ = rewards.streaks_from_days(
        {d for d in all_days if d < start}, start - timedelta(days=1)
    )

    new_habit_ids = {
        habit.id for habit in habits if habit.created_at.date() >= start
    }
    return challenges.WeekActivity(
        daily_completions=ledger.daily_counts(completed_logs),
        focus_sessions=len(focus),
        focus_minutes=sum(s.duration for s in focus),
        categories=frozenset(
            habit_by_id[log.habit_id].category for log in completed_logs if log.habit_id in habit_by_id
        ),
        early_completions=sum(
            1 for log in completed_logs if log.created_at.time() < challenges.EARLY_COMPLETION_BEFORE
        ),
        perfect_days=perfect_days,
        streak_gain=max(current - before, 0),
        new_habits_completed=len({log.habit_id for log in completed_logs} & new_habit_ids),
    )


def analytics(ctx: AppContext, *, user_id: int, today: date, days: int = 30) -> ledger.LedgerSummary:
    start = today - timedelta(days=days - 1)
    logs = ctx.habit_repo.logs_between(start, today, user_id=user_id)
    habits = ctx.habit_repo.list_all(user_id=user_id, include_inactive=True)
    return ledger.summarize(logs, habits, today)


def contribution(ctx: AppContext, *, user_id: int, today: date) -> list[ledger.GridCell]:
    start = today - timedelta(days=ledger.CONTRIBUTION_DAYS - 1)
    logs = ctx.habit_repo.logs_between(start, today, user_id=user_id)
    return ledger.contribution_grid(logs, today)


def _evolution_dict(points: int) -> dict[str, Any]:
    evo = progress.evolution_for(points)
    return {
        "stage": evo.tier.stage,
        "name": evo.tier.name,
        "icon": evo.tier.icon,
        "description": evo.tier.description,
        "next": evo.next_tier.name if evo.next_tier else None,
        "nextAt": evo.next_tier.min_points if evo.next_tier else None,
        "progress": round(evo.progress, 1) if evo.progress is not None else None,
    }


def dashboard(ctx: AppContext, *, user_id: int, today: date) -> dict[str, Any]:
    """Everything the dashboard shows, as a JSON-ready mapping."""

    user = _require_user(ctx, user_id)
    level = rewards.level_progress(user.total_points)
    streak = rewards.effective_streak(stats_of(user), today)
    views = habits_for_day(ctx, user_id=user_id, day=today)
    due_today = [view for view in views if view.due]
    summary = analytics(ctx, user_id=user_id, today=today)
    challenge = challenges.weekly_challenge(today)
    challenge_state = challenges.challenge_progress(
        challenge, week_activity(ctx, user_id=user_id, day=today)
    )

    return {
        "stats": {
            "totalPoints": user.total_points,
            "currentStreak": streak,
            "longestStreak": user.longest_streak,
            "level": level.level,
            "levelProgress": level.percent,
            "pointsIntoLevel": level.points_into_level,
            "levelSize": level.level_size,
            "multiplier": rewards.xp_multiplier(streak),
            "multiplierLabel": rewards.multiplier_label(streak),
        },
        "evolution": _evolution_dict(user.total_points),
        "today": {
            "date": today.isoformat(),
            "due": len(due_today),
            "completed": sum(1 for view in due_today if view.completed),
            "habits": [
                {
                    "id": view.habit.id,
                    "name": view.habit.name,
                    "icon": view.habit.icon,
                    "color": view.habit.color,
                    "category": view.habit.category,
                    "completed": view.completed,
                    "streak": view.current_streak,
                }
                for view in due_today
            ],
        },
        "completionRate": ledger.percent(summary.overall_rate),
        "weekly": [
            {"date": day.isoformat(), "completed": count} for day, count in summary.weekly_series
        ],
        "challenge": _challenge_dict(challenge_state),
    }


def _challenge_dict(state: challenges.ChallengeProgress) -> dict[str, Any]:
    challenge = state.challenge
    return {
        "id": challenge.id,
        "name": challenge.name,
        "description": challenge.description,
        "type": challenge.type,
        "target": challenge.target,
        "reward": challenge.reward,
        "current": state.current,
        "progress": round(state.percent, 1),
        "completed": state.completed,
    }


def challenge_overview(ctx: AppContext, *, user_id: int, today: date) -> dict[str, Any]:
    challenge = challenges.weekly_challenge(today)
    state = challenges.challenge_progress(challenge, week_activity(ctx, user_id=user_id, day=today))
    return _challenge_dict(state)


def badge_overview(
    ctx: AppContext, *, user_id: int, today: Optional[date] = None
) -> list[dict[str, Any]]:
    """Each catalog badge with the user's progress and unlock time."""

    counters = progress_counters(ctx, user_id=user_id, today=today)
    unlocked = {row.badge_id: row for row in ctx.achievement_repo.list_for_user(user_id=user_id)}
    rows: list[dict[str, Any]] = []
    for badge in progress.BADGES:
        record = unlocked.get(badge.id)
        rows.append(
            {
                "id": badge.id,
                "name": badge.name,
                "description": badge.description,
                "icon": badge.icon,
                "type": badge.type,
                "requirement": badge.requirement,
                "points": badge.points,
                "progress": round(progress.badge_progress(badge, counters), 1),
                "unlocked": record is not None,
                "unlockedAt": record.unlocked_at.isoformat() if record else None,
            }
        )
    return rows


__all__ = [
    "CompletionResult",
    "FocusResult",
    "analytics",
    "badge_overview",
    "bump_special_counter",
    "challenge_overview",
    "close_day_for_all",
    "close_day_for_user",
    "contribution",
    "dashboard",
    "evaluate_badges",
    "log_completion",
    "progress_counters",
    "record_focus_session",
    "special_counters",
    "week_activity",
]
