"""Weekly coaching insights backed by the OpenAI chat completions API."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Optional

from openai import OpenAI

from ..context import AppContext
from ..errors import NotFoundError
from ..models.focus import SessionType
from ..models.insight import WeeklyInsight

logger = logging.getLogger("habitoid.insights")

SYSTEM_PROMPT = (
    "You are an expert productivity coach who provides personalized, actionable insights "
    "based on habit tracking data. Always respond with valid JSON in the requested format."
)

DEFAULT_INSIGHTS = "Your habit tracking shows consistent effort. Keep building on your current momentum."
DEFAULT_RECOMMENDATIONS = "Continue tracking your habits daily and focus on maintaining consistency."
DEFAULT_TIP = "Every small step counts towards building lasting habits. Keep going!"


@dataclass(slots=True)
class WeeklyInsightData:
    habits_completed: int
    total_habits: int
    completion_rate: int
    current_streak: int
    pomodoro_sessions: int
    focus_time: int  # minutes
    categories_active: list[str] = field(default_factory=list)
    missed_days: int = 7


@dataclass(slots=True)
class GeneratedInsights:
    insights: str
    recommendations: str
    motivational_tip: str
    source: str = "fallback"


def build_prompt(data: WeeklyInsightData) -> str:
    hours, minutes = divmod(data.focus_time, 60)
    categories = ", ".join(data.categories_active) or "none"
    return (
        "As a productivity coach, analyze this user's weekly habit tracking data and provide "
        "personalized insights.\n\n"
        "Weekly Data:\n"
        f"- Habits completed: {data.habits_completed} out of {data.total_habits} total habits\n"
        f"- Completion rate: {data.completion_rate}%\n"
        f"- Current streak: {data.current_streak} days\n"
        f"- Pomodoro sessions: {data.pomodoro_sessions}\n"
        f"- Focus time: {hours}h {minutes}m\n"
        f"- Active categories: {categories}\n"
        f"- Missed days: {data.missed_days}\n\n"
        "Provide a JSON response with:\n"
        '1. "insights": A detailed analysis of their performance, patterns, and areas of '
        "strength/improvement (2-3 sentences)\n"
        '2. "recommendations": Specific, actionable advice to improve their habit consistency '
        "and productivity (2-3 bullet points)\n"
        '3. "motivationalTip": An encouraging, personalized message that acknowledges their '
        "progress and motivates continued effort (1-2 sentences)\n\n"
        "Keep the tone encouraging and supportive while being honest about areas for improvement."
    )


def fallback_insights(data: WeeklyInsightData) -> GeneratedInsights:
    """Deterministic text used when the text service is unavailable."""

    if data.completion_rate < 70:
        recommendations = (
            "Consider reducing the number of habits you're tracking to focus on consistency. "
            "Start with 2-3 core habits and build from there."
        )
    else:
        recommendations = (
            "Great consistency! Consider adding a new challenging habit or increasing the "
            "difficulty of existing ones."
        )
    if data.current_streak > 7:
        tip = (
            f"Your {data.current_streak}-day streak shows real commitment. Each day you continue "
            "strengthens the neural pathways that make these habits automatic."
        )
    else:
        tip = (
            "Building habits takes time and patience. Focus on showing up consistently, even if "
            "it's just for a few minutes each day."
        )
    return GeneratedInsights(
        insights=(
            f"This week you completed {data.completion_rate}% of your habits with a "
            f"{data.current_streak}-day streak. Your {data.pomodoro_sessions} focus sessions "
            "show good time management discipline."
        ),
        recommendations=recommendations,
        motivational_tip=tip,
        source="fallback",
    )


def _as_text(value: Any, default: str) -> str:
    if isinstance(value, list):
        value = "\n".join(f"- {item}" for item in value if str(item).strip())
    if not isinstance(value, str) or not value.strip():
        return default
    return value.strip()


class InsightGenerator:
    """Calls the chat completions API; any failure yields the fallback text."""

    def __init__(
        self,
        *,
        api_key: Optional[str],
        model: str = "gpt-4o-mini",
        timeout: float = 20,
        client: Any = None,
    ) -> None:
        self.model = model
        self.client = client
        if self.client is None and api_key:
            self.client = OpenAI(api_key=api_key, timeout=timeout, max_retries=0)
        if self.client is None:
            logger.info("Insight generation disabled (no OPENAI_API_KEY)")

    @classmethod
    def from_context(cls, ctx: AppContext) -> "InsightGenerator":
        return cls(
            api_key=ctx.config.OPENAI_API_KEY,
            model=ctx.config.OPENAI_MODEL,
            timeout=ctx.config.OPENAI_TIMEOUT,
        )

    def generate(self, data: WeeklyInsightData) -> GeneratedInsights:
        if self.client is None:
            return fallback_insights(data)
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": build_prompt(data)},
                ],
                response_format={"type": "json_object"},
                temperature=0.7,
            )
            content = response.choices[0].message.content or "{}"
            result = json.loads(content)
            if not isinstance(result, dict):
                raise ValueError("insight response is not a JSON object")
        except Exception as exc:
            logger.error("Failed to generate AI insights: %s", exc, exc_info=True)
            return fallback_insights(data)

        return GeneratedInsights(
            insights=_as_text(result.get("insights"), DEFAULT_INSIGHTS),
            recommendations=_as_text(result.get("recommendations"), DEFAULT_RECOMMENDATIONS),
            motivational_tip=_as_text(result.get("motivationalTip"), DEFAULT_TIP),
            source="openai",
        )


def collect_week(ctx: AppContext, *, user_id: int, week_start: date) -> WeeklyInsightData:
    """Summarize the seven days starting at ``week_start``."""

    week_end = week_start + timedelta(days=6)
    user = ctx.user_repo.get_by_id(user_id)
    if user is None:
        raise NotFoundError(f"User {user_id} not found")
    habits = ctx.habit_repo.list_active(user_id=user_id)
    habit_by_id = {habit.id: habit for habit in ctx.habit_repo.list_all(user_id=user_id, include_inactive=True)}
    logs = [
        log
        for log in ctx.habit_repo.logs_between(week_start, week_end, user_id=user_id)
        if log.completed
    ]
    sessions = [
        s
        for s in ctx.focus_repo.list_between(week_start, week_end, user_id=user_id)
        if s.completed
    ]

    total = len(habits) * 7
    completed = len(logs)
    categories = sorted(
        {habit_by_id[log.habit_id].category for log in logs if log.habit_id in habit_by_id}
    )
    return WeeklyInsightData(
        habits_completed=completed,
        total_habits=total,
        completion_rate=int(completed / total * 100 + 0.5) if total else 0,
        current_streak=user.current_streak,
        pomodoro_sessions=len(sessions),
        focus_time=sum(s.duration for s in sessions if s.session_type == SessionType.FOCUS.value),
        categories_active=categories,
        missed_days=7 - len({log.occurred_on for log in logs}),
    )


def generate_weekly_insight(
    ctx: AppContext,
    *,
    user_id: int,
    week_start: date,
    generator: Optional[InsightGenerator] = None,
) -> WeeklyInsight:
    """Generate (or regenerate) and store the insight for one week."""

    data = collect_week(ctx, user_id=user_id, week_start=week_start)
    generator = generator or InsightGenerator.from_context(ctx)
    text = generator.generate(data)
    logger.info(
        "Weekly insight generated",
        extra={"user_id": user_id, "week_start": week_start.isoformat(), "source": text.source},
    )
    return ctx.insight_repo.upsert(
        WeeklyInsight(
            user_id=user_id,
            week_start=week_start,
            insights=text.insights,
            recommendations=text.recommendations,
            motivational_tip=text.motivational_tip,
            source=text.source,
        ),
        user_id=user_id,
    )


__all__ = [
    "GeneratedInsights",
    "InsightGenerator",
    "WeeklyInsightData",
    "build_prompt",
    "collect_week",
    "fallback_insights",
    "generate_weekly_insight",
]
