"""Weekly PDF report rendering with matplotlib."""

from __future__ import annotations

import io
import textwrap
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Optional

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402
from matplotlib.backends.backend_pdf import PdfPages  # noqa: E402
from matplotlib.figure import Figure  # noqa: E402

from ..constants import category_label  # noqa: E402
from ..context import AppContext  # noqa: E402
from ..errors import NotFoundError  # noqa: E402

PRIMARY_COLOR = "#10b981"
TEXT_COLOR = "#1f2937"
MUTED_COLOR = "#6b7280"
BOX_COLOR = "#f9fafb"
A4_INCHES = (8.27, 11.69)


@dataclass(slots=True)
class HabitWeekRow:
    name: str
    category: str
    completed: int

    @property
    def rate(self) -> int:
        return int(self.completed / 7 * 100 + 0.5)


@dataclass(slots=True)
class WeeklyReportData:
    user_name: str
    week_start: date
    completion_rate: int
    current_streak: int
    completed: int
    total_points: int
    habits: list[HabitWeekRow] = field(default_factory=list)
    insights: Optional[str] = None
    recommendations: Optional[str] = None
    motivational_tip: Optional[str] = None

    @property
    def week_end(self) -> date:
        return self.week_start + timedelta(days=6)


def collect_report(ctx: AppContext, *, user_id: int, week_start: date) -> WeeklyReportData:
    """Gather stats, per-habit counts and any stored insight for the week."""

    user = ctx.user_repo.get_by_id(user_id)
    if user is None:
        raise NotFoundError(f"User {user_id} not found")
    week_end = week_start + timedelta(days=6)
    habits = ctx.habit_repo.list_active(user_id=user_id)
    logs = ctx.habit_repo.logs_between(week_start, week_end, user_id=user_id)
    done_by_habit: dict[int, int] = {}
    for log in logs:
        if log.completed:
            done_by_habit[log.habit_id] = done_by_habit.get(log.habit_id, 0) + 1

    rows = [
        HabitWeekRow(name=habit.name, category=habit.category, completed=done_by_habit.get(habit.id, 0))
        for habit in habits
        if habit.id is not None
    ]
    completed = sum(row.completed for row in rows)
    possible = len(habits) * 7
    insight = ctx.insight_repo.get(week_start, user_id=user_id)
    return WeeklyReportData(
        user_name=user.display_name,
        week_start=week_start,
        completion_rate=int(completed / possible * 100 + 0.5) if possible else 0,
        current_streak=user.current_streak,
        completed=completed,
        total_points=user.total_points,
        habits=rows,
        insights=insight.insights if insight else None,
        recommendations=insight.recommendations if insight else None,
        motivational_tip=insight.motivational_tip if insight else None,
    )


def _summary_page(data: WeeklyReportData) -> Figure:
    fig = plt.figure(figsize=A4_INCHES)
    fig.patches.append(
        plt.Rectangle((0, 0.88), 1, 0.12, transform=fig.transFigure, color=PRIMARY_COLOR, zorder=0)
    )
    fig.text(0.07, 0.955, "Habitoid", fontsize=26, fontweight="bold", color="white")
    fig.text(0.07, 0.925, "Weekly Habit Report", fontsize=13, color="white")
    fig.text(0.07, 0.898, data.user_name, fontsize=11, color="white")
    fig.text(
        0.5,
        0.85,
        f"Week of {data.week_start:%b %d, %Y} - {data.week_end:%b %d, %Y}",
        ha="center",
        fontsize=12,
        color=TEXT_COLOR,
    )

    stats = [
        ("Completion", f"{data.completion_rate}%"),
        ("Streak", str(data.current_streak)),
        ("Completed", str(data.completed)),
        ("Points", str(data.total_points)),
    ]
    width = 0.2
    for index, (label, value) in enumerate(stats):
        left = 0.07 + index * (width + 0.02)
        fig.patches.append(
            plt.Rectangle((left, 0.74), width, 0.08, transform=fig.transFigure, color=BOX_COLOR)
        )
        fig.text(left + width / 2, 0.785, value, ha="center", fontsize=18,
                 fontweight="bold", color=PRIMARY_COLOR)
        fig.text(left + width / 2, 0.752, label, ha="center", fontsize=9, color=MUTED_COLOR)

    ax = fig.add_axes([0.3, 0.12, 0.62, 0.55])
    if data.habits:
        names = [row.name for row in data.habits][::-1]
        rates = [row.rate for row in data.habits][::-1]
        bars = ax.barh(names, rates, color=PRIMARY_COLOR)
        for bar, row in zip(bars, data.habits[::-1]):
            ax.text(
                min(bar.get_width() + 2, 102),
                bar.get_y() + bar.get_height() / 2,
                f"{row.completed}/7 · {category_label(row.category)}",
                va="center",
                fontsize=8,
                color=MUTED_COLOR,
            )
        ax.set_xlim(0, 130)
    else:
        ax.text(0.5, 0.5, "No active habits this week", ha="center", va="center",
                color=MUTED_COLOR, transform=ax.transAxes)
        ax.set_yticks([])
    ax.set_title("Habit Performance", loc="left", fontsize=14, fontweight="bold", color=TEXT_COLOR)
    ax.set_xlabel("Completion %")
    ax.spines["top"].set_visible(False)
    ax.spines["right"].set_visible(False)
    return fig


def _insights_page(data: WeeklyReportData) -> Figure:
    fig = plt.figure(figsize=A4_INCHES)
    fig.text(0.07, 0.93, "AI Insights", fontsize=18, fontweight="bold", color=TEXT_COLOR)
    y = 0.88
    for heading, body in (
        ("Insights", data.insights),
        ("Recommendations", data.recommendations),
        ("Motivational Tip", data.motivational_tip),
    ):
        if not body:
            continue
        fig.text(0.07, y, heading, fontsize=12, fontweight="bold", color=PRIMARY_COLOR)
        y -= 0.03
        for paragraph in body.splitlines() or [body]:
            for line in textwrap.wrap(paragraph, width=90) or [""]:
                fig.text(0.07, y, line, fontsize=10, color=TEXT_COLOR)
                y -= 0.022
        y -= 0.03
    fig.text(0.5, 0.04, "Generated by Habitoid", ha="center", fontsize=8, color=MUTED_COLOR)
    return fig


def build_weekly_report(data: WeeklyReportData) -> bytes:
    """Render the report as PDF bytes; the insight page is added when text exists."""

    buffer = io.BytesIO()
    with PdfPages(buffer) as pdf:
        pages = [_summary_page(data)]
        if data.insights or data.recommendations or data.motivational_tip:
            pages.append(_insights_page(data))
        for fig in pages:
            pdf.savefig(fig)
            plt.close(fig)
        info = pdf.infodict()
        info["Title"] = "Weekly Habit Report - Habitoid"
        info["Author"] = "Habitoid"
        info["Subject"] = f"Weekly Report for {data.user_name}"
    return buffer.getvalue()


__all__ = [
    "HabitWeekRow",
    "WeeklyReportData",
    "build_weekly_report",
    "collect_report",
]
