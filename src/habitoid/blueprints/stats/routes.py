"""Dashboard, achievements, challenge, leaderboard, analytics and export routes."""

from __future__ import annotations

from typing import Any, Optional

from flask import Response, jsonify, request

from ...domain import ledger, progress
from ...extensions import current_user_id, get_context, login_required
from ...services import export_csv, social, stats
from ..common import parse_day, query_day
from . import bp

MAX_ANALYTICS_DAYS = 365


def _weekday_dict(rate: Optional[ledger.WeekdayRate]) -> Optional[dict[str, Any]]:
    if rate is None:
        return None
    return {
        "weekday": int(rate.weekday),
        "label": rate.label,
        "completed": rate.completed,
        "total": rate.total,
        "rate": ledger.percent(rate.rate),
    }


def _summary_dict(summary: ledger.LedgerSummary) -> dict[str, Any]:
    return {
        "totalEvents": summary.total_events,
        "totalCompleted": summary.total_completed,
        "completionRate": ledger.percent(summary.overall_rate),
        "weekdays": [_weekday_dict(rate) for rate in summary.weekday_rates],
        "bestDay": _weekday_dict(summary.best_day),
        "worstDay": _weekday_dict(summary.worst_day),
        "categories": [
            {
                "category": rate.category,
                "label": rate.label,
                "completed": rate.completed,
                "total": rate.total,
                "rate": ledger.percent(rate.rate),
            }
            for rate in summary.category_rates
        ],
        "weekly": [{"date": day.isoformat(), "completed": n} for day, n in summary.weekly_series],
        "monthly": [{"date": day.isoformat(), "completed": n} for day, n in summary.monthly_series],
    }


@bp.get("/stats/dashboard")
@login_required
def dashboard():
    return jsonify(stats.dashboard(get_context(), user_id=current_user_id(), today=query_day()))


@bp.get("/achievements")
@login_required
def achievements():
    """The static badge catalog."""

    return jsonify(
        [
            {
                "id": badge.id,
                "name": badge.name,
                "description": badge.description,
                "icon": badge.icon,
                "type": badge.type,
                "requirement": badge.requirement,
                "points": badge.points,
            }
            for badge in progress.BADGES
        ]
    )


@bp.get("/user-achievements")
@login_required
def user_achievements():
    return jsonify(stats.badge_overview(get_context(), user_id=current_user_id(), today=query_day()))


@bp.get("/challenge")
@login_required
def challenge():
    return jsonify(stats.challenge_overview(get_context(), user_id=current_user_id(), today=query_day()))


@bp.get("/leaderboard")
@login_required
def leaderboard():
    return jsonify(social.leaderboard(get_context()))


@bp.get("/analytics")
@login_required
def analytics():
    days = request.args.get("days", default=30, type=int)
    if days is None or not 1 <= days <= MAX_ANALYTICS_DAYS:
        raise ValueError(f"days must be between 1 and {MAX_ANALYTICS_DAYS}")
    summary = stats.analytics(get_context(), user_id=current_user_id(), today=query_day(), days=days)
    return jsonify(_summary_dict(summary))


@bp.get("/export/logs.csv")
@login_required
def export_logs():
    start = request.args.get("start")
    end = request.args.get("end")
    body = export_csv.user_logs_csv(
        get_context(),
        user_id=current_user_id(),
        start=parse_day(start) if start else None,
        end=parse_day(end) if end else None,
    )
    return Response(
        body,
        mimetype="text/csv",
        headers={"Content-Disposition": 'attachment; filename="habit-logs.csv"'},
    )
