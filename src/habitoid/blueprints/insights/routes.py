"""Weekly insight and PDF report routes."""

from __future__ import annotations

from flask import Response, jsonify

from ...domain.challenges import week_start
from ...errors import NotFoundError
from ...extensions import current_user_id, get_context, login_required
from ...services import insights, reports
from ..common import json_body, parse_day, serialize
from . import bp


@bp.post("/insights/generate")
@login_required
def generate_insight():
    """Generate the insight for ``weekStart`` (default: the current week)."""

    raw = json_body().get("weekStart")
    start = parse_day(raw) if raw else week_start(parse_day(None))
    insight = insights.generate_weekly_insight(get_context(), user_id=current_user_id(), week_start=start)
    return jsonify(serialize(insight))


@bp.get("/insights/<week_start_value>")
@login_required
def get_insight(week_start_value: str):
    start = parse_day(week_start_value)
    insight = get_context().insight_repo.get(start, user_id=current_user_id())
    if insight is None:
        raise NotFoundError("Insight not found")
    return jsonify(serialize(insight))


@bp.get("/reports/weekly/<week_start_value>")
@login_required
def weekly_report(week_start_value: str):
    start = parse_day(week_start_value)
    data = reports.collect_report(get_context(), user_id=current_user_id(), week_start=start)
    pdf = reports.build_weekly_report(data)
    return Response(
        pdf,
        mimetype="application/pdf",
        headers={
            "Content-Disposition": f'attachment; filename="weekly-report-{start.isoformat()}.pdf"'
        },
    )
