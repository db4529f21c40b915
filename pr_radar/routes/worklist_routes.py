"""Worklist routes: one endpoint per review category."""

from flask import Blueprint, jsonify, request

from pr_radar.errors import PRRadarError
from pr_radar.extensions import get_context
from pr_radar.models import Category
from pr_radar.routes import error_response, status_for

worklist_bp = Blueprint("worklists", __name__)


def _flag(name):
    return request.args.get(name, "false").lower() in ("1", "true", "yes")


@worklist_bp.route("/api/worklists/<category>")
def get_worklist(category):
    """Get the PRs in one worklist category."""
    try:
        cat = Category.parse(category)
    except ValueError as e:
        return error_response(str(e), 400)

    try:
        prs = get_context().dispatcher.fetch_category(cat, force_refresh=_flag("force"))
        return jsonify({"category": cat.value, "prs": [pr.to_dict() for pr in prs]})
    except PRRadarError as e:
        return error_response(str(e), status_for(e), f"Failed to fetch {cat.value} PRs: {e}")
