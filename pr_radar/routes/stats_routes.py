"""Review stats route."""

from flask import Blueprint, jsonify

from pr_radar.errors import PRRadarError
from pr_radar.extensions import get_context
from pr_radar.routes import error_response, status_for

stats_bp = Blueprint("stats", __name__)


@stats_bp.route("/api/stats")
def get_stats():
    """Merged and approved PR counts for the configured user."""
    try:
        stats = get_context().dispatcher.fetch_stats()
        return jsonify({"stats": stats.to_dict()})
    except PRRadarError as e:
        return error_response(str(e), status_for(e), f"Failed to fetch stats: {e}")
