"""Single PR / issue lookup routes."""

from dataclasses import asdict

from flask import Blueprint, jsonify, request

from pr_radar.errors import PRRadarError
from pr_radar.extensions import get_context
from pr_radar.routes import error_response, status_for

item_bp = Blueprint("items", __name__)


@item_bp.route("/api/items/title")
def get_item_title():
    """Get the title of a PR or issue URL."""
    url = request.args.get("url")
    if not url:
        return error_response("Missing 'url' parameter", 400)
    try:
        title = get_context().items.fetch_item_title(url)
        return jsonify({"url": url, "title": title})
    except PRRadarError as e:
        return error_response(str(e), status_for(e), f"Failed to fetch title for {url}: {e}")


@item_bp.route("/api/prs/info")
def get_pr_info():
    """Get a PR's title and approvals."""
    url = request.args.get("url")
    if not url:
        return error_response("Missing 'url' parameter", 400)
    try:
        title, approvals = get_context().items.fetch_pr_info(url)
        return jsonify({"url": url, "title": title, "approvals": [asdict(a) for a in approvals]})
    except PRRadarError as e:
        return error_response(str(e), status_for(e), f"Failed to fetch PR info for {url}: {e}")
