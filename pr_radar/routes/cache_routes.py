"""Cache management routes."""

from flask import Blueprint, jsonify, request

from pr_radar.extensions import get_context
from pr_radar.models import Category
from pr_radar.routes import error_response

cache_bp = Blueprint("cache", __name__)


@cache_bp.route("/api/cache/invalidate", methods=["POST"])
def invalidate_cache():
    """Invalidate one worklist category, or all when none is given."""
    data = request.get_json(silent=True) or {}
    category = data.get("category")
    try:
        cat = Category.parse(category) if category else None
    except ValueError as e:
        return error_response(str(e), 400)

    get_context().worklists.invalidate(cat)
    return jsonify({"message": "Cache invalidated", "category": cat.value if cat else None})


@cache_bp.route("/api/clear-cache", methods=["POST"])
def clear_cache():
    """Invalidate every worklist category."""
    get_context().worklists.invalidate()
    return jsonify({"message": "Cache cleared"})
