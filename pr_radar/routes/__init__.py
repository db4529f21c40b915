"""Route blueprints registration and shared error responses."""

from flask import jsonify

from pr_radar.errors import InvalidReference, ToolNotFound
from pr_radar.extensions import logger


def error_response(message, status=500, log_message=None):
    """JSON error body; logs log_message (or message) at ERROR."""
    logger.error(log_message or message)
    return jsonify({"error": message}), status


def status_for(error):
    """HTTP status for an error raised by the services."""
    if isinstance(error, (InvalidReference, ValueError)):
        return 400
    if isinstance(error, ToolNotFound):
        return 503
    return 500


def register_blueprints(app):
    """Register all route blueprints with the Flask app."""
    from pr_radar.routes.worklist_routes import worklist_bp
    from pr_radar.routes.cache_routes import cache_bp
    from pr_radar.routes.stats_routes import stats_bp
    from pr_radar.routes.item_routes import item_bp

    app.register_blueprint(worklist_bp)
    app.register_blueprint(cache_bp)
    app.register_blueprint(stats_bp)
    app.register_blueprint(item_bp)
