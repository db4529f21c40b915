"""PR Radar - review worklists and stats aggregated from the GitHub CLI.

Provides the Flask application factory and all backend modules.
"""

import logging

from flask import Flask

from pr_radar.config import get_config
from pr_radar.context import build_context
from pr_radar.extensions import EXTENSION_KEY, logger
from pr_radar.routes import register_blueprints


def create_app(config=None, context=None):
    """Create and configure the Flask application.

    Args:
        config: Optional config dict. Defaults to the loaded config.json.
        context: Optional prebuilt AppContext (tests pass one with fakes).
    """
    config = config if config is not None else get_config()
    logger.setLevel(getattr(logging, str(config.get("log_level", "INFO")).upper(), logging.INFO))

    app = Flask(__name__)
    context = context or build_context(config)
    app.extensions[EXTENSION_KEY] = context
    register_blueprints(app)
    logger.info(f"PR Radar ready for {context.config['user']} on {context.config['repo']}")
    return app
