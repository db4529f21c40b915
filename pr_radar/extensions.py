"""Shared logger and access to the per-app service context."""

import logging

from flask import current_app

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger("pr_radar")

EXTENSION_KEY = "pr_radar"


def get_context():
    """Return the AppContext attached to the running Flask app."""
    return current_app.extensions[EXTENSION_KEY]
