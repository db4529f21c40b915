#!/usr/bin/env python3
"""PR Radar - Flask Backend

Serves review worklists and review stats for one GitHub user, using the
GitHub CLI (gh) for authentication and data fetching.
"""

import atexit

from pr_radar import create_app
from pr_radar.config import get_config
from pr_radar.extensions import EXTENSION_KEY

app = create_app()
atexit.register(app.extensions[EXTENSION_KEY].dispatcher.shutdown)


if __name__ == "__main__":
    config = get_config()
    app.run(
        host=config.get("host", "127.0.0.1"),
        port=config.get("port", 5060),
        debug=config.get("debug", False),
        threaded=True,
    )
