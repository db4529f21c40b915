"""Application configuration loaded from config.json."""

import json
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

# Project root is one level up from pr_radar/
PROJECT_ROOT = Path(__file__).parent.parent

DEFAULT_CONFIG: Dict[str, Any] = {
    "repo": "shop/world",
    "user": "",
    "team_slug": "",
    "cache_ttl_seconds": 600,
    "worklist_limit": 50,
    "stats_limit": 200,
    "max_workers": 4,
    "gh_path": None,
    "host": "127.0.0.1",
    "port": 5060,
    "debug": False,
    "log_level": "INFO",
}


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """Load configuration from config.json, merged over DEFAULT_CONFIG.

    Args:
        config_path: Optional path to config file. Defaults to PROJECT_ROOT/config.json.

    Returns:
        Configuration dictionary.
    """
    if config_path is None:
        config_path = PROJECT_ROOT / "config.json"
    config = dict(DEFAULT_CONFIG)
    if Path(config_path).exists():
        with open(config_path) as f:
            config.update(json.load(f))
    return config


def split_repo(repo: str) -> Tuple[str, str]:
    """Split "owner/name" into its two parts."""
    parts = (repo or "").split("/")
    if len(parts) != 2 or not all(parts):
        raise ValueError(f"Invalid repo '{repo}', expected 'owner/name'")
    return parts[0], parts[1]


# Singleton config instance
_config: Optional[Dict[str, Any]] = None


def get_config() -> Dict[str, Any]:
    """Get the singleton config dictionary."""
    global _config
    if _config is None:
        _config = load_config()
    return _config
