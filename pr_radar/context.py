"""Long-lived service graph for one running application."""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from pr_radar.cache.pr_cache import PRCache
from pr_radar.config import get_config, split_repo
from pr_radar.services.batch_service import BatchDetailFetcher
from pr_radar.services.dispatcher import ReviewDispatcher
from pr_radar.services.github_service import GhCli
from pr_radar.services.item_service import ItemService
from pr_radar.services.stats_service import StatsService
from pr_radar.services.worklist_service import WorklistService

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    config: Dict[str, Any]
    gh: GhCli
    cache: PRCache
    worklists: WorklistService
    stats: StatsService
    items: ItemService
    dispatcher: ReviewDispatcher


def build_context(config: Optional[Dict[str, Any]] = None, gh: Optional[GhCli] = None,
                  cache: Optional[PRCache] = None) -> AppContext:
    """Wire up services from config. `gh` and `cache` may be supplied by tests."""
    config = config if config is not None else get_config()
    owner, name = split_repo(config["repo"])
    # An empty login or team would drop the search scoping flags entirely
    for key in ("user", "team_slug"):
        if not config.get(key):
            raise ValueError(f"Config key '{key}' must be set")
    logger.debug(f"Building context for {config['user']} on {config['repo']}")

    gh = gh or GhCli(gh_path=config.get("gh_path"))
    cache = cache or PRCache(ttl_seconds=config.get("cache_ttl_seconds", 600))
    batch = BatchDetailFetcher(gh, owner, name)
    worklists = WorklistService(
        gh, cache,
        repo=config["repo"],
        user=config["user"],
        team_slug=config["team_slug"],
        batch=batch,
        limit=config.get("worklist_limit", 50),
    )
    stats = StatsService(gh, config["repo"], config["user"], limit=config.get("stats_limit", 200))
    dispatcher = ReviewDispatcher(worklists, stats, max_workers=config.get("max_workers", 4))
    return AppContext(
        config=config,
        gh=gh,
        cache=cache,
        worklists=worklists,
        stats=stats,
        items=ItemService(gh),
        dispatcher=dispatcher,
    )
