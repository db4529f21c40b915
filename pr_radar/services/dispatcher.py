"""Runs blocking worklist/stats fetches on a bounded thread pool.

Callers get a Future back. Work cannot be cancelled or timed out once it
starts; a hung gh process holds its worker until it exits.
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Dict, Tuple

from pr_radar.errors import PRRadarError, WorkerFailure
from pr_radar.models import Category
from pr_radar.services.stats_service import StatsService
from pr_radar.services.worklist_service import WorklistService

logger = logging.getLogger(__name__)


class ReviewDispatcher:
    def __init__(self, worklists: WorklistService, stats: StatsService, max_workers: int = 4):
        self.worklists = worklists
        self.stats = stats
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="pr-radar")
        # One in-flight fetch per category, tagged with the cache generation it
        # started under; only requests made under the same generation share it
        self._in_progress: Dict[Category, Tuple[Future, int]] = {}
        self._in_progress_lock = threading.Lock()

    def submit_category(self, category: Category, force_refresh: bool = False) -> Future:
        with self._in_progress_lock:
            generation = self.worklists.cache.generation(category)
            running = self._in_progress.get(category)
            if running is not None:
                running_future, running_generation = running
                if not running_future.done() and running_generation == generation:
                    logger.debug(f"Joining in-flight fetch for {category.value}")
                    return running_future
            future = self._executor.submit(self.worklists.fetch_category, category, force_refresh)
            self._in_progress[category] = (future, generation)
        future.add_done_callback(lambda f, c=category: self._clear_in_progress(c, f))
        return future

    def _clear_in_progress(self, category: Category, future: Future) -> None:
        with self._in_progress_lock:
            running = self._in_progress.get(category)
            if running is not None and running[0] is future:
                del self._in_progress[category]

    def submit_stats(self) -> Future:
        return self._executor.submit(self.stats.fetch_stats)

    def wait(self, future: Future):
        """Block for a result. Non-domain errors are reported as WorkerFailure."""
        try:
            return future.result()
        except PRRadarError:
            raise
        except Exception as e:
            logger.error(f"Worker task failed: {e}")
            raise WorkerFailure(f"Task failed: {e}") from e

    def fetch_category(self, category: Category, force_refresh: bool = False):
        return self.wait(self.submit_category(category, force_refresh))

    def fetch_stats(self):
        return self.wait(self.submit_stats())

    def shutdown(self) -> None:
        self._executor.shutdown(wait=False)
