"""Per-category worklist cache with TTL expiry and invalidation."""

import logging
import threading
import time
from typing import Callable, Dict, Iterable, Optional

from cachetools import TTLCache

from pr_radar.models import CachedResultSet, Category, PullRequest

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 600


class PRCache:
    """One slot per Category behind a single lock.

    Every invalidate bumps the slot's generation; a put made with a stale
    generation is dropped so an in-flight fetch cannot restore data that was
    invalidated while it ran.
    """

    def __init__(self, ttl_seconds: float = DEFAULT_TTL_SECONDS, timer: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._timer = timer
        self._lock = threading.Lock()
        self._slots = TTLCache(maxsize=len(Category), ttl=ttl_seconds, timer=timer)
        self._generations: Dict[Category, int] = {category: 0 for category in Category}

    def get(self, category: Category) -> Optional[CachedResultSet]:
        """Return the slot if it was populated less than ttl_seconds ago."""
        with self._lock:
            return self._slots.get(category)

    def put(self, category: Category, prs: Iterable[PullRequest], generation: Optional[int] = None) -> bool:
        """Replace the slot. Returns False if the write was dropped as stale."""
        with self._lock:
            if generation is not None and generation != self._generations[category]:
                logger.info(f"Dropping stale cache write for {category.value} (invalidated during fetch)")
                return False
            self._slots[category] = CachedResultSet(
                category=category,
                prs=tuple(prs),
                cached_at=self._timer(),
            )
            return True

    def generation(self, category: Category) -> int:
        with self._lock:
            return self._generations[category]

    def invalidate(self, category: Optional[Category] = None) -> None:
        """Clear one slot, or every slot when category is None."""
        with self._lock:
            targets = [category] if category is not None else list(Category)
            for target in targets:
                self._slots.pop(target, None)
                self._generations[target] += 1
        logger.info(f"Invalidated PR cache: {category.value if category else 'all'}")
