"""Merged / approved PR counters over month-to-date, last month and 90 days."""

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import date, timedelta
from typing import Dict, Optional

from pr_radar.errors import ProcessFailure
from pr_radar.filters.pr_search_builder import PRSearchBuilder, PRSearchParams
from pr_radar.models import DateWindows, ReviewStats
from pr_radar.services.github_service import GhCli, parse_json_output

logger = logging.getLogger(__name__)

TRAILING_WINDOW_DAYS = 90


def compute_date_windows(today: Optional[date] = None) -> DateWindows:
    """Compute the three stats windows relative to `today` (local date)."""
    today = today or date.today()
    first_of_month = today.replace(day=1)
    if today.month == 1:
        prev_month_start = date(today.year - 1, 12, 1)
    else:
        prev_month_start = date(today.year, today.month - 1, 1)
    return DateWindows(
        today=today,
        mtd_start=first_of_month,
        prev_month_start=prev_month_start,
        prev_month_end=first_of_month - timedelta(days=1),
        ninety_day_start=today - timedelta(days=TRAILING_WINDOW_DAYS),
    )


class StatsService:
    """Counts merged and approved PRs for one user with six scoped searches."""

    def __init__(self, gh: GhCli, repo: str, user: str, limit: int = 200):
        self.gh = gh
        self.repo = repo
        self.user = user
        self.limit = limit

    def build_searches(self, windows: DateWindows) -> Dict[str, PRSearchParams]:
        mtd = windows.mtd_start.isoformat()
        prev_start = windows.prev_month_start.isoformat()
        prev_end = windows.prev_month_end.isoformat()
        ninety = windows.ninety_day_start.isoformat()

        searches = {}
        for prefix, who in (("prs_merged", {"author": self.user}),
                            ("prs_approved", {"reviewed_by": self.user})):
            searches[f"{prefix}_mtd"] = PRSearchParams.merged_since(
                self.repo, mtd, self.limit, **who)
            searches[f"{prefix}_prev_month"] = PRSearchParams.merged_between(
                self.repo, prev_start, prev_end, self.limit, **who)
            searches[f"{prefix}_prev_3_months"] = PRSearchParams.merged_since(
                self.repo, ninety, self.limit, **who)
        return searches

    def count(self, name: str, params: PRSearchParams) -> int:
        """Result count of one search; a failed search counts as zero."""
        try:
            output = self.gh.run_command(PRSearchBuilder(params).build())
        except ProcessFailure as e:
            logger.warning(f"Stats search {name} failed, counting 0: {e}")
            return 0
        results = parse_json_output(output)
        return len(results) if isinstance(results, list) else 0

    def fetch_stats(self, today: Optional[date] = None) -> ReviewStats:
        # Fail fast when gh is missing rather than reporting six zeroes
        self.gh.resolve()
        windows = compute_date_windows(today)
        searches = self.build_searches(windows)

        with ThreadPoolExecutor(max_workers=len(searches)) as executor:
            futures = {name: executor.submit(self.count, name, params)
                       for name, params in searches.items()}
            counts = {name: future.result() for name, future in futures.items()}

        logger.info(f"Fetched review stats for {self.user}: {counts}")
        return ReviewStats(**counts)
