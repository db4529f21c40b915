"""Worklist orchestration: search, filter, batch-detail, classify, sort, cache.

Every category runs the same pipeline:

1. one or two ``gh search prs`` calls (a search failure aborts the fetch),
2. drop PRs authored by the requesting user where the category says so,
3. de-duplicate by PR number, first seen wins,
4. one batched detail lookup for the whole candidate list,
5. keep the PRs matching the category predicate,
6. sort ascending by ``createdAt`` (ISO-8601, so string order is time order),
7. write the cache slot.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Sequence, Tuple

from pr_radar.cache.pr_cache import PRCache
from pr_radar.errors import ParseFailure
from pr_radar.filters.pr_search_builder import PRSearchBuilder, PRSearchParams
from pr_radar.models import Approval, Category, PRDetails, PullRequest, PullRequestSummary
from pr_radar.services.batch_service import BatchDetailFetcher
from pr_radar.services.github_service import GhCli, load_json_output

logger = logging.getLogger(__name__)

# Search sources
REQUESTED_FROM_ME = "requested_from_me"
REQUESTED_FROM_TEAM = "requested_from_team"
AUTHORED_BY_ME = "authored_by_me"
AUTHORED_CHANGES_REQUESTED = "authored_changes_requested"

Predicate = Callable[[Sequence[Approval], str], bool]


def _approved_by(approvals: Sequence[Approval], user: str) -> bool:
    return any(a.username.lower() == user.lower() for a in approvals)


def is_high_priority(approvals: Sequence[Approval], user: str) -> bool:
    """One approval already, and it is not mine."""
    return len(approvals) == 1 and not _approved_by(approvals, user)


def has_one_approval(approvals: Sequence[Approval], user: str) -> bool:
    return len(approvals) == 1


def has_no_approvals(approvals: Sequence[Approval], user: str) -> bool:
    return not approvals


def has_approvals(approvals: Sequence[Approval], user: str) -> bool:
    return bool(approvals)


def include_all(approvals: Sequence[Approval], user: str) -> bool:
    return True


@dataclass(frozen=True)
class CategoryRule:
    sources: Tuple[str, ...]
    exclude_self: bool
    predicate: Predicate


# MY_NEEDS_REVIEW does not exclude PRs with a changes-requested review, so a
# PR can be listed there and under MY_CHANGES_REQUESTED at the same time.
CATEGORY_RULES: Dict[Category, CategoryRule] = {
    Category.HIGH_PRIORITY: CategoryRule((REQUESTED_FROM_ME,), True, is_high_priority),
    Category.MEDIUM_PRIORITY: CategoryRule((REQUESTED_FROM_TEAM,), True, has_one_approval),
    Category.LOW_PRIORITY: CategoryRule((REQUESTED_FROM_ME, REQUESTED_FROM_TEAM), True, has_no_approvals),
    Category.MY_APPROVED: CategoryRule((AUTHORED_BY_ME,), False, has_approvals),
    Category.MY_CHANGES_REQUESTED: CategoryRule((AUTHORED_CHANGES_REQUESTED,), False, include_all),
    Category.MY_NEEDS_REVIEW: CategoryRule((AUTHORED_BY_ME,), False, has_no_approvals),
}


def merge_candidates(result_sets: Sequence[Sequence[PullRequestSummary]], user: str,
                     exclude_self: bool) -> List[PullRequestSummary]:
    """Concatenate search results, dropping my own PRs and repeated numbers."""
    seen = set()
    merged = []
    for results in result_sets:
        for pr in results:
            if exclude_self and pr.author.lower() == user.lower():
                continue
            if pr.number in seen:
                continue
            seen.add(pr.number)
            merged.append(pr)
    return merged


def classify(candidates: Sequence[PullRequestSummary], details: Dict[int, PRDetails],
             predicate: Predicate, user: str) -> List[PullRequest]:
    """Join candidates with their details, filter by predicate, sort by creation time.

    A candidate missing from `details` counts as having no approvals and no
    requested reviewers; it is never dropped for that reason alone.
    """
    prs = [PullRequest.from_summary(summary, details.get(summary.number)) for summary in candidates]
    selected = [pr for pr in prs if predicate(pr.approvals, user)]
    selected.sort(key=lambda pr: pr.created_at)
    return selected


class WorklistService:
    """Builds and caches the six review worklists for one user."""

    def __init__(self, gh: GhCli, cache: PRCache, repo: str, user: str, team_slug: str,
                 batch: BatchDetailFetcher, limit: int = 50):
        self.gh = gh
        self.cache = cache
        self.repo = repo
        self.user = user
        self.team_slug = team_slug
        self.batch = batch
        self.limit = limit

    def fetch_category(self, category: Category, force_refresh: bool = False) -> List[PullRequest]:
        """Return the category's worklist, from cache unless expired or forced."""
        if not force_refresh:
            cached = self.cache.get(category)
            if cached is not None:
                logger.debug(f"Cache hit for {category.value} ({len(cached.prs)} PRs)")
                return list(cached.prs)

        generation = self.cache.generation(category)
        rule = CATEGORY_RULES[category]

        result_sets = [self.search(self.source_params(source)) for source in rule.sources]
        candidates = merge_candidates(result_sets, self.user, rule.exclude_self)
        details = self.batch.fetch([pr.number for pr in candidates])
        prs = classify(candidates, details, rule.predicate, self.user)

        self.cache.put(category, prs, generation=generation)
        logger.info(f"Fetched {category.value}: {len(prs)} of {len(candidates)} candidate PRs")
        return prs

    def invalidate(self, category=None) -> None:
        self.cache.invalidate(category)

    def source_params(self, source: str) -> PRSearchParams:
        login = self.team_slug if source == REQUESTED_FROM_TEAM else self.user
        if not login:
            raise ValueError(f"Search source '{source}' has no login or team to scope it")
        base = dict(repo=self.repo, state="open", limit=self.limit)
        if source == REQUESTED_FROM_ME:
            return PRSearchParams(review_requested=self.user, **base)
        if source == REQUESTED_FROM_TEAM:
            return PRSearchParams(review_requested=self.team_slug, **base)
        if source == AUTHORED_BY_ME:
            return PRSearchParams(author=self.user, **base)
        if source == AUTHORED_CHANGES_REQUESTED:
            return PRSearchParams(author=self.user, review="changes_requested", **base)
        raise ValueError(f"Unknown search source '{source}'")

    def search(self, params: PRSearchParams) -> List[PullRequestSummary]:
        """Run one PR search. Failures propagate and abort the category fetch."""
        output = self.gh.run_command(PRSearchBuilder(params).build())
        items = load_json_output(output, "PR JSON") if output else []
        if not isinstance(items, list):
            raise ParseFailure("Failed to parse PR JSON: expected a list")
        return [PullRequestSummary.from_search_item(item) for item in items]
