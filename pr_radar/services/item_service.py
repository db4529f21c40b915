"""Single PR / issue lookups by URL. Not cached."""

import logging
from typing import List, Tuple

from pr_radar.errors import InvalidReference, ParseFailure
from pr_radar.models import Approval
from pr_radar.services.github_service import GhCli, load_json_output
from pr_radar.utils.urls import parse_issue_url, parse_pr_url

logger = logging.getLogger(__name__)


def approvals_from_reviews(reviews) -> List[Approval]:
    """Approved REST reviews, one per login; a repeated login keeps the last one."""
    if not isinstance(reviews, list):
        raise ParseFailure("Failed to parse PR reviews: expected a list")
    approvals = {}
    for review in reviews:
        if not isinstance(review, dict):
            raise ParseFailure("Failed to parse PR reviews: expected objects")
        if review.get("state") != "APPROVED":
            continue
        user = review.get("user") or {}
        login = user.get("login")
        submitted_at = review.get("submitted_at")
        if login and submitted_at:
            approvals[login] = Approval(username=login, approved_at=submitted_at)
    return list(approvals.values())


class ItemService:
    def __init__(self, gh: GhCli):
        self.gh = gh

    def _fetch_title(self, org: str, repo: str, kind: str, number: str) -> str:
        return self.gh.run_command([
            "api", f"repos/{org}/{repo}/{kind}/{number}",
            "--jq", ".title",
        ])

    def fetch_pr_info(self, url: str) -> Tuple[str, List[Approval]]:
        """Fetch a PR's title and its current approvals."""
        ref = parse_pr_url(url)
        if not ref:
            raise InvalidReference("Invalid PR URL format")
        org, repo, number = ref

        title = self._fetch_title(org, repo, "pulls", number)
        output = self.gh.run_command(["api", f"repos/{org}/{repo}/pulls/{number}/reviews"])
        approvals = approvals_from_reviews(load_json_output(output, "PR reviews"))
        logger.info(f"Fetched {org}/{repo}#{number}: {len(approvals)} approvals")
        return title, approvals

    def fetch_issue_title(self, url: str) -> str:
        ref = parse_issue_url(url)
        if not ref:
            raise InvalidReference("Invalid GitHub issue URL format")
        org, repo, number = ref
        return self._fetch_title(org, repo, "issues", number)

    def fetch_item_title(self, url: str) -> str:
        """Title of a PR or issue URL, whichever shape it matches."""
        ref = parse_pr_url(url)
        if ref:
            org, repo, number = ref
            return self._fetch_title(org, repo, "pulls", number)
        if parse_issue_url(url):
            return self.fetch_issue_title(url)
        raise InvalidReference(f"Unrecognized PR or issue URL: {url}")
