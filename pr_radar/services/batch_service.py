"""Batched PR detail lookup: one GraphQL round trip for a whole worklist.

Each PR number becomes an aliased ``pullRequest`` sub-query (``pr123: pullRequest(number: 123)``)
inside a single ``repository`` query. The response is parsed fragment by fragment so a
malformed or missing PR never costs the rest of the batch its data.

Failures here never propagate: a failed call or an unexpected envelope yields an empty
mapping, and callers treat PRs missing from the mapping as having no approvals and no
requested reviewers.
"""

import logging
from typing import Any, Dict, Iterable, List

from pr_radar.errors import ProcessFailure
from pr_radar.models import Approval, PRDetails
from pr_radar.services.github_service import GhCli, parse_json_output

logger = logging.getLogger(__name__)

ALIAS_PREFIX = "pr"
REVIEWS_LIMIT = 100
REVIEW_REQUESTS_LIMIT = 20
TEAM_PREFIX = "team:"

PR_FRAGMENT_TEMPLATE = """{alias}: pullRequest(number: {number}) {{
    number
    reviews(last: {reviews_limit}) {{
        nodes {{
            state
            author {{ login }}
            submittedAt
        }}
    }}
    reviewRequests(last: {requests_limit}) {{
        nodes {{
            requestedReviewer {{
                ... on User {{ login }}
                ... on Team {{ slug }}
            }}
        }}
    }}
}}"""


def build_batch_query(owner: str, name: str, pr_numbers: Iterable[int]) -> str:
    """Build one GraphQL query with an aliased sub-query per PR number."""
    fragments = [
        PR_FRAGMENT_TEMPLATE.format(
            alias=f"{ALIAS_PREFIX}{number}",
            number=number,
            reviews_limit=REVIEWS_LIMIT,
            requests_limit=REVIEW_REQUESTS_LIMIT,
        )
        for number in pr_numbers
    ]
    return 'query {{ repository(owner: "{}", name: "{}") {{ {} }} }}'.format(
        owner, name, "\n".join(fragments)
    )


def alias_to_number(key: str):
    """Recover the PR number from an alias key, or None if it does not parse."""
    if not key.startswith(ALIAS_PREFIX):
        return None
    suffix = key[len(ALIAS_PREFIX):]
    if not suffix.isdigit():
        return None
    return int(suffix)


def parse_approvals(review_nodes: List[Dict[str, Any]]) -> List[Approval]:
    """Approved reviews, one per login. A repeated login keeps the last node parsed."""
    approvals: Dict[str, Approval] = {}
    for node in review_nodes:
        if node.get("state") != "APPROVED":
            continue
        author = node.get("author")
        submitted_at = node.get("submittedAt")
        if not author or not author.get("login") or not submitted_at:
            continue
        login = author["login"]
        approvals[login] = Approval(username=login, approved_at=submitted_at)
    return list(approvals.values())


def parse_requested_reviewers(request_nodes: List[Dict[str, Any]]) -> List[str]:
    """User logins as-is, teams as ``team:{slug}``; anything else is skipped."""
    reviewers = []
    for node in request_nodes:
        reviewer = node.get("requestedReviewer")
        if not reviewer:
            continue
        if reviewer.get("login"):
            reviewers.append(reviewer["login"])
        elif reviewer.get("slug"):
            reviewers.append(f"{TEAM_PREFIX}{reviewer['slug']}")
    return reviewers


def parse_pr_fragment(fragment: Dict[str, Any]) -> PRDetails:
    """Parse one aliased pullRequest object. Raises on a malformed fragment."""
    review_nodes = fragment["reviews"]["nodes"]
    request_nodes = fragment["reviewRequests"]["nodes"]
    if not isinstance(review_nodes, list) or not isinstance(request_nodes, list):
        raise TypeError("nodes is not a list")
    return PRDetails(
        approvals=parse_approvals(review_nodes),
        requested_reviewers=parse_requested_reviewers(request_nodes),
    )


def parse_batch_response(payload: Any) -> Dict[int, PRDetails]:
    """Map PR number -> PRDetails from a GraphQL response body."""
    if not isinstance(payload, dict):
        return {}
    data = payload.get("data")
    if not isinstance(data, dict):
        return {}
    repository = data.get("repository")
    if not isinstance(repository, dict):
        return {}

    result: Dict[int, PRDetails] = {}
    for key, fragment in repository.items():
        if not fragment:
            continue
        number = alias_to_number(key)
        if number is None:
            logger.debug(f"Skipping batch fragment with unexpected key {key!r}")
            continue
        try:
            result[number] = parse_pr_fragment(fragment)
        except (KeyError, TypeError, AttributeError) as e:
            logger.debug(f"Skipping malformed batch fragment {key}: {e}")
    return result


class BatchDetailFetcher:
    """Fetches approvals and requested reviewers for many PRs in one gh call."""

    def __init__(self, gh: GhCli, owner: str, name: str):
        self.gh = gh
        self.owner = owner
        self.name = name

    def fetch(self, pr_numbers: Iterable[int]) -> Dict[int, PRDetails]:
        numbers = list(dict.fromkeys(pr_numbers))
        if not numbers:
            return {}

        query = build_batch_query(self.owner, self.name, numbers)
        try:
            output = self.gh.run_command(["api", "graphql", "-f", f"query={query}"])
        except ProcessFailure as e:
            logger.warning(f"Batch detail lookup failed for {len(numbers)} PRs: {e}")
            return {}

        details = parse_batch_response(parse_json_output(output))
        if len(details) < len(numbers):
            logger.warning(f"Batch detail lookup returned {len(details)}/{len(numbers)} PRs")
        return details
