"""
Shared fixtures: a scripted gh runner and a controllable clock.

No test here needs gh installed or network access.
"""

import json

import pytest

from pr_radar.cache.pr_cache import PRCache
from pr_radar.errors import ProcessFailure
from pr_radar.services.batch_service import BatchDetailFetcher
from pr_radar.services.worklist_service import WorklistService

REPO = "acme/widgets"
USER = "alice"
TEAM = "acme/reviewers"
MY_TEAM_KEY = f"review-requested:{TEAM}"


def search_item(number, author="bob", created_at=None, title=None):
    """One `gh search prs --json number,title,url,author,createdAt` row."""
    return {
        "number": number,
        "title": title or f"PR {number}",
        "url": f"https://github.com/{REPO}/pull/{number}",
        "author": {"login": author},
        "createdAt": created_at or f"2024-03-{number:02d}T10:00:00Z",
    }


def review_node(login, state="APPROVED", submitted_at="2024-03-10T12:00:00Z"):
    return {"state": state, "author": {"login": login}, "submittedAt": submitted_at}


def pr_fragment(number, reviews=(), requested=()):
    return {
        "number": number,
        "reviews": {"nodes": list(reviews)},
        "reviewRequests": {"nodes": [{"requestedReviewer": r} for r in requested]},
    }


def graphql_payload(fragments):
    """GraphQL response body with one aliased fragment per PR."""
    return {"data": {"repository": {f"pr{f['number']}": f for f in fragments}}}


def search_key(args):
    """Identify a search by its scoping flags."""
    if "--review-requested" in args:
        return "review-requested:" + args[args.index("--review-requested") + 1]
    if "--reviewed-by" in args:
        return "reviewed-by:" + args[args.index("--reviewed-by") + 1]
    key = "author:" + args[args.index("--author") + 1]
    if "--review" in args:
        key += ":" + args[args.index("--review") + 1]
    return key


class FakeGh:
    """Stands in for GhCli; answers from canned search and GraphQL data.

    `searches` maps search_key() -> list of items (or an Exception to raise).
    `graphql` is a payload dict, raw string, or Exception.
    """

    def __init__(self):
        self.calls = []
        self.searches = {}
        self.graphql = {"data": {"repository": {}}}

    def resolve(self):
        return "/usr/bin/gh"

    def run_command(self, args, check=True):
        self.calls.append(list(args))
        if args[:2] == ["api", "graphql"]:
            return self._answer(self.graphql)
        if args[:2] == ["search", "prs"]:
            return self._answer(self.searches.get(search_key(args), []))
        raise ProcessFailure(f"gh command failed: unexpected args {args}")

    @staticmethod
    def _answer(value):
        if isinstance(value, Exception):
            raise value
        if isinstance(value, str):
            return value
        return json.dumps(value)

    @property
    def search_calls(self):
        return [c for c in self.calls if c[:2] == ["search", "prs"]]

    @property
    def graphql_calls(self):
        return [c for c in self.calls if c[:2] == ["api", "graphql"]]


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def fake_gh():
    return FakeGh()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def pr_cache(clock):
    return PRCache(ttl_seconds=600, timer=clock)


@pytest.fixture
def worklists(fake_gh, pr_cache):
    batch = BatchDetailFetcher(fake_gh, "acme", "widgets")
    return WorklistService(fake_gh, pr_cache, repo=REPO, user=USER, team_slug=TEAM, batch=batch)
