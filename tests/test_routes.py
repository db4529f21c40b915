"""Tests for the Flask HTTP surface."""

from unittest.mock import patch

import pytest
from conftest import MY_TEAM_KEY, USER, graphql_payload, pr_fragment, review_node, search_item

from pr_radar import create_app
from pr_radar.cache.pr_cache import PRCache
from pr_radar.context import build_context
from pr_radar.errors import ProcessFailure, ToolNotFound
from pr_radar.models import Category

CONFIG = {
    "repo": "acme/widgets",
    "user": USER,
    "team_slug": "acme/reviewers",
    "cache_ttl_seconds": 600,
    "max_workers": 2,
}


@pytest.fixture
def app_context(fake_gh, clock):
    return build_context(dict(CONFIG), gh=fake_gh, cache=PRCache(600, timer=clock))


@pytest.fixture
def client(app_context):
    app = create_app(config=dict(CONFIG), context=app_context)
    app.config["TESTING"] = True
    yield app.test_client()
    app_context.dispatcher.shutdown()


class TestCreateApp:
    def test_repeated_apps_leave_no_exit_hooks(self, app_context):
        with patch("atexit.register") as register:
            create_app(config=dict(CONFIG), context=app_context)
            create_app(config=dict(CONFIG), context=app_context)
        register.assert_not_called()
        app_context.dispatcher.shutdown()


class TestWorklistRoutes:
    def test_get_worklist(self, client, fake_gh):
        fake_gh.searches[MY_TEAM_KEY] = [search_item(1), search_item(2)]
        fake_gh.graphql = graphql_payload([pr_fragment(1, reviews=[review_node("bob")], requested=[{"slug": "ml"}])])

        resp = client.get("/api/worklists/medium")
        assert resp.status_code == 200
        body = resp.get_json()
        assert body["category"] == "medium"
        assert body["prs"] == [{
            "number": 1,
            "title": "PR 1",
            "url": "https://github.com/acme/widgets/pull/1",
            "author": "bob",
            "created_at": "2024-03-01T10:00:00Z",
            "approvals": [{"username": "bob", "approved_at": "2024-03-10T12:00:00Z"}],
            "requested_reviewers": ["team:ml"],
        }]

    def test_cached_then_forced(self, client, fake_gh):
        client.get("/api/worklists/low")
        calls = len(fake_gh.calls)
        client.get("/api/worklists/low")
        assert len(fake_gh.calls) == calls
        client.get("/api/worklists/low?force=true")
        assert len(fake_gh.calls) > calls

    def test_unknown_category(self, client):
        resp = client.get("/api/worklists/urgent")
        assert resp.status_code == 400
        assert "Unknown category" in resp.get_json()["error"]

    def test_search_failure_is_500(self, client, fake_gh):
        fake_gh.searches[f"review-requested:{USER}"] = ProcessFailure("gh command failed: bad creds")
        resp = client.get("/api/worklists/high")
        assert resp.status_code == 500
        assert "bad creds" in resp.get_json()["error"]

    def test_missing_tool_is_503(self, client, fake_gh):
        fake_gh.searches[f"review-requested:{USER}"] = ToolNotFound()
        resp = client.get("/api/worklists/high")
        assert resp.status_code == 503


class TestCacheRoutes:
    def test_invalidate_one(self, client, app_context):
        app_context.cache.put(Category.LOW_PRIORITY, [])
        app_context.cache.put(Category.HIGH_PRIORITY, [])
        resp = client.post("/api/cache/invalidate", json={"category": "low"})
        assert resp.status_code == 200
        assert app_context.cache.get(Category.LOW_PRIORITY) is None
        assert app_context.cache.get(Category.HIGH_PRIORITY) is not None

    def test_invalidate_all_without_body(self, client, app_context):
        app_context.cache.put(Category.LOW_PRIORITY, [])
        resp = client.post("/api/cache/invalidate")
        assert resp.status_code == 200
        assert app_context.cache.get(Category.LOW_PRIORITY) is None

    def test_invalidate_unknown_category(self, client):
        assert client.post("/api/cache/invalidate", json={"category": "nope"}).status_code == 400

    def test_clear_cache(self, client, app_context):
        app_context.cache.put(Category.MY_APPROVED, [])
        assert client.post("/api/clear-cache").status_code == 200
        assert app_context.cache.get(Category.MY_APPROVED) is None


class TestStatsRoute:
    def test_stats_shape(self, client):
        resp = client.get("/api/stats")
        assert resp.status_code == 200
        assert set(resp.get_json()["stats"]) == {
            "prs_merged_mtd", "prs_merged_prev_month", "prs_merged_prev_3_months",
            "prs_approved_mtd", "prs_approved_prev_month", "prs_approved_prev_3_months",
        }


class TestItemRoutes:
    def test_missing_url(self, client):
        assert client.get("/api/items/title").status_code == 400
        assert client.get("/api/prs/info").status_code == 400

    def test_invalid_reference(self, client):
        resp = client.get("/api/prs/info", query_string={"url": "https://example.com/x"})
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "Invalid PR URL format"
