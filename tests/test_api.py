"""Tests for the HTTP API."""

import json

import pytest

from api.index import handler
from booru_sidebar.main import app
from booru_sidebar.models.schemas import ApiFamily


class TestSystem:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_providers(self, client):
        data = client.get("/providers").json()
        assert data["providers"]["konachan"] == "moebooru"
        assert set(data["families"]) == {f.value for f in ApiFamily}

    def test_entry_point_handler_is_the_app(self):
        assert handler is app


# =============================================================================
# Similarity endpoints
# =============================================================================


class TestSimilarityEndpoints:
    def test_compare(self, client):
        response = client.post("/similarity/compare", json={"a": "kitten", "b": "sitting"})
        assert response.status_code == 200
        data = response.json()
        assert data["distance"] == 3
        assert 0.0 <= data["score"] <= 1.0
        assert 0.0 <= data["text_match_score"] <= 1.0

    def test_compare_query_too_long(self, client):
        response = client.post("/similarity/compare", json={"a": "ab" * 150, "b": "xy" * 1500})
        assert response.status_code == 400
        assert "Query too long" in response.json()["detail"]

    def test_score_query_too_long(self, client):
        response = client.post("/similarity/score", json={"a": "xy" * 1500, "b": "ab" * 150})
        assert response.status_code == 400

    def test_compare_truncates_longer_string(self, client):
        response = client.post("/similarity/compare", json={"a": "cat", "b": "cat" + "x" * 5000})
        assert response.status_code == 200
        assert response.json()["partial_ratio"] == 1.0

    def test_score_methods(self, client):
        general = client.post("/similarity/score", json={"a": "abcdef", "b": "abcxyz"}).json()
        assert general["method"] == "general"
        assert general["score"] == pytest.approx(0.56)

        text = client.post(
            "/similarity/score", json={"a": "cat", "b": "category", "method": "text_match"}
        ).json()
        assert text["score"] == pytest.approx(0.98)

    def test_score_rejects_non_strings(self, client):
        response = client.post("/similarity/score", json={"a": 1, "b": "x"})
        assert response.status_code == 422

    def test_rank(self, client):
        response = client.post(
            "/similarity/rank",
            json={"query": "cat", "candidates": ["dog", "category", "cat"], "min_score": 0.5},
        )
        assert response.status_code == 200
        results = response.json()["results"]
        assert [r["candidate"] for r in results] == ["cat", "category"]
        assert [r["index"] for r in results] == [2, 1]

    def test_rank_query_too_long(self, client):
        response = client.post(
            "/similarity/rank", json={"query": "q" * 1000, "candidates": ["a"]}
        )
        assert response.status_code == 400

    def test_rank_invalid_method(self, client):
        response = client.post(
            "/similarity/rank", json={"query": "cat", "candidates": [], "method": "soundex"}
        )
        assert response.status_code == 422

    def test_tag_suggest(self, client):
        response = client.post(
            "/tags/suggest",
            json={
                "query": " cat ",
                "tags": [{"name": "dog", "count": 9}, {"name": "cat_ears", "count": 3}],
                "limit": 1,
            },
        )
        data = response.json()
        assert data["query"] == "cat"
        assert [s["name"] for s in data["suggestions"]] == ["cat_ears"]

    def test_tag_suggest_highlight(self, client):
        response = client.post(
            "/tags/suggest",
            json={"query": "cat", "tags": [{"name": "cat&dog", "count": 1}], "highlight": True},
        )
        assert response.json()["suggestions"][0]["label"] == "<b>cat</b>&amp;dog"


# =============================================================================
# Normalization endpoints
# =============================================================================


class TestNormalizeEndpoints:
    def test_normalize_by_family(self, client):
        body = [{"id": 1, "file_url": "https://files.yande.re/a.png", "rating": "s"}]
        response = client.post("/normalize/moebooru/posts", json=body)
        assert response.status_code == 200
        data = response.json()
        assert data["family"] == "moebooru"
        assert data["count"] == 1
        assert data["posts"][0]["file_ext"] == "png"

    def test_normalize_by_provider(self, client):
        body = {"post": [{"id": 1, "rating": "explicit", "file_url": "https://img.gelbooru.com/a.jpg"}]}
        data = client.post("/normalize/gelbooru/posts", json=body).json()
        assert data["posts"][0]["rating"] == "e"

        data = client.post("/normalize/konachan/posts", json=[]).json()
        assert data == {"family": "moebooru", "count": 0, "posts": []}

    def test_e926_is_sfw_only(self, client):
        body = {"posts": [{"id": 1, "rating": "q", "file": {"url": "https://static1.e926.net/a.png"}}]}
        data = client.post("/normalize/e926/posts", json=body).json()
        assert data["family"] == "e621"
        assert data["posts"][0]["is_nsfw"] is False

    def test_shimmie_xml_body(self, client):
        xml = '<posts><tag id="9" file_url="https://cdn.example/x" file_name="x.gif" /></posts>'
        response = client.post(
            "/normalize/paheal/posts",
            content=xml,
            headers={"Content-Type": "application/xml"},
        )
        data = response.json()
        assert data["family"] == "shimmie"
        assert data["posts"][0]["id"] == 9
        assert data["posts"][0]["file_ext"] == "gif"

    def test_normalize_by_site_host(self, client):
        body = {"posts": [{"id": 1, "rating": "e", "file": {"url": "https://static1.e926.net/a.png"}}]}
        data = client.post("/normalize/e926.net/posts", json=body).json()
        assert data["family"] == "e621"
        assert data["posts"][0]["is_nsfw"] is False

    def test_shimmie_site_url(self, client):
        xml = '<posts><tag id="1" file_url="https://cdn.example/x" preview_url="/thumbs/1.jpg" /></posts>'
        data = client.post(
            "/normalize/shimmie/posts",
            params={"site_url": "https://booru.example.net/post/list"},
            content=xml,
        ).json()
        assert data["posts"][0]["preview_url"] == "https://booru.example.net/thumbs/1.jpg"

    def test_shimmie_entities_refused(self, client):
        xml = (
            '<!DOCTYPE posts [<!ENTITY c "cccccccccc"><!ENTITY b "&c;&c;&c;&c;&c;&c;&c;&c;&c;&c;">'
            '<!ENTITY a "&b;&b;&b;&b;&b;&b;&b;&b;&b;&b;">]>'
            '<posts><tag id="1" file_url="https://cdn.example/x" tags="&a;" /></posts>'
        )
        response = client.post("/normalize/paheal/posts", content=xml)
        assert response.status_code == 200
        assert response.json() == {"family": "shimmie", "count": 0, "posts": []}

    def test_json_with_bom(self, client):
        raw = "\ufeff" + json.dumps([{"name": "cat", "count": 2}])
        response = client.post(
            "/normalize/yandere/tags",
            content=raw.encode("utf-8"),
            headers={"Content-Type": "application/json"},
        )
        assert response.json()["tags"] == [{"name": "cat", "count": 2}]

    def test_autocomplete_tags(self, client):
        body = [{"label": "cat (12)", "value": "cat"}]
        data = client.post("/normalize/safebooru/tags?autocomplete=true", json=body).json()
        assert data["tags"] == [{"name": "cat", "count": 12}]

    def test_unknown_family(self, client):
        response = client.post("/normalize/myspace/posts", json=[])
        assert response.status_code == 404

    def test_invalid_json(self, client):
        response = client.post(
            "/normalize/danbooru/posts",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400


# =============================================================================
# Download endpoint
# =============================================================================


class TestDownloadCommand:
    def test_builds_bash_command(self, client):
        response = client.post(
            "/downloads/command",
            json={"url": "https://x.example/a.png", "directory": "/tmp/booru", "file_name": "a.png"},
        )
        command = response.json()["command"]
        assert command[:2] == ["bash", "-c"]
        assert command[2].startswith("mkdir -p '/tmp/booru' && curl -fsSL -A 'Mozilla/5.0 BooruSidebar/1.0'")

    def test_requires_file_name(self, client):
        response = client.post(
            "/downloads/command", json={"url": "https://x.example/a.png", "directory": "/tmp", "file_name": ""}
        )
        assert response.status_code == 422

    def test_file_url_and_file_protocol_directory(self, client):
        response = client.post(
            "/downloads/command",
            json={"url": "https://x.example/a.png", "directory": "file:///tmp/my booru", "file_name": "a.png"},
        )
        data = response.json()
        assert data["file_url"] == "file:///tmp/my booru/a.png"
        assert data["command"][2].startswith("mkdir -p '/tmp/my booru' && ")
        assert data["command"][2].endswith("-o '/tmp/my booru/a.png'")


# =============================================================================
# Settings state
# =============================================================================


class TestStateRestore:
    def test_applies_known_keys(self, client):
        response = client.post(
            "/state/restore",
            json={
                "current": {"provider": "yandere", "page_size": 20, "search": {"safe_mode": True}},
                "snapshot": {"provider": "danbooru", "unknown": 1, "search": {"history": []}},
            },
        )
        assert response.status_code == 200
        assert response.json()["state"] == {
            "provider": "danbooru",
            "page_size": 20,
            "search": {"history": []},
        }

    def test_strips_bookkeeping_keys(self, client):
        response = client.post(
            "/state/restore",
            json={"current": {"objectName": "config", "_version": 2, "theme": "dark"}, "snapshot": {}},
        )
        assert response.json()["state"] == {"_version": 2, "theme": "dark"}
