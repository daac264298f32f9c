"""Tests for content API endpoints."""

import logging
from pathlib import Path

import pytest
from aiohttp.test_utils import TestClient
from contentnav.config import Config, ContentConfig, LiveReloadConfig, ServerConfig
from contentnav.server import create_app


@pytest.fixture
def client(test_config: Config, aiohttp_client) -> TestClient:
    """Create test client with configured app."""
    app = create_app(test_config)
    return aiohttp_client(app)


def _make_config(source_dir: Path) -> Config:
    return Config(
        server=ServerConfig(),
        content=ContentConfig(source_dir=source_dir),
        live_reload=LiveReloadConfig(enabled=False),
    )


class TestGetNavigation:
    """Tests for GET /api/nav/{group}."""

    @pytest.mark.asyncio
    async def test__docs__returns_tree(self, client) -> None:
        test_client = await client
        response = await test_client.get("/api/nav/docs")

        assert response.status == 200
        data = await response.json()
        assert [item["id"] for item in data] == ["docs", "docs-core"]
        assert [item["id"] for item in data[1]["items"]] == [
            "docs-core-accounts",
            "docs-core-transactions",
            "docs-core-fees",
        ]

    @pytest.mark.asyncio
    async def test__synthesized_category__no_href(self, client) -> None:
        test_client = await client
        response = await test_client.get("/api/nav/docs")

        data = await response.json()
        fees = data[1]["items"][2]
        assert fees["label"] == "Fees"
        assert "href" not in fees
        assert fees["items"][0]["href"] == "/docs/core/fees/priority"

    @pytest.mark.asyncio
    async def test__locale_prefix__translated_tree(self, client) -> None:
        test_client = await client
        response = await test_client.get("/api/nav/de/docs")

        assert response.status == 200
        data = await response.json()
        assert data[0]["label"] == "Dokumentation"

    @pytest.mark.asyncio
    async def test__unknown_group__returns_404(self, client) -> None:
        test_client = await client
        response = await test_client.get("/api/nav/blog")

        assert response.status == 404
        data = await response.json()
        assert data == {"error": "Unknown content group", "path": "blog"}

    @pytest.mark.asyncio
    async def test__unsupported_locale__returns_404(self, client) -> None:
        test_client = await client
        response = await test_client.get("/api/nav/fr/docs")

        assert response.status == 404
        data = await response.json()
        assert data["error"] == "Unsupported locale"

    @pytest.mark.asyncio
    async def test__broken_course__returns_500(self, tmp_path: Path, aiohttp_client) -> None:
        """Report dangling lesson references as a server-side content error."""
        course = tmp_path / "content" / "courses" / "c1"
        course.mkdir(parents=True)
        (course / "metadata.yml").write_text("title: C1\nlessons:\n  - missing\n")
        test_client = await aiohttp_client(create_app(_make_config(tmp_path)))

        response = await test_client.get("/api/nav/courses")

        assert response.status == 500
        data = await response.json()
        assert data["error"] == "Content integrity error"
        assert "missing" in data["detail"]


class TestGetContent:
    """Tests for GET /api/content/{path}."""

    @pytest.mark.asyncio
    async def test__page__returns_record_with_navigation(self, client) -> None:
        test_client = await client
        response = await test_client.get("/api/content/docs/core/accounts")

        assert response.status == 200
        data = await response.json()
        assert data["title"] == "Accounts"
        assert data["href"] == "/docs/core/accounts"
        assert data["prev"]["href"] == "/docs/core"
        assert data["next"]["href"] == "/docs/core/transactions"
        assert [crumb["label"] for crumb in data["breadcrumbs"]] == ["Documentation", "Core Concepts"]

    @pytest.mark.asyncio
    async def test__translated_page__returns_translation(self, client) -> None:
        test_client = await client
        response = await test_client.get("/api/content/de/docs/intro")

        assert response.status == 200
        data = await response.json()
        assert data["title"] == "Einführung"
        assert data["locale"] == "de"

    @pytest.mark.asyncio
    async def test__lesson__course_order(self, client) -> None:
        test_client = await client
        response = await test_client.get("/api/content/developers/courses/intro-to-solana/setup")

        assert response.status == 200
        data = await response.json()
        assert data["prev"]["slug"] == "intro"
        assert data["next"]["slug"] == "advanced"

    @pytest.mark.asyncio
    async def test__response__has_etag(self, client) -> None:
        test_client = await client
        response = await test_client.get("/api/content/docs/intro")

        assert response.status == 200
        assert response.headers["ETag"].startswith('"')
        assert "max-age" in response.headers["Cache-Control"]

    @pytest.mark.asyncio
    async def test__matching_etag__returns_304(self, client) -> None:
        test_client = await client
        first = await test_client.get("/api/content/docs/intro")
        etag = first.headers["ETag"]

        response = await test_client.get("/api/content/docs/intro", headers={"If-None-Match": etag})

        assert response.status == 304

    @pytest.mark.asyncio
    async def test__missing_page__returns_404(self, client) -> None:
        test_client = await client
        response = await test_client.get("/api/content/docs/missing")

        assert response.status == 404
        data = await response.json()
        assert data == {"error": "Not found", "path": "docs/missing"}

    @pytest.mark.asyncio
    async def test__unsupported_locale__returns_404(self, client) -> None:
        test_client = await client
        response = await test_client.get("/api/content/fr/docs/intro")

        assert response.status == 404

    @pytest.mark.asyncio
    async def test__empty_path__returns_400(self, client) -> None:
        test_client = await client
        response = await test_client.get("/api/content/")

        assert response.status == 400


class TestGetRecords:
    """Tests for GET /api/records/{group}."""

    @pytest.mark.asyncio
    async def test__group__returns_records_and_pagination(self, client) -> None:
        test_client = await client
        response = await test_client.get("/api/records/guides")

        assert response.status == 200
        data = await response.json()
        assert len(data["records"]) == 3
        assert data["pagination"]["totalRecords"] == 3
        assert all("body" not in record for record in data["records"])

    @pytest.mark.asyncio
    async def test__page_size__limits_records(self, client) -> None:
        test_client = await client
        response = await test_client.get("/api/records/guides?pageSize=2&page=2")

        data = await response.json()
        assert len(data["records"]) == 1
        assert data["pagination"]["totalPages"] == 2
        assert data["pagination"]["hasPreviousPage"] is True

    @pytest.mark.asyncio
    async def test__sort_field__orders_records(self, client) -> None:
        test_client = await client
        response = await test_client.get("/api/records/guides?sortField=title&sortDirection=desc")

        data = await response.json()
        assert [record["title"] for record in data["records"]] == [
            "ZK Compression",
            "Intro to Anchor",
            "Hello World",
        ]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "query",
        ["page=0", "page=abc", "pageSize=-1", "sortDirection=sideways"],
    )
    async def test__invalid_query__returns_400(self, client, query: str) -> None:
        test_client = await client
        response = await test_client.get(f"/api/records/guides?{query}")

        assert response.status == 400


    @pytest.mark.asyncio
    async def test__mixed_type_sort_field__returns_200(self, tmp_path: Path, aiohttp_client) -> None:
        guides = tmp_path / "content" / "guides"
        guides.mkdir(parents=True)
        (guides / "a.md").write_text("---\ntitle: A\nlevel: advanced\n---\n\nText\n")
        (guides / "b.md").write_text("---\ntitle: B\nlevel: 3\n---\n\nText\n")
        test_client = await aiohttp_client(create_app(_make_config(tmp_path)))

        response = await test_client.get("/api/records/guides?sortField=level")

        assert response.status == 200
        data = await response.json()
        assert [record["title"] for record in data["records"]] == ["B", "A"]


class TestGetPaths:
    """Tests for GET /api/paths/{group}."""

    @pytest.mark.asyncio
    async def test__docs__includes_alt_routes(self, client) -> None:
        test_client = await client
        response = await test_client.get("/api/paths/docs")

        assert response.status == 200
        hrefs = [entry["href"] for entry in await response.json()]
        assert "/docs/intro" in hrefs
        assert "/docs/getting-started" in hrefs
        assert "/docs/rpc" not in hrefs

    @pytest.mark.asyncio
    async def test__rpc__lists_rpc_routes(self, client) -> None:
        test_client = await client
        response = await test_client.get("/api/paths/docs/rpc")

        hrefs = [entry["href"] for entry in await response.json()]
        assert "/docs/rpc/http/get-balance" in hrefs


class TestGetOverview:
    """Tests for GET /api/overview."""

    @pytest.mark.asyncio
    async def test__default_locale__featured_by_group(self, client) -> None:
        test_client = await client
        response = await test_client.get("/api/overview")

        assert response.status == 200
        data = await response.json()
        assert [record["slug"] for record in data["guides"]] == ["hello-world", "intro-to-anchor"]
        assert [record["slug"] for record in data["resources"]] == ["anchor"]
        assert data["workshops"] == []

    @pytest.mark.asyncio
    async def test__untranslated_locale__falls_back(self, client) -> None:
        test_client = await client
        response = await test_client.get("/api/overview/de")

        assert response.status == 200
        data = await response.json()
        assert len(data["guides"]) == 2

    @pytest.mark.asyncio
    async def test__unsupported_locale__returns_404(self, client) -> None:
        test_client = await client
        response = await test_client.get("/api/overview/fr")

        assert response.status == 404


class TestErrorResponses:
    """Tests for errors shared by every endpoint."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("url", ["/api/nav/docs", "/api/content/docs", "/api/paths/docs", "/api/overview"])
    async def test__unparseable_content__returns_json_500(self, tmp_path: Path, aiohttp_client, url: str) -> None:
        """Report a broken content file as a JSON error naming the file."""
        docs = tmp_path / "docs"
        docs.mkdir()
        (docs / "bad.md").write_text("---\ntitle: [unclosed\n---\n\nText\n")
        test_client = await aiohttp_client(create_app(_make_config(tmp_path)))

        response = await test_client.get(url)

        assert response.status == 500
        data = await response.json()
        assert data["error"] == "Content load error"
        assert "docs/bad.md" in data["detail"]

    @pytest.mark.asyncio
    async def test__verbose__logs_misses_as_warnings(self, content_dir: Path, aiohttp_client, caplog) -> None:
        test_client = await aiohttp_client(create_app(_make_config(content_dir), verbose=True))

        with caplog.at_level(logging.DEBUG, logger="contentnav.api.common"):
            response = await test_client.get("/api/content/docs/missing")

        assert response.status == 404
        assert [r.levelno for r in caplog.records if r.name == "contentnav.api.common"] == [logging.WARNING]

    @pytest.mark.asyncio
    async def test__not_verbose__logs_misses_at_debug(self, content_dir: Path, aiohttp_client, caplog) -> None:
        test_client = await aiohttp_client(create_app(_make_config(content_dir)))

        with caplog.at_level(logging.DEBUG, logger="contentnav.api.common"):
            response = await test_client.get("/api/content/docs/missing")

        assert response.status == 404
        assert [r.levelno for r in caplog.records if r.name == "contentnav.api.common"] == [logging.DEBUG]
