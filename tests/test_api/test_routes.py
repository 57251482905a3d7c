"""Tests for API routes using httpx AsyncClient."""

from __future__ import annotations

import pytest
from httpx import ASGITransport, AsyncClient

from cdelink.api.dependencies import Repos
from cdelink.constants import IndicatorDomain, MaturityLevel
from cdelink.models.project import Project
from cdelink.resilience.errors import ErrorClass, StoreError


@pytest.fixture
async def client(api_app, fake_repos: Repos, make_item):
    """Test client over fake repos seeded with a small catalog."""
    fake_repos.catalog.add(make_item("COM-01", "Coverage Rate"))
    fake_repos.catalog.add(
        make_item(
            "COM-02",
            "Audience Reach",
            maturity_level=MaturityLevel.EXPERT,
        )
    )
    fake_repos.catalog.add(
        make_item(
            "DIS-01",
            "Events Held",
            domain=IndicatorDomain.DISSEMINATION,
        )
    )
    await fake_repos.project.create(Project(id="proj-1", name="Outreach"))

    transport = ASGITransport(app=api_app)
    async with AsyncClient(
        transport=transport, base_url="http://test"
    ) as c:
        yield c


class TestHealthRoutes:
    @pytest.mark.asyncio
    async def test_health(self, client: AsyncClient) -> None:
        resp = await client.get("/api/health")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "healthy"
        assert "version" in data

    @pytest.mark.asyncio
    async def test_health_detailed(self, client: AsyncClient) -> None:
        resp = await client.get("/api/health/detailed")
        assert resp.status_code == 200
        data = resp.json()
        assert data["components"]["database"]["status"] == "connected"
        assert data["components"]["catalog"] == {
            "status": "ready",
            "items": 3,
        }


class TestCatalogRoutes:
    @pytest.mark.asyncio
    async def test_query_all(self, client: AsyncClient) -> None:
        resp = await client.get("/api/catalog")
        data = resp.json()
        assert data["success"] is True
        assert [i["code"] for i in data["data"]] == [
            "COM-01",
            "COM-02",
            "DIS-01",
        ]
        assert data["metadata"]["count"] == 3

    @pytest.mark.asyncio
    async def test_query_filters(self, client: AsyncClient) -> None:
        resp = await client.get(
            "/api/catalog",
            params={
                "domain": "communication",
                "maturity_level": "all",
                "search": "reach",
            },
        )
        assert [i["code"] for i in resp.json()["data"]] == ["COM-02"]

    @pytest.mark.asyncio
    async def test_invalid_limit_rejected(
        self, client: AsyncClient
    ) -> None:
        resp = await client.get("/api/catalog", params={"limit": 0})
        assert resp.status_code == 422

    @pytest.mark.asyncio
    async def test_options(self, client: AsyncClient) -> None:
        resp = await client.get("/api/catalog/options")
        data = resp.json()["data"]
        assert data["domains"][0]["value"] == "all"
        assert data["maturity_levels"][0]["label"] == "All Levels"

    @pytest.mark.asyncio
    async def test_get_item_with_usage(
        self, client: AsyncClient, fake_repos: Repos
    ) -> None:
        fake_repos.attachment.seed("proj-1", "item-com-01")
        resp = await client.get("/api/catalog/item-com-01")
        data = resp.json()["data"]
        assert data["name"] == "Coverage Rate"
        assert data["project_count"] == 1
        assert data["library_route"] == "/library?indicatorId=item-com-01"

    @pytest.mark.asyncio
    async def test_get_missing_item(self, client: AsyncClient) -> None:
        resp = await client.get("/api/catalog/nope")
        data = resp.json()
        assert data["success"] is False
        assert data["error"] == "Catalog item not found"

    @pytest.mark.asyncio
    async def test_transient_store_failure_maps_to_503(
        self, client: AsyncClient, fake_repos: Repos
    ) -> None:
        fake_repos.catalog.fail_with = StoreError(
            "connection refused", ErrorClass.TRANSIENT
        )
        resp = await client.get("/api/catalog")
        assert resp.status_code == 503
        body = resp.json()
        assert body["success"] is False
        assert body["error"] == "Store unavailable, please try again"
        assert body["metadata"]["error_class"] == "transient"

    @pytest.mark.asyncio
    async def test_unclassified_store_failure_maps_to_500(
        self, client: AsyncClient, fake_repos: Repos
    ) -> None:
        fake_repos.catalog.fail_with = StoreError("unexpected")
        resp = await client.get("/api/catalog")
        assert resp.status_code == 500
        assert resp.json()["error"] == "Unexpected store error"


class TestProjectRoutes:
    @pytest.mark.asyncio
    async def test_create_and_get(self, client: AsyncClient) -> None:
        resp = await client.post(
            "/api/projects", json={"name": "Field trials"}
        )
        project = resp.json()["data"]
        assert project["name"] == "Field trials"

        resp = await client.get(f"/api/projects/{project['id']}")
        assert resp.json()["data"]["id"] == project["id"]

    @pytest.mark.asyncio
    async def test_get_missing(self, client: AsyncClient) -> None:
        resp = await client.get("/api/projects/missing")
        assert resp.json()["error"] == "Project not found"

    @pytest.mark.asyncio
    async def test_list_and_delete(self, client: AsyncClient) -> None:
        resp = await client.get("/api/projects")
        assert len(resp.json()["data"]) == 1

        await client.delete("/api/projects/proj-1")
        resp = await client.get("/api/projects")
        assert resp.json()["data"] == []


class TestAttachRoutes:
    @pytest.mark.asyncio
    async def test_attach_then_list(self, client: AsyncClient) -> None:
        resp = await client.post(
            "/api/projects/proj-1/indicators",
            json={
                "item_ids": ["item-dis-01", "item-com-01"],
                "baseline": 0,
            },
        )
        body = resp.json()
        assert body["success"] is True
        assert body["data"]["inserted"] == 2
        assert body["data"]["summary"] == "Added 2 indicators"

        resp = await client.get("/api/projects/proj-1/indicators")
        rows = resp.json()["data"]
        assert [r["indicator"]["code"] for r in rows] == [
            "COM-01",
            "DIS-01",
        ]
        assert rows[0]["baseline"] == 0

    @pytest.mark.asyncio
    async def test_attach_reports_skips(
        self, client: AsyncClient, fake_repos: Repos
    ) -> None:
        fake_repos.attachment.seed("proj-1", "item-com-01")
        resp = await client.post(
            "/api/projects/proj-1/indicators",
            json={"item_ids": ["item-com-01", "item-com-02"]},
        )
        data = resp.json()["data"]
        assert data["inserted"] == 1
        assert data["skipped"] == 1
        assert data["summary"] == (
            "Added 1 indicator, skipped 1 already added"
        )

    @pytest.mark.asyncio
    async def test_attach_empty_rejected(
        self, client: AsyncClient
    ) -> None:
        resp = await client.post(
            "/api/projects/proj-1/indicators", json={"item_ids": []}
        )
        assert resp.status_code == 422

    @pytest.mark.asyncio
    async def test_attach_store_failure(
        self, client: AsyncClient, fake_repos: Repos
    ) -> None:
        fake_repos.attachment.fail_with = StoreError("disk I/O error")
        resp = await client.post(
            "/api/projects/proj-1/indicators",
            json={"item_ids": ["item-com-01"]},
        )
        body = resp.json()
        assert body["success"] is False
        assert body["error"] == (
            "Some indicators could not be added: disk I/O error"
        )
        assert body["data"]["inserted"] == 0
        assert body["data"]["outcome"] == "failed"


class TestEvidenceRoutes:
    @pytest.mark.asyncio
    async def test_create_with_link(self, client: AsyncClient) -> None:
        resp = await client.post(
            "/api/projects/proj-1/evidence",
            json={
                "type": "agenda",
                "title": "Workshop agenda",
                "evidence_date": "2024-04-02",
                "link_to": {
                    "entity_kind": "activity",
                    "entity_id": "act-1",
                },
            },
        )
        body = resp.json()
        assert body["metadata"]["link"] == "linked"
        evidence_id = body["data"]["id"]

        resp = await client.get("/api/evidence-links/activity/act-1")
        assert resp.json()["data"] == [evidence_id]

        resp = await client.get("/api/projects/proj-1/evidence")
        assert resp.json()["data"][0]["evidence_date"] == "2024-04-02"

    @pytest.mark.asyncio
    async def test_link_and_unlink(self, client: AsyncClient) -> None:
        url = "/api/evidence-links/indicator/ind-1/ev-1"
        first = await client.post(url)
        second = await client.post(url)
        assert first.json()["data"]["outcome"] == "linked"
        assert second.json()["data"]["outcome"] == "already_linked"

        removed = await client.delete(url)
        again = await client.delete(url)
        assert removed.json()["data"]["removed"] is True
        assert again.json()["data"]["removed"] is False

    @pytest.mark.asyncio
    async def test_unknown_kind_rejected(
        self, client: AsyncClient
    ) -> None:
        resp = await client.post("/api/evidence-links/workshop/w-1/ev-1")
        assert resp.status_code == 422

    @pytest.mark.asyncio
    async def test_blank_title_rejected(
        self, client: AsyncClient
    ) -> None:
        resp = await client.post(
            "/api/projects/proj-1/evidence", json={"title": ""}
        )
        assert resp.status_code == 422
