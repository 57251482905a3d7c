"""Tests for SqlProjectRepository, ProjectService and DataService."""

from __future__ import annotations

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from cdelink.models.project import Project
from cdelink.repositories.project_repo import SqlProjectRepository
from cdelink.resilience.errors import ValidationError
from cdelink.services.data_service import DataService
from cdelink.services.project_service import ProjectService


class TestSqlProjectRepository:
    @pytest.mark.asyncio
    async def test_create_and_get(self, session: AsyncSession) -> None:
        repo = SqlProjectRepository(session)
        created = await repo.create(Project(name="Outreach"))
        assert created.id

        fetched = await repo.get_by_id(created.id)
        assert fetched is not None
        assert fetched.name == "Outreach"

    @pytest.mark.asyncio
    async def test_delete(self, session: AsyncSession) -> None:
        repo = SqlProjectRepository(session)
        await repo.create(Project(id="p1", name="Gone"))
        await repo.delete("p1")
        assert await repo.get_by_id("p1") is None

    @pytest.mark.asyncio
    async def test_list_all(self, session: AsyncSession) -> None:
        repo = SqlProjectRepository(session)
        await repo.create(Project(name="A"))
        await repo.create(Project(name="B"))
        assert len(await repo.list_all()) == 2


class TestProjectService:
    @pytest.mark.asyncio
    async def test_blank_name_rejected(self, session: AsyncSession) -> None:
        service = ProjectService(SqlProjectRepository(session))
        with pytest.raises(ValidationError):
            await service.create("   ")

    @pytest.mark.asyncio
    async def test_name_trimmed(self, session: AsyncSession) -> None:
        service = ProjectService(SqlProjectRepository(session))
        project = await service.create("  Field trials ")
        assert project.name == "Field trials"


class TestDataService:
    @pytest.mark.asyncio
    async def test_check_connection(self, engine) -> None:
        service = DataService(async_sessionmaker(engine))
        assert await service.check_connection() is True

    @pytest.mark.asyncio
    async def test_catalog_size_counts_active(
        self, engine, session: AsyncSession, make_item
    ) -> None:
        session.add_all(
            [make_item("COM-01"), make_item("COM-02", is_active=False)]
        )
        await session.commit()
        service = DataService(async_sessionmaker(engine))
        assert await service.catalog_size() == 1
