"""Tests for evidence and evidence-link repositories against SQLite."""

from __future__ import annotations

import sqlite3
from datetime import date
from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from cdelink.constants import EntityKind, EvidenceType
from cdelink.models.evidence import EvidenceItem, EvidenceLink
from cdelink.models.project import Project
from cdelink.repositories.evidence_repo import (
    SqlEvidenceLinkRepository,
    SqlEvidenceRepository,
)
from cdelink.resilience.errors import (
    ErrorClass,
    StoreError,
    UniqueConstraintError,
)


@pytest.fixture
async def evidence_id(session: AsyncSession) -> str:
    session.add(Project(id="proj-1", name="Outreach"))
    item = await SqlEvidenceRepository(session).create(
        EvidenceItem(
            project_id="proj-1",
            type=EvidenceType.PHOTO,
            title="Stand photo",
            evidence_date=date(2024, 3, 1),
        )
    )
    await session.commit()
    return item.id


class TestSqlEvidenceRepository:
    @pytest.mark.asyncio
    async def test_list_by_project_newest_first(
        self, session: AsyncSession, evidence_id: str
    ) -> None:
        repo = SqlEvidenceRepository(session)
        await repo.create(
            EvidenceItem(
                project_id="proj-1",
                title="Later",
                evidence_date=date(2024, 6, 1),
            )
        )
        items = await repo.list_by_project("proj-1")
        assert [i.title for i in items] == ["Later", "Stand photo"]
        assert items[0].type == EvidenceType.SCREENSHOT

    @pytest.mark.asyncio
    async def test_get_by_id(
        self, session: AsyncSession, evidence_id: str
    ) -> None:
        item = await SqlEvidenceRepository(session).get_by_id(evidence_id)
        assert item is not None
        assert item.to_dict()["evidence_date"] == "2024-03-01"


class TestSqlEvidenceLinkRepository:
    @pytest.mark.asyncio
    async def test_insert_and_lookup(
        self, session: AsyncSession, evidence_id: str
    ) -> None:
        repo = SqlEvidenceLinkRepository(session)
        link = await repo.insert(
            EvidenceLink.for_entity(EntityKind.ASSET, "asset-1", evidence_id)
        )
        assert link.entity == (EntityKind.ASSET, "asset-1")
        assert await repo.evidence_ids_for(
            EntityKind.ASSET, "asset-1"
        ) == [evidence_id]
        assert await repo.evidence_ids_for(
            EntityKind.ACTIVITY, "asset-1"
        ) == []

    @pytest.mark.asyncio
    async def test_duplicate_link_raises_unique_error(
        self, session: AsyncSession, evidence_id: str
    ) -> None:
        repo = SqlEvidenceLinkRepository(session)
        await repo.insert(
            EvidenceLink.for_entity(
                EntityKind.INDICATOR, "ind-1", evidence_id
            )
        )
        await session.commit()

        with pytest.raises(UniqueConstraintError):
            await repo.insert(
                EvidenceLink.for_entity(
                    EntityKind.INDICATOR, "ind-1", evidence_id
                )
            )
        assert await repo.evidence_ids_for(
            EntityKind.INDICATOR, "ind-1"
        ) == [evidence_id]

    @pytest.mark.asyncio
    async def test_one_evidence_many_entities(
        self, session: AsyncSession, evidence_id: str
    ) -> None:
        repo = SqlEvidenceLinkRepository(session)
        for kind in EntityKind:
            await repo.insert(
                EvidenceLink.for_entity(kind, "shared", evidence_id)
            )
        await repo.insert(
            EvidenceLink.for_entity(EntityKind.ACTIVITY, "other", evidence_id)
        )
        for kind in EntityKind:
            assert await repo.evidence_ids_for(kind, "shared") == [
                evidence_id
            ]

    @pytest.mark.asyncio
    async def test_link_without_entity_rejected(
        self, session: AsyncSession, evidence_id: str
    ) -> None:
        repo = SqlEvidenceLinkRepository(session)
        with pytest.raises(StoreError) as info:
            await repo.insert(EvidenceLink(evidence_item_id=evidence_id))
        assert not isinstance(info.value, UniqueConstraintError)

    @pytest.mark.asyncio
    async def test_delete_returns_rowcount(
        self, session: AsyncSession, evidence_id: str
    ) -> None:
        repo = SqlEvidenceLinkRepository(session)
        await repo.insert(
            EvidenceLink.for_entity(
                EntityKind.PUBLICATION, "pub-1", evidence_id
            )
        )
        assert await repo.delete(
            EntityKind.PUBLICATION, "pub-1", evidence_id
        ) == 1
        assert await repo.delete(
            EntityKind.PUBLICATION, "pub-1", evidence_id
        ) == 0

    @pytest.mark.asyncio
    async def test_failed_delete_rolls_back(
        self, session: AsyncSession, evidence_id: str
    ) -> None:
        repo = SqlEvidenceLinkRepository(session)
        locked = OperationalError(
            "DELETE", {}, sqlite3.OperationalError("database is locked")
        )
        with (
            patch.object(
                session, "execute", AsyncMock(side_effect=locked)
            ),
            patch.object(session, "rollback", AsyncMock()) as rollback,
        ):
            with pytest.raises(StoreError) as info:
                await repo.delete(EntityKind.ASSET, "a-1", evidence_id)

        rollback.assert_awaited_once()
        assert info.value.error_class is ErrorClass.TRANSIENT
        assert info.value.retryable
