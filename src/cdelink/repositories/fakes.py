"""In-memory fake repositories for testing.

Dict/list-backed implementations of all repository protocols.
No SQLAlchemy I/O. Uniqueness rules mirror the database
constraints: a conflicting batch raises UniqueConstraintError and
stores nothing.
"""

# pyright: reportUnusedFunction=false

from __future__ import annotations

import uuid
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime

from cdelink.constants import AttachmentStatus, EntityKind
from cdelink.models.attachment import ProjectAttachment
from cdelink.models.catalog import CatalogItem
from cdelink.models.evidence import EvidenceItem, EvidenceLink
from cdelink.models.project import Project
from cdelink.resilience.errors import StoreError, UniqueConstraintError
from cdelink.schemas import CatalogFilter


class FakeProjectRepository:
    """Dict-backed ProjectRepository for testing."""

    def __init__(self) -> None:
        self._store: dict[str, Project] = {}

    async def get_by_id(self, project_id: str) -> Project | None:
        return self._store.get(project_id)

    async def list_all(self) -> list[Project]:
        return list(self._store.values())

    async def create(self, project: Project) -> Project:
        if not project.id:
            project.id = str(uuid.uuid4())
        project.created_at = datetime.now(UTC)
        self._store[project.id] = project
        return project

    async def delete(self, project_id: str) -> None:
        self._store.pop(project_id, None)


class FakeCatalogRepository:
    """List-backed CatalogRepository for testing."""

    def __init__(self, items: list[CatalogItem] | None = None) -> None:
        self._store: list[CatalogItem] = []
        self.fail_with: Exception | None = None
        for item in items or []:
            self.add(item)

    def add(self, item: CatalogItem) -> CatalogItem:
        if not item.item_id:
            item.item_id = str(uuid.uuid4())
        if item.is_active is None:
            item.is_active = True
        self._store.append(item)
        return item

    async def query(
        self, filters: CatalogFilter, default_window: int
    ) -> list[CatalogItem]:
        if self.fail_with is not None:
            raise self.fail_with
        results = [i for i in self._store if i.is_active]
        domain = filters.domain_constraint
        if domain:
            results = [i for i in results if i.domain == domain]
        maturity = filters.maturity_constraint
        if maturity:
            results = [
                i for i in results if i.maturity_level == maturity
            ]
        term = filters.search_term
        if term:
            q = term.lower()
            results = [
                i
                for i in results
                if q in i.name.lower()
                or q in i.code.lower()
                or q in i.definition.lower()
            ]
        results.sort(key=lambda i: (i.domain, i.code))
        offset, limit = filters.window(default_window)
        end = None if limit is None else offset + limit
        return results[offset:end]

    async def get_by_id(self, item_id: str) -> CatalogItem | None:
        for item in self._store:
            if item.item_id == item_id and item.is_active:
                return item
        return None


class FakeAttachmentRepository:
    """List-backed AttachmentRepository for testing.

    ``after_read`` runs after every existing-id read, which lets a
    test hold several attach calls between their read and their
    insert. ``fail_with`` makes the next bulk insert raise.
    """

    def __init__(
        self,
        catalog: FakeCatalogRepository | None = None,
        after_read: Callable[[], Awaitable[None]] | None = None,
    ) -> None:
        self._store: list[ProjectAttachment] = []
        self._catalog = catalog
        self._after_read = after_read
        self.fail_with: Exception | None = None
        self.read_calls = 0
        self.insert_calls = 0
        # Ids the store accepts but does not persist
        self.silently_dropped: set[str] = set()

    def seed(self, project_id: str, *item_ids: str) -> None:
        for item_id in item_ids:
            self._store.append(
                ProjectAttachment(
                    project_indicator_id=str(uuid.uuid4()),
                    project_id=project_id,
                    item_id=item_id,
                    status=AttachmentStatus.ACTIVE,
                )
            )

    def rows(self, project_id: str) -> list[ProjectAttachment]:
        return [a for a in self._store if a.project_id == project_id]

    async def existing_item_ids(self, project_id: str) -> set[str]:
        self.read_calls += 1
        existing = {a.item_id for a in self.rows(project_id)}
        if self._after_read is not None:
            await self._after_read()
        return existing

    async def bulk_insert(
        self, records: list[ProjectAttachment]
    ) -> list[ProjectAttachment]:
        self.insert_calls += 1
        if self.fail_with is not None:
            exc, self.fail_with = self.fail_with, None
            raise exc
        taken = {(a.project_id, a.item_id) for a in self._store}
        batch: set[tuple[str, str]] = set()
        for record in records:
            key = (record.project_id, record.item_id)
            if key in taken or key in batch:
                raise UniqueConstraintError(
                    "UNIQUE constraint failed: "
                    "project_indicators.project_id, "
                    "project_indicators.item_id"
                )
            batch.add(key)
        stored = [
            r for r in records if r.item_id not in self.silently_dropped
        ]
        for record in stored:
            if not record.project_indicator_id:
                record.project_indicator_id = str(uuid.uuid4())
        self._store.extend(stored)
        return stored

    async def list_active(
        self, project_id: str
    ) -> list[tuple[ProjectAttachment, CatalogItem]]:
        if self._catalog is None:
            return []
        pairs: list[tuple[ProjectAttachment, CatalogItem]] = []
        for att in self.rows(project_id):
            if att.status != AttachmentStatus.ACTIVE:
                continue
            item = await self._catalog.get_by_id(att.item_id)
            if item is not None:
                pairs.append((att, item))
        pairs.sort(key=lambda p: (p[1].domain, p[1].code))
        return pairs

    async def count_for_item(self, item_id: str) -> int:
        return sum(1 for a in self._store if a.item_id == item_id)


class FakeEvidenceRepository:
    """Dict-backed EvidenceRepository for testing."""

    def __init__(self) -> None:
        self._store: dict[str, EvidenceItem] = {}

    async def list_by_project(
        self, project_id: str
    ) -> list[EvidenceItem]:
        items = [
            e for e in self._store.values() if e.project_id == project_id
        ]
        items.sort(key=lambda e: e.evidence_date, reverse=True)
        return items

    async def get_by_id(self, evidence_id: str) -> EvidenceItem | None:
        return self._store.get(evidence_id)

    async def create(self, item: EvidenceItem) -> EvidenceItem:
        if not item.id:
            item.id = str(uuid.uuid4())
        if item.evidence_date is None:
            item.evidence_date = datetime.now(UTC).date()
        item.created_at = datetime.now(UTC)
        self._store[item.id] = item
        return item


class FakeEvidenceLinkRepository:
    """List-backed EvidenceLinkRepository for testing."""

    def __init__(self) -> None:
        self._store: list[EvidenceLink] = []
        self.fail_with: StoreError | None = None

    def __len__(self) -> int:
        return len(self._store)

    async def insert(self, link: EvidenceLink) -> EvidenceLink:
        if self.fail_with is not None:
            raise self.fail_with
        key = (link.evidence_item_id, *link.entity)
        for existing in self._store:
            if (existing.evidence_item_id, *existing.entity) == key:
                raise UniqueConstraintError(
                    "UNIQUE constraint failed: evidence_links"
                )
        if not link.id:
            link.id = str(uuid.uuid4())
        link.linked_at = datetime.now(UTC)
        self._store.append(link)
        return link

    async def delete(
        self, kind: EntityKind, entity_id: str, evidence_id: str
    ) -> int:
        before = len(self._store)
        self._store = [
            link
            for link in self._store
            if not (
                link.evidence_item_id == evidence_id
                and link.entity == (kind, entity_id)
            )
        ]
        return before - len(self._store)

    async def evidence_ids_for(
        self, kind: EntityKind, entity_id: str
    ) -> list[str]:
        return [
            link.evidence_item_id
            for link in self._store
            if link.entity == (kind, entity_id)
        ]
