"""Protocol-based repository interfaces.

SQL implementations satisfy these protocols structurally (no inheritance).
Test doubles can be plain classes or mocks matching the same signature.

Write methods raise ``UniqueConstraintError`` on a uniqueness
violation and ``StoreError`` on any other store failure.
"""

from typing import Protocol

from cdelink.constants import EntityKind
from cdelink.models.attachment import ProjectAttachment
from cdelink.models.catalog import CatalogItem
from cdelink.models.evidence import EvidenceItem, EvidenceLink
from cdelink.models.project import Project
from cdelink.schemas import CatalogFilter


class ProjectRepository(Protocol):
    async def get_by_id(self, project_id: str) -> Project | None: ...
    async def list_all(self) -> list[Project]: ...
    async def create(self, project: Project) -> Project: ...
    async def delete(self, project_id: str) -> None: ...


class CatalogRepository(Protocol):
    async def query(
        self, filters: CatalogFilter, default_window: int
    ) -> list[CatalogItem]: ...
    async def get_by_id(self, item_id: str) -> CatalogItem | None: ...


class AttachmentRepository(Protocol):
    async def existing_item_ids(self, project_id: str) -> set[str]: ...
    async def bulk_insert(
        self, records: list[ProjectAttachment]
    ) -> list[ProjectAttachment]: ...
    async def list_active(
        self, project_id: str
    ) -> list[tuple[ProjectAttachment, CatalogItem]]: ...
    async def count_for_item(self, item_id: str) -> int: ...


class EvidenceRepository(Protocol):
    async def list_by_project(
        self, project_id: str
    ) -> list[EvidenceItem]: ...
    async def get_by_id(self, evidence_id: str) -> EvidenceItem | None: ...
    async def create(self, item: EvidenceItem) -> EvidenceItem: ...


class EvidenceLinkRepository(Protocol):
    async def insert(self, link: EvidenceLink) -> EvidenceLink: ...
    async def delete(
        self, kind: EntityKind, entity_id: str, evidence_id: str
    ) -> int: ...
    async def evidence_ids_for(
        self, kind: EntityKind, entity_id: str
    ) -> list[str]: ...
