"""Project evidence items and the create-then-link flow."""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from cdelink.constants import EntityKind, LinkOutcome
from cdelink.models.evidence import EvidenceItem
from cdelink.repositories.protocols import EvidenceRepository
from cdelink.resilience.errors import ValidationError
from cdelink.schemas import EvidenceCreate
from cdelink.services.link_service import (
    EvidenceLinkService,
    parse_entity_kind,
)

logger = logging.getLogger(__name__)


class EvidenceService:
    def __init__(
        self,
        repo: EvidenceRepository,
        links: EvidenceLinkService,
    ) -> None:
        self._repo = repo
        self._links = links

    async def list_for_project(
        self, project_id: str
    ) -> list[EvidenceItem]:
        """Project evidence, most recent evidence date first."""
        return await self._repo.list_by_project(project_id)

    async def get(self, evidence_id: str) -> EvidenceItem | None:
        return await self._repo.get_by_id(evidence_id)

    async def create(
        self, project_id: str, body: EvidenceCreate
    ) -> EvidenceItem:
        if not project_id:
            raise ValidationError("project_id is required")
        item = EvidenceItem(
            project_id=project_id,
            type=body.type,
            title=body.title,
            description=body.description,
            source_url=body.source_url,
            evidence_date=body.evidence_date or datetime.now(UTC).date(),
            notes=body.notes,
        )
        item = await self._repo.create(item)
        logger.info(
            "event=evidence_created project_id=%s evidence_id=%s type=%s",
            project_id,
            item.id,
            item.type,
        )
        return item

    async def create_and_link(
        self,
        project_id: str,
        body: EvidenceCreate,
        entity_kind: str | EntityKind,
        entity_id: str,
    ) -> tuple[EvidenceItem, LinkOutcome]:
        """Create an evidence item and link it to one entity.

        The kind is checked before anything is written.
        """
        kind = parse_entity_kind(entity_kind)
        if not entity_id:
            raise ValidationError("entity_id is required")
        item = await self.create(project_id, body)
        outcome = await self._links.link(kind, entity_id, item.id)
        return item, outcome
