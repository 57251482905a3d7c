"""Request/response schemas for the HTTP API."""

from typing import Any

from pydantic import BaseModel, Field

from cdelink.constants import EntityKind
from cdelink.schemas import AttachmentDefaults, EvidenceCreate


class APIResponse(BaseModel):
    """Standard response envelope for all API endpoints."""

    success: bool
    data: Any | None = None
    error: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class ProjectCreate(BaseModel):
    """Request body for POST /api/projects."""

    name: str = Field(min_length=1, max_length=200)


class AttachRequest(AttachmentDefaults):
    """Request body for POST /api/projects/{id}/indicators."""

    item_ids: list[str] = Field(min_length=1, max_length=500)

    def defaults(self) -> AttachmentDefaults:
        return AttachmentDefaults(
            baseline=self.baseline,
            target=self.target,
            responsible_role=self.responsible_role,
            notes=self.notes,
        )


class LinkTarget(BaseModel):
    entity_kind: EntityKind
    entity_id: str = Field(min_length=1)


class EvidenceCreateRequest(EvidenceCreate):
    """Request body for POST /api/projects/{id}/evidence.

    ``link_to`` links the new item in the same request.
    """

    link_to: LinkTarget | None = None

    def evidence(self) -> EvidenceCreate:
        return EvidenceCreate.model_validate(
            self.model_dump(exclude={"link_to"})
        )
