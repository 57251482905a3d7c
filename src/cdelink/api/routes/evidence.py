"""Evidence item and evidence link routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from cdelink.api.dependencies import (
    get_evidence_service,
    get_link_service,
    get_operation_logger,
)
from cdelink.api.schemas import APIResponse, EvidenceCreateRequest
from cdelink.constants import EntityKind
from cdelink.logger import OperationLogger
from cdelink.services.evidence_service import EvidenceService
from cdelink.services.link_service import EvidenceLinkService

router = APIRouter(tags=["evidence"])


@router.get("/api/projects/{project_id}/evidence")
async def list_evidence(
    project_id: str,
    service: EvidenceService = Depends(get_evidence_service),
) -> APIResponse:
    items = await service.list_for_project(project_id)
    return APIResponse(
        success=True,
        data=[e.to_dict() for e in items],
    )


@router.post("/api/projects/{project_id}/evidence")
async def create_evidence(
    project_id: str,
    body: EvidenceCreateRequest,
    service: EvidenceService = Depends(get_evidence_service),
    op_logger: OperationLogger = Depends(get_operation_logger),
) -> APIResponse:
    """Create an evidence item, optionally linking it in the same request."""
    if body.link_to is None:
        item = await service.create(project_id, body.evidence())
        return APIResponse(success=True, data=item.to_dict())

    target = body.link_to
    item, outcome = await service.create_and_link(
        project_id, body.evidence(), target.entity_kind, target.entity_id
    )
    op_logger.log_link(
        "link", target.entity_kind, target.entity_id, item.id, outcome
    )
    return APIResponse(
        success=True,
        data=item.to_dict(),
        metadata={"link": outcome.value},
    )


@router.get("/api/evidence-links/{entity_kind}/{entity_id}")
async def linked_evidence(
    entity_kind: EntityKind,
    entity_id: str,
    service: EvidenceLinkService = Depends(get_link_service),
) -> APIResponse:
    """Ids of the evidence items linked to one entity."""
    ids = await service.linked_evidence_ids(entity_kind, entity_id)
    return APIResponse(success=True, data=ids)


@router.post("/api/evidence-links/{entity_kind}/{entity_id}/{evidence_id}")
async def link_evidence(
    entity_kind: EntityKind,
    entity_id: str,
    evidence_id: str,
    service: EvidenceLinkService = Depends(get_link_service),
    op_logger: OperationLogger = Depends(get_operation_logger),
) -> APIResponse:
    outcome = await service.link(entity_kind, entity_id, evidence_id)
    op_logger.log_link(
        "link", entity_kind, entity_id, evidence_id, outcome
    )
    return APIResponse(success=True, data={"outcome": outcome.value})


@router.delete(
    "/api/evidence-links/{entity_kind}/{entity_id}/{evidence_id}"
)
async def unlink_evidence(
    entity_kind: EntityKind,
    entity_id: str,
    evidence_id: str,
    service: EvidenceLinkService = Depends(get_link_service),
    op_logger: OperationLogger = Depends(get_operation_logger),
) -> APIResponse:
    removed = await service.unlink(entity_kind, entity_id, evidence_id)
    op_logger.log_link(
        "unlink",
        entity_kind,
        entity_id,
        evidence_id,
        "removed" if removed else "absent",
    )
    return APIResponse(success=True, data={"removed": removed})
