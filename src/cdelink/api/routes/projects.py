"""Project CRUD and indicator attachment routes."""

from __future__ import annotations

import time

from fastapi import APIRouter, Depends

from cdelink.api.dependencies import (
    get_attachment_service,
    get_operation_logger,
    get_project_service,
)
from cdelink.api.schemas import APIResponse, AttachRequest, ProjectCreate
from cdelink.logger import OperationLogger
from cdelink.resilience.errors import AttachmentError
from cdelink.services.attachment_service import AttachmentService
from cdelink.services.project_service import ProjectService

router = APIRouter(prefix="/api/projects", tags=["projects"])


@router.get("")
async def list_projects(
    service: ProjectService = Depends(get_project_service),
) -> APIResponse:
    projects = await service.list_all()
    return APIResponse(
        success=True,
        data=[p.to_dict() for p in projects],
    )


@router.post("")
async def create_project(
    body: ProjectCreate,
    service: ProjectService = Depends(get_project_service),
) -> APIResponse:
    project = await service.create(name=body.name)
    return APIResponse(success=True, data=project.to_dict())


@router.get("/{project_id}")
async def get_project(
    project_id: str,
    service: ProjectService = Depends(get_project_service),
) -> APIResponse:
    project = await service.get(project_id)
    if project is None:
        return APIResponse(
            success=False, error="Project not found"
        )
    return APIResponse(success=True, data=project.to_dict())


@router.delete("/{project_id}")
async def delete_project(
    project_id: str,
    service: ProjectService = Depends(get_project_service),
) -> APIResponse:
    """Delete a project; attachments and evidence cascade."""
    await service.delete(project_id)
    return APIResponse(success=True)


@router.get("/{project_id}/indicators")
async def list_project_indicators(
    project_id: str,
    service: AttachmentService = Depends(get_attachment_service),
) -> APIResponse:
    pairs = await service.list_for_project(project_id)
    return APIResponse(
        success=True,
        data=[att.to_dict(item) for att, item in pairs],
    )


@router.post("/{project_id}/indicators")
async def attach_indicators(
    project_id: str,
    body: AttachRequest,
    service: AttachmentService = Depends(get_attachment_service),
    op_logger: OperationLogger = Depends(get_operation_logger),
) -> APIResponse:
    """Bulk-attach catalog indicators to the project.

    Conflicts are reported as skips. Only an unexpected store failure
    returns ``success=false``, with the partial result in ``data``.
    """
    start = time.monotonic()
    error: str | None = None
    try:
        result = await service.attach(
            project_id, body.item_ids, body.defaults()
        )
    except AttachmentError as exc:
        result = exc.result
        error = "Some indicators could not be added: " + ", ".join(
            result.errors
        )
        op_logger.log_error("attach", str(exc))

    op_logger.log_attach(
        project_id,
        len(set(body.item_ids)),
        result.inserted,
        result.skipped,
        result.outcome,
        (time.monotonic() - start) * 1000,
    )
    return APIResponse(
        success=error is None, data=result.to_dict(), error=error
    )
