"""FastAPI dependency injection for repository and service access."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass
from typing import TYPE_CHECKING

from fastapi import Depends, Request

from cdelink.repositories.protocols import (
    AttachmentRepository,
    CatalogRepository,
    EvidenceLinkRepository,
    EvidenceRepository,
    ProjectRepository,
)
from cdelink.services.attachment_service import AttachmentService
from cdelink.services.catalog_service import CatalogService
from cdelink.services.evidence_service import EvidenceService
from cdelink.services.link_service import EvidenceLinkService
from cdelink.services.project_service import ProjectService

if TYPE_CHECKING:
    from cdelink.config import Settings
    from cdelink.logger import OperationLogger
    from cdelink.services.data_service import DataService

logger = logging.getLogger(__name__)


@dataclass
class Repos:
    """Repository container resolved per-request via Depends.

    Bundles all repository protocols into a single injectable
    unit. Routes receive this instead of touching session_factory.
    """

    project: ProjectRepository
    catalog: CatalogRepository
    attachment: AttachmentRepository
    evidence: EvidenceRepository
    link: EvidenceLinkRepository


async def get_repos(
    request: Request,
) -> AsyncIterator[Repos]:
    """Generator dep; the session lives for the entire request.

    Commits once the route returns; an exception inside the route
    skips the commit and the session closes with a rollback.
    """
    from cdelink.repositories.attachment_repo import (
        SqlAttachmentRepository,
    )
    from cdelink.repositories.catalog_repo import SqlCatalogRepository
    from cdelink.repositories.evidence_repo import (
        SqlEvidenceLinkRepository,
        SqlEvidenceRepository,
    )
    from cdelink.repositories.project_repo import SqlProjectRepository

    session_factory = request.app.state.session_factory
    async with session_factory() as session:
        yield Repos(
            project=SqlProjectRepository(session),
            catalog=SqlCatalogRepository(session),
            attachment=SqlAttachmentRepository(session),
            evidence=SqlEvidenceRepository(session),
            link=SqlEvidenceLinkRepository(session),
        )
        await session.commit()


def get_settings(request: Request) -> Settings:
    return request.app.state.settings  # type: ignore[no-any-return]


def get_operation_logger(request: Request) -> OperationLogger:
    return request.app.state.operation_logger  # type: ignore[no-any-return]


def get_data_service(request: Request) -> DataService:
    """Get DataService from app.state."""
    return request.app.state.data_service  # type: ignore[no-any-return]


def get_project_service(
    repos: Repos = Depends(get_repos),
) -> ProjectService:
    return ProjectService(repos.project)


def get_catalog_service(
    request: Request,
    repos: Repos = Depends(get_repos),
) -> CatalogService:
    settings = get_settings(request)
    return CatalogService(
        repos.catalog,
        attachments=repos.attachment,
        default_window=settings.catalog_default_window,
    )


def get_attachment_service(
    repos: Repos = Depends(get_repos),
) -> AttachmentService:
    return AttachmentService(repos.attachment)


def get_link_service(
    repos: Repos = Depends(get_repos),
) -> EvidenceLinkService:
    return EvidenceLinkService(repos.link)


def get_evidence_service(
    repos: Repos = Depends(get_repos),
) -> EvidenceService:
    return EvidenceService(
        repos.evidence, EvidenceLinkService(repos.link)
    )
