"""Project lifecycle management service."""

from __future__ import annotations

from cdelink.models.project import Project
from cdelink.repositories.protocols import ProjectRepository
from cdelink.resilience.errors import ValidationError


class ProjectService:
    def __init__(self, repo: ProjectRepository) -> None:
        self._repo = repo

    async def list_all(self) -> list[Project]:
        return await self._repo.list_all()

    async def get(self, project_id: str) -> Project | None:
        return await self._repo.get_by_id(project_id)

    async def create(self, name: str) -> Project:
        if not name.strip():
            raise ValidationError("project name is required")
        return await self._repo.create(Project(name=name.strip()))

    async def delete(self, project_id: str) -> None:
        await self._repo.delete(project_id)
