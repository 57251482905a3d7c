"""SQL implementation of ProjectRepository."""

from sqlalchemy import delete as sa_delete
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cdelink.models.project import Project
from cdelink.resilience.errors import to_store_error


class SqlProjectRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, project_id: str) -> Project | None:
        result = await self._session.execute(
            select(Project).where(Project.id == project_id)
        )
        return result.scalar_one_or_none()

    async def list_all(self) -> list[Project]:
        result = await self._session.execute(
            select(Project).order_by(Project.created_at.desc())
        )
        return list(result.scalars().all())

    async def create(self, project: Project) -> Project:
        self._session.add(project)
        try:
            await self._session.flush()
        except SQLAlchemyError as exc:
            await self._session.rollback()
            raise to_store_error(exc) from exc
        return project

    async def delete(self, project_id: str) -> None:
        await self._session.execute(
            sa_delete(Project).where(Project.id == project_id)
        )
        await self._session.flush()
