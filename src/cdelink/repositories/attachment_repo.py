"""SQL implementation of AttachmentRepository."""

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cdelink.constants import AttachmentStatus
from cdelink.models.attachment import ProjectAttachment
from cdelink.models.catalog import CatalogItem
from cdelink.resilience.errors import to_store_error


class SqlAttachmentRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def existing_item_ids(self, project_id: str) -> set[str]:
        try:
            result = await self._session.execute(
                select(ProjectAttachment.item_id).where(
                    ProjectAttachment.project_id == project_id
                )
            )
        except SQLAlchemyError as exc:
            raise to_store_error(exc) from exc
        return set(result.scalars().all())

    async def bulk_insert(
        self, records: list[ProjectAttachment]
    ) -> list[ProjectAttachment]:
        """Insert all records in one flush.

        A failed flush leaves the session unusable, so it is rolled
        back before the translated error is raised. Nothing from the
        batch is persisted in that case.
        """
        self._session.add_all(records)
        try:
            await self._session.flush()
        except SQLAlchemyError as exc:
            await self._session.rollback()
            raise to_store_error(exc) from exc
        return list(records)

    async def list_active(
        self, project_id: str
    ) -> list[tuple[ProjectAttachment, CatalogItem]]:
        result = await self._session.execute(
            select(ProjectAttachment, CatalogItem)
            .join(
                CatalogItem,
                ProjectAttachment.item_id == CatalogItem.item_id,
            )
            .where(
                ProjectAttachment.project_id == project_id,
                ProjectAttachment.status == AttachmentStatus.ACTIVE,
            )
            .order_by(CatalogItem.domain, CatalogItem.code)
        )
        return [(att, item) for att, item in result.all()]

    async def count_for_item(self, item_id: str) -> int:
        result = await self._session.execute(
            select(func.count())
            .select_from(ProjectAttachment)
            .where(ProjectAttachment.item_id == item_id)
        )
        return result.scalar_one()
