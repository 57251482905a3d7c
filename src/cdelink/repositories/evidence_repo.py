"""SQL implementations of EvidenceRepository and EvidenceLinkRepository."""

from sqlalchemy import delete as sa_delete
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cdelink.constants import EntityKind
from cdelink.models.evidence import EvidenceItem, EvidenceLink, entity_column
from cdelink.resilience.errors import to_store_error


class SqlEvidenceRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_by_project(
        self, project_id: str
    ) -> list[EvidenceItem]:
        result = await self._session.execute(
            select(EvidenceItem)
            .where(EvidenceItem.project_id == project_id)
            .order_by(
                EvidenceItem.evidence_date.desc(),
                EvidenceItem.created_at.desc(),
            )
        )
        return list(result.scalars().all())

    async def get_by_id(self, evidence_id: str) -> EvidenceItem | None:
        result = await self._session.execute(
            select(EvidenceItem).where(EvidenceItem.id == evidence_id)
        )
        return result.scalar_one_or_none()

    async def create(self, item: EvidenceItem) -> EvidenceItem:
        self._session.add(item)
        try:
            await self._session.flush()
        except SQLAlchemyError as exc:
            await self._session.rollback()
            raise to_store_error(exc) from exc
        return item


class SqlEvidenceLinkRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def insert(self, link: EvidenceLink) -> EvidenceLink:
        self._session.add(link)
        try:
            await self._session.flush()
        except SQLAlchemyError as exc:
            await self._session.rollback()
            raise to_store_error(exc) from exc
        return link

    async def delete(
        self, kind: EntityKind, entity_id: str, evidence_id: str
    ) -> int:
        try:
            result = await self._session.execute(
                sa_delete(EvidenceLink).where(
                    EvidenceLink.evidence_item_id == evidence_id,
                    entity_column(kind) == entity_id,
                )
            )
            await self._session.flush()
        except SQLAlchemyError as exc:
            await self._session.rollback()
            raise to_store_error(exc) from exc
        rowcount: int = getattr(result, "rowcount", 0) or 0
        return rowcount

    async def evidence_ids_for(
        self, kind: EntityKind, entity_id: str
    ) -> list[str]:
        result = await self._session.execute(
            select(EvidenceLink.evidence_item_id)
            .where(entity_column(kind) == entity_id)
            .order_by(EvidenceLink.linked_at)
        )
        return list(result.scalars().all())
