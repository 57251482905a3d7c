"""SQL implementation of CatalogRepository."""

from sqlalchemy import or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cdelink.models.catalog import CatalogItem
from cdelink.resilience.errors import to_store_error
from cdelink.schemas import CatalogFilter


class SqlCatalogRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def query(
        self, filters: CatalogFilter, default_window: int
    ) -> list[CatalogItem]:
        stmt = select(CatalogItem).where(CatalogItem.is_active.is_(True))

        domain = filters.domain_constraint
        if domain:
            stmt = stmt.where(CatalogItem.domain == domain)
        maturity = filters.maturity_constraint
        if maturity:
            stmt = stmt.where(CatalogItem.maturity_level == maturity)

        term = filters.search_term
        if term:
            stmt = stmt.where(
                or_(
                    CatalogItem.name.icontains(term, autoescape=True),
                    CatalogItem.code.icontains(term, autoescape=True),
                    CatalogItem.definition.icontains(
                        term, autoescape=True
                    ),
                )
            )

        stmt = stmt.order_by(CatalogItem.domain, CatalogItem.code)

        offset, limit = filters.window(default_window)
        if offset:
            stmt = stmt.offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)

        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as exc:
            raise to_store_error(exc) from exc
        return list(result.scalars().all())

    async def get_by_id(self, item_id: str) -> CatalogItem | None:
        try:
            result = await self._session.execute(
                select(CatalogItem).where(
                    CatalogItem.item_id == item_id,
                    CatalogItem.is_active.is_(True),
                )
            )
        except SQLAlchemyError as exc:
            raise to_store_error(exc) from exc
        return result.scalar_one_or_none()
