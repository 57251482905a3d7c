"""Database component health checks."""

import logging

from sqlalchemy import func, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from cdelink.models.catalog import CatalogItem

logger = logging.getLogger(__name__)


class DataService:
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
    ) -> None:
        self._session_factory = session_factory

    async def check_connection(self) -> bool:
        try:
            async with self._session_factory() as session:
                await session.execute(text("SELECT 1"))
            return True
        except (SQLAlchemyError, OSError) as exc:
            logger.warning("event=db_unreachable error=%s", exc)
            return False

    async def catalog_size(self) -> int | None:
        """Active library items, or None if the store cannot be read."""
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(func.count())
                    .select_from(CatalogItem)
                    .where(CatalogItem.is_active.is_(True))
                )
                return result.scalar_one()
        except (SQLAlchemyError, OSError) as exc:
            logger.warning("event=catalog_unreadable error=%s", exc)
            return None
