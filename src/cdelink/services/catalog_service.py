"""Catalog query service that filters the shared indicator library."""

from __future__ import annotations

import logging
from urllib.parse import urlencode

from cdelink.constants import (
    DEFAULT_WINDOW_SIZE,
    DOMAIN_LABELS,
    LIBRARY_ROUTE,
    MATURITY_LABELS,
)
from cdelink.models.catalog import CatalogItem
from cdelink.repositories.protocols import (
    AttachmentRepository,
    CatalogRepository,
)
from cdelink.schemas import CatalogFilter

logger = logging.getLogger(__name__)


def _options(labels: dict[str, str]) -> list[dict[str, str]]:
    return [
        {"value": value, "label": label}
        for value, label in labels.items()
    ]


def library_route(item_id: str | None = None) -> str:
    """Browser route to the library page, optionally focused on an item."""
    if item_id:
        return f"{LIBRARY_ROUTE}?{urlencode({'indicatorId': item_id})}"
    return LIBRARY_ROUTE


class CatalogService:
    def __init__(
        self,
        repo: CatalogRepository,
        attachments: AttachmentRepository | None = None,
        default_window: int = DEFAULT_WINDOW_SIZE,
    ) -> None:
        self._repo = repo
        self._attachments = attachments
        self._default_window = default_window

    async def query(
        self, filters: CatalogFilter | None = None
    ) -> list[CatalogItem]:
        """Active catalog items matching ``filters``, ordered by domain, code.

        Store failures propagate as StoreError; nothing is retried.
        """
        filters = filters or CatalogFilter()
        logger.debug(
            "event=catalog_query domain=%s maturity=%s search=%r"
            " limit=%s offset=%s",
            filters.domain_constraint,
            filters.maturity_constraint,
            filters.search_term,
            filters.limit,
            filters.offset,
        )
        return await self._repo.query(filters, self._default_window)

    async def get_item(self, item_id: str) -> CatalogItem | None:
        return await self._repo.get_by_id(item_id)

    async def usage_count(self, item_id: str) -> int:
        """Number of projects the item is attached to."""
        if self._attachments is None:
            return 0
        return await self._attachments.count_for_item(item_id)

    @staticmethod
    def domain_options() -> list[dict[str, str]]:
        return _options(DOMAIN_LABELS)

    @staticmethod
    def maturity_options() -> list[dict[str, str]]:
        return _options(MATURITY_LABELS)
