"""Indicator library (catalog) routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from cdelink.api.dependencies import get_catalog_service, get_settings
from cdelink.api.schemas import APIResponse
from cdelink.config import Settings
from cdelink.schemas import CatalogFilter
from cdelink.services.catalog_service import CatalogService, library_route

router = APIRouter(prefix="/api/catalog", tags=["catalog"])


@router.get("")
async def query_catalog(
    service: CatalogService = Depends(get_catalog_service),
    settings: Settings = Depends(get_settings),
    domain: str | None = Query(default=None),
    maturity_level: str | None = Query(default=None),
    search: str | None = Query(default=None, max_length=200),
    limit: int | None = Query(default=None, ge=1),
    offset: int | None = Query(default=None, ge=0),
) -> APIResponse:
    """Active catalog items, ordered by domain then code."""
    if limit is not None:
        limit = min(limit, settings.catalog_max_limit)
    filters = CatalogFilter(
        domain=domain,
        maturity_level=maturity_level,
        search=search,
        limit=limit,
        offset=offset,
    )
    items = await service.query(filters)
    return APIResponse(
        success=True,
        data=[i.to_dict() for i in items],
        metadata={"count": len(items)},
    )


@router.get("/options")
async def catalog_options() -> APIResponse:
    """Select options for the domain and maturity filters."""
    return APIResponse(
        success=True,
        data={
            "domains": CatalogService.domain_options(),
            "maturity_levels": CatalogService.maturity_options(),
        },
    )


@router.get("/{item_id}")
async def get_catalog_item(
    item_id: str,
    service: CatalogService = Depends(get_catalog_service),
) -> APIResponse:
    item = await service.get_item(item_id)
    if item is None:
        return APIResponse(
            success=False, error="Catalog item not found"
        )
    data = item.to_dict()
    data["project_count"] = await service.usage_count(item_id)
    data["library_route"] = library_route(item_id)
    return APIResponse(success=True, data=data)
