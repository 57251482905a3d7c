"""Health check endpoints."""

from datetime import UTC, datetime

from fastapi import APIRouter, Depends

from cdelink import __version__
from cdelink.api.dependencies import get_data_service
from cdelink.services.data_service import DataService

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health")
async def health() -> dict[str, str]:
    """Basic health check for load balancers."""
    return {
        "status": "healthy",
        "version": __version__,
        "timestamp": datetime.now(UTC).isoformat(),
    }


@router.get("/health/detailed")
async def health_detailed(
    data_service: DataService = Depends(get_data_service),
) -> dict[str, object]:
    """Database reachability plus the size of the indicator library.

    An empty library is reported but does not degrade the service;
    pickers simply show no results until it is seeded.
    """
    db_healthy = await data_service.check_connection()
    items = await data_service.catalog_size() if db_healthy else None

    if items is None:
        catalog = {"status": "unknown", "items": None}
    else:
        catalog = {"status": "ready" if items else "empty", "items": items}

    return {
        "status": "healthy" if db_healthy else "degraded",
        "version": __version__,
        "components": {
            "database": {
                "status": "connected" if db_healthy else "disconnected"
            },
            "catalog": catalog,
        },
        "timestamp": datetime.now(UTC).isoformat(),
    }
