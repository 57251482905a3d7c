"""FastAPI application with lifespan startup."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import async_sessionmaker

from cdelink import __version__
from cdelink.api.routes import catalog, evidence, health, projects
from cdelink.config import Settings, create_app_engine
from cdelink.logger import OperationLogger
from cdelink.logging_config import setup_logging
from cdelink.models.base import Base
from cdelink.resilience.errors import (
    ErrorClass,
    StoreError,
    ValidationError,
)
from cdelink.services.data_service import DataService

_settings = Settings()
setup_logging(_settings.log_level)

_logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = _settings

    # 1. Engine (aiosqlite + WAL via pool-connect listener)
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    engine = create_app_engine(
        settings.database_url, echo=settings.debug_mode
    )

    # 2. Create tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    # 3. Session factory, logger, services
    session_factory = async_sessionmaker(engine, expire_on_commit=False)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = session_factory
    app.state.operation_logger = OperationLogger(
        log_dir=settings.log_dir, level=settings.log_level
    )
    app.state.data_service = DataService(session_factory)

    _logger.info(
        "event=startup database=%s", engine.url.render_as_string()
    )

    yield

    await engine.dispose()


app = FastAPI(
    title="cdelink",
    description=(
        "Indicator library picker and evidence linking"
        " for project monitoring"
    ),
    version=__version__,
    openapi_url="/api/openapi.json",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_settings.cors_origins,
    allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Cache-Control"],
    allow_credentials=False,
)


@app.exception_handler(ValidationError)
async def _validation_error(
    _request: Request, exc: ValidationError
) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={
            "success": False,
            "error": str(exc),
            "data": None,
            "metadata": {},
        },
    )


def _store_error_response(exc: StoreError) -> tuple[int, str]:
    """Status code and caller-facing message for a store failure."""
    match exc.error_class:
        case ErrorClass.CLIENT:
            return 422, f"Request rejected by the store: {exc}"
        case ErrorClass.CONFLICT:
            return 409, f"Conflicts with an existing record: {exc}"
        case ErrorClass.TRANSIENT:
            return 503, "Store unavailable, please try again"
        case _:
            return 500, "Unexpected store error"


@app.exception_handler(StoreError)
async def _store_error(
    _request: Request, exc: StoreError
) -> JSONResponse:
    status_code, message = _store_error_response(exc)
    _logger.error(
        "event=store_error class=%s retryable=%s status=%d error=%s",
        exc.error_class.value,
        exc.retryable,
        status_code,
        exc,
    )
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": message,
            "data": None,
            "metadata": {"error_class": exc.error_class.value},
        },
    )


# Routes
app.include_router(health.router)
app.include_router(catalog.router)
app.include_router(projects.router)
app.include_router(evidence.router)
