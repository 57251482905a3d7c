"""Shared test fixtures: SQLite sessions, fake repos, catalog items."""

from collections.abc import Callable
from pathlib import Path

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from cdelink.api.dependencies import Repos, get_data_service, get_repos
from cdelink.config import Settings
from cdelink.constants import IndicatorDomain, MaturityLevel
from cdelink.logger import OperationLogger
from cdelink.main import app
from cdelink.models.base import Base
from cdelink.models.catalog import CatalogItem
from cdelink.repositories.fakes import (
    FakeAttachmentRepository,
    FakeCatalogRepository,
    FakeEvidenceLinkRepository,
    FakeEvidenceRepository,
    FakeProjectRepository,
)

ItemFactory = Callable[..., CatalogItem]


def build_item(
    code: str,
    name: str | None = None,
    *,
    domain: str = IndicatorDomain.COMMUNICATION,
    maturity_level: str = MaturityLevel.BASIC,
    definition: str = "",
    is_active: bool = True,
) -> CatalogItem:
    return CatalogItem(
        item_id=f"item-{code.lower()}",
        code=code,
        name=name or code,
        domain=domain,
        maturity_level=maturity_level,
        definition=definition or f"Definition of {code}",
        unit="number",
        aggregation_method="sum",
        data_source="manual",
        is_system=True,
        is_active=is_active,
    )


@pytest.fixture
def make_item() -> ItemFactory:
    return build_item


@pytest.fixture
async def engine():
    """Fresh in-memory database per test."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def session(engine):
    async with AsyncSession(engine, expire_on_commit=False) as session:
        yield session


@pytest.fixture
async def file_session_factory(tmp_path: Path):
    """File-backed database for tests that need independent connections."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'race.db'}"
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, expire_on_commit=False)
    await engine.dispose()


class FakeDataService:
    """Always-healthy DataService stand-in."""

    async def check_connection(self) -> bool:
        return True

    async def catalog_size(self) -> int:
        return 3


@pytest.fixture
def fake_repos() -> Repos:
    catalog = FakeCatalogRepository()
    return Repos(
        project=FakeProjectRepository(),
        catalog=catalog,
        attachment=FakeAttachmentRepository(catalog=catalog),
        evidence=FakeEvidenceRepository(),
        link=FakeEvidenceLinkRepository(),
    )


@pytest.fixture
def api_app(tmp_path: Path, fake_repos: Repos):
    """App wired to fake repos (no database)."""
    app.state.settings = Settings(
        database_url="sqlite:///:memory:",
        log_dir=tmp_path / "logs",
    )
    app.state.operation_logger = OperationLogger(
        log_dir=tmp_path / "logs", level="INFO"
    )
    app.dependency_overrides[get_repos] = lambda: fake_repos
    app.dependency_overrides[get_data_service] = FakeDataService
    yield app
    app.dependency_overrides.clear()
