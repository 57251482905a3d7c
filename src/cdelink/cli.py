"""CLI entry point: ``cdelink init-db|catalog|attach|serve``."""

from __future__ import annotations

import argparse
import asyncio
import json
import os
import sys
from collections.abc import Awaitable, Callable
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from cdelink import __version__
from cdelink.config import Settings, create_app_engine
from cdelink.constants import IndicatorDomain, MaturityLevel
from cdelink.logging_config import setup_logging
from cdelink.models.base import Base
from cdelink.repositories.attachment_repo import SqlAttachmentRepository
from cdelink.repositories.catalog_repo import SqlCatalogRepository
from cdelink.resilience.errors import (
    AttachmentError,
    StoreError,
    ValidationError,
)
from cdelink.schemas import AttachmentDefaults, CatalogFilter
from cdelink.services.attachment_service import AttachmentService
from cdelink.services.catalog_service import CatalogService


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point. Returns the process exit code."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(f"cdelink {__version__}")
        return 0

    if args.database_url:
        os.environ["DATABASE_URL"] = args.database_url
    settings = Settings()
    setup_logging("DEBUG" if args.verbose else settings.log_level)

    if args.command == "serve":
        return _run_serve(args, settings)
    if args.command == "init-db":
        return _run(settings, _init_db)
    if args.command == "catalog":
        return _run(settings, lambda sf: _catalog(sf, args, settings))
    if args.command == "attach":
        return _run(settings, lambda sf: _attach(sf, args))

    parser.print_help()
    return 0


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="cdelink",
        description=(
            "Indicator library picker and evidence linking "
            "for project monitoring."
        ),
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print version and exit",
    )
    parser.add_argument(
        "--database-url",
        default=None,
        help="Override DATABASE_URL",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose output",
    )

    sub = parser.add_subparsers(dest="command")

    sub.add_parser("init-db", help="Create database tables")

    catalog = sub.add_parser(
        "catalog",
        help="Query the indicator library",
    )
    catalog.add_argument(
        "--domain",
        "-d",
        choices=["all", *(d.value for d in IndicatorDomain)],
        default=None,
    )
    catalog.add_argument(
        "--maturity",
        "-m",
        choices=["all", *(m.value for m in MaturityLevel)],
        default=None,
    )
    catalog.add_argument(
        "--search",
        "-s",
        default=None,
        help="Match name, code or definition (case-insensitive)",
    )
    catalog.add_argument("--limit", type=int, default=None)
    catalog.add_argument("--offset", type=int, default=None)

    attach = sub.add_parser(
        "attach",
        help="Attach library indicators to a project",
    )
    attach.add_argument("project_id")
    attach.add_argument("item_ids", nargs="+")
    attach.add_argument("--baseline", type=float, default=None)
    attach.add_argument("--target", type=float, default=None)
    attach.add_argument("--responsible-role", default=None)
    attach.add_argument("--notes", default=None)

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)

    return parser


def _run(
    settings: Settings,
    command: Callable[[async_sessionmaker[AsyncSession]], Awaitable[int]],
) -> int:
    async def _main() -> int:
        settings.data_dir.mkdir(parents=True, exist_ok=True)
        engine = create_app_engine(settings.database_url)
        try:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            factory = async_sessionmaker(engine, expire_on_commit=False)
            return await command(factory)
        finally:
            await engine.dispose()

    try:
        return asyncio.run(_main())
    except ValidationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2
    except StoreError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, default=str))


async def _init_db(_factory: async_sessionmaker[AsyncSession]) -> int:
    print("Database ready")
    return 0


async def _catalog(
    factory: async_sessionmaker[AsyncSession],
    args: argparse.Namespace,
    settings: Settings,
) -> int:
    filters = CatalogFilter(
        domain=args.domain,
        maturity_level=args.maturity,
        search=args.search,
        limit=args.limit,
        offset=args.offset,
    )
    async with factory() as session:
        service = CatalogService(
            SqlCatalogRepository(session),
            default_window=settings.catalog_default_window,
        )
        items = await service.query(filters)
    _print_json([i.to_dict() for i in items])
    return 0


async def _attach(
    factory: async_sessionmaker[AsyncSession],
    args: argparse.Namespace,
) -> int:
    defaults = AttachmentDefaults(
        baseline=args.baseline,
        target=args.target,
        responsible_role=args.responsible_role,
        notes=args.notes,
    )
    async with factory() as session:
        service = AttachmentService(SqlAttachmentRepository(session))
        try:
            result = await service.attach(
                args.project_id, args.item_ids, defaults
            )
        except AttachmentError as exc:
            _print_json(exc.result.to_dict())
            return 1
        await session.commit()
    _print_json(result.to_dict())
    return 0


def _run_serve(args: argparse.Namespace, settings: Settings) -> int:
    import uvicorn

    uvicorn.run(
        "cdelink.main:app",
        host=args.host or settings.host,
        port=args.port or settings.port,
        log_level=settings.log_level.lower(),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
