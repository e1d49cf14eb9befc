"""Async engine and session handling for the transaction ledger."""

from __future__ import annotations

import logging
import re
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from sqlalchemy import MetaData, text
from sqlalchemy.ext.asyncio import (
    AsyncConnection,
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from akawo.config.settings import DatabaseConfig, settings

# Importing the package registers every table on Base.metadata.
from akawo.models import Base

logger = logging.getLogger(__name__)

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def resolve_schema(config: DatabaseConfig) -> str | None:
    """Return the PostgreSQL schema to use, or ``None`` for the default search path.

    Schemas only apply to PostgreSQL; a SQLite ``DB_URL`` ignores ``DB_SCHEMA``.
    Names that are not plain identifiers are rejected with a warning.
    """

    if not config.url.startswith("postgresql"):
        return None
    candidate = (config.db_schema or "").strip()
    if not candidate:
        return None
    if not _IDENTIFIER.fullmatch(candidate):
        logger.warning("Ignoring invalid DB_SCHEMA %r; using the default search_path", candidate)
        return None
    return candidate


def bind_schema(metadata: MetaData, schema: str | None) -> None:
    """Point unqualified tables at ``schema`` so DDL and queries land there."""

    if not schema:
        return
    metadata.schema = schema
    for table in metadata.tables.values():
        if table.schema is None:
            table.schema = schema


def _engine_options(config: DatabaseConfig, debug: bool) -> dict[str, Any]:
    options: dict[str, Any] = {"echo": debug}
    if config.url.startswith("sqlite"):
        options["connect_args"] = {"check_same_thread": False}
        return options

    options["pool_pre_ping"] = True
    if config.serverless or debug:
        # Serverless Postgres pauses idle instances; pooled connections would go stale.
        options["poolclass"] = NullPool
    return options


SCHEMA = resolve_schema(settings.database)
bind_schema(Base.metadata, SCHEMA)

engine: AsyncEngine = create_async_engine(
    settings.database.url,
    **_engine_options(settings.database, settings.debug),
)

SessionFactory = async_sessionmaker(
    engine,
    expire_on_commit=False,
    class_=AsyncSession,
)


async def _set_search_path(target: AsyncSession | AsyncConnection) -> None:
    if SCHEMA:
        await target.execute(text(f'SET search_path TO "{SCHEMA}", public'))


@asynccontextmanager
async def session_scope() -> AsyncIterator[AsyncSession]:
    """Yield a session bound to the configured schema; the ledger's session factory."""

    async with SessionFactory() as session:
        await _set_search_path(session)
        yield session


async def init_models() -> None:
    """Create the schema (PostgreSQL only) and any missing tables."""

    async with engine.begin() as conn:
        if SCHEMA:
            await conn.execute(text(f'CREATE SCHEMA IF NOT EXISTS "{SCHEMA}"'))
        await _set_search_path(conn)
        await conn.run_sync(Base.metadata.create_all)

    logger.info(
        "Ledger tables ready: %s (schema=%s)",
        ", ".join(sorted(Base.metadata.tables)),
        SCHEMA or "default",
    )


async def dispose_engine() -> None:
    await engine.dispose()
