# bjjconnect/db/sql.py
from __future__ import annotations

import logging
from typing import Any, AsyncIterator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from bjjconnect.core.config import settings
from bjjconnect.db.base import Base

logger = logging.getLogger(__name__)


def _engine_kwargs(dsn: str) -> dict[str, Any]:
    kwargs: dict[str, Any] = {"echo": settings.DB_ECHO, "pool_pre_ping": True}
    if not dsn.startswith("sqlite"):
        # SQLite uses its own pool classes which reject sizing arguments
        kwargs.update(
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_timeout=settings.DB_POOL_TIMEOUT,
        )
    return kwargs


def build_engine(dsn: str | None = None) -> AsyncEngine:
    dsn = dsn or settings.SQL_DSN
    return create_async_engine(dsn, **_engine_kwargs(dsn))


def build_sessionmaker(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=bind,
        expire_on_commit=False,
        autoflush=False,
        class_=AsyncSession,
    )


engine = build_engine()
AsyncSessionLocal = build_sessionmaker(engine)


async def get_session() -> AsyncIterator[AsyncSession]:
    """
    Provide a DB session for each request.

    The whole request is one unit of work: commit when the handler returns,
    rollback on any exception (domain errors included) and re-raise so the
    error handlers can render the envelope.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception as exc:
            await session.rollback()
            logger.debug("session_rolled_back", extra={"reason": type(exc).__name__})
            raise


async def ping_db(session: AsyncSession) -> bool:
    await session.execute(text("SELECT 1"))
    return True


def _import_models() -> None:
    # Registers every table on Base.metadata
    from bjjconnect.modules.users import models as _users  # noqa: F401
    from bjjconnect.modules.availability import models as _availability  # noqa: F401
    from bjjconnect.modules.sessions import models as _sessions  # noqa: F401
    from bjjconnect.modules.pending import models as _pending  # noqa: F401


async def init_db(bind: AsyncEngine | None = None, *, drop: bool = False) -> None:
    """
    Create (optionally drop first) all tables.
    """
    _import_models()
    async with (bind or engine).begin() as conn:
        if drop:
            await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    logger.info("database_initialized", extra={"dropped": drop})
