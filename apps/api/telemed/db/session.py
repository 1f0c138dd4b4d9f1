"""Async engine and request-scoped sessions for the clinical database."""
from __future__ import annotations

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from ..core.config import Settings, settings


def build_engine(config: Settings) -> AsyncEngine:
    connect_args: dict[str, object] = {
        # Transaction-mode poolers in front of managed Postgres reject cached prepared statements.
        "statement_cache_size": 0,
    }
    if config.database_ssl_required:
        connect_args["ssl"] = True

    return create_async_engine(
        config.database_async_url,
        echo=config.log_level.upper() == "DEBUG",
        pool_pre_ping=True,
        pool_recycle=1800,
        connect_args=connect_args,
    )


engine = build_engine(settings)
SessionLocal = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding one session per request."""

    async with SessionLocal() as session:
        yield session
