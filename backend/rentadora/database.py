"""
Rentadora API - Database Engine and Session Factory
====================================================

What:  Async SQLAlchemy engine and session factory backing SQLDocumentStore.
How:   create_engine_from_settings() builds a pooled async engine from
       `settings`; build_session_factory() wraps it in an async_sessionmaker.
Who:   Called once by main.build_document_store() when DOCUMENT_STORE=sql,
       and by Alembic for migrations (Base.metadata).
When:  At application construction; the engine is disposed by the store's
       close() during shutdown.

Connection Pooling:
    pool_size / max_overflow / pool_pre_ping come from settings.
    pool_recycle=3600 recycles connections hourly.
    SQLite URLs get none of these; the dialect picks its own pool.
"""

from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from rentadora.config import Settings, settings as default_settings


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares a single metadata object, read by Alembic for migrations and by
    tests to create the documents table on SQLite.
    """
    pass


def engine_options(config: Settings) -> Dict[str, Any]:
    """Keyword arguments for create_async_engine derived from settings."""
    options: Dict[str, Any] = {"echo": config.log_level == "DEBUG"}
    if not config.is_sqlite:
        options.update(
            pool_size=config.db_pool_size,
            max_overflow=config.db_max_overflow,
            pool_pre_ping=config.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return options


def create_engine_from_settings(config: Optional[Settings] = None) -> AsyncEngine:
    """
    Create the async engine for the configured DATABASE_URL.

    Raises:
        Whatever SQLAlchemy raises for an unknown dialect or a missing
        driver package; this happens at startup, not per request.
    """
    config = config or default_settings
    return create_async_engine(config.database_url, **engine_options(config))


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Session factory with expire_on_commit=False, so ORM attributes stay
    readable after the per-operation transaction commits.
    """
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
