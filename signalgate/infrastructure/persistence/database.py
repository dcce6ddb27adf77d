"""
SignalGate – SQLAlchemy ORM Base Configuration
==============================================
Declarative base and async engine/session management.

Clean Architecture: concrete database infrastructure. Repositories
depend on the domain interfaces, never the other way round.

URL:
- ``settings.db_url`` when set (any async URL, e.g. ``sqlite+aiosqlite://``)
- otherwise MySQL through aiomysql built from the ``db_*`` parts
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy import BigInteger, Integer, MetaData
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from signalgate.shared.config.settings import Settings
from signalgate.shared.logging.logger import get_logger

logger = get_logger("database")

# ─── Naming Convention (consistent constraint names) ─────────────────────
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# BIGINT primary keys only autoincrement on SQLite as INTEGER
PrimaryKeyType = BigInteger().with_variant(Integer, "sqlite")


class Base(DeclarativeBase):
    """Declarative base of every ORM model."""

    metadata = MetaData(naming_convention=NAMING_CONVENTION)


class DatabaseManager:
    """
    Async engine + session factory.

    USAGE:
        db = DatabaseManager(settings)
        await db.initialize()      # FastAPI startup
        await db.create_tables()

        async with db.session() as session:
            result = await session.execute(...)

        await db.close()           # FastAPI shutdown
    """

    def __init__(self, settings: Optional[Settings] = None, url: Optional[str] = None):
        self._settings = settings or Settings()
        self._url = url
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None

    @property
    def database_url(self) -> str:
        if self._url:
            return self._url
        s = self._settings
        if s.db_url:
            return s.db_url
        return (
            f"mysql+aiomysql://{s.db_user}:{s.db_password}"
            f"@{s.db_host}:{s.db_port}/{s.db_name}"
            f"?charset=utf8mb4"
        )

    @property
    def is_initialized(self) -> bool:
        return self._engine is not None

    async def initialize(self) -> None:
        if self._engine is not None:
            return

        s = self._settings
        url = self.database_url
        kwargs = {"echo": s.db_echo}
        if not url.startswith("sqlite"):
            kwargs.update(
                pool_size=s.db_pool_size,
                max_overflow=s.db_max_overflow,
                pool_recycle=3600,
                pool_pre_ping=True,
            )
        self._engine = create_async_engine(url, **kwargs)
        self._session_factory = async_sessionmaker(
            bind=self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
        logger.info("Database engine ready (%s)", url.split("://", 1)[0])

    async def create_tables(self) -> None:
        """CREATE TABLE IF NOT EXISTS for every model."""
        # models register themselves on Base.metadata when imported
        from signalgate.infrastructure.persistence import models  # noqa: F401

        if self._engine is None:
            raise RuntimeError("DatabaseManager not initialized. Call initialize() first.")
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def close(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Session committed on success, rolled back on error."""
        if self._session_factory is None:
            raise RuntimeError("DatabaseManager not initialized. Call initialize() first.")

        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
