"""
Periferia Social Backend — Database Handle & Session Management
================================================================

What:  The `Database` handle (async engine + session factory), the ORM
       declarative base, and the per-request session dependency.
Why:   Centralizes all connection logic in one explicitly constructed object
       instead of a module-level engine that every import shares.
How:   `Database(url)` builds the engine; the application lifespan opens it at
       startup and disposes it at shutdown. Requests reach it through
       `request.app.state.database` via the `get_db_session` dependency.
Who:   main.py (lifecycle), routes (sessions), seed tool and tests (direct use).

Lifecycle:
    1. Constructed once per process (lifespan) or per test (conftest fixture)
    2. Stored on app.state.database
    3. Each request: session() → yield → commit on success / rollback on error
    4. Shutdown: dispose() closes every pooled connection

Connection Pooling:
    PostgreSQL (asyncpg) uses the configured pool_size / max_overflow.
    SQLite (aiosqlite, tests only) gets SQLAlchemy's default pool because the
    queue pool arguments do not apply to it.
"""

import logging
from typing import AsyncGenerator, Optional

from fastapi import Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from periferia_social.config import Settings, settings as default_settings
from periferia_social.exceptions import DatabaseError

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    All models inherit from this class so that they share one metadata object,
    which Alembic reads for migrations and create_schema() uses for tests.
    """
    pass


class Database:
    """
    Explicit persistence handle: one async engine plus its session factory.

    Usage:
        database = Database.from_settings(settings)
        async with database.session() as session:
            ...
        await database.dispose()
    """

    def __init__(self, url: str, echo: bool = False, **engine_kwargs) -> None:
        self.url = url
        self.engine: AsyncEngine = create_async_engine(url, echo=echo, **engine_kwargs)
        # expire_on_commit=False: response models are built after the commit
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, config: Optional[Settings] = None) -> "Database":
        """Builds a handle from application settings, applying pool options for PostgreSQL."""
        config = config or default_settings
        url = config.sqlalchemy_url
        engine_kwargs = {}
        if not url.startswith("sqlite"):
            engine_kwargs = {
                "pool_size": config.db_pool_size,
                "max_overflow": config.db_max_overflow,
                "pool_pre_ping": config.db_pool_pre_ping,
                "pool_recycle": 3600,
            }
        return cls(url, echo=config.log_level == "DEBUG", **engine_kwargs)

    def session(self) -> AsyncSession:
        """Returns a new session; use it as an async context manager."""
        return self._session_factory()

    async def create_schema(self) -> None:
        """
        Creates every table known to Base.metadata.

        Used by tests, the seed tool and DB_CREATE_SCHEMA. Deployed databases
        are migrated with Alembic instead.
        """
        # Import models so they register with Base.metadata
        from periferia_social import models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database schema ensured")

    async def drop_schema(self) -> None:
        from periferia_social import models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    async def dispose(self) -> None:
        """Closes all connections in the pool."""
        await self.engine.dispose()


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Opens a session from the Database stored on app.state
        2. Yields it to the route handler
        3. On success: commits the transaction
        4. On error: rolls back and re-raises for the global handlers
        5. Always: closes the session (returns connection to pool)

    Routes declare it with scope="function" so the commit runs before the
    response is built; a failed COMMIT surfaces as DatabaseError (500).
    """
    database: Database = request.app.state.database
    async with database.session() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise

        try:
            await session.commit()
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error("Database error committing transaction: %s", str(e))
            raise DatabaseError(context={"operation": "commit", "error_type": type(e).__name__})
        finally:
            await session.close()
