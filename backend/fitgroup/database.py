"""
FitGroup Backend — Database Session Management
==============================================

What:  Async SQLAlchemy engine, session factory, and FastAPI dependency.
Why:   Centralizes all database connection logic in one place.
How:   A `Database` object owns one async engine and its session factory. The
       application factory creates it and stores it on `app.state.database`;
       the request dependency opens one session per request that commits on
       success and rolls back on any error.
Who:   Route handlers receive sessions via FastAPI's dependency injection and
       hand them to service constructors.
When:  Engine is created with the app; sessions are created per-request.

Transaction Model:
    One request == one session == one transaction. Services only flush;
    the dependency commits at the end. A multi-step lifecycle operation
    (create group + owner, retag, delete cascade) therefore commits or rolls
    back as a whole. Routes declare the dependency with scope="function", so
    the commit happens before the response is sent and before any background
    task runs.

Connection Pooling Strategy (PostgreSQL):
    pool_size=20:      Persistent connections for normal load
    max_overflow=10:   Temporary connections for traffic spikes (total max = 30)
    pool_pre_ping:     Validates connections before use (catches stale connections)
    pool_recycle=3600: Recycles connections every hour
    SQLite URLs skip pool sizing (the SQLite dialects pick their own pool).
"""

from typing import Any, AsyncGenerator, Dict

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from fitgroup.config import Settings


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    All models inherit from this class to register with a single metadata
    object (used by Alembic for migrations and by tests for create_all).
    """
    pass


class Database:
    """
    Explicit persistence handle: one engine plus its session factory.

    Why a class (not module globals): each application instance, and each
    test, owns its own engine. Nothing in the codebase reaches for a
    process-wide connection.
    """

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        # expire_on_commit=False: attributes stay readable after commit
        # (lazy refresh would fail outside the async context)
        self.session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        """Build a Database from application settings."""
        engine_kwargs: Dict[str, Any] = {
            # Echo SQL queries in DEBUG mode for development visibility
            "echo": settings.log_level == "DEBUG",
        }
        if not settings.is_sqlite:
            engine_kwargs.update(
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_max_overflow,
                pool_pre_ping=settings.db_pool_pre_ping,
                pool_recycle=3600,
            )
        return cls(create_async_engine(settings.database_url, **engine_kwargs))

    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Yield a session wrapped in commit-on-success / rollback-on-error.

        How it works:
            1. Creates a new session from the factory
            2. Yields it to the caller (route handler → services)
            3. On success: commits the transaction
            4. On error: rolls back, then re-raises for the exception handlers
            5. Always: closes the session (returns connection to pool)
        """
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                # Rollback for ANY failure so no partial writes survive
                await session.rollback()
                raise
            finally:
                await session.close()

    async def dispose(self) -> None:
        """Close all pooled connections (called on application shutdown)."""
        await self.engine.dispose()


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    The session comes from the Database stored on the application instance,
    so tests can build an app around an in-memory database without patching.
    Declare it with scope="function": under the default request scope the
    commit would run after the response and after its background tasks.

    Example usage in a route:
        @router.get("/groups/{group_id}")
        async def get_group(
            group_id: int,
            db: AsyncSession = Depends(get_db_session, scope="function"),
        ):
            return await GroupService(db).get_group(group_id)
    """
    database: Database = request.app.state.database
    async for session in database.session():
        yield session
