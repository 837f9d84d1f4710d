"""
Nexio Backend — Database Session Management
============================================

What:  Async SQLAlchemy engine, session factory, and FastAPI dependency.
How:   Creates an async engine with connection pooling, a per-request session
       dependency, and the commit step write handlers finish with.
Who:   Used by route handlers via FastAPI's dependency injection system.
When:  Engine is created at module import; sessions are created per-request.

Transaction Boundary:
    One request = one session = one transaction. Storage calls only flush;
    a write handler commits once, via `commit_session`, before it returns.
    An upvote insert and the counter updates that follow it therefore commit
    together or not at all.

Connection Pooling Strategy:
    PostgreSQL (asyncpg):
        pool_size=20, max_overflow=10, pool_pre_ping, pool_recycle=3600
    SQLite (aiosqlite, local runs and tests):
        NullPool — a fresh connection per session, nothing held between
        event loops.
"""

import logging
from typing import AsyncGenerator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool

from nexio.config import settings
from nexio.exceptions import DatabaseError

logger = logging.getLogger(__name__)


# ── Engine Configuration ──────────────────────────────────────────────────
def _engine_options() -> dict:
    """Pool options for the configured backend."""
    options = {
        # Echo SQL queries in DEBUG mode for development visibility
        "echo": settings.log_level == "DEBUG",
    }
    if settings.is_sqlite:
        options["poolclass"] = NullPool
    else:
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return options


engine = create_async_engine(settings.database_url, **_engine_options())

# ── Session Factory ───────────────────────────────────────────────────────
# expire_on_commit=False: attributes stay readable after commit; response
# models are built from ORM rows after the handler's last flush
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    All models inherit from this class to register with the shared metadata
    (used by Alembic for migrations and by the tests for create_all).
    """
    pass


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the route handler (the handler performs queries)
        3. On error: rolls back the transaction
        4. Always: closes the session, discarding anything not committed

    Commits are not made here. The exit code of a yield dependency runs after
    the response has been sent, so a failed commit could no longer change the
    status code. Write handlers call `commit_session` before returning.

    Example usage in a route:
        @router.post("/posts")
        async def create_post(payload, db: AsyncSession = Depends(get_db_session)):
            post = await post_service.create_post(db, payload)
            await commit_session(db)
            return post

    Raises:
        Any exception is re-raised after rollback so the global handlers can
        respond with the right status code.
    """
    async with async_session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def commit_session(session: AsyncSession) -> None:
    """
    What:  Commits the request's transaction before the response is built.
    Raises:
        DatabaseError: the commit failed; the transaction is rolled back
    """
    try:
        await session.commit()
    except SQLAlchemyError as e:
        logger.error("Commit failed: %s", e)
        await session.rollback()
        raise DatabaseError(context={"original_error": type(e).__name__})


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def create_schema() -> None:
    """
    What:  Creates all tables that do not exist yet.
    When:  Local SQLite runs and tests; PostgreSQL deployments use Alembic.
    """
    # Registers every model on Base.metadata before create_all
    import nexio.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine() -> None:
    """
    What:  Gracefully closes all connections in the pool.
    When:  Called during application shutdown (lifespan handler).
    """
    await engine.dispose()
