"""
Database connection management
"""

import asyncio
import os
import threading
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import text
from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from ..config import DATABASE_URL_KEY, settings
from ..errors import ServerError
from ..logging import get_logger

logger = get_logger(__name__)

# Process-wide connection pool shared by all requests
_async_engine: AsyncEngine | None = None
_async_session_local: async_sessionmaker[AsyncSession] | None = None
_initialized = False
_init_lock = threading.Lock()

# Errors that mean "could not talk to the database at all"
CONNECTION_ERRORS = (SQLAlchemyError, OSError, asyncio.TimeoutError)


def get_database_url() -> str:
    """Get the database URL, checking the environment first for test compatibility.

    Raises:
        ServerError: If no connection string is configured.
    """
    db_url = os.getenv(DATABASE_URL_KEY) or settings.database_url
    if not db_url:
        raise ServerError(f"{DATABASE_URL_KEY} is not set")
    return db_url


def to_async_url(db_url: str) -> URL:
    """Select the async driver for plain PostgreSQL URLs; other URLs pass through."""
    if db_url.startswith("postgresql://"):
        db_url = db_url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return make_url(db_url)


def _engine_options(url: URL) -> dict[str, Any]:
    """Pool and timeout options for the given driver."""
    options: dict[str, Any] = {"echo": settings.sql_echo, "pool_pre_ping": True}

    if url.get_backend_name() == "sqlite":
        # SQLite picks its own pool class; only the busy timeout applies.
        options["connect_args"] = {"timeout": settings.database_query_timeout}
        return options

    options.update(
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        pool_timeout=settings.database_pool_timeout,
    )
    if url.get_driver_name() == "asyncpg":
        options["connect_args"] = {
            "timeout": settings.database_connect_timeout,
            "command_timeout": settings.database_query_timeout,
        }
    return options


def reset_database() -> None:
    """Forget the shared pool without disposing it (for tests)."""
    global _async_engine, _async_session_local, _initialized
    _async_engine = None
    _async_session_local = None
    _initialized = False


def init_database(database_url: str | None = None, force_reinit: bool = False) -> None:
    """Initialize the shared connection pool.

    Thread-safe; creating the engine does not connect, so this only fails
    when the URL is missing, malformed, or names a driver without asyncio
    support (e.g. `sqlite:///` or a bare `mysql://`).

    Raises:
        ServerError: If the URL is not configured or no async engine can be
            built from it.
    """
    global _async_engine, _async_session_local, _initialized

    if _initialized and not force_reinit and database_url is None:
        return

    with _init_lock:
        if _initialized and not force_reinit and database_url is None:
            return

        db_url = database_url or get_database_url()
        try:
            url = to_async_url(db_url)
            _async_engine = create_async_engine(url, **_engine_options(url))
        except (SQLAlchemyError, ImportError, ValueError) as e:
            # Malformed URL, unknown dialect, or a driver without asyncio support
            logger.error("Database engine creation failed", error=str(e), error_type=type(e).__name__)
            raise ServerError(str(e)) from e

        _async_session_local = async_sessionmaker(
            _async_engine,
            class_=AsyncSession,
            autoflush=False,
            expire_on_commit=False,
        )
        _initialized = True
        logger.info(
            "Database initialized",
            database_url=url.render_as_string(hide_password=True),
            pool_size=settings.database_pool_size,
        )


async def dispose_database() -> None:
    """Close every pooled connection and forget the pool."""
    engine = _async_engine
    reset_database()
    if engine is not None:
        await engine.dispose()
        logger.info("Database pool disposed")


def get_async_engine() -> AsyncEngine:
    """Get the shared async engine, initializing it on first use."""
    if _async_engine is None:
        init_database()
    assert _async_engine is not None
    return _async_engine


@asynccontextmanager
async def open_connection() -> AsyncGenerator[AsyncSession, None]:
    """Check a connection out of the shared pool for the duration of one call.

    The connection is returned to the pool on every exit path. Statements
    are read-only, so the transaction is always rolled back.

    Raises:
        ServerError: If the pool is not configured or no connection can be
            established.
    """
    if _async_session_local is None:
        init_database()
    assert _async_session_local is not None

    async with _async_session_local() as session:
        try:
            # Force the checkout so connection failures surface here
            await session.connection()
        except CONNECTION_ERRORS as e:
            logger.error("Database connection failed", error=str(e), error_type=type(e).__name__)
            raise ServerError(str(e)) from e

        try:
            yield session
        finally:
            await session.rollback()


async def check_database_connection() -> tuple[bool, str | None]:
    """
    Test the database connection and return helpful error messages.

    Returns:
        tuple: (success: bool, error_message: str | None)
    """
    try:
        async with open_connection() as session:
            await session.execute(text("SELECT 1"))
            return True, None
    except CONNECTION_ERRORS as e:
        return False, f"Database query failed ({type(e).__name__}): {e}"
    except ServerError as e:
        error_str = e.detail

        if error_str == f"{DATABASE_URL_KEY} is not set":
            return False, f"{error_str}\nExport it or add it to a .env file."
        elif "does not exist" in error_str:
            db_name = make_url(get_database_url()).database
            return False, (
                f"Cannot connect to database: {error_str}\n"
                f"This usually means:\n"
                f"  1. The database '{db_name}' doesn't exist\n"
                f"  2. The database user/role doesn't exist\n"
                f"Please check your connection string."
            )
        elif "Connection refused" in error_str or "could not connect" in error_str:
            return False, (
                f"Cannot connect to database server: {error_str}\n"
                f"The database server appears to be down or unreachable."
            )
        elif "password authentication failed" in error_str:
            return False, (
                f"Database authentication failed: {error_str}\n"
                f"Please check your database credentials."
            )
        else:
            return False, f"Database connection error: {error_str}"
