"""
Shared pytest fixtures and configuration for all tests.
"""

import os
from collections.abc import AsyncGenerator, Generator
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest
import pytest_asyncio
import strawberry

from blogql.config import DATABASE_URL_KEY, settings
from blogql.database.connection import (
    dispose_database,
    get_async_engine,
    init_database,
    reset_database,
)
from blogql.dbmodels import Base, Categories, Posts

BASE_DATE = datetime(2024, 1, 1, 9, 0, 0)


@pytest.fixture(autouse=True)
def reset_environment() -> Generator[None, None, None]:
    """Reset environment variables for each test."""
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def no_database_url(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Remove every source of the connection string."""
    monkeypatch.delenv(DATABASE_URL_KEY, raising=False)
    monkeypatch.setattr(settings, "database_url", None)
    reset_database()
    yield
    reset_database()


@pytest.fixture
def mock_info():
    """Create a mock GraphQL info object with request context."""
    info = MagicMock(spec=strawberry.Info)
    info.context = {"request": MagicMock()}
    return info


@pytest.fixture
def sqlite_url(tmp_path: Path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'blog.db'}"


@pytest_asyncio.fixture
async def blog_database(sqlite_url: str) -> AsyncGenerator[str, None]:
    """Point the shared pool at a fresh SQLite database with empty tables."""
    os.environ[DATABASE_URL_KEY] = sqlite_url
    init_database(sqlite_url, force_reinit=True)

    async with get_async_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield sqlite_url

    await dispose_database()


async def _seed_posts(rows: list[dict[str, Any]], categories: list[str] | None = None) -> None:
    """Insert categories and posts; ``category`` in a row is a category name."""
    from blogql.database.connection import open_connection

    async with open_connection() as session:
        by_name = {}
        for index, name in enumerate(categories or [], start=1):
            category = Categories(id=index, name=name)
            session.add(category)
            by_name[name] = index

        for row in rows:
            row = dict(row)
            name = row.pop("category", None)
            row["category_id"] = by_name.get(name) if name else None
            session.add(Posts(**row))

        await session.commit()


def _make_posts(
    count: int, start_id: int = 1, open: int = 1, category: str | None = None
) -> list[dict[str, Any]]:
    """Rows for ``count`` posts, each one hour newer than the previous."""
    return [
        {
            "id": start_id + i,
            "title": f"Post {start_id + i}",
            "contents": f"Body of post {start_id + i}",
            "pub_date": BASE_DATE + timedelta(hours=start_id + i),
            "open": open,
            "category": category,
        }
        for i in range(count)
    ]


@pytest.fixture
def seed_posts():
    """Async helper inserting categories and post rows into the test database."""
    return _seed_posts


@pytest.fixture
def make_posts():
    """Helper building post rows."""
    return _make_posts


# Test markers
def pytest_configure(config: Any) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: mark test as slow running")  # type: ignore[reportUnknownMemberType]
    config.addinivalue_line("markers", "integration: mark test as integration test")  # type: ignore[reportUnknownMemberType]
    config.addinivalue_line("markers", "unit: mark test as unit test")  # type: ignore[reportUnknownMemberType]
