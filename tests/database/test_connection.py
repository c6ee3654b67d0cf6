"""
Tests for connection pool setup and acquisition
"""

from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from blogql.config import settings
from blogql.database import connection
from blogql.database.connection import (
    _engine_options,
    check_database_connection,
    get_database_url,
    init_database,
    open_connection,
    to_async_url,
)
from blogql.errors import ServerError


class TestDatabaseUrl:
    def test_missing_url_is_a_server_error(self, no_database_url):
        with pytest.raises(ServerError) as exc_info:
            get_database_url()
        assert exc_info.value.detail == "BLOG_DATABASE_URL is not set"

    def test_environment_wins_over_settings(self, monkeypatch):
        monkeypatch.setattr(settings, "database_url", "postgresql://a@h/settings")
        monkeypatch.setenv("BLOG_DATABASE_URL", "postgresql://a@h/env")
        assert get_database_url() == "postgresql://a@h/env"

    def test_settings_used_when_environment_empty(self, monkeypatch):
        monkeypatch.delenv("BLOG_DATABASE_URL", raising=False)
        monkeypatch.setattr(settings, "database_url", "postgresql://a@h/settings")
        assert get_database_url() == "postgresql://a@h/settings"

    def test_plain_postgres_url_uses_asyncpg(self):
        url = to_async_url("postgresql://user:pw@db:5432/blog")
        assert url.drivername == "postgresql+asyncpg"
        assert url.database == "blog"

    def test_explicit_driver_is_kept(self):
        assert to_async_url("sqlite+aiosqlite:///blog.db").drivername == "sqlite+aiosqlite"


class TestEngineOptions:
    def test_postgres_pool_is_bounded_with_timeouts(self):
        options = _engine_options(to_async_url("postgresql://u@h/db"))
        assert options["pool_size"] == settings.database_pool_size
        assert options["max_overflow"] == settings.database_max_overflow
        assert options["pool_timeout"] == settings.database_pool_timeout
        assert options["connect_args"] == {
            "timeout": settings.database_connect_timeout,
            "command_timeout": settings.database_query_timeout,
        }

    def test_sqlite_gets_no_pool_sizing(self):
        options = _engine_options(to_async_url("sqlite+aiosqlite:///blog.db"))
        assert "pool_size" not in options
        assert "max_overflow" not in options


class TestOpenConnection:
    @pytest.mark.asyncio
    async def test_missing_url_fails_on_open(self, no_database_url):
        with pytest.raises(ServerError) as exc_info:
            async with open_connection():
                pass
        assert exc_info.value.detail == "BLOG_DATABASE_URL is not set"

    def test_malformed_url_is_a_server_error(self, no_database_url):
        with pytest.raises(ServerError):
            init_database("not a url", force_reinit=True)

    @pytest.mark.parametrize("url", ["sqlite:///blog.db", "mysql://blog:pw@db/blog"])
    def test_sync_driver_url_is_a_server_error(self, no_database_url, url):
        with pytest.raises(ServerError) as exc_info:
            init_database(url, force_reinit=True)
        assert exc_info.value.detail
        assert connection._initialized is False

    @pytest.mark.asyncio
    async def test_sync_driver_url_fails_on_open(self, no_database_url, monkeypatch):
        monkeypatch.setenv("BLOG_DATABASE_URL", "sqlite:///blog.db")
        with pytest.raises(ServerError) as exc_info:
            async with open_connection():
                pass
        assert "async" in exc_info.value.detail

    @pytest.mark.asyncio
    async def test_connect_failure_is_a_server_error(self, sqlite_url, no_database_url):
        init_database(sqlite_url, force_reinit=True)
        error = OperationalError("SELECT 1", {}, Exception("connection refused"))

        with patch.object(
            connection.AsyncSession, "connection", side_effect=error
        ):
            with pytest.raises(ServerError) as exc_info:
                async with open_connection():
                    pass

        assert "connection refused" in exc_info.value.detail
        await connection.dispose_database()

    @pytest.mark.asyncio
    async def test_connection_reusable_after_release(self, blog_database):
        from sqlalchemy import text

        for _ in range(3):
            async with open_connection() as session:
                result = await session.execute(text("SELECT 1"))
                assert result.scalar_one() == 1


class TestCheckDatabaseConnection:
    @pytest.mark.asyncio
    async def test_reports_success(self, blog_database):
        assert await check_database_connection() == (True, None)

    @pytest.mark.asyncio
    async def test_reports_missing_url(self, no_database_url):
        ok, message = await check_database_connection()
        assert ok is False
        assert message.startswith("BLOG_DATABASE_URL is not set")

    @pytest.mark.asyncio
    async def test_reports_missing_database_name(self, no_database_url, monkeypatch):
        monkeypatch.setenv("BLOG_DATABASE_URL", "postgresql://blog:pw@db:5432/blog_prod?sslmode=require")

        with patch("blogql.database.connection.open_connection") as mock_open:
            mock_open.return_value.__aenter__.side_effect = ServerError(
                'database "blog_prod" does not exist'
            )
            ok, message = await check_database_connection()

        assert ok is False
        assert "The database 'blog_prod' doesn't exist" in message
