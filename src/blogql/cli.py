#!/usr/bin/env python3
"""
Main CLI entry point for the blog API server.
"""

import asyncio
import os
import sys

import click
import uvicorn

from blogql import __version__
from blogql.logging import configure_logging, get_logger

logger = get_logger(__name__)


@click.group()
@click.version_option(version=__version__, prog_name="blogql")
def cli() -> None:
    """Blog API CLI - run the server and check the database."""
    pass


@cli.command()
@click.option(
    "--host",
    default="0.0.0.0",
    help="Host to bind to (default: 0.0.0.0)",
)
@click.option(
    "--port",
    default=8000,
    type=int,
    help="Port to bind to (default: 8000)",
)
@click.option(
    "--reload",
    is_flag=True,
    default=False,
    help="Enable auto-reload for development",
)
@click.option(
    "--log-level",
    default="info",
    type=click.Choice(["debug", "info", "warning", "error"]),
    help="Log level (default: info)",
)
def serve(host: str, port: int, reload: bool, log_level: str) -> None:
    """Start the blog API server."""
    configure_logging(debug=(log_level == "debug"), level=log_level)

    logger.info("Starting blog API server", host=host, port=port, reload=reload, log_level=log_level)

    # The app module reads these when it is imported
    if log_level == "debug":
        os.environ["BLOG_DEBUG"] = "true"
    os.environ.setdefault("BLOG_LOG_LEVEL", log_level)

    try:
        uvicorn.run(
            "blogql.api.app:app",
            host=host,
            port=port,
            reload=reload,
            log_level=log_level,
            access_log=True,
        )
    except KeyboardInterrupt:
        logger.info("Server shutdown requested by user")
    except Exception as e:
        logger.error("Server startup failed", error=str(e))
        sys.exit(1)


@cli.command("check-db")
def check_db() -> None:
    """Open one pooled connection and run a trivial query."""
    from blogql.database.connection import check_database_connection, dispose_database

    configure_logging()

    async def do_check() -> tuple[bool, str | None]:
        try:
            return await check_database_connection()
        finally:
            await dispose_database()

    ok, message = asyncio.run(do_check())
    if ok:
        click.echo("✓ Database connection OK")
        return

    click.echo(f"✗ {message}", err=True)
    sys.exit(1)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
