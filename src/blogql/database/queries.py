"""
Read queries against the posts and categories tables
"""

import asyncio
from collections.abc import Awaitable
from dataclasses import dataclass
from datetime import datetime
from typing import Any, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.exc import SQLAlchemyError

from ..config import settings
from ..dbmodels import Categories, Posts
from ..errors import NotFoundError, ServerError
from ..logging import get_logger
from ..pagination import PAGE_LENGTH, page_offset
from .connection import open_connection

logger = get_logger(__name__)

# Characters of body text kept for posts in a listing
PREVIEW_LENGTH = 200

T = TypeVar("T")

QUERY_ERRORS = (SQLAlchemyError, OSError, asyncio.TimeoutError)


@dataclass(frozen=True)
class PostRecord:
    """One row of the post listing or lookup."""

    id: int
    title: str
    category: str | None
    contents: str | None
    pub_date: datetime
    open: int


def _select_posts(contents: Any) -> Select:
    """SELECT posts joined to their (optional) category name."""
    return select(
        Posts.id,
        Posts.title,
        Categories.name.label("category"),
        contents.label("contents"),
        Posts.pub_date,
        Posts.open,
    ).outerjoin(Categories, Posts.category_id == Categories.id)


async def _with_timeout(awaitable: Awaitable[T]) -> T:
    return await asyncio.wait_for(awaitable, timeout=settings.database_query_timeout)


async def count_open_posts() -> int:
    """Count publicly visible posts.

    A failing count statement is reported as zero posts; failing to obtain a
    connection still raises ``ServerError``.
    """
    stmt = select(func.count()).select_from(Posts).where(Posts.open != 0)

    async with open_connection() as session:
        try:
            result = await _with_timeout(session.execute(stmt))
            return int(result.scalar_one())
        except QUERY_ERRORS as e:
            logger.warning("Counting open posts failed", error=str(e), error_type=type(e).__name__)
            return 0


async def fetch_post_by_id(post_id: int) -> PostRecord:
    """Fetch one post with its full body, regardless of visibility.

    Raises:
        NotFoundError: If no post has this id.
        ServerError: If the connection or the query fails.
    """
    stmt = _select_posts(Posts.contents).where(Posts.id == post_id)

    async with open_connection() as session:
        try:
            result = await _with_timeout(session.execute(stmt))
            row = result.one_or_none()
        except QUERY_ERRORS as e:
            logger.error("Fetching post failed", post_id=post_id, error=str(e))
            raise ServerError(str(e)) from e

    if row is None:
        logger.info("Post not found", post_id=post_id)
        raise NotFoundError("no such post")

    return PostRecord(**row._mapping)


async def fetch_posts_page(page: int, category: str) -> list[PostRecord]:
    """Fetch one page of open posts, newest first, with truncated bodies.

    An empty ``category`` means no filter. Returns an empty list when
    nothing matches.

    Raises:
        ServerError: If the connection or the query fails.
    """
    stmt = (
        _select_posts(func.substr(Posts.contents, 1, PREVIEW_LENGTH))
        .where(Posts.open != 0)
        .order_by(Posts.pub_date.desc(), Posts.id.desc())
        .limit(PAGE_LENGTH)
        .offset(page_offset(page))
    )
    if category:
        stmt = stmt.where(Categories.name == category)

    async with open_connection() as session:
        try:
            result = await _with_timeout(session.execute(stmt))
            rows = result.all()
        except QUERY_ERRORS as e:
            logger.error("Fetching posts page failed", page=page, category=category, error=str(e))
            raise ServerError(str(e)) from e

    return [PostRecord(**row._mapping) for row in rows]
