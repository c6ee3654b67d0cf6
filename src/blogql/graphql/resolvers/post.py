from __future__ import annotations

from typing import TYPE_CHECKING

import strawberry

from ...config import settings
from ...database.queries import (
    PostRecord,
    count_open_posts,
    fetch_post_by_id,
    fetch_posts_page,
)
from ...errors import NotFoundError
from ...logging import get_logger
from ...pagination import normalize_page, paginate

if TYPE_CHECKING:
    from ..types.post import Post, Posts
    from ..types.status import Ping

logger = get_logger(__name__)


def _to_post_type(record: PostRecord) -> Post:
    from ..types.post import Post as PostType

    return PostType(
        id=record.id,
        title=record.title,
        category=record.category,
        contents=record.contents,
        pub_date=record.pub_date,
        open=record.open,
    )


async def resolve_ping(info: strawberry.Info) -> Ping:
    """Fixed status answer; never touches the database."""
    from ..types.status import Ping as PingType

    return PingType(status="ok", code=200)


async def resolve_post_by_id(info: strawberry.Info, id: int) -> Post:
    """
    Resolve a single post by id with its full contents.

    Visibility is not checked: a closed post is still returned by id.
    """
    record = await fetch_post_by_id(id)
    return _to_post_type(record)


async def resolve_posts_page(info: strawberry.Info, page: int, category: str) -> Posts:
    """
    Resolve one page of open posts, optionally filtered by category.

    The page count is derived from all open posts, not only those in the
    requested category.

    Raises:
        NotFoundError: If there are no open posts or the page is past the end.
        ServerError: If the database cannot be reached.
    """
    from ..types.post import Posts as PostsType

    page = normalize_page(page)

    total = await count_open_posts()
    if total == 0:
        logger.info("No open posts", page=page, category=category)
        raise NotFoundError("no posts")

    pagination = paginate(page, total, saturate_next=settings.legacy_pagination)
    if pagination.current > pagination.page_count:
        logger.info(
            "Requested page past the end",
            page=page,
            page_count=pagination.page_count,
        )
        raise NotFoundError("no posts")

    records = await fetch_posts_page(pagination.current, category)

    return PostsType(
        current=pagination.current,
        next=pagination.next,
        prev=pagination.previous,
        category=category,
        page_size=pagination.page_count,
        page_count=pagination.page_count,
        results=[_to_post_type(record) for record in records],
    )
