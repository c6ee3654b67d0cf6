"""
Post GraphQL type definitions
"""

from datetime import datetime

import strawberry


@strawberry.type
class Post:
    """Post type for GraphQL API."""

    id: int
    title: str
    category: str | None
    contents: str | None = strawberry.field(
        description="Full body for a single post, first 200 characters in a listing."
    )
    pub_date: datetime
    open: int


@strawberry.type
class Posts:
    """One page of the open-post listing."""

    current: int
    next: int | None
    prev: int | None
    category: str = strawberry.field(description="Category filter; empty string means none.")
    page_size: int = strawberry.field(
        description="Total number of pages. Kept for existing clients; same as pageCount."
    )
    page_count: int
    results: list[Post]
