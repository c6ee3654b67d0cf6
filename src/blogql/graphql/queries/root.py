"""
Root GraphQL query definitions
"""

from typing import Annotated

import strawberry

from ...errors import BlogError
from ..errors import to_graphql_error
from ..types.post import Post, Posts
from ..types.status import Ping


@strawberry.type
class Query:
    """Root GraphQL query type."""

    @strawberry.field
    async def ping(self, info: strawberry.Info) -> Ping:
        """Check that the API is up."""
        from ..resolvers.post import resolve_ping

        return await resolve_ping(info)

    @strawberry.field(name="getPost")
    async def get_post(
        self,
        info: strawberry.Info,
        id: Annotated[int, strawberry.argument(description="id of the post")],
    ) -> Post | None:
        """Get a post by ID."""
        from ..resolvers.post import resolve_post_by_id

        try:
            return await resolve_post_by_id(info, id)
        except BlogError as e:
            raise to_graphql_error(e) from e

    @strawberry.field(name="getPosts")
    async def get_posts(
        self,
        info: strawberry.Info,
        page: Annotated[int, strawberry.argument(description="current page")],
        category: Annotated[str, strawberry.argument(description="selected category")],
    ) -> Posts | None:
        """Get one page of open posts, newest first."""
        from ..resolvers.post import resolve_posts_page

        try:
            return await resolve_posts_page(info, page, category)
        except BlogError as e:
            raise to_graphql_error(e) from e
