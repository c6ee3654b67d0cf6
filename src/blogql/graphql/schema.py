"""
Main GraphQL schema definition using Strawberry
"""

from typing import Any

import strawberry
from fastapi import Request
from graphql import get_introspection_query, graphql_sync
from graphql import validate_schema as gql_validate_schema
from strawberry.fastapi import GraphQLRouter

from ..config import settings
from ..logging import get_logger
from .queries.root import Query

logger = get_logger(__name__)

# Read-only API: no mutations, no subscriptions
schema = strawberry.Schema(query=Query)


class SchemaValidationError(Exception):
    """The GraphQL schema cannot be served."""


def validate_schema() -> None:
    """Validate the GraphQL schema at startup.

    Raises:
        SchemaValidationError: If the schema is invalid or introspection fails
    """
    graphql_schema = schema._schema

    errors = gql_validate_schema(graphql_schema)
    if errors:
        error_messages = [str(e) for e in errors]
        logger.error("GraphQL schema validation failed", errors=error_messages)
        raise SchemaValidationError(f"GraphQL schema validation failed: {'; '.join(error_messages)}")

    result = graphql_sync(graphql_schema, get_introspection_query())
    if result.errors:
        error_messages = [str(e) for e in result.errors]
        logger.error("GraphQL introspection failed", errors=error_messages)
        raise SchemaValidationError(f"GraphQL introspection failed: {'; '.join(error_messages)}")

    logger.info("GraphQL schema validation successful")


def create_graphql_router(path: str | None = None) -> GraphQLRouter[dict[str, Any], None]:
    """Create a GraphQL router for FastAPI.

    Queries are POSTed to ``path``; GET on the same path serves GraphiQL.
    """

    async def get_context(request: Request) -> dict[str, Any]:
        """Get the context for GraphQL resolvers."""
        return {
            "request": request,
        }

    return GraphQLRouter(
        schema,
        path=path if path is not None else settings.graphql_path,
        graphql_ide="graphiql" if settings.graphiql else None,
        context_getter=get_context,
    )
