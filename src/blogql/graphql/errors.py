"""
Translation of service errors into GraphQL field errors
"""

from graphql import GraphQLError

from ..config import settings
from ..errors import BlogError, ServerError
from ..logging import get_logger

logger = get_logger(__name__)

GENERIC_SERVER_REASON = "database unavailable"


def to_graphql_error(error: BlogError) -> GraphQLError:
    """Build a field-level error carrying the error's extensions.

    Server error details are replaced by a generic reason unless
    ``expose_error_details`` is enabled.
    """
    extensions = dict(error.extensions)

    if isinstance(error, ServerError):
        logger.error("Server error while resolving field", detail=error.detail)
        if not settings.expose_error_details:
            extensions["reason"] = GENERIC_SERVER_REASON

    return GraphQLError(error.message, extensions=extensions, original_error=error)
