"""
Middleware for request context and logging
"""

import json
import re
from collections.abc import Callable
from typing import Any

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from .config import settings
from .logging import clear_request_context, get_logger, set_request_context

logger = get_logger(__name__)

OPERATION_PATTERN = re.compile(r"\bquery\s+(\w+)")
FIELD_PATTERN = re.compile(r"\{\s*(\w+)")


def operation_name_from_document(document: Any) -> str | None:
    """Best-effort operation name of a query document, for logs only."""
    if not isinstance(document, str) or not document:
        return None
    if "__schema" in document or "IntrospectionQuery" in document:
        return "__introspection"

    match = OPERATION_PATTERN.search(document)
    if match:
        return match.group(1)

    # Anonymous query: name it after its first root field
    match = FIELD_PATTERN.search(document)
    if match:
        return f"anonymous:{match.group(1)}"
    return "unnamed_operation"


async def extract_graphql_operation_name(request: Request) -> str | None:
    if request.url.path != settings.graphql_path:
        return None

    if request.method == "GET":
        params = request.query_params
        op = params.get("operationName")
        if op:
            return op
        return operation_name_from_document(params.get("query"))

    if request.method == "POST":
        try:
            body = await request.body()
            if not body:
                return None
            data = json.loads(body)
            if not isinstance(data, dict):
                return None
            op = data.get("operationName")
            if isinstance(op, str) and op:
                return op
            return operation_name_from_document(data.get("query"))
        except (json.JSONDecodeError, UnicodeDecodeError):
            return None

    return None


class LoggingContextMiddleware(BaseHTTPMiddleware):
    """Middleware to set logging context for each request."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = set_request_context()

        try:
            graphql_operation = await extract_graphql_operation_name(request)
            if graphql_operation:
                # Resolver and data access logs carry the operation name too
                set_request_context(request_id, graphql_operation=graphql_operation)

            # Query text and variables are never logged
            log_data: dict[str, Any] = {
                "method": request.method,
                "path": request.url.path,
                "user_agent": request.headers.get("user-agent"),
                "remote_addr": request.client.host if request.client else None,
            }
            if graphql_operation:
                log_data["graphql_operation"] = graphql_operation

            logger.info("Request started", **log_data)

            response = await call_next(request)

            logger.info(
                "Request completed",
                status_code=response.status_code,
                method=request.method,
                path=request.url.path,
                graphql_operation=graphql_operation,
            )
            response.headers["X-Request-ID"] = request_id
            return response

        except Exception as e:
            logger.error(
                "Request failed",
                method=request.method,
                path=request.url.path,
                error=str(e),
            )
            raise

        finally:
            clear_request_context()
