"""
Centralized logging configuration using structlog
"""

import base64
import logging
import secrets
import sys
import time
from contextvars import ContextVar
from typing import Any

import structlog

# Context variables for request tracking
request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)
graphql_operation_ctx: ContextVar[str | None] = ContextVar("graphql_operation", default=None)

# Third-party loggers and the level they run at outside debug mode
THIRD_PARTY_LEVELS = {
    "uvicorn.access": logging.WARNING,
    "sqlalchemy.pool": logging.WARNING,
}


class RequestContextFilter:
    """Add request id and GraphQL operation name to log records."""

    def __call__(self, logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        # Required by the structlog processor interface
        _ = logger, method_name

        request_id = request_id_ctx.get()
        if request_id:
            event_dict["request_id"] = request_id

        # Explicit graphql_operation on the call wins over the bound one
        operation = graphql_operation_ctx.get()
        if operation:
            event_dict.setdefault("graphql_operation", operation)

        return event_dict


def _resolve_level(debug: bool, level: str | None) -> int:
    """Map a level name to a logging level, falling back on the debug flag."""
    if level:
        resolved = logging.getLevelName(level.upper())
        if isinstance(resolved, int):
            return resolved
    return logging.DEBUG if debug else logging.INFO


def configure_logging(debug: bool = False, level: str | None = None, sql_echo: bool = False) -> None:
    """Configure structlog with appropriate processors and formatters.

    Args:
        debug: If True, use human-readable console output. If False, use JSON.
        level: Explicit log level name (``BLOG_LOG_LEVEL``); unknown names
            fall back to the debug flag.
        sql_echo: Keep SQLAlchemy statement logging at INFO.
    """
    log_level = _resolve_level(debug, level)

    # Configure stdlib logging; structlog renders the final line
    logging.basicConfig(
        level=log_level,
        stream=sys.stdout,
        format="%(message)s",
        force=True,
    )

    # Per-request access lines come from our middleware, not uvicorn
    if not debug:
        for name, third_party_level in THIRD_PARTY_LEVELS.items():
            logging.getLogger(name).setLevel(third_party_level)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO if sql_echo else logging.WARNING)

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        # Request id and operation name
        RequestContextFilter(),
        structlog.processors.TimeStamper(fmt="ISO", utc=True),
        structlog.stdlib.PositionalArgumentsFormatter(),
        # Stack and exception info (driver tracebacks on ServerError)
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if debug:
        # Development: human-readable console output
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        # Production: JSON output
        processors.append(structlog.processors.JSONRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structlog logger instance.

    Args:
        name: Logger name (typically __name__)
    """
    return structlog.get_logger(name)


def generate_request_id() -> str:
    """Generate a compact request ID from a microsecond timestamp plus randomness.

    Format: 14-character url-safe base64 string (8 timestamp bytes + 2 random bytes).
    """
    timestamp_us = int(time.time() * 1_000_000)
    random_bytes = secrets.token_bytes(2)
    combined_bytes = timestamp_us.to_bytes(8, byteorder="big") + random_bytes
    return base64.urlsafe_b64encode(combined_bytes).decode("ascii").rstrip("=")


def set_request_context(
    request_id: str | None = None, graphql_operation: str | None = None
) -> str:
    """Bind request context for the current task.

    Args:
        request_id: Request ID to set (generates one if None)
        graphql_operation: Operation name of the GraphQL document, if any

    Returns:
        The request ID in effect
    """
    if request_id is None:
        request_id = generate_request_id()

    request_id_ctx.set(request_id)
    if graphql_operation is not None:
        graphql_operation_ctx.set(graphql_operation)
    return request_id


def clear_request_context() -> None:
    """Clear request context variables."""
    request_id_ctx.set(None)
    graphql_operation_ctx.set(None)


def get_request_id() -> str | None:
    return request_id_ctx.get()


def get_graphql_operation() -> str | None:
    return graphql_operation_ctx.get()
