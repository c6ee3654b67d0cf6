"""
Error taxonomy shared by the data access and resolver layers
"""

from typing import Any


class BlogError(Exception):
    """Base class for errors surfaced to API callers."""

    default_message = "unknown error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        """Message shown to API callers."""
        return str(self)

    @property
    def extensions(self) -> dict[str, Any]:
        return {}


class NotFoundError(BlogError):
    """The requested post, page, or listing does not exist."""

    default_message = "not found"

    @property
    def extensions(self) -> dict[str, Any]:
        return {"code": "NOT_FOUND"}


class ServerError(BlogError):
    """Configuration or connectivity failure.

    ``detail`` may carry raw driver text, so callers only ever see the fixed
    ``message``; the detail travels in the ``reason`` extension, which the
    GraphQL layer sanitizes unless explicitly configured otherwise.
    """

    default_message = "ServerError"

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail

    @property
    def message(self) -> str:
        return self.default_message

    @property
    def extensions(self) -> dict[str, Any]:
        return {"reason": self.detail}
