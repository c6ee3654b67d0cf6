"""
Service status GraphQL type
"""

import strawberry


@strawberry.type
class Ping:
    """Liveness answer of the query API."""

    status: str
    code: int
