"""
Blog GraphQL API
Read-only query service for blog posts
"""

__version__ = "0.1.0"

from .config import settings

__all__ = ["settings", "__version__"]
