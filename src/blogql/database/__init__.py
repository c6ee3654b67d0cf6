"""
Database module for the blog API
"""

from .connection import dispose_database, init_database, open_connection

__all__ = ["dispose_database", "init_database", "open_connection"]
