"""
Persistence adapters.

Resources depend on these storage objects rather than touching SQLAlchemy
sessions directly.
"""

from .sql_repository import ChocolateStorage, NotFoundError, UserStorage

__all__ = ["ChocolateStorage", "NotFoundError", "UserStorage"]
