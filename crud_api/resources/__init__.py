"""
Resource handlers: one per JSON:API type, delegating persistence to the
storage objects they are constructed with.
"""

from .chocolate import ChocolateResource
from .schemas import ChocolateSchema, UserSchema
from .user import UserResource

__all__ = ["ChocolateResource", "ChocolateSchema", "UserResource", "UserSchema"]
