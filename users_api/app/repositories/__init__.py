"""
User persistence.

``UserRepository`` defines the storage contract and
``InMemoryUserRepository`` implements it with a dictionary.  A
persistent backend only needs to subclass ``UserRepository``.
"""

from .base import UserRepository, normalize_email, normalize_name
from .memory import InMemoryUserRepository

__all__ = [
    "InMemoryUserRepository",
    "UserRepository",
    "normalize_email",
    "normalize_name",
]
