"""Persistence repositories for database operations."""

from uptask.infrastructure.persistence.repositories.token_repository import (
    TokenRepository,
)
from uptask.infrastructure.persistence.repositories.user_repository import (
    UserRepository,
)

__all__ = [
    "TokenRepository",
    "UserRepository",
]
