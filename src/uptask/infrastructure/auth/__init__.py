"""Authentication infrastructure components.

This module provides password hashing and session token services.
"""

from uptask.infrastructure.auth.jwt_service import (
    InvalidTokenError,
    JWTError,
    JWTService,
    TokenExpiredError,
    get_jwt_service,
)
from uptask.infrastructure.auth.password_hasher import (
    hash_password,
    needs_rehash,
    verify_password,
)

__all__ = [
    "InvalidTokenError",
    "JWTError",
    "JWTService",
    "TokenExpiredError",
    "get_jwt_service",
    "hash_password",
    "needs_rehash",
    "verify_password",
]
