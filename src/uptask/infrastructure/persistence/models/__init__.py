"""SQLAlchemy models for the UpTask auth tables.

All models inherit from the Base class defined in database.py and are
created on application startup.
"""

from uptask.infrastructure.persistence.models.token import TokenModel
from uptask.infrastructure.persistence.models.user import UserModel

__all__ = [
    "TokenModel",
    "UserModel",
]
