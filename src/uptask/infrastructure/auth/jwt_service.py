"""Session token service.

Issues and validates the signed bearer token returned by login. The token
is a stateless HS256 JWT carrying the user identifier and an expiry.
"""

from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from uptask.core.config import Settings, get_settings


class JWTError(Exception):
    """Base exception for JWT-related errors."""

    pass


class TokenExpiredError(JWTError):
    """Raised when a token has expired."""

    pass


class InvalidTokenError(JWTError):
    """Raised when a token is invalid."""

    pass


class JWTService:
    """Service for creating and validating session tokens."""

    ALGORITHM = "HS256"
    ISSUER = "uptask"

    def __init__(self, secret_key: str, expire_days: int = 180) -> None:
        """Initialize the JWT service.

        Args:
            secret_key: Secret key for signing tokens.
            expire_days: Token lifetime in days.
        """
        if not secret_key:
            raise ValueError("secret_key must not be empty")
        self.secret_key = secret_key
        self.expires_delta = timedelta(days=expire_days)

    @classmethod
    def from_settings(cls, settings: Settings) -> "JWTService":
        """Build the signer from the configured secret and lifetime."""
        return cls(
            secret_key=settings.secret_key,
            expire_days=settings.access_token_expire_days,
        )

    def create_access_token(self, user_id: str, expires_delta: timedelta | None = None) -> str:
        """Create a session token for a user.

        Args:
            user_id: The user's unique identifier.
            expires_delta: Custom expiration time. Defaults to the service lifetime.

        Returns:
            Encoded JWT.
        """
        if expires_delta is None:
            expires_delta = self.expires_delta

        now = datetime.now(timezone.utc)
        payload = {
            "iss": self.ISSUER,
            "sub": user_id,
            "iat": now,
            "exp": now + expires_delta,
            "id": user_id,
            "type": "access",
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.ALGORITHM)

    def decode_token(self, token: str) -> dict[str, Any]:
        """Decode and validate a JWT.

        Raises:
            TokenExpiredError: If the token has expired.
            InvalidTokenError: If the token is invalid.
        """
        try:
            return jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.ALGORITHM],
                issuer=self.ISSUER,
            )
        except jwt.ExpiredSignatureError as e:
            raise TokenExpiredError("Token has expired") from e
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError("Invalid token") from e

    def validate_access_token(self, token: str) -> dict[str, Any]:
        """Validate that a token is a session token and decode it.

        Raises:
            TokenExpiredError: If the token has expired.
            InvalidTokenError: If the token is invalid or of the wrong type.
        """
        payload = self.decode_token(token)
        if payload.get("type") != "access":
            raise InvalidTokenError("Not an access token")
        return payload

    def get_user_id(self, token: str) -> str:
        """Return the user identifier carried by a valid session token."""
        payload = self.validate_access_token(token)
        user_id = payload.get("id")
        if not user_id:
            raise InvalidTokenError("Missing user id claim")
        return user_id


_jwt_service: JWTService | None = None


def get_jwt_service() -> JWTService:
    """Get the process-wide session token signer built from settings."""
    global _jwt_service
    if _jwt_service is None:
        _jwt_service = JWTService.from_settings(get_settings())
    return _jwt_service
