"""Token generation service.

Produces the six-digit codes users type in to confirm an account or
reset a password.
"""

import secrets


class TokenService:
    """Service for generating one-time codes."""

    CODE_MIN = 100000
    CODE_MAX = 999999

    @staticmethod
    def generate_code() -> str:
        """Generate a six-digit numeric code.

        Returns:
            A string in the range 100000-999999, from a CSPRNG.
        """
        span = TokenService.CODE_MAX - TokenService.CODE_MIN + 1
        return str(TokenService.CODE_MIN + secrets.randbelow(span))


# Default token service instance
token_service = TokenService()
