"""Password hashing utility using Argon2.

Passwords are stored as Argon2id digests. Each call to ``hash_password``
uses a fresh random salt, so the same plaintext yields different digests.
"""

from argon2 import PasswordHasher
from argon2.exceptions import VerifyMismatchError

_hasher = PasswordHasher()


def hash_password(password: str) -> str:
    """Hash a password using Argon2id.

    Args:
        password: The plaintext password to hash.

    Returns:
        The hashed password string.

    Example:
        >>> hash_password("secreto123").startswith("$argon2id$")
        True
    """
    return _hasher.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    """Verify a password against a stored digest.

    Args:
        password: The plaintext password to verify.
        hashed: The stored digest.

    Returns:
        True if the password matches, False otherwise.
    """
    try:
        _hasher.verify(hashed, password)
        return True
    except VerifyMismatchError:
        return False


def needs_rehash(hashed: str) -> bool:
    """Check if a digest was produced with outdated Argon2 parameters."""
    return _hasher.check_needs_rehash(hashed)
