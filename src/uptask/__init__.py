"""UpTask - authentication and account management service.

Account creation with email confirmation codes, login with signed session
tokens, password reset, and profile management for the UpTask project
manager.
"""

__version__ = "0.1.0"

from uptask.infrastructure.api.app import app

__all__ = ["app", "__version__"]
