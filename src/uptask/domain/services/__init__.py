"""Domain services for UpTask.

Services contain the business logic of the code-driven account flows.
"""

from uptask.domain.services.confirmation_service import ConfirmationService
from uptask.domain.services.password_reset_service import PasswordResetService
from uptask.domain.services.token_flow_service import TokenFlowService

__all__ = [
    "ConfirmationService",
    "PasswordResetService",
    "TokenFlowService",
]
