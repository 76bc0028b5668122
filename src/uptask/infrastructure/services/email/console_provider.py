"""Development email provider.

Writes outgoing emails to the log instead of delivering them. Used when no
SMTP host is configured.
"""

import uuid

from uptask.core.logging import get_logger
from uptask.infrastructure.services.email.email_provider import EmailProvider

logger = get_logger(__name__)


class ConsoleEmailProvider(EmailProvider):
    """Logs emails to the console."""

    async def send_email(
        self,
        to: str,
        subject: str,
        html_body: str,
        text_body: str,
        from_email: str,
        from_name: str,
    ) -> str | None:
        message_id = f"<{uuid.uuid4().hex}@console>"
        logger.info(
            "[EMAIL] Outgoing email",
            message_id=message_id,
            sender=f"{from_name} <{from_email}>",
            to=to,
            subject=subject,
            body=html_body,
        )
        return message_id
