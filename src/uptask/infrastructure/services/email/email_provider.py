"""Abstract base class for email transports."""

from abc import ABC, abstractmethod


class EmailProvider(ABC):
    """Abstract base class for email transports.

    The dispatcher only ever needs a single send operation.
    """

    @abstractmethod
    async def send_email(
        self,
        to: str,
        subject: str,
        html_body: str,
        text_body: str,
        from_email: str,
        from_name: str,
    ) -> str | None:
        """Send an email.

        Args:
            to: Recipient email address.
            subject: Email subject line.
            html_body: HTML email body.
            text_body: Plain text email body.
            from_email: Sender email address.
            from_name: Sender display name.

        Returns:
            The Message-ID of the sent email, if the transport knows it.

        Raises:
            Exception: If the transport fails.
        """
        pass
