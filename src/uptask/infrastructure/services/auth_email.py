"""Transactional emails for the account flows.

Sends the confirmation and password reset codes. Callers schedule these
sends after the response is built, so delivery failures are logged here and
never raised.
"""

from uptask.core.config import Settings
from uptask.core.logging import get_logger
from uptask.infrastructure.services.email.console_provider import ConsoleEmailProvider
from uptask.infrastructure.services.email.email_provider import EmailProvider
from uptask.infrastructure.services.email.smtp_provider import SMTPProvider, SMTPSettings
from uptask.infrastructure.services.email.template_renderer import (
    TemplateRenderer,
    get_template_renderer,
)

logger = get_logger(__name__)

CONFIRMATION_SUBJECT = "UpTask - Confirma tu cuenta"
CONFIRMATION_TEXT = "UpTask - Confirma tu cuenta"
CONFIRMATION_HTML = """\
<p>Hola: {{ name }}, has creado tu cuenta en UpTask, ya casi está todo listo, solo debes confirmar tu cuenta</p>
<p>Visita el siguiente enlace:</p>
<a href="{{ url }}">Confirmar cuenta</a>
<p>E ingresa el código: <b>{{ token }}</b></p>
<p>Este token expira en {{ expire_minutes }} minutos</p>
"""

PASSWORD_RESET_SUBJECT = "UpTask - Restablece tu contraseña"
PASSWORD_RESET_TEXT = "UpTask - Restablece tu contraseña"
PASSWORD_RESET_HTML = """\
<p>Hola: {{ name }}, has solicitado restablecer tu contraseña.</p>
<p>Visita el siguiente enlace:</p>
<a href="{{ url }}">Restablecer contraseña</a>
<p>E ingresa el código: <b>{{ token }}</b></p>
<p>Este token expira en {{ expire_minutes }} minutos</p>
"""


class AuthEmail:
    """Mail dispatcher for account confirmation and password reset."""

    def __init__(
        self,
        provider: EmailProvider,
        frontend_url: str,
        from_email: str,
        from_name: str,
        expire_minutes: int = 10,
        renderer: TemplateRenderer | None = None,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            provider: Transport used to deliver messages.
            frontend_url: Base URL of the frontend, used for links.
            from_email: Sender address.
            from_name: Sender display name.
            expire_minutes: Code lifetime announced in the emails.
            renderer: Template renderer. Defaults to the shared instance.
        """
        self.provider = provider
        self.frontend_url = frontend_url.rstrip("/")
        self.from_email = from_email
        self.from_name = from_name
        self.expire_minutes = expire_minutes
        self.renderer = renderer or get_template_renderer()

    @classmethod
    def from_settings(cls, settings: Settings) -> "AuthEmail":
        """Build a dispatcher with the transport selected by configuration."""
        if settings.smtp_enabled:
            provider: EmailProvider = SMTPProvider(SMTPSettings.from_settings(settings))
        else:
            provider = ConsoleEmailProvider()
        return cls(
            provider=provider,
            frontend_url=settings.frontend_url,
            from_email=settings.mail_from_email,
            from_name=settings.mail_from_name,
            expire_minutes=settings.token_expire_minutes,
        )

    async def send_confirmation_email(self, email: str, name: str, token: str) -> bool:
        """Send the account confirmation code.

        Returns:
            True if the transport accepted the message, False otherwise.
        """
        return await self._send(
            kind="confirmation",
            to=email,
            subject=CONFIRMATION_SUBJECT,
            text_body=CONFIRMATION_TEXT,
            html_template=CONFIRMATION_HTML,
            variables={
                "name": name,
                "token": token,
                "url": f"{self.frontend_url}/auth/confirm-account",
            },
        )

    async def send_password_reset_token(self, email: str, name: str, token: str) -> bool:
        """Send the password reset code.

        Returns:
            True if the transport accepted the message, False otherwise.
        """
        return await self._send(
            kind="password_reset",
            to=email,
            subject=PASSWORD_RESET_SUBJECT,
            text_body=PASSWORD_RESET_TEXT,
            html_template=PASSWORD_RESET_HTML,
            variables={
                "name": name,
                "token": token,
                "url": f"{self.frontend_url}/auth/new-password",
            },
        )

    async def _send(
        self,
        kind: str,
        to: str,
        subject: str,
        text_body: str,
        html_template: str,
        variables: dict[str, str],
    ) -> bool:
        try:
            html_body = self.renderer.render(
                html_template,
                {**variables, "expire_minutes": str(self.expire_minutes)},
            )
            message_id = await self.provider.send_email(
                to=to,
                subject=subject,
                html_body=html_body,
                text_body=text_body,
                from_email=self.from_email,
                from_name=self.from_name,
            )
        except Exception as e:
            logger.error(
                "Failed to send email",
                kind=kind,
                to=to,
                error=str(e),
                exc_type=type(e).__name__,
            )
            return False

        logger.info("Mensaje enviado", kind=kind, to=to, message_id=message_id)
        return True
