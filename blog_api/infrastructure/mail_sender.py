"""SMTP Mail Sender — delivers verification codes through fastapi-mail.

Invariants:
    - Every send is bounded by mail_timeout_seconds
    - Any transport failure or timeout surfaces as DeliveryError (core/errors.py)
    - The OTP code is rendered into the message but never logged

Design Decisions:
    - Jinja2 template shipped inside the package (blog_api/templates)
    - FastMail built once per sender; ConnectionConfig validated at construction
"""

import asyncio
import logging

from fastapi_mail import ConnectionConfig, FastMail, MessageSchema, MessageType
from fastapi_mail.errors import ConnectionErrors
from jinja2 import Environment, PackageLoader, select_autoescape

from blog_api.config import Settings
from blog_api.core.errors import DeliveryError

logger = logging.getLogger(__name__)

_TEMPLATE = "verification_email.html"


class SmtpMailSender:
    """MailSender implementation over SMTP."""

    def __init__(self, settings: Settings):
        self._app_name = settings.smtp_from_name
        self._timeout = settings.mail_timeout_seconds
        self._expires_minutes = max(1, settings.otp_ttl_seconds // 60)
        self._mail = FastMail(ConnectionConfig(
            MAIL_USERNAME=settings.smtp_user,
            MAIL_PASSWORD=settings.smtp_password,
            MAIL_FROM=settings.smtp_user,
            MAIL_FROM_NAME=settings.smtp_from_name,
            MAIL_PORT=settings.smtp_port,
            MAIL_SERVER=settings.smtp_server,
            MAIL_STARTTLS=settings.smtp_starttls,
            MAIL_SSL_TLS=settings.smtp_ssl_tls,
            USE_CREDENTIALS=bool(settings.smtp_password),
            TIMEOUT=max(1, int(settings.mail_timeout_seconds)),
        ))
        self._jinja = Environment(
            loader=PackageLoader("blog_api", "templates"),
            autoescape=select_autoescape(["html", "xml"]),
        )

    def render(self, otp_code: str, display_name: str) -> str:
        return self._jinja.get_template(_TEMPLATE).render(
            app_name=self._app_name,
            display_name=display_name,
            otp_code=otp_code,
            expires_minutes=self._expires_minutes,
        )

    async def send(self, otp_code: str, to_email: str, display_name: str) -> None:
        message = MessageSchema(
            subject=f"Verification code for {self._app_name}",
            recipients=[to_email],
            body=self.render(otp_code, display_name),
            subtype=MessageType.html,
        )
        try:
            await asyncio.wait_for(
                self._mail.send_message(message), timeout=self._timeout,
            )
        except asyncio.TimeoutError:
            logger.warning("Verification mail timed out", extra={"error_code": "DELIVERY_TIMEOUT"})
            raise DeliveryError("timed out")
        except (ConnectionErrors, OSError) as e:
            logger.warning(f"Verification mail failed: {e}", extra={"error_code": "DELIVERY_FAILED"})
            raise DeliveryError("mail server rejected or unreachable")
