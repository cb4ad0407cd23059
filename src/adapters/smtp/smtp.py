"""
SMTP email sender adapter - Implements EmailSender protocol.

Delivers activation emails through an SMTP relay using smtplib.
Transport errors are reported to the domain as EmailDeliveryFailed so
the registration transaction can be rolled back.
"""

import logging
import smtplib
from email.message import EmailMessage

from src.domain.exceptions import EmailDeliveryFailed

logger = logging.getLogger(__name__)

ACTIVATION_SUBJECT = "Account Activation"
ACTIVATION_PATH = "/api/1.0/users/token/{token}"


class SmtpEmailSender:
    """Implements EmailSender protocol via smtplib."""

    def __init__(
        self,
        host: str,
        port: int,
        sender: str,
        username: str | None = None,
        password: str | None = None,
        use_tls: bool = False,
        timeout: float = 10.0,
    ) -> None:
        self._host = host
        self._port = port
        self._sender = sender
        self._username = username
        self._password = password
        self._use_tls = use_tls
        self._timeout = timeout

    def build_message(self, email: str, token: str) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self._sender
        message["To"] = email
        message["Subject"] = ACTIVATION_SUBJECT
        message.set_content(
            "Please activate your account.\n\n"
            f"Activation token: {token}\n"
            f"Activate with: POST {ACTIVATION_PATH.format(token=token)}\n"
        )
        return message

    def send_account_activation(self, email: str, token: str) -> None:
        """
        Send the activation email.

        Raises:
            EmailDeliveryFailed: On any SMTP or connection error
        """
        message = self.build_message(email, token)
        try:
            with smtplib.SMTP(self._host, self._port, timeout=self._timeout) as client:
                if self._use_tls:
                    client.starttls()
                if self._username:
                    client.login(self._username, self._password or "")
                client.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            logger.exception("Activation email to %s failed via %s:%s", email, self._host, self._port)
            raise EmailDeliveryFailed(email) from e

        logger.info("Activation email sent to %s", email)
