"""
==============================================================================
Expiration Notifier Module
==============================================================================

Email delivery of expiration warnings.

This module implements:
- NotificationResult: outcome of a single send
- EmailNotifier: builds the warning message and sends it over SMTP

Failure Model:
-------------
notify() never raises for delivery problems. SMTP, socket and message
formatting errors are wrapped in MailError, logged, and handed back in the
NotificationResult so a scan keeps going over the remaining products.
Line breaks in product names are collapsed before they reach the subject.

Message:
-------
    Subject: Aviso: Produto <nome> vence em <dias> dias
    Text:    O produto <nome> (Código de Barras: <codigo>) está a <dias> dias de vencer.
    HTML:    same sentence, name and day count in bold

==============================================================================
"""

from __future__ import annotations

import html
import logging
import smtplib
from dataclasses import dataclass
from email.errors import MessageError
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formatdate, make_msgid
from typing import Optional

from shelfwatch.config import Settings
from shelfwatch.core.exceptions import MailError
from shelfwatch.db.models import Product


# Module logger
logger = logging.getLogger(__name__)


SUBJECT_TEMPLATE = "Aviso: Produto {name} vence em {days} dias"
TEXT_TEMPLATE = "O produto {name} (Código de Barras: {barcode}) está a {days} dias de vencer."
HTML_TEMPLATE = (
    "<p>O produto <b>{name}</b> (Código de Barras: {barcode}) "
    "está a <b>{days}</b> dias de vencer.</p>"
)


def _single_line(value: str) -> str:
    """Collapse line breaks so free text stays inside one header."""
    return " ".join(value.splitlines()).strip()


@dataclass
class NotificationResult:
    """Outcome of one notification attempt."""

    success: bool
    message_id: Optional[str] = None
    error: Optional[MailError] = None


class EmailNotifier:
    """
    Sends expiration warnings to the configured recipient.

    Each call opens its own SMTP connection with a bounded timeout; sends
    are not pooled since at most a handful go out per day.

    Attributes:
        _settings: Mail configuration (host, port, credentials, addresses)

    Example:
        >>> notifier = EmailNotifier(settings)
        >>> result = notifier.notify(product, 15)
        >>> result.success
        True
    """

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    # =========================================================================
    # MESSAGE BUILDING
    # =========================================================================

    def build_message(self, product: Product, days_remaining: int) -> MIMEMultipart:
        """Build the plain-text + HTML warning email for one product."""
        name = product.name or ""
        barcode = product.barcode

        message = MIMEMultipart("alternative")
        message["From"] = self._settings.mail_sender
        message["To"] = self._settings.email_to
        message["Subject"] = SUBJECT_TEMPLATE.format(
            name=_single_line(name), days=days_remaining
        )
        message["Date"] = formatdate(localtime=True)
        message["Message-ID"] = make_msgid(domain=self._sender_domain())

        message.attach(MIMEText(
            TEXT_TEMPLATE.format(name=name, barcode=barcode, days=days_remaining),
            "plain",
            "utf-8",
        ))
        message.attach(MIMEText(
            HTML_TEMPLATE.format(
                name=html.escape(name),
                barcode=html.escape(barcode),
                days=days_remaining,
            ),
            "html",
            "utf-8",
        ))
        return message

    def _sender_domain(self) -> Optional[str]:
        sender = self._settings.mail_sender
        if "@" in sender:
            return sender.rsplit("@", 1)[1]
        return None

    # =========================================================================
    # DELIVERY
    # =========================================================================

    def notify(self, product: Product, days_remaining: int) -> NotificationResult:
        """
        Email a warning that ``product`` expires in ``days_remaining`` days.

        Returns:
            NotificationResult; failures are logged, never raised
        """
        if not self._settings.email_to:
            error = MailError("No recipient configured (EMAIL_TO)")
            logger.warning(f"Skipping warning for {product.barcode!r}: {error.message}")
            return NotificationResult(success=False, error=error)

        try:
            message = self.build_message(product, days_remaining)
            self._send(message)
        except (smtplib.SMTPException, OSError, MessageError) as e:
            error = MailError(f"Erro ao enviar e-mail: {e}")
            logger.error(
                f"Failed to send expiration warning for {product.barcode!r} "
                f"({days_remaining} days): {e}"
            )
            return NotificationResult(success=False, error=error)

        message_id = message["Message-ID"]
        logger.info(f"E-mail enviado: {message_id} ({product.barcode!r}, {days_remaining} days)")
        return NotificationResult(success=True, message_id=message_id)

    def _send(self, message: MIMEMultipart) -> None:
        """Deliver one message over a fresh SMTP connection."""
        settings = self._settings
        smtp_class = smtplib.SMTP_SSL if settings.email_secure else smtplib.SMTP

        with smtp_class(
            settings.email_host,
            settings.email_port,
            timeout=settings.email_timeout_seconds,
        ) as server:
            if not settings.email_secure:
                server.ehlo()
                if server.has_extn("starttls"):
                    server.starttls()
                    server.ehlo()
            if settings.email_user:
                server.login(settings.email_user, settings.email_pass)
            server.send_message(message)
