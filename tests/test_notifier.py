"""
==============================================================================
Email Notifier Tests
==============================================================================

Tests for message content and SMTP failure handling. smtplib.SMTP is
replaced with the in-process fake from conftest.

==============================================================================
"""

from datetime import date

import pytest

from shelfwatch.config import Settings
from shelfwatch.core.exceptions import MailError
from shelfwatch.db.models import Product
from shelfwatch.services.notifier import EmailNotifier


@pytest.fixture
def product() -> Product:
    return Product(
        id=1,
        barcode="789100",
        name="Leite Integral",
        quantity="12",
        expiration_date=date(2026, 11, 3),
    )


def _parts(message):
    return {
        part.get_content_type(): part.get_payload(decode=True).decode("utf-8")
        for part in message.get_payload()
    }


class TestMessage:
    """Tests for the warning email content."""

    def test_headers(self, settings: Settings, product: Product):
        """Test subject, sender and recipient."""
        message = EmailNotifier(settings).build_message(product, 15)

        assert message["Subject"] == "Aviso: Produto Leite Integral vence em 15 dias"
        assert message["From"] == "alertas@example.com"
        assert message["To"] == "estoque@example.com"
        assert message["Message-ID"].endswith("@example.com>")

    def test_plain_and_html_bodies(self, settings: Settings, product: Product):
        """Test both variants carry name, barcode and day count."""
        parts = _parts(EmailNotifier(settings).build_message(product, 45))

        assert parts["text/plain"] == (
            "O produto Leite Integral (Código de Barras: 789100) está a 45 dias de vencer."
        )
        assert "<b>Leite Integral</b>" in parts["text/html"]
        assert "<b>45</b>" in parts["text/html"]
        assert "789100" in parts["text/html"]

    def test_html_escapes_name(self, settings: Settings, product: Product):
        """Test product names cannot inject markup."""
        product.name = "Queijo <Minas>"
        parts = _parts(EmailNotifier(settings).build_message(product, 15))

        assert "Queijo &lt;Minas&gt;" in parts["text/html"]
        assert "Queijo <Minas>" in parts["text/plain"]

    def test_line_breaks_in_name_stay_in_subject(self, settings: Settings, product: Product):
        """Test a multi-line name cannot add headers to the warning."""
        product.name = "Leite\r\nBcc: x@evil.com"
        message = EmailNotifier(settings).build_message(product, 15)

        assert message["Subject"] == "Aviso: Produto Leite Bcc: x@evil.com vence em 15 dias"
        assert message["Bcc"] is None
        assert "\nBcc:" not in message.as_string()

    def test_explicit_sender(self, settings: Settings, product: Product):
        """Test EMAIL_FROM overrides the SMTP login as sender."""
        settings.email_from = "inventario@example.com"
        message = EmailNotifier(settings).build_message(product, 15)

        assert message["From"] == "inventario@example.com"


class TestDelivery:
    """Tests for SMTP delivery."""

    def test_send_success(self, settings: Settings, product: Product, fake_smtp):
        """Test a send uses the configured server, TLS and login."""
        result = EmailNotifier(settings).notify(product, 15)

        assert result.success is True
        assert result.error is None
        server = fake_smtp.instances[0]
        assert (server.host, server.port) == ("smtp.example.com", 587)
        assert server.timeout == settings.email_timeout_seconds
        assert server.started_tls is True
        assert server.logged_in_as == "alertas@example.com"
        assert len(server.sent) == 1
        assert result.message_id == server.sent[0]["Message-ID"]

    def test_login_skipped_without_user(self, settings: Settings, product: Product, fake_smtp):
        """Test an open relay is used without authentication."""
        settings.email_user = ""
        settings.email_from = "inventario@example.com"

        result = EmailNotifier(settings).notify(product, 15)

        assert result.success is True
        assert fake_smtp.instances[0].logged_in_as is None

    def test_auth_failure_is_returned(self, settings: Settings, product: Product, fake_smtp):
        """Test SMTP errors come back as a failed result."""
        fake_smtp.fail_on_login = True

        result = EmailNotifier(settings).notify(product, 15)

        assert result.success is False
        assert isinstance(result.error, MailError)
        assert result.message_id is None

    def test_connection_failure_is_returned(self, settings: Settings, product: Product, fake_smtp):
        """Test socket errors come back as a failed result."""
        fake_smtp.refuse_connection = True

        result = EmailNotifier(settings).notify(product, 45)

        assert result.success is False
        assert "connection refused" in result.error.message

    def test_no_recipient(self, settings: Settings, product: Product, fake_smtp):
        """Test nothing is sent when no recipient is configured."""
        settings.email_to = ""

        result = EmailNotifier(settings).notify(product, 15)

        assert result.success is False
        assert fake_smtp.instances == []

    def test_unserializable_message_is_returned(self, settings: Settings, product: Product, fake_smtp):
        """Test a header the mail library refuses comes back as a failed result."""
        settings.email_to = "estoque@example.com\nBcc: x@evil.com"

        result = EmailNotifier(settings).notify(product, 15)

        assert result.success is False
        assert isinstance(result.error, MailError)
        assert fake_smtp.instances[0].sent == []
