"""
==============================================================================
Pytest Configuration and Fixtures
==============================================================================

Provides settings, an in-memory database, the store, a recording notifier
a fake SMTP server and an API client.

==============================================================================
"""

import smtplib
from datetime import date
from typing import Generator, List, Set, Tuple

import pytest
from fastapi.testclient import TestClient

from shelfwatch.config import Settings
from shelfwatch.core.exceptions import MailError, StoreError
from shelfwatch.db import DatabaseManager, Product, ProductStore
from shelfwatch.main import Application
from shelfwatch.services.notifier import NotificationResult


TODAY = date(2026, 10, 19)


# ============================================================================
# FAKES
# ============================================================================

class RecordingNotifier:
    """Notifier that records calls; fails for barcodes listed in ``fail_for``."""

    def __init__(self) -> None:
        self.calls: List[Tuple[str, int]] = []
        self.fail_for: Set[str] = set()

    def notify(self, product: Product, days_remaining: int) -> NotificationResult:
        self.calls.append((product.barcode, days_remaining))
        if product.barcode in self.fail_for:
            return NotificationResult(success=False, error=MailError("connection refused"))
        return NotificationResult(success=True, message_id=f"<{product.barcode}@test>")


class FailingStore:
    """Store whose every operation fails like a lost database connection."""

    def ping(self) -> bool:
        return False

    def _fail(self, *args, **kwargs):
        raise StoreError("Erro ao buscar produtos")

    find_all = _fail
    find_by_barcode = _fail
    find_in_range = _fail
    insert = _fail
    delete_by_compound_key = _fail


class FakeSMTP:
    """Stands in for smtplib.SMTP; records the last session."""

    instances: List["FakeSMTP"] = []
    fail_on_login = False
    refuse_connection = False

    def __init__(self, host, port, timeout=None):
        if self.refuse_connection:
            raise ConnectionRefusedError("connection refused")
        self.host = host
        self.port = port
        self.timeout = timeout
        self.started_tls = False
        self.logged_in_as = None
        self.sent = []
        FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def ehlo(self):
        return (250, b"ok")

    def has_extn(self, name):
        return name.lower() == "starttls"

    def starttls(self):
        self.started_tls = True

    def login(self, user, password):
        if self.fail_on_login:
            raise smtplib.SMTPAuthenticationError(535, b"authentication failed")
        self.logged_in_as = user

    def send_message(self, message):
        # Serialize like smtplib does so header errors surface here
        message.as_string()
        self.sent.append(message)


# ============================================================================
# CONFIGURATION FIXTURES
# ============================================================================

@pytest.fixture
def settings() -> Settings:
    """Settings for an in-memory database with the scheduler off."""
    return Settings(
        _env_file=None,
        database_url="sqlite://",
        scheduler_enabled=False,
        email_host="smtp.example.com",
        email_port=587,
        email_user="alertas@example.com",
        email_pass="secret",
        email_to="estoque@example.com",
    )


# ============================================================================
# DATABASE FIXTURES
# ============================================================================

@pytest.fixture(scope="function")
def db_manager() -> Generator[DatabaseManager, None, None]:
    """Create a fresh in-memory database for each test."""
    manager = DatabaseManager("sqlite://")
    manager.create_tables()
    try:
        yield manager
    finally:
        manager.drop_tables()
        manager.dispose()


@pytest.fixture
def store(db_manager: DatabaseManager) -> ProductStore:
    return ProductStore(db_manager)


@pytest.fixture
def failing_store() -> FailingStore:
    return FailingStore()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def fake_smtp(monkeypatch):
    """Replace smtplib.SMTP with FakeSMTP for one test."""
    FakeSMTP.instances = []
    FakeSMTP.fail_on_login = False
    FakeSMTP.refuse_connection = False
    monkeypatch.setattr(smtplib, "SMTP", FakeSMTP)
    return FakeSMTP


# ============================================================================
# API FIXTURES
# ============================================================================

@pytest.fixture(scope="function")
def client(settings: Settings, notifier: RecordingNotifier) -> Generator[TestClient, None, None]:
    """Test client over an app with its own in-memory database."""
    app = Application(settings, notifier=notifier).app

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
