"""
==============================================================================
Expiration Scanner Tests
==============================================================================

Tests for threshold matching, window bounds and failure isolation.

==============================================================================
"""

from datetime import date, timedelta

from shelfwatch.db import ProductStore
from shelfwatch.services.expiration_scanner import ExpirationScanner
from shelfwatch.services.notifier import EmailNotifier


TODAY = date(2026, 10, 19)


def _add(store: ProductStore, barcode: str, days: int) -> None:
    store.insert(barcode, "1", TODAY + timedelta(days=days), name=f"Produto {barcode}")


class TestThresholds:
    """Tests for the exact 45/15 day matching."""

    def test_only_exact_thresholds_notified(self, store: ProductStore, notifier):
        """Test warnings go out on exactly 45 and 15 days remaining."""
        for barcode, days in [
            ("d45", 45), ("d44", 44), ("d16", 16), ("d15", 15),
            ("d14", 14), ("d0", 0), ("d46", 46), ("past", -1),
        ]:
            _add(store, barcode, days)

        report = ExpirationScanner(store, notifier).scan(TODAY)

        assert sorted(notifier.calls) == [("d15", 15), ("d45", 45)]
        assert report.examined == 6
        assert report.aborted is False

    def test_no_products_in_window(self, store: ProductStore, notifier):
        """Test an empty window sends nothing."""
        _add(store, "far", 90)

        report = ExpirationScanner(store, notifier).scan(TODAY)

        assert notifier.calls == []
        assert report.examined == 0

    def test_each_batch_notified(self, store: ProductStore, notifier):
        """Test two batches of one barcode at a threshold both warn."""
        _add(store, "789100", 15)
        _add(store, "789100", 15)

        ExpirationScanner(store, notifier).scan(TODAY)

        assert notifier.calls == [("789100", 15), ("789100", 15)]

    def test_day_count_uses_scan_date(self, store: ProductStore, notifier):
        """Test the same product hits each threshold on its own day."""
        store.insert("789100", "1", TODAY + timedelta(days=45))
        scanner = ExpirationScanner(store, notifier)

        for offset in range(0, 46):
            scanner.scan(TODAY + timedelta(days=offset))

        assert notifier.calls == [("789100", 45), ("789100", 15)]


class TestRepeatedScans:
    """Tests for documented non-idempotence."""

    def test_same_day_scan_twice_notifies_twice(self, store: ProductStore, notifier):
        """Test scans carry no memory of earlier sends."""
        _add(store, "123", 15)
        scanner = ExpirationScanner(store, notifier)

        scanner.scan(TODAY)
        scanner.scan(TODAY)

        assert notifier.calls == [("123", 15), ("123", 15)]

    def test_missed_day_not_caught_up(self, store: ProductStore, notifier):
        """Test a threshold day without a scan is not warned about later."""
        _add(store, "123", 15)

        ExpirationScanner(store, notifier).scan(TODAY + timedelta(days=1))

        assert notifier.calls == []


class TestFailures:
    """Tests for store and notifier failures."""

    def test_store_failure_aborts_quietly(self, failing_store, notifier):
        """Test a failed query is reported, not raised."""
        report = ExpirationScanner(failing_store, notifier).scan(TODAY)

        assert report.aborted is True
        assert report.examined == 0
        assert notifier.calls == []

    def test_notifier_failure_does_not_stop_loop(self, store: ProductStore, notifier):
        """Test one failed send leaves the other products unaffected."""
        _add(store, "first", 15)
        _add(store, "second", 45)
        notifier.fail_for.add("first")

        report = ExpirationScanner(store, notifier).scan(TODAY)

        assert notifier.calls == [("first", 15), ("second", 45)]
        assert report.failed == [("first", 15)]
        assert report.notified == [("second", 45)]
        assert report.attempted == 2

    def test_multiline_name_does_not_stop_loop(self, store: ProductStore, settings, fake_smtp):
        """Test a product name with line breaks still lets later products warn."""
        store.insert("bad", "1", TODAY + timedelta(days=15), name="Leite\nBcc: x@evil.com")
        _add(store, "good", 45)

        report = ExpirationScanner(store, EmailNotifier(settings)).scan(TODAY)

        assert report.aborted is False
        assert report.attempted == 2
        assert report.notified == [("bad", 15), ("good", 45)]
        sent = [message for server in fake_smtp.instances for message in server.sent]
        assert [message["Subject"] for message in sent] == [
            "Aviso: Produto Leite Bcc: x@evil.com vence em 15 dias",
            "Aviso: Produto Produto good vence em 45 dias",
        ]
        assert all(message["Bcc"] is None for message in sent)

    def test_unsendable_message_does_not_stop_loop(self, store: ProductStore, settings, fake_smtp):
        """Test a message that fails to serialize is counted and the scan continues."""
        _add(store, "first", 15)
        _add(store, "second", 45)
        settings.email_to = "estoque@example.com\nBcc: x@evil.com"

        report = ExpirationScanner(store, EmailNotifier(settings)).scan(TODAY)

        assert report.aborted is False
        assert report.failed == [("first", 15), ("second", 45)]
        assert report.notified == []
