"""
==============================================================================
Expiration Scanner Module
==============================================================================

Daily check of products approaching their expiration date.

Algorithm:
---------
1. window_end = today + 45 days
2. Load products with expiration_date in [today, window_end] (inclusive)
3. days_remaining = (expiration_date - today).days
4. Notify when days_remaining is exactly 45 or 15

A product is therefore warned about on exactly two calendar days. If the
scan does not run on one of those days the warning is lost; there is no
catch-up. Running the scan twice on the same day warns twice.

==============================================================================
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import List, Protocol, Tuple

from shelfwatch.core.exceptions import StoreError
from shelfwatch.db.models import Product
from shelfwatch.db.store import ProductStore
from shelfwatch.services.notifier import NotificationResult


# Module logger
logger = logging.getLogger(__name__)


SCAN_WINDOW_DAYS = 45
WARNING_THRESHOLDS: Tuple[int, ...] = (45, 15)


class Notifier(Protocol):
    """Anything that can deliver an expiration warning."""

    def notify(self, product: Product, days_remaining: int) -> NotificationResult:
        ...


@dataclass
class ScanReport:
    """Summary of one scan run."""

    today: date
    examined: int = 0
    notified: List[Tuple[str, int]] = field(default_factory=list)
    failed: List[Tuple[str, int]] = field(default_factory=list)
    aborted: bool = False

    @property
    def attempted(self) -> int:
        return len(self.notified) + len(self.failed)


class ExpirationScanner:
    """
    Finds products at a warning threshold and notifies about them.

    The scanner only reads from the store.

    Attributes:
        _store: ProductStore to query
        _notifier: Notifier receiving one call per matching product

    Example:
        >>> scanner = ExpirationScanner(store, notifier)
        >>> report = scanner.scan(date(2026, 10, 19))
        >>> report.notified
        [('789100', 15)]
    """

    def __init__(self, store: ProductStore, notifier: Notifier) -> None:
        self._store = store
        self._notifier = notifier

    def scan(self, today: date) -> ScanReport:
        """
        Run the expiration check for ``today``.

        Store failures abort the run and are logged; the report is marked
        aborted. Notification failures are logged and the loop continues.
        """
        report = ScanReport(today=today)
        window_end = today + timedelta(days=SCAN_WINDOW_DAYS)

        try:
            products = self._store.find_in_range(today, window_end)
        except StoreError as e:
            logger.error(f"Erro ao verificar os produtos: {e.message}")
            report.aborted = True
            return report

        report.examined = len(products)

        for product in products:
            days_remaining = product.days_until_expiration(today)
            if days_remaining not in WARNING_THRESHOLDS:
                continue

            result = self._notifier.notify(product, days_remaining)
            if result.success:
                report.notified.append((product.barcode, days_remaining))
            else:
                report.failed.append((product.barcode, days_remaining))

        logger.info(
            f"Expiration scan for {today}: {report.examined} products in window, "
            f"{len(report.notified)} warnings sent, {len(report.failed)} failed"
        )
        return report
