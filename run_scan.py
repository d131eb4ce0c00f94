#!/usr/bin/env python3
"""
Run Expiration Scan Script
Runs one expiration scan against the configured database, outside the daily schedule.

Usage:
    python run_scan.py                    # scan for today, send emails
    python run_scan.py --date 2026-11-03  # scan as if it were that day
    python run_scan.py --dry-run          # list warnings without sending
"""

import argparse
import logging
import sys
from datetime import date

from shelfwatch.config import get_settings
from shelfwatch.db import DatabaseManager, Product, ProductStore
from shelfwatch.services.expiration_scanner import ExpirationScanner
from shelfwatch.services.notifier import EmailNotifier, NotificationResult


class PrintingNotifier:
    """Prints warnings instead of emailing them."""

    def notify(self, product: Product, days_remaining: int) -> NotificationResult:
        print(f"  would warn: {product.barcode} {product.name or ''} ({days_remaining} days)")
        return NotificationResult(success=True)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Run one expiration scan")
    parser.add_argument(
        "--date",
        type=date.fromisoformat,
        default=None,
        help="Scan date as YYYY-MM-DD (default: today)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print matching products instead of sending emails",
    )
    return parser.parse_args(argv)


def run_scan(argv=None) -> int:
    """Run the scan and return a process exit code."""
    args = parse_args(argv)
    settings = get_settings()

    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    )

    db_manager = DatabaseManager(settings.database_url)
    store = ProductStore(db_manager)
    notifier = PrintingNotifier() if args.dry_run else EmailNotifier(settings)
    scanner = ExpirationScanner(store, notifier)

    try:
        report = scanner.scan(args.date or date.today())
    finally:
        db_manager.dispose()

    if report.aborted:
        print("❌ ERROR: could not read products from the database")
        return 1

    print(f"✅ Scanned {report.examined} products expiring by {report.today}+45d")
    print(f"   warnings sent: {len(report.notified)}, failed: {len(report.failed)}")
    return 0 if not report.failed else 2


if __name__ == "__main__":
    print("=" * 60)
    print("EXPIRATION SCAN")
    print("=" * 60)
    print()
    code = run_scan()
    print()
    print("=" * 60)
    sys.exit(code)
