"""
==============================================================================
Expiration Scheduler Module
==============================================================================

Runs the expiration scan once a day.

Background Task:
---------------
An APScheduler AsyncIOScheduler on the application's event loop fires a
single cron job (default "0 0 * * *", midnight server time). Each firing:
1. Skips if a previous scan is still running (single-flight lock)
2. Runs ExpirationScanner.scan(today) in a worker thread
3. Logs the outcome; errors never escape the job

Missed Triggers:
---------------
Jobs live in memory only. A midnight that passes while the process is
down is not replayed after restart, and coalescing collapses any queued
firings into one.

==============================================================================
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date, datetime
from typing import Any, Callable, Dict, List, Optional

import pytz
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from shelfwatch.config import Settings
from shelfwatch.services.expiration_scanner import ExpirationScanner, ScanReport


# Module logger
logger = logging.getLogger(__name__)


JOB_ID = "expiration_scan"

# Seconds after the trigger time a late firing is still run
MISFIRE_GRACE_SECONDS = 300


class ExpirationScheduler:
    """
    Lifecycle manager for the daily expiration scan.

    Attributes:
        _scanner: ExpirationScanner to run
        _settings: Scheduler settings (enabled flag, cron, timezone)
        _scheduler: AsyncIOScheduler, created on start()
        _lock: Single-flight guard around scans

    Example:
        >>> scheduler = ExpirationScheduler(scanner, settings)
        >>> scheduler.start()          # inside a running event loop
        >>> await scheduler.run_once() # manual run
        >>> scheduler.stop()
    """

    def __init__(
        self,
        scanner: ExpirationScanner,
        settings: Settings,
        today_provider: Optional[Callable[[], date]] = None,
    ) -> None:
        self._scanner = scanner
        self._settings = settings
        self._timezone = (
            pytz.timezone(settings.scheduler_timezone)
            if settings.scheduler_timezone
            else None
        )
        self._today_provider = today_provider or self._today
        self._scheduler: Optional[AsyncIOScheduler] = None
        self._lock = asyncio.Lock()
        self._is_running = False

    def _today(self) -> date:
        return datetime.now(self._timezone).date()

    def build_trigger(self) -> CronTrigger:
        """Build the cron trigger from settings."""
        return CronTrigger.from_crontab(self._settings.scan_cron, timezone=self._timezone)

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def start(self) -> None:
        """
        Start the scheduler.

        Must be called from within a running event loop.
        """
        if not self._settings.scheduler_enabled:
            logger.info("Expiration scheduler is disabled, skipping start")
            return

        if self._is_running:
            logger.warning("Expiration scheduler already running")
            return

        scheduler = AsyncIOScheduler(timezone=self._timezone) if self._timezone else AsyncIOScheduler()
        scheduler.add_job(
            self.run_once,
            self.build_trigger(),
            id=JOB_ID,
            name="Daily Expiration Scan",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
            misfire_grace_time=MISFIRE_GRACE_SECONDS,
        )
        scheduler.start()

        self._scheduler = scheduler
        self._is_running = True
        logger.info(f"✅ Expiration scheduler started (cron={self._settings.scan_cron!r})")

    def stop(self) -> None:
        """Stop the scheduler without waiting for a running scan."""
        if self._scheduler and self._is_running:
            self._scheduler.shutdown(wait=False)
            self._is_running = False
            logger.info("🛑 Expiration scheduler stopped")

    # =========================================================================
    # JOB
    # =========================================================================

    async def run_once(self, today: Optional[date] = None) -> Optional[ScanReport]:
        """
        Run one scan unless another is already in progress.

        Args:
            today: Date to scan for (defaults to the current date)

        Returns:
            The ScanReport, or None if skipped or failed
        """
        if self._lock.locked():
            logger.warning("Expiration scan already in progress, skipping this trigger")
            return None

        async with self._lock:
            scan_date = today or self._today_provider()
            logger.info(f"🔄 Running expiration scan for {scan_date}")
            try:
                return await asyncio.to_thread(self._scanner.scan, scan_date)
            except Exception as e:
                logger.error(f"Expiration scan error: {e}", exc_info=True)
                return None

    # =========================================================================
    # STATUS
    # =========================================================================

    @property
    def is_running(self) -> bool:
        """Check if the scheduler is running."""
        return self._is_running

    @property
    def scan_in_progress(self) -> bool:
        """Check if a scan is currently executing."""
        return self._lock.locked()

    def get_jobs_info(self) -> List[Dict[str, Any]]:
        """Get information about scheduled jobs."""
        if not self._scheduler:
            return []

        jobs = []
        for job in self._scheduler.get_jobs():
            jobs.append(
                {
                    "id": job.id,
                    "name": job.name,
                    "next_run": job.next_run_time.isoformat() if job.next_run_time else None,
                }
            )
        return jobs
