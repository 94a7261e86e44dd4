"""
junglesales.scheduler
=====================

Daily decay job.

:class:`DecayScheduler` scans every company, applies
:pyfunc:`junglesales.decay.next_state` and writes the result back one
company at a time.  A failed write is logged and the scan moves on; a
failed scan ends the tick.  Nothing is retried.

The daily trigger uses the ``schedule`` library.  ``run_forever`` blocks
the caller, ``start`` runs the same loop on a daemon thread.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Optional

import schedule

from .company_repo import CompanyRepository
from .decay import next_state
from .errors import StoreError
from .models import CompanyUpdate
from .settings import Settings, settings as default_settings

logger = logging.getLogger(__name__)


@dataclass
class TickReport:
    """Counts for one tick.  ``ran`` is False when the tick was skipped."""
    updated: int = 0
    skipped: int = 0
    failed: int = 0
    ran: bool = True


class DecayScheduler:
    """
    Apply the countdown transition to every company once per tick.

    Parameters
    ----------
    repository_factory : callable, default=CompanyRepository
        Returns a fresh repository for each tick; closed when the tick ends.
    config : Settings, optional
        Decay options (time of day, overlap guard, auto‑enroll).
    """

    def __init__(
        self,
        repository_factory: Callable[[], CompanyRepository] = CompanyRepository,
        config: Optional[Settings] = None,
    ) -> None:
        self.repository_factory = repository_factory
        self.config = config or default_settings
        self._running = threading.Lock()
        self._jobs = schedule.Scheduler()
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    # ------------------------------------------------------------------
    # One tick
    # ------------------------------------------------------------------
    def tick(self) -> TickReport:
        """Run the decay over every company.  Safe to call directly."""
        if self.config.decay_prevent_overlap:
            if not self._running.acquire(blocking=False):
                logger.warning("decay tick already running, skipping this one")
                return TickReport(ran=False)
            try:
                return self._tick()
            finally:
                self._running.release()
        return self._tick()

    def _tick(self) -> TickReport:
        report = TickReport()
        repo = self.repository_factory()
        try:
            try:
                companies = repo.all()
            except StoreError:
                logger.exception("decay tick could not load companies")
                return report

            for company in companies:
                update = next_state(company)
                try:
                    if update is None:
                        if not self.config.decay_auto_enroll:
                            report.skipped += 1
                            continue
                        repo.upsert(
                            company.name,
                            CompanyUpdate(time_stamp=self.config.decay_enroll_window),
                        )
                        logger.info("%s was enrolled", company.name)
                    elif repo.update(company.name, update):
                        logger.info("%s was updated", company.name)
                    else:
                        # renamed or deleted since the scan
                        logger.warning("%s matched no record, nothing updated", company.name)
                        report.skipped += 1
                        continue
                    report.updated += 1
                except StoreError:
                    logger.exception("decay update failed for %s", company.name)
                    report.failed += 1
        finally:
            repo.close()

        logger.info(
            "decay tick done: %d updated, %d skipped, %d failed",
            report.updated, report.skipped, report.failed,
        )
        return report

    # ------------------------------------------------------------------
    # Daily trigger
    # ------------------------------------------------------------------
    def schedule_daily(self) -> schedule.Job:
        """Register :meth:`tick` to fire every day at ``decay_at``."""
        self._jobs.clear()
        return self._jobs.every().day.at(self.config.decay_at).do(self.tick)

    def run_forever(self) -> None:
        """Block, firing the daily tick until :meth:`stop` is called."""
        if not self._jobs.get_jobs():
            self.schedule_daily()
        logger.info("decay scheduler started, next run at %s", self._jobs.next_run)
        while not self._stop.is_set():
            self._jobs.run_pending()
            self._stop.wait(self.config.decay_poll_seconds)
        logger.info("decay scheduler stopped")

    def start(self) -> threading.Thread:
        """Run :meth:`run_forever` on a daemon thread."""
        if self._thread is not None and self._thread.is_alive():
            return self._thread
        self._stop.clear()
        self._thread = threading.Thread(target=self.run_forever, name="decay-scheduler", daemon=True)
        self._thread.start()
        return self._thread

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
