"""Scheduled daily digest: refresh cached streaks and check health alerts."""

from __future__ import annotations

import logging
from datetime import date

logger = logging.getLogger(__name__)


class DigestScheduler:
    """Runs the daily digest job for every known user.

    Uses APScheduler for cron-based scheduling.
    """

    def __init__(self, config, backend=None, clock=date.today) -> None:
        """Initialize scheduler with a SmartSpendConfig.

        Args:
            config: SmartSpendConfig instance.
            backend: AIBackend used for health alerts; alerts are skipped
                when None.
            clock: Callable returning today's date.

        Raises:
            ImportError: If apscheduler is not installed.
        """
        try:
            from apscheduler.schedulers.asyncio import AsyncIOScheduler
            from apscheduler.triggers.cron import CronTrigger
        except ImportError:
            raise ImportError(
                "apscheduler is required: pip install 'smartspend[scheduler]'"
            )

        self._config = config
        self._backend = backend
        self._clock = clock
        self._scheduler = AsyncIOScheduler()
        self._CronTrigger = CronTrigger
        self._running = False

    def setup_jobs(self) -> None:
        """Register scheduled jobs based on config."""
        schedule = self._config.scheduler.digest_schedule
        self._scheduler.add_job(
            self._job_daily_digest,
            trigger=self._parse_cron(schedule),
            id="daily_digest",
            name="Daily streak digest",
            replace_existing=True,
        )
        logger.info("Registered daily digest job: %s", schedule)

    def start(self) -> None:
        self.setup_jobs()
        self._scheduler.start()
        self._running = True
        logger.info("Scheduler started")

    def stop(self) -> None:
        if self._running:
            self._scheduler.shutdown(wait=False)
            self._running = False
            logger.info("Scheduler stopped")

    @property
    def running(self) -> bool:
        return self._running

    def get_jobs(self) -> list[dict]:
        """Return info about scheduled jobs."""
        jobs = []
        for job in self._scheduler.get_jobs():
            next_run = getattr(job, "next_run_time", None)
            jobs.append({
                "id": job.id,
                "name": job.name,
                "next_run": str(next_run) if next_run else None,
            })
        return jobs

    def _parse_cron(self, expr: str):
        """Parse a cron expression into a CronTrigger."""
        parts = expr.split()
        if len(parts) == 5:
            return self._CronTrigger(
                minute=parts[0],
                hour=parts[1],
                day=parts[2],
                month=parts[3],
                day_of_week=parts[4],
            )
        raise ValueError(f"Invalid cron expression: {expr}")

    async def _job_daily_digest(self) -> dict[str, dict]:
        """Recompute streaks for every owner and log due health alerts.

        Returns:
            Mapping of owner id to its refreshed streaks and alert text.
        """
        logger.info("Running daily digest...")
        results: dict[str, dict] = {}

        from .advisor import get_health_alert
        from .db import ProfileStore, TransactionStore
        from .streaks import compute_streaks

        today = self._clock()
        coach = self._config.coach
        store = TransactionStore(self._config.database.path)
        profiles = ProfileStore(self._config.database.path)
        try:
            for owner_id in profiles.owners():
                try:
                    transactions = store.list_for_owner(owner_id)
                    streaks = compute_streaks(transactions, today)
                    if streaks is not None:
                        profiles.save_streaks(owner_id, streaks)

                    alert = ""
                    if self._backend is not None:
                        alert = await get_health_alert(
                            self._backend,
                            transactions,
                            today,
                            window_days=coach.alert_window_days,
                            threshold=coach.alert_threshold,
                        )
                    if alert:
                        logger.info("Health alert for %s: %s", owner_id, alert)
                    results[owner_id] = {"streaks": streaks, "alert": alert}
                except Exception:
                    logger.exception("Daily digest failed for %s", owner_id)
        finally:
            store.close()
            profiles.close()

        logger.info("Daily digest done for %d users", len(results))
        return results
