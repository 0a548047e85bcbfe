"""Fixed-interval driver for check cycles."""

import asyncio
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import structlog
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from .runner import CheckRunner


logger = structlog.get_logger(__name__)

CYCLE_JOB_ID = "check_cycle"


class CheckScheduler:
    """Runs ``runner.run_and_report`` every ``schedule_ms`` milliseconds using APScheduler."""

    def __init__(self, runner: CheckRunner, schedule_ms: int):
        if schedule_ms <= 0:
            raise ValueError(f"schedule must be a positive number of milliseconds, got {schedule_ms}")
        self.runner = runner
        self.schedule_ms = schedule_ms
        self.scheduler = AsyncIOScheduler(timezone=timezone.utc)
        self.running = False

    def start(self):
        """Register the cycle job and start ticking. Must be called from a running event loop."""
        if self.running:
            logger.warning("Scheduler already running")
            return

        self.scheduler.add_job(
            func=self.runner.run_and_report,
            trigger=IntervalTrigger(seconds=self.schedule_ms / 1000.0),
            id=CYCLE_JOB_ID,
            name="health check cycle",
            # One cycle at a time; late ticks collapse into a single run.
            max_instances=1,
            coalesce=True,
            next_run_time=datetime.now(timezone.utc),
        )
        self.scheduler.start()
        self.running = True
        logger.info("Check scheduler started", interval_ms=self.schedule_ms, jobs=len(self.runner.config.jobs))

    def stop(self):
        """Stop ticking. Does not wait for an in-flight cycle."""
        if not self.running:
            return

        self.scheduler.shutdown(wait=False)
        self.running = False
        logger.info("Check scheduler stopped")

    def get_status(self) -> Dict[str, Any]:
        job = self.scheduler.get_job(CYCLE_JOB_ID)
        next_run: Optional[datetime] = job.next_run_time if job is not None else None
        return {
            "running": self.running,
            "interval_ms": self.schedule_ms,
            "runner_state": self.runner.state,
            "next_run": next_run.isoformat() if next_run else None,
        }

    async def serve(self):
        """Start the scheduler and wait until cancelled."""
        self.start()
        try:
            await asyncio.Event().wait()
        finally:
            self.stop()
            await self.runner.aclose()

    def run_forever(self):
        """Block the calling thread running cycles until the process is interrupted."""
        try:
            asyncio.run(self.serve())
        except KeyboardInterrupt:
            logger.info("Interrupted, shutting down")
