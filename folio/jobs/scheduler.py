"""Job scheduler using APScheduler with async support."""

from __future__ import annotations

import inspect
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from folio.core.config import settings
from folio.core.logging import get_logger

from .registry import get_all_jobs, get_job

logger = get_logger("jobs.scheduler")

# Global scheduler instance
_scheduler: Optional["JobScheduler"] = None


class JobScheduler:
    """Runs registered jobs on the crontab schedules from settings."""

    def __init__(self, schedules: Optional[dict[str, str]] = None):
        self._scheduler = AsyncIOScheduler(
            timezone=settings.scheduler_timezone,
            job_defaults={
                "coalesce": True,  # Combine missed runs into one
                "max_instances": 1,
                "misfire_grace_time": 60 * 30,
            },
        )
        self._schedules = dict(settings.job_schedules if schedules is None else schedules)
        self._last_runs: dict[str, dict[str, Any]] = {}
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """Schedule registered jobs and start the scheduler."""
        if self._running:
            logger.warning("Scheduler already running")
            return

        if not settings.scheduler_enabled:
            logger.info("Scheduler disabled via SCHEDULER_ENABLED=false")
            return

        self._load_jobs()
        self._scheduler.start()
        self._running = True
        logger.info("Job scheduler started")

    async def stop(self) -> None:
        """Stop the scheduler."""
        if not self._running:
            return

        self._scheduler.shutdown(wait=False)
        self._running = False
        logger.info("Job scheduler stopped")

    def _load_jobs(self) -> None:
        """Add a cron job for every registered job that has a schedule."""
        for name, func in get_all_jobs().items():
            cron_expr = self._schedules.get(name)
            if not cron_expr:
                logger.warning(f"No schedule configured for job: {name}")
                continue

            try:
                trigger = CronTrigger.from_crontab(cron_expr, timezone=settings.scheduler_timezone)
            except ValueError as e:
                logger.error(f"Invalid cron expression for job {name}: {cron_expr} ({e})")
                continue

            self._scheduler.add_job(
                self._wrap_job(name, func),
                trigger=trigger,
                id=name,
                name=name,
                replace_existing=True,
            )
            logger.info(f"Scheduled job: {name} ({cron_expr})")

    def _wrap_job(self, name: str, func: Callable) -> Callable:
        """Wrap job function with logging."""

        async def wrapper():
            await self._execute_job(name, func)

        return wrapper

    async def _execute_job(self, name: str, func: Callable) -> str:
        """Execute a job, recording its outcome. Errors are logged, not raised."""
        logger.info(f"Job {name} started")
        start_time = datetime.now(timezone.utc)

        try:
            result = func()
            if inspect.isawaitable(result):
                result = await result
            status = "ok"
            message = str(result) if result else "Completed successfully"
        except Exception as e:
            status = "error"
            message = str(e)
            logger.exception(f"Job {name} failed")

        duration_ms = int((datetime.now(timezone.utc) - start_time).total_seconds() * 1000)
        self._last_runs[name] = {
            "status": status,
            "message": message,
            "started_at": start_time,
            "duration_ms": duration_ms,
        }
        if status == "ok":
            logger.info(f"Job {name} completed in {duration_ms}ms: {message}")
        return message

    async def run_job_now(self, name: str) -> str:
        """Manually trigger a job execution."""
        job_func = get_job(name)
        if job_func is None:
            raise ValueError(f"Unknown job: {name}")

        return await self._execute_job(name, job_func)

    def get_next_run_time(self, name: str) -> Optional[datetime]:
        """Get next scheduled run time for a job."""
        job = self._scheduler.get_job(name)
        if job:
            return job.next_run_time
        return None

    def get_jobs_status(self) -> list[dict[str, Any]]:
        """Status of all scheduled jobs, with their last outcome."""
        jobs = []
        for job in self._scheduler.get_jobs():
            next_run = getattr(job, "next_run_time", None)
            jobs.append(
                {
                    "id": job.id,
                    "name": job.name,
                    "next_run_time": next_run.isoformat() if next_run else None,
                    "last_run": self._last_runs.get(job.id),
                }
            )
        return jobs


def get_scheduler() -> Optional[JobScheduler]:
    """Get the global scheduler instance."""
    return _scheduler


async def start_scheduler() -> JobScheduler:
    """Start the global scheduler."""
    global _scheduler
    if _scheduler is None:
        _scheduler = JobScheduler()
    await _scheduler.start()
    return _scheduler


async def stop_scheduler() -> None:
    """Stop the global scheduler."""
    global _scheduler
    if _scheduler is not None:
        await _scheduler.stop()
        _scheduler = None
