"""
app/scheduler/jobs.py

APScheduler-based trigger for the ingestion cycle and the link
verification pass.

Schedule (UTC, crontab syntax, both configurable)
--------------------------------------------------
  ingestion_cycle    : "*/20 * * * *", disabled unless INGESTION_CRON_ENABLED
  link_verification  : "0 */6 * * *", enabled unless VERIFICATION_CRON_ENABLED=false

Each job holds a process-local, non-blocking lock for its duration; a tick
that fires while the previous run of the same job is still going is
skipped. This assumes a single running instance of the process.

Lifecycle
----------
Call ``build_scheduler()`` once to get a configured ``BackgroundScheduler``.
Start it on app boot; shut it down gracefully on app shutdown.
The scheduler is wired into FastAPI via the ``lifespan`` context in main.py.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from app.config import SchedulerSettings, get_scheduler_settings
from app.services.ingestion_run_service import build_ingestion_service
from db.session import session_scope
from verification.orchestrator import build_verification_orchestrator
from verification.stats import VerificationStats

logger = logging.getLogger(__name__)

_ingestion_lock = threading.Lock()
_verification_lock = threading.Lock()


def run_guarded(lock: threading.Lock, job_name: str, job: Callable[[], None]) -> bool:
    """
    Run `job` unless another run holding `lock` is in progress.

    Returns False when the tick was skipped. Exceptions from the job are
    logged and swallowed so the scheduler thread keeps running.
    """

    if not lock.acquire(blocking=False):
        logger.warning("Scheduler: %s skipped, previous run still in progress", job_name)
        return False
    try:
        logger.info("Scheduler: %s starting", job_name)
        job()
        logger.info("Scheduler: %s complete", job_name)
    except Exception:  # noqa: BLE001
        logger.exception("Scheduler: %s failed", job_name)
    finally:
        lock.release()
    return True


def run_ingestion_cycle_job() -> bool:
    def _job() -> None:
        with session_scope() as db:
            summary = build_ingestion_service(db).run_cycle()
            logger.info(
                "Scheduler: ingestion_cycle scanned=%s runnable=%s",
                summary.scanned_sources,
                summary.runnable_sources,
            )

    return run_guarded(_ingestion_lock, "ingestion_cycle", _job)


def run_link_verification_job(stats: VerificationStats) -> bool:
    def _job() -> None:
        with session_scope() as db:
            build_verification_orchestrator(db).run(stats)

    return run_guarded(_verification_lock, "link_verification", _job)


def build_scheduler(
    verification_stats: VerificationStats,
    settings: SchedulerSettings | None = None,
) -> BackgroundScheduler:
    """
    Build and register the enabled periodic jobs.

    Returns a configured but *not yet started* ``BackgroundScheduler``.
    The caller must call ``.start()`` and ``.shutdown(wait=True)`` at the
    appropriate lifecycle points.
    """
    resolved = settings or get_scheduler_settings()
    scheduler = BackgroundScheduler(timezone="UTC")

    if resolved.ingestion_enabled:
        scheduler.add_job(
            run_ingestion_cycle_job,
            trigger=CronTrigger.from_crontab(resolved.ingestion_schedule, timezone="UTC"),
            id="ingestion_cycle",
            name="Ingestion cycle",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
            misfire_grace_time=600,
        )
        logger.info("Scheduler: ingestion_cycle scheduled cron=%r", resolved.ingestion_schedule)
    else:
        logger.info("Scheduler: ingestion_cycle disabled")

    if resolved.verification_enabled:
        scheduler.add_job(
            run_link_verification_job,
            trigger=CronTrigger.from_crontab(resolved.verification_schedule, timezone="UTC"),
            args=[verification_stats],
            id="link_verification",
            name="Link verification",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
            misfire_grace_time=3600,
        )
        logger.info("Scheduler: link_verification scheduled cron=%r", resolved.verification_schedule)
    else:
        logger.info("Scheduler: link_verification disabled")

    return scheduler
