from __future__ import annotations

import threading

from app.config import SchedulerSettings
from app.scheduler.jobs import build_scheduler, run_guarded
from verification.stats import VerificationStats


def test_run_guarded_runs_job_and_releases_lock() -> None:
    lock = threading.Lock()
    calls: list[str] = []

    assert run_guarded(lock, "demo", lambda: calls.append("ran")) is True
    assert calls == ["ran"]
    assert lock.locked() is False


def test_run_guarded_skips_overlapping_tick() -> None:
    lock = threading.Lock()
    calls: list[str] = []
    lock.acquire()
    try:
        assert run_guarded(lock, "demo", lambda: calls.append("ran")) is False
    finally:
        lock.release()
    assert calls == []


def test_run_guarded_releases_lock_after_failure() -> None:
    lock = threading.Lock()

    def _boom() -> None:
        raise RuntimeError("database went away")

    assert run_guarded(lock, "demo", _boom) is True
    assert lock.locked() is False


def test_build_scheduler_registers_enabled_jobs() -> None:
    scheduler = build_scheduler(
        VerificationStats(),
        SchedulerSettings(ingestion_enabled=True, verification_enabled=True),
    )

    assert sorted(job.id for job in scheduler.get_jobs()) == ["ingestion_cycle", "link_verification"]


def test_build_scheduler_skips_disabled_ingestion() -> None:
    scheduler = build_scheduler(
        VerificationStats(),
        SchedulerSettings(ingestion_enabled=False, verification_enabled=True),
    )

    assert [job.id for job in scheduler.get_jobs()] == ["link_verification"]


def test_build_scheduler_with_everything_disabled() -> None:
    scheduler = build_scheduler(
        VerificationStats(),
        SchedulerSettings(ingestion_enabled=False, verification_enabled=False),
    )

    assert scheduler.get_jobs() == []
