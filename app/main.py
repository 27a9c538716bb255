"""
app/main.py

FastAPI entrypoint for the ingestion and link verification service.
"""

from __future__ import annotations

import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from verification.stats import VerificationStats

logger = logging.getLogger(__name__)

_DATABASE_URL_VARS = ("DATABASE_URL", "CLOUD_DATABASE_URL", "LOCAL_DATABASE_URL")


def _validate_env() -> None:
    """
    Fail fast on configuration the pipeline cannot run without.

    Every problem is collected and reported in a single RuntimeError:
    - at least one of DATABASE_URL, CLOUD_DATABASE_URL, LOCAL_DATABASE_URL
    - INGESTION_DEFAULT_ADMIN_ID whenever the ingestion cron is enabled
    """

    from app.config import get_ingestion_settings, get_scheduler_settings
    from db.config import load_env_files

    load_env_files()

    problems: list[str] = []
    if not any(os.getenv(name, "").strip() for name in _DATABASE_URL_VARS):
        problems.append(f"No database URL configured. Set one of {', '.join(_DATABASE_URL_VARS)}.")

    if get_scheduler_settings().ingestion_enabled and not get_ingestion_settings().default_admin_id:
        problems.append(
            "INGESTION_CRON_ENABLED is true but INGESTION_DEFAULT_ADMIN_ID is not set; "
            "scheduled runs could not create drafts."
        )

    if problems:
        raise RuntimeError("Startup validation failed:\n" + "\n".join(f"  - {p}" for p in problems))


def _configure_logging() -> None:
    level_name = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def _check_database() -> None:
    """
    SELECT 1, then confirm every ORM table exists. Migrations are never
    applied from here.
    """

    from sqlalchemy import inspect, text

    import db.models  # noqa: F401  registers ORM models on Base.metadata
    from db.base import Base
    from db.session import get_engine

    try:
        with get_engine().connect() as connection:
            connection.execute(text("SELECT 1"))
            existing = set(inspect(connection).get_table_names())
    except Exception as exc:
        raise RuntimeError("Database unavailable.") from exc

    missing = sorted(set(Base.metadata.tables) - existing)
    if missing:
        logger.critical(
            "Schema check failed missing_tables=%s, run 'alembic upgrade head' and restart",
            ",".join(missing),
        )
        raise RuntimeError(f"Database schema is missing tables: {', '.join(missing)}.")
    logger.info("Database reachable, %d pipeline tables present", len(Base.metadata.tables))


@asynccontextmanager
async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Check the database, then run the scheduler for the app's lifetime."""
    _check_database()

    from app.scheduler.jobs import build_scheduler

    scheduler = build_scheduler(application.state.verification_stats)
    scheduler.start()
    logger.info("Scheduler started jobs=%s", [job.id for job in scheduler.get_jobs()])
    try:
        yield
    finally:
        scheduler.shutdown(wait=True)
        logger.info("Scheduler shut down")


def create_app() -> FastAPI:
    _validate_env()
    _configure_logging()

    application = FastAPI(
        title="FresherFlow Ingestion API",
        version="1.0.0",
        lifespan=_lifespan,
    )
    application.state.verification_stats = VerificationStats()

    from app.api.routers import ingestion_router, verification_router

    application.include_router(ingestion_router)
    application.include_router(verification_router)

    @application.get("/health")
    def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    return application


app = create_app()
