"""
app/config.py

Environment-driven settings for the ingestion and link verification pipelines.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from db.config import load_env_files

INGESTION_USER_AGENT = "FresherFlow-IngestionBot/1.0 (+https://fresherflow.in)"
VERIFICATION_USER_AGENT = "FresherFlow-VerificationBot/1.0 (+https://fresherflow.in)"


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading settings.
    """

    load_env_files()


def _get_bool_env(name: str, default: bool) -> bool:
    """
    Read a boolean from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_float_env(name: str, default: float) -> float:
    """
    Read a float from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return float(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    """
    Read a string from environment variables with fallback.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _get_optional_str_env(name: str) -> str | None:
    """
    Read an optional string value from environment variables.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return None
    stripped = value.strip()
    return stripped if stripped else None


@dataclass(frozen=True)
class IngestionSettings:
    """
    Thresholds and ownership for ingested drafts.

    default_admin_id is optional here on purpose: its absence is reported
    as a ConfigurationError by the draft writer when a draft is needed.
    """

    fresher_score_min: int = 35
    high_confidence_score: int = 55
    default_admin_id: str | None = None
    default_location: str = "India"
    error_summary_limit: int = 5


@dataclass(frozen=True)
class ExternalHTTPSettings:
    """
    Shared HTTP behavior for source feed fetches.
    """

    timeout_seconds: float = 15.0
    max_retries: int = 2
    backoff_initial_seconds: float = 0.5
    backoff_multiplier: float = 2.0
    user_agent: str = INGESTION_USER_AGENT


@dataclass(frozen=True)
class VerificationSettings:
    """
    Link health probing and quarantine settings.
    """

    timeout_seconds: float = 8.0
    batch_size: int = 50
    max_failures: int = 3
    stale_after_hours: int = 12
    per_host_interval_seconds: float = 0.5
    user_agent: str = VERIFICATION_USER_AGENT


@dataclass(frozen=True)
class SchedulerSettings:
    """
    Cron triggers for both pipelines.
    """

    ingestion_enabled: bool = False
    ingestion_schedule: str = "*/20 * * * *"
    verification_enabled: bool = True
    verification_schedule: str = "0 */6 * * *"


@dataclass(frozen=True)
class NotificationSettings:
    """
    Operator notification webhook. Unset URL disables delivery.
    """

    webhook_url: str | None = None
    timeout_seconds: float = 5.0


@lru_cache(maxsize=1)
def get_ingestion_settings() -> IngestionSettings:
    """
    Return cached ingestion settings from environment variables.
    """

    return IngestionSettings(
        fresher_score_min=_get_int_env("INGESTION_FRESHER_SCORE_MIN", 35),
        high_confidence_score=_get_int_env("INGESTION_HIGH_CONFIDENCE_SCORE", 55),
        default_admin_id=_get_optional_str_env("INGESTION_DEFAULT_ADMIN_ID"),
        default_location=_get_str_env("INGESTION_DEFAULT_LOCATION", "India"),
        error_summary_limit=max(1, _get_int_env("INGESTION_ERROR_SUMMARY_LIMIT", 5)),
    )


@lru_cache(maxsize=1)
def get_external_http_settings() -> ExternalHTTPSettings:
    """
    Return source fetch HTTP settings from environment variables.
    """

    return ExternalHTTPSettings(
        timeout_seconds=max(1.0, _get_float_env("EXTERNAL_HTTP_TIMEOUT_SECONDS", 15.0)),
        max_retries=max(0, _get_int_env("EXTERNAL_HTTP_MAX_RETRIES", 2)),
        backoff_initial_seconds=max(0.1, _get_float_env("EXTERNAL_HTTP_BACKOFF_INITIAL_SECONDS", 0.5)),
        backoff_multiplier=max(1.0, _get_float_env("EXTERNAL_HTTP_BACKOFF_MULTIPLIER", 2.0)),
        user_agent=_get_str_env("INGESTION_USER_AGENT", INGESTION_USER_AGENT),
    )


@lru_cache(maxsize=1)
def get_verification_settings() -> VerificationSettings:
    """
    Return link verification settings from environment variables.
    """

    return VerificationSettings(
        timeout_seconds=max(1.0, _get_float_env("VERIFICATION_TIMEOUT_SECONDS", 8.0)),
        batch_size=max(1, _get_int_env("VERIFICATION_BATCH_SIZE", 50)),
        max_failures=max(1, _get_int_env("VERIFICATION_MAX_FAILURES", 3)),
        stale_after_hours=max(1, _get_int_env("VERIFICATION_STALE_AFTER_HOURS", 12)),
        per_host_interval_seconds=max(0.0, _get_float_env("VERIFICATION_PER_HOST_INTERVAL_SECONDS", 0.5)),
        user_agent=_get_str_env("VERIFICATION_USER_AGENT", VERIFICATION_USER_AGENT),
    )


@lru_cache(maxsize=1)
def get_scheduler_settings() -> SchedulerSettings:
    """
    Return cron settings. Ingestion is opt-in, verification is opt-out.
    """

    return SchedulerSettings(
        ingestion_enabled=_get_bool_env("INGESTION_CRON_ENABLED", False),
        ingestion_schedule=_get_str_env("INGESTION_CRON_SCHEDULE", "*/20 * * * *"),
        verification_enabled=_get_bool_env("VERIFICATION_CRON_ENABLED", True),
        verification_schedule=_get_str_env("VERIFICATION_CRON_SCHEDULE", "0 */6 * * *"),
    )


@lru_cache(maxsize=1)
def get_notification_settings() -> NotificationSettings:
    return NotificationSettings(
        webhook_url=_get_optional_str_env("NOTIFY_WEBHOOK_URL"),
        timeout_seconds=max(1.0, _get_float_env("NOTIFY_TIMEOUT_SECONDS", 5.0)),
    )
