"""
Shared fixtures: in-memory stores, a stepping clock and source factories.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Callable

import pytest

from app.config import IngestionSettings, VerificationSettings
from app.domain.ingestion import SourceConfig
from app.notifications import NotificationSink
from app.repositories.memory import InMemoryIngestionStore, InMemoryOpportunityStore
from db.models.ingestion_source import IngestionSourceType
from db.models.opportunity import OpportunityType

BASE_TIME = datetime(2026, 10, 19, 9, 0, tzinfo=timezone.utc)


class SteppingClock:
    """Returns BASE_TIME, then advances by `step` on every call."""

    def __init__(self, start: datetime = BASE_TIME, step: timedelta = timedelta(seconds=1)) -> None:
        self.current = start
        self.step = step

    def __call__(self) -> datetime:
        value = self.current
        self.current = self.current + self.step
        return value


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, *, invalid_json: bool = False) -> None:
        self.status_code = status_code
        self._payload = payload
        self._invalid_json = invalid_json
        self.closed = False

    def json(self) -> Any:
        if self._invalid_json:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._payload

    def raise_for_status(self) -> None:
        import requests

        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)

    def close(self) -> None:
        self.closed = True


@pytest.fixture()
def base_time() -> datetime:
    return BASE_TIME


@pytest.fixture()
def clock() -> SteppingClock:
    return SteppingClock()


@pytest.fixture()
def make_source() -> Callable[..., SourceConfig]:
    def _make(**overrides: Any) -> SourceConfig:
        values: dict[str, Any] = {
            "id": uuid.uuid4(),
            "name": "Acme Careers",
            "endpoint": "https://careers.acme.example/api/jobs",
            "source_type": IngestionSourceType.JSON_FEED,
            "default_type": OpportunityType.JOB,
            "run_frequency_minutes": 60,
            "enabled": True,
        }
        values.update(overrides)
        return SourceConfig(**values)

    return _make


@pytest.fixture()
def ingestion_store() -> InMemoryIngestionStore:
    return InMemoryIngestionStore()


@pytest.fixture()
def opportunity_store() -> InMemoryOpportunityStore:
    return InMemoryOpportunityStore()


@pytest.fixture()
def ingestion_settings() -> IngestionSettings:
    return IngestionSettings(default_admin_id="admin-ingestion")


@pytest.fixture()
def verification_settings() -> VerificationSettings:
    return VerificationSettings(per_host_interval_seconds=0.0)


@pytest.fixture()
def fake_response() -> type[FakeResponse]:
    return FakeResponse


class FailingNotificationSink(NotificationSink):
    """Raises a non-HTTP error on every delivery, like a revoked bot token."""

    def __init__(self) -> None:
        self.attempts: list[str] = []

    def notify(self, event: str, payload: dict[str, Any]) -> None:
        self.attempts.append(event)
        raise RuntimeError("bot token revoked")


@pytest.fixture()
def failing_sink() -> FailingNotificationSink:
    return FailingNotificationSink()
