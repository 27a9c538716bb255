"""
app/notifications/sinks.py

Outbound operational notifications: run summaries and archived links.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

import requests

from app.config import NotificationSettings, get_notification_settings
from app.logging_utils import log_event

logger = logging.getLogger(__name__)


class NotificationSink(ABC):
    @abstractmethod
    def notify(self, event: str, payload: dict[str, Any]) -> None:
        """
        Deliver one event. May raise; callers go through notify_safely.
        """


class NullNotificationSink(NotificationSink):
    def notify(self, event: str, payload: dict[str, Any]) -> None:
        return None


class RecordingNotificationSink(NotificationSink):
    """
    Keeps every event in memory; handy for tests and local runs.
    """

    def __init__(self) -> None:
        self.events: list[tuple[str, dict[str, Any]]] = []

    def notify(self, event: str, payload: dict[str, Any]) -> None:
        self.events.append((event, dict(payload)))


class WebhookNotificationSink(NotificationSink):
    """
    POSTs {"event": ..., "payload": ...} as JSON to a webhook URL.
    """

    def __init__(
        self,
        *,
        webhook_url: str,
        timeout_seconds: float = 5.0,
        session: requests.Session | None = None,
    ) -> None:
        self._webhook_url = webhook_url
        self._timeout_seconds = timeout_seconds
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "Content-Type": "application/json",
                "Accept": "application/json",
            }
        )

    def notify(self, event: str, payload: dict[str, Any]) -> None:
        response = self._session.post(
            self._webhook_url,
            json={"event": event, "payload": payload},
            timeout=self._timeout_seconds,
        )
        response.raise_for_status()


def notify_safely(sink: NotificationSink, event: str, payload: dict[str, Any]) -> bool:
    """
    Deliver an event. Any sink failure is logged at WARNING and reported
    as False; it never reaches the pipeline.
    """

    try:
        sink.notify(event, payload)
    except Exception as exc:  # noqa: BLE001
        log_event(
            logger,
            logging.WARNING,
            "notification.failed",
            notification_event=event,
            error=str(exc),
        )
        return False
    return True


def build_notification_sink(settings: NotificationSettings | None = None) -> NotificationSink:
    resolved = settings or get_notification_settings()
    if not resolved.webhook_url:
        return NullNotificationSink()
    return WebhookNotificationSink(
        webhook_url=resolved.webhook_url,
        timeout_seconds=resolved.timeout_seconds,
    )
