from __future__ import annotations

import json
import logging
from typing import Any

import requests

from app.config import NotificationSettings
from app.notifications import (
    NullNotificationSink,
    RecordingNotificationSink,
    WebhookNotificationSink,
    build_notification_sink,
    notify_safely,
)


class PostSession:
    def __init__(self, response: Any = None, error: Exception | None = None) -> None:
        self.headers: dict[str, str] = {}
        self.response = response
        self.error = error
        self.calls: list[dict[str, Any]] = []

    def post(self, url: str, **kwargs: Any) -> Any:
        self.calls.append({"url": url, **kwargs})
        if self.error is not None:
            raise self.error
        return self.response


def test_webhook_posts_event_and_payload(fake_response) -> None:
    session = PostSession(response=fake_response(204))
    sink = WebhookNotificationSink(webhook_url="https://hooks.example/ops", timeout_seconds=2.0, session=session)

    sink.notify("ingestion.run_summary", {"status": "SUCCESS"})

    call = session.calls[0]
    assert call["url"] == "https://hooks.example/ops"
    assert call["json"] == {"event": "ingestion.run_summary", "payload": {"status": "SUCCESS"}}
    assert call["timeout"] == 2.0
    assert session.headers["Content-Type"] == "application/json"


def test_notify_safely_swallows_delivery_errors() -> None:
    session = PostSession(error=requests.ConnectionError("refused"))
    sink = WebhookNotificationSink(webhook_url="https://hooks.example/ops", session=session)

    assert notify_safely(sink, "verification.run_summary", {"processed": 1}) is False


def test_notify_safely_reports_http_errors(fake_response) -> None:
    sink = WebhookNotificationSink(
        webhook_url="https://hooks.example/ops",
        session=PostSession(response=fake_response(500)),
    )

    assert notify_safely(sink, "verification.run_summary", {}) is False


def test_notify_safely_delivers() -> None:
    sink = RecordingNotificationSink()

    assert notify_safely(sink, "verification.link_archived", {"posting_id": "p-1"}) is True
    assert sink.events == [("verification.link_archived", {"posting_id": "p-1"})]


def test_build_sink_without_url_is_null() -> None:
    sink = build_notification_sink(NotificationSettings(webhook_url=None))
    assert isinstance(sink, NullNotificationSink)


def test_build_sink_with_url_is_webhook() -> None:
    sink = build_notification_sink(NotificationSettings(webhook_url="https://hooks.example/ops"))
    assert isinstance(sink, WebhookNotificationSink)


def test_notify_safely_swallows_non_http_sink_errors(failing_sink, caplog) -> None:
    with caplog.at_level(logging.WARNING, logger="app.notifications.sinks"):
        delivered = notify_safely(failing_sink, "verification.link_archived", {"posting_id": "p-1"})

    assert delivered is False
    assert failing_sink.attempts == ["verification.link_archived"]
    logged = [json.loads(record.getMessage()) for record in caplog.records]
    assert logged == [
        {
            "error": "bot token revoked",
            "event": "notification.failed",
            "notification_event": "verification.link_archived",
        }
    ]
