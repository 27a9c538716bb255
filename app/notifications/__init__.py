"""
app/notifications package marker.
"""

from app.notifications.sinks import (
    NotificationSink,
    NullNotificationSink,
    RecordingNotificationSink,
    WebhookNotificationSink,
    build_notification_sink,
    notify_safely,
)

__all__ = [
    "NotificationSink",
    "NullNotificationSink",
    "RecordingNotificationSink",
    "WebhookNotificationSink",
    "build_notification_sink",
    "notify_safely",
]
