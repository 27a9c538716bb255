"""
app/logging_utils.py

JSON audit lines for the ingestion and verification pipelines.

Per-item ingestion outcomes ("ingestion.item"), per-posting probe results
("verification.probe") and failed notification deliveries
("notification.failed") are each one line, so they can be filtered by
event name next to the plain key=value service logs.
"""

from __future__ import annotations

import json
import logging
from typing import Any


def log_event(logger: logging.Logger, level: int, event: str, **fields: Any) -> None:
    """
    Log `event` and its fields as a single sorted JSON object.

    Values json cannot encode (UUIDs, datetimes) are written with str().
    Nothing is serialized when `level` is disabled for `logger`.
    """

    if not logger.isEnabledFor(level):
        return
    logger.log(level, json.dumps({"event": event, **fields}, default=str, sort_keys=True))
