from __future__ import annotations

import json
import logging
import uuid
from datetime import datetime, timezone

from app.logging_utils import log_event

logger = logging.getLogger("tests.audit")


def test_event_is_one_sorted_json_line(caplog) -> None:
    run_id = uuid.UUID("00000000-0000-0000-0000-000000000001")
    finished = datetime(2026, 10, 19, 9, 0, tzinfo=timezone.utc)

    with caplog.at_level(logging.INFO, logger="tests.audit"):
        log_event(logger, logging.INFO, "ingestion.item", run_id=run_id, finished_at=finished, status="DEDUPED")

    [record] = caplog.records
    assert record.levelno == logging.INFO
    assert json.loads(record.getMessage()) == {
        "event": "ingestion.item",
        "finished_at": "2026-10-19 09:00:00+00:00",
        "run_id": "00000000-0000-0000-0000-000000000001",
        "status": "DEDUPED",
    }
    assert record.getMessage().index('"event"') < record.getMessage().index('"status"')


def test_disabled_level_emits_nothing(caplog) -> None:
    with caplog.at_level(logging.WARNING, logger="tests.audit"):
        log_event(logger, logging.DEBUG, "verification.probe", result="HEALTHY")

    assert caplog.records == []
