"""
verification/stats.py

In-memory aggregate of verification passes for the lifetime of the process.
"""

from __future__ import annotations

import threading
from datetime import datetime
from typing import Any

from verification.base import VerificationSummary


class VerificationStats:
    """
    Lifetime totals plus the most recent pass. Owned by whoever runs
    verification (the API app or a CLI invocation); not persisted.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.reset()

    def reset(self) -> None:
        with self._lock:
            self._total_runs = 0
            self._totals = {
                "processed": 0,
                "healthy": 0,
                "soft_failures": 0,
                "hard_failures": 0,
                "archived": 0,
            }
            self._last_run_at: datetime | None = None
            self._last_summary: VerificationSummary | None = None

    def record(self, summary: VerificationSummary, *, finished_at: datetime) -> None:
        with self._lock:
            self._total_runs += 1
            self._totals["processed"] += summary.processed
            self._totals["healthy"] += summary.healthy
            self._totals["soft_failures"] += summary.soft_failures
            self._totals["hard_failures"] += summary.hard_failures
            self._totals["archived"] += summary.archived
            self._last_run_at = finished_at
            self._last_summary = summary

    def snapshot(self) -> dict[str, Any]:
        with self._lock:
            return {
                "total_runs": self._total_runs,
                "totals": dict(self._totals),
                "last_run_at": self._last_run_at,
                "last_run": self._last_summary.as_dict() if self._last_summary else None,
            }
