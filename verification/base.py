"""
verification/base.py

Probe outcomes and the value types exchanged between the prober,
the quarantine state machine and the opportunity store.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime


class ProbeResult:
    HEALTHY = "HEALTHY"
    SOFT_FAIL = "SOFT_FAIL"
    HARD_FAIL = "HARD_FAIL"


# Protected or rate-limited: the link probably works for a human.
SOFT_FAIL_STATUS_CODES: frozenset[int] = frozenset({401, 403, 429, 503})


def classify_status_code(status_code: int) -> str:
    """Map one HTTP status to a probe result. 2xx/3xx are healthy."""
    if 200 <= status_code < 400:
        return ProbeResult.HEALTHY
    if status_code in SOFT_FAIL_STATUS_CODES:
        return ProbeResult.SOFT_FAIL
    return ProbeResult.HARD_FAIL


@dataclass(frozen=True)
class PostingHealth:
    """
    The slice of a published posting the verification pass needs.
    """

    id: uuid.UUID
    title: str
    company: str
    apply_link: str | None
    link_health: str
    verification_failures: int


@dataclass(frozen=True)
class HealthUpdate:
    """
    New health state for one posting. archive=True also moves its
    publication status to ARCHIVED.
    """

    link_health: str
    verification_failures: int
    last_verified_at: datetime
    archive: bool = False


@dataclass(frozen=True)
class VerificationSummary:
    processed: int = 0
    healthy: int = 0
    soft_failures: int = 0
    hard_failures: int = 0
    archived: int = 0
    duration_seconds: float = 0.0

    def as_dict(self) -> dict[str, float | int]:
        return {
            "processed": self.processed,
            "healthy": self.healthy,
            "soft_failures": self.soft_failures,
            "hard_failures": self.hard_failures,
            "archived": self.archived,
            "duration_seconds": self.duration_seconds,
        }
