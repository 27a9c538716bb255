"""
verification/quarantine.py

Health transitions driven by probe results.
"""

from __future__ import annotations

from datetime import datetime

from db.models.opportunity import LinkHealth
from verification.base import HealthUpdate, PostingHealth, ProbeResult


class QuarantineStateMachine:
    """
    HEALTHY resets failures to 0. SOFT_FAIL moves to RETRYING and leaves
    the counter alone. HARD_FAIL increments it; reaching `max_failures`
    makes the posting BROKEN and archives it.
    """

    def __init__(self, *, max_failures: int = 3) -> None:
        if max_failures < 1:
            raise ValueError("max_failures must be at least 1.")
        self._max_failures = max_failures

    @property
    def max_failures(self) -> int:
        return self._max_failures

    def transition(self, posting: PostingHealth, result: str, *, now: datetime) -> HealthUpdate:
        if result == ProbeResult.HEALTHY:
            return HealthUpdate(
                link_health=LinkHealth.HEALTHY,
                verification_failures=0,
                last_verified_at=now,
            )

        if result == ProbeResult.SOFT_FAIL:
            return HealthUpdate(
                link_health=LinkHealth.RETRYING,
                verification_failures=posting.verification_failures,
                last_verified_at=now,
            )

        if result == ProbeResult.HARD_FAIL:
            failures = posting.verification_failures + 1
            broken = failures >= self._max_failures
            return HealthUpdate(
                link_health=LinkHealth.BROKEN if broken else LinkHealth.RETRYING,
                verification_failures=failures,
                last_verified_at=now,
                archive=broken,
            )

        raise ValueError(f"Unknown probe result: {result}")
