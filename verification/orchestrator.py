"""
verification/orchestrator.py

One link verification pass over a bounded batch of published postings.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from sqlalchemy.orm import Session

from app.config import VerificationSettings, get_verification_settings
from app.logging_utils import log_event
from app.notifications import NotificationSink, NullNotificationSink, build_notification_sink, notify_safely
from app.repositories.base import OpportunityStore
from app.repositories.opportunity_repository import SQLAlchemyOpportunityStore
from verification.base import ProbeResult, VerificationSummary
from verification.prober import LinkProber
from verification.quarantine import QuarantineStateMachine
from verification.stats import VerificationStats
from verification.throttle import HostThrottle

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LinkVerificationOrchestrator:
    """
    Probes postings one at a time and applies quarantine transitions.
    """

    def __init__(
        self,
        *,
        store: OpportunityStore,
        prober: LinkProber,
        settings: VerificationSettings | None = None,
        quarantine: QuarantineStateMachine | None = None,
        throttle: HostThrottle | None = None,
        notifier: NotificationSink | None = None,
        clock: Callable[[], datetime] = _utcnow,
        monotonic: Callable[[], float] = time.monotonic,
    ) -> None:
        self._store = store
        self._prober = prober
        self._settings = settings or get_verification_settings()
        self._quarantine = quarantine or QuarantineStateMachine(max_failures=self._settings.max_failures)
        self._throttle = throttle or HostThrottle(
            min_interval_seconds=self._settings.per_host_interval_seconds
        )
        self._notifier = notifier or NullNotificationSink()
        self._clock = clock
        self._monotonic = monotonic

    def run(self, stats: VerificationStats | None = None) -> VerificationSummary:
        started = self._monotonic()
        stale_before = self._clock() - timedelta(hours=self._settings.stale_after_hours)
        postings = self._store.list_verification_candidates(
            stale_before=stale_before,
            limit=self._settings.batch_size,
        )
        logger.info("Link verification started candidates=%s", len(postings))

        counts = {
            ProbeResult.HEALTHY: 0,
            ProbeResult.SOFT_FAIL: 0,
            ProbeResult.HARD_FAIL: 0,
        }
        processed = 0
        archived = 0

        for posting in postings:
            if not posting.apply_link:
                continue

            self._throttle.wait(posting.apply_link)
            result = self._prober.probe(posting.apply_link)
            processed += 1
            counts[result] += 1

            update = self._quarantine.transition(posting, result, now=self._clock())
            try:
                self._store.apply_health_update(posting.id, update)
            except Exception:
                logger.exception("Failed to persist link health posting_id=%s", posting.id)
                continue

            log_event(
                logger,
                logging.DEBUG if result == ProbeResult.HEALTHY else logging.WARNING,
                "verification.probe",
                posting_id=posting.id,
                result=result,
                link_health=update.link_health,
                verification_failures=update.verification_failures,
            )

            if update.archive:
                archived += 1
                notify_safely(
                    self._notifier,
                    "verification.link_archived",
                    {
                        "posting_id": str(posting.id),
                        "title": posting.title,
                        "company": posting.company,
                        "apply_link": posting.apply_link,
                        "verification_failures": update.verification_failures,
                    },
                )

        summary = VerificationSummary(
            processed=processed,
            healthy=counts[ProbeResult.HEALTHY],
            soft_failures=counts[ProbeResult.SOFT_FAIL],
            hard_failures=counts[ProbeResult.HARD_FAIL],
            archived=archived,
            duration_seconds=round(self._monotonic() - started, 3),
        )
        if stats is not None:
            stats.record(summary, finished_at=self._clock())

        logger.info(
            "Link verification completed processed=%s healthy=%s soft_failures=%s "
            "hard_failures=%s archived=%s duration_seconds=%s",
            summary.processed,
            summary.healthy,
            summary.soft_failures,
            summary.hard_failures,
            summary.archived,
            summary.duration_seconds,
        )
        notify_safely(self._notifier, "verification.run_summary", summary.as_dict())
        return summary


def build_verification_orchestrator(db: Session) -> LinkVerificationOrchestrator:
    settings = get_verification_settings()
    return LinkVerificationOrchestrator(
        store=SQLAlchemyOpportunityStore(db),
        prober=LinkProber(settings=settings),
        settings=settings,
        notifier=build_notification_sink(),
    )
