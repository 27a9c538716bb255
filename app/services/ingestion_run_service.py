"""
app/services/ingestion_run_service.py

Run tracker: fetch -> normalize -> score -> dedup/draft for each source,
with a durable run record and one audit row per candidate.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Protocol

from sqlalchemy.orm import Session

from app.config import IngestionSettings, get_external_http_settings, get_ingestion_settings
from app.connectors.base import BaseSourceConnector
from app.connectors.registry import ConnectorRegistry
from app.domain.errors import ConfigurationError, ItemProcessingError
from app.domain.ingestion import (
    IngestionCycleSummary,
    IngestionRunRecord,
    ItemResult,
    RawOpportunityRecord,
    RunCounters,
    SourceConfig,
    SourceCycleResult,
    SourceRunSummary,
)
from app.domain.opportunity import Candidate, FresherScore, WriteOutcome
from app.logging_utils import log_event
from app.notifications import NotificationSink, NullNotificationSink, build_notification_sink, notify_safely
from app.repositories.base import IngestionStore
from app.repositories.ingestion_repository import SQLAlchemyIngestionStore
from app.repositories.opportunity_repository import SQLAlchemyOpportunityStore
from app.services.draft_writer import DraftWriter
from app.services.fresher_score import score_candidate
from db.models.ingestion_run import IngestionRunStatus
from db.models.raw_opportunity import RawOpportunityStatus

logger = logging.getLogger(__name__)

SKIP_REASON_NOT_RUNNABLE = "source_not_found_or_disabled"
ERROR_SUMMARY_MAX_CHARS = 2000
RUN_LIST_DEFAULT_LIMIT = 25
RUN_LIST_MAX_LIMIT = 200

_OUTCOME_STATUS = {
    WriteOutcome.CREATED: RawOpportunityStatus.DRAFT_CREATED,
    WriteOutcome.DEDUPED: RawOpportunityStatus.DEDUPED,
    WriteOutcome.REJECTED: RawOpportunityStatus.REJECTED,
}


class ConnectorResolver(Protocol):
    def get(self, source_type: str) -> BaseSourceConnector: ...


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _truncate(message: str) -> str:
    return message[:ERROR_SUMMARY_MAX_CHARS]


def clamp_run_limit(limit: int | None) -> int:
    if limit is None:
        return RUN_LIST_DEFAULT_LIMIT
    return max(1, min(RUN_LIST_MAX_LIMIT, limit))


class IngestionRunService:
    """
    Drives ingestion for enabled sources.

    Item failures are recorded as ERROR rows and the loop moves on. A fetch
    failure, or a missing draft owner, fails the whole run and propagates
    to the caller of `run_source`; `run_cycle` catches it per source.
    """

    def __init__(
        self,
        *,
        store: IngestionStore,
        writer: DraftWriter,
        connectors: ConnectorResolver,
        settings: IngestionSettings | None = None,
        scorer: Callable[[Candidate], FresherScore] = score_candidate,
        notifier: NotificationSink | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._store = store
        self._writer = writer
        self._connectors = connectors
        self._settings = settings or get_ingestion_settings()
        self._scorer = scorer
        self._notifier = notifier or NullNotificationSink()
        self._clock = clock

    def run_cycle(self) -> IngestionCycleSummary:
        """
        Run every enabled source whose re-run interval has elapsed.
        """

        now = self._clock()
        sources = self._store.list_sources(enabled_only=True)
        runnable = [source for source in sources if source.is_due(now)]

        results: list[SourceCycleResult] = []
        for source in runnable:
            try:
                summary = self._run(source)
            except Exception as exc:
                logger.error(
                    "Ingestion source failed in cycle source_id=%s source=%s error=%s",
                    source.id,
                    source.name,
                    exc,
                )
                results.append(SourceCycleResult(source_id=source.id, ok=False, error=str(exc)))
                continue
            results.append(SourceCycleResult(source_id=source.id, ok=True, summary=summary))

        logger.info(
            "Ingestion cycle completed scanned=%s runnable=%s failed=%s",
            len(sources),
            len(runnable),
            sum(1 for result in results if not result.ok),
        )
        return IngestionCycleSummary(
            scanned_sources=len(sources),
            runnable_sources=len(runnable),
            results=results,
        )

    def run_source(self, source_id: uuid.UUID) -> SourceRunSummary:
        """
        Run one source now, ignoring its re-run interval.
        """

        source = self._store.get_source(source_id)
        if source is None or not source.enabled:
            logger.info("Ingestion source skipped source_id=%s reason=%s", source_id, SKIP_REASON_NOT_RUNNABLE)
            return SourceRunSummary.skipped_source(source_id, SKIP_REASON_NOT_RUNNABLE)
        return self._run(source)

    def list_sources(self) -> list[SourceConfig]:
        return self._store.list_sources()

    def list_runs(
        self,
        *,
        source_id: uuid.UUID | None = None,
        limit: int | None = None,
    ) -> list[IngestionRunRecord]:
        return self._store.list_runs(source_id=source_id, limit=clamp_run_limit(limit))

    def _run(self, source: SourceConfig) -> SourceRunSummary:
        started_at = self._clock()
        run_id = self._store.create_run(source.id, started_at=started_at)
        counters = RunCounters()
        logger.info("Ingestion run started source_id=%s run_id=%s source=%s", source.id, run_id, source.name)

        try:
            connector = self._connectors.get(source.source_type)
            candidates = connector.fetch_candidates(source)
        except Exception as exc:
            counters.errors += 1
            self._fail_run(source, run_id, counters, exc)
            raise

        self._store.touch_source(source.id, last_run_at=started_at, last_success_at=self._clock())
        counters.fetched = len(candidates)

        high_confidence = 0
        for candidate in candidates:
            try:
                result = self._process_item(candidate, source)
            except ConfigurationError as exc:
                failed_item = ItemResult.failure(
                    candidate,
                    error=ItemProcessingError(str(exc), title=candidate.title),
                )
                self._record(failed_item, source=source, run_id=run_id, counters=counters)
                self._fail_run(source, run_id, counters, exc)
                raise

            self._record(result, source=source, run_id=run_id, counters=counters)
            if result.score is not None and result.score.score >= self._settings.high_confidence_score:
                high_confidence += 1

        status = IngestionRunStatus.PARTIAL if counters.errors else IngestionRunStatus.SUCCESS
        error_summary = None
        if counters.error_messages:
            limit = self._settings.error_summary_limit
            error_summary = _truncate(" | ".join(counters.error_messages[:limit]))

        self._store.finish_run(
            run_id,
            status=status,
            ended_at=self._clock(),
            counters=counters,
            error_summary=error_summary,
        )

        summary = SourceRunSummary(
            source_id=source.id,
            run_id=run_id,
            status=status,
            fetched_count=counters.fetched,
            draft_created_count=counters.draft_created,
            deduped_count=counters.deduped,
            rejected_count=counters.rejected,
            error_count=counters.errors,
        )
        logger.info(
            "Ingestion run completed source_id=%s run_id=%s status=%s fetched=%s drafts=%s "
            "deduped=%s rejected=%s errors=%s high_confidence=%s high_confidence_threshold=%s",
            source.id,
            run_id,
            status,
            counters.fetched,
            counters.draft_created,
            counters.deduped,
            counters.rejected,
            counters.errors,
            high_confidence,
            self._settings.high_confidence_score,
        )
        notify_safely(
            self._notifier,
            "ingestion.run_summary",
            {
                "source_id": str(source.id),
                "source_name": source.name,
                "run_id": str(run_id),
                "status": status,
                "fetched_count": counters.fetched,
                "draft_created_count": counters.draft_created,
                "deduped_count": counters.deduped,
                "rejected_count": counters.rejected,
                "error_count": counters.errors,
            },
        )
        return summary

    def _process_item(self, candidate: Candidate, source: SourceConfig) -> ItemResult:
        score: FresherScore | None = None
        try:
            score = self._scorer(candidate)
            if score.score < self._settings.fresher_score_min:
                return ItemResult.success(candidate, status=RawOpportunityStatus.REJECTED, score=score)

            written = self._writer.write_or_skip(candidate, source_name=source.name, score=score.score)
        except ConfigurationError:
            raise
        except Exception as exc:
            message = str(exc) or exc.__class__.__name__
            return ItemResult.failure(
                candidate,
                error=ItemProcessingError(message, title=candidate.title),
                score=score,
            )

        return ItemResult.success(
            candidate,
            status=_OUTCOME_STATUS[written.outcome],
            score=score,
            posting_id=written.posting_id if written.outcome == WriteOutcome.CREATED else None,
        )

    def _record(
        self,
        result: ItemResult,
        *,
        source: SourceConfig,
        run_id: uuid.UUID,
        counters: RunCounters,
    ) -> None:
        try:
            self._store.record_raw_opportunity(
                RawOpportunityRecord.from_item(result, source_id=source.id, run_id=run_id)
            )
        except Exception as exc:
            logger.exception(
                "Audit row write failed source_id=%s run_id=%s title=%s posting_id=%s",
                source.id,
                run_id,
                result.candidate.title,
                result.posting_id,
            )
            message = f"Audit row not written ({result.status}): {str(exc) or exc.__class__.__name__}"
            result = ItemResult.failure(
                result.candidate,
                error=ItemProcessingError(message, title=result.candidate.title),
                score=result.score,
            )

        counters.record(result)
        log_event(
            logger,
            logging.DEBUG if result.ok else logging.WARNING,
            "ingestion.item",
            source_id=source.id,
            run_id=run_id,
            status=result.status,
            title=result.candidate.title,
            fresher_score=result.score.score if result.score is not None else None,
            error=result.error.message if result.error is not None else None,
        )

    def _fail_run(
        self,
        source: SourceConfig,
        run_id: uuid.UUID,
        counters: RunCounters,
        exc: Exception,
    ) -> None:
        message = str(exc) or exc.__class__.__name__
        self._store.finish_run(
            run_id,
            status=IngestionRunStatus.FAILED,
            ended_at=self._clock(),
            counters=counters,
            error_summary=_truncate(message),
        )
        self._store.touch_source(source.id, last_run_at=self._clock())
        logger.error("Ingestion run failed source_id=%s run_id=%s error=%s", source.id, run_id, message)
        notify_safely(
            self._notifier,
            "ingestion.run_summary",
            {
                "source_id": str(source.id),
                "source_name": source.name,
                "run_id": str(run_id),
                "status": IngestionRunStatus.FAILED,
                "error": message,
            },
        )


def build_ingestion_service(db: Session) -> IngestionRunService:
    """
    Wire the run service to SQLAlchemy stores on one session.
    """

    settings = get_ingestion_settings()
    return IngestionRunService(
        store=SQLAlchemyIngestionStore(db),
        writer=DraftWriter(opportunities=SQLAlchemyOpportunityStore(db), settings=settings),
        connectors=ConnectorRegistry(http_settings=get_external_http_settings()),
        settings=settings,
        notifier=build_notification_sink(),
    )
