"""
app/domain/ingestion.py

Domain models for ingestion runs, per-item results and cycle summaries.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any

from app.domain.errors import ItemProcessingError
from app.domain.opportunity import Candidate, FresherScore
from db.models.raw_opportunity import RawOpportunityStatus

# raw_opportunities column widths
RAW_TITLE_MAX_CHARS = 500
RAW_COMPANY_MAX_CHARS = 255
RAW_EXTERNAL_ID_MAX_CHARS = 255


@dataclass(frozen=True)
class SourceConfig:
    """
    Read-only snapshot of one IngestionSource row.
    """

    id: uuid.UUID
    name: str
    endpoint: str
    source_type: str
    default_type: str
    run_frequency_minutes: int
    enabled: bool = True
    last_run_at: datetime | None = None
    last_success_at: datetime | None = None

    def is_due(self, now: datetime) -> bool:
        """
        A source that never ran, or whose last attempt (successful or not)
        is at least run_frequency_minutes old, is runnable.
        """

        if self.last_run_at is None:
            return True
        return now - self.last_run_at >= timedelta(minutes=self.run_frequency_minutes)


@dataclass(frozen=True)
class ItemResult:
    """
    Outcome of processing one candidate: either a terminal status or an error.
    """

    candidate: Candidate
    status: str
    score: FresherScore | None = None
    posting_id: uuid.UUID | None = None
    error: ItemProcessingError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(
        cls,
        candidate: Candidate,
        *,
        status: str,
        score: FresherScore,
        posting_id: uuid.UUID | None = None,
    ) -> "ItemResult":
        return cls(candidate=candidate, status=status, score=score, posting_id=posting_id)

    @classmethod
    def failure(
        cls,
        candidate: Candidate,
        *,
        error: ItemProcessingError,
        score: FresherScore | None = None,
    ) -> "ItemResult":
        return cls(
            candidate=candidate,
            status=RawOpportunityStatus.ERROR,
            score=score,
            error=error,
        )


@dataclass(frozen=True)
class RawOpportunityRecord:
    """
    Write-once audit entry for one processed candidate. `from_item`
    clips text to the column widths of raw_opportunities.
    """

    source_id: uuid.UUID
    run_id: uuid.UUID
    status: str
    title: str
    company: str
    suggested_type: str
    fresher_score: int
    reason_flags: list[str]
    raw_payload: Any = None
    source_external_id: str | None = None
    apply_link: str | None = None
    mapped_posting_id: uuid.UUID | None = None
    error_message: str | None = None

    @classmethod
    def from_item(
        cls,
        result: ItemResult,
        *,
        source_id: uuid.UUID,
        run_id: uuid.UUID,
    ) -> "RawOpportunityRecord":
        candidate = result.candidate
        score = result.score
        return cls(
            source_id=source_id,
            run_id=run_id,
            status=result.status,
            title=candidate.title[:RAW_TITLE_MAX_CHARS],
            company=candidate.company[:RAW_COMPANY_MAX_CHARS],
            suggested_type=candidate.type,
            fresher_score=score.score if score is not None else 0,
            reason_flags=list(score.flags) if score is not None else [],
            raw_payload=candidate.raw,
            source_external_id=(
                candidate.source_external_id[:RAW_EXTERNAL_ID_MAX_CHARS]
                if candidate.source_external_id
                else None
            ),
            apply_link=candidate.apply_link,
            mapped_posting_id=result.posting_id,
            error_message=result.error.message if result.error is not None else None,
        )


@dataclass
class RunCounters:
    """
    Aggregate item counters for one run.

    Once every fetched item has been recorded,
    draft_created + deduped + rejected + errors == fetched.
    """

    fetched: int = 0
    draft_created: int = 0
    deduped: int = 0
    rejected: int = 0
    errors: int = 0
    error_messages: list[str] = field(default_factory=list)

    def record(self, result: ItemResult) -> None:
        if result.status == RawOpportunityStatus.DRAFT_CREATED:
            self.draft_created += 1
        elif result.status == RawOpportunityStatus.DEDUPED:
            self.deduped += 1
        elif result.status == RawOpportunityStatus.REJECTED:
            self.rejected += 1
        else:
            self.errors += 1
            if result.error is not None:
                self.error_messages.append(result.error.message)

    @property
    def processed(self) -> int:
        return self.draft_created + self.deduped + self.rejected + self.errors

    @property
    def is_balanced(self) -> bool:
        return self.processed == self.fetched


@dataclass(frozen=True)
class SourceRunSummary:
    """
    Result of one source's ingestion pass as returned to the caller.
    """

    source_id: uuid.UUID
    run_id: uuid.UUID | None = None
    status: str | None = None
    fetched_count: int = 0
    draft_created_count: int = 0
    deduped_count: int = 0
    rejected_count: int = 0
    error_count: int = 0
    skipped: bool = False
    reason: str | None = None

    @classmethod
    def skipped_source(cls, source_id: uuid.UUID, reason: str) -> "SourceRunSummary":
        return cls(source_id=source_id, skipped=True, reason=reason)


@dataclass(frozen=True)
class SourceCycleResult:
    """
    One entry of a cycle: the source's summary, or the error that stopped it.
    """

    source_id: uuid.UUID
    ok: bool
    summary: SourceRunSummary | None = None
    error: str | None = None


@dataclass(frozen=True)
class IngestionCycleSummary:
    scanned_sources: int
    runnable_sources: int
    results: list[SourceCycleResult] = field(default_factory=list)


@dataclass(frozen=True)
class IngestionRunRecord:
    """
    Read model for run history listings.
    """

    id: uuid.UUID
    source_id: uuid.UUID
    source_name: str | None
    status: str
    started_at: datetime
    ended_at: datetime | None
    fetched_count: int
    draft_created_count: int
    deduped_count: int
    rejected_count: int
    error_count: int
    error_summary: str | None
