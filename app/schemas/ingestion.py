"""
app/schemas/ingestion.py

Response schemas for ingestion operations.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from app.domain.ingestion import (
    IngestionCycleSummary,
    IngestionRunRecord,
    SourceConfig,
    SourceRunSummary,
)


class SourceRunSummaryResponse(BaseModel):
    """
    API response model for one source's ingestion pass.
    """

    source_id: uuid.UUID
    run_id: uuid.UUID | None = None
    status: str | None = None
    fetched_count: int = Field(0, ge=0)
    draft_created_count: int = Field(0, ge=0)
    deduped_count: int = Field(0, ge=0)
    rejected_count: int = Field(0, ge=0)
    error_count: int = Field(0, ge=0)
    skipped: bool = False
    reason: str | None = None

    @classmethod
    def from_summary(cls, summary: SourceRunSummary) -> "SourceRunSummaryResponse":
        return cls(
            source_id=summary.source_id,
            run_id=summary.run_id,
            status=summary.status,
            fetched_count=summary.fetched_count,
            draft_created_count=summary.draft_created_count,
            deduped_count=summary.deduped_count,
            rejected_count=summary.rejected_count,
            error_count=summary.error_count,
            skipped=summary.skipped,
            reason=summary.reason,
        )


class SourceCycleResultResponse(BaseModel):
    source_id: uuid.UUID
    ok: bool
    summary: SourceRunSummaryResponse | None = None
    error: str | None = None


class IngestionCycleResponse(BaseModel):
    """
    API response model for a full ingestion cycle.
    """

    scanned_sources: int = Field(..., ge=0)
    runnable_sources: int = Field(..., ge=0)
    results: list[SourceCycleResultResponse]

    @classmethod
    def from_summary(cls, summary: IngestionCycleSummary) -> "IngestionCycleResponse":
        return cls(
            scanned_sources=summary.scanned_sources,
            runnable_sources=summary.runnable_sources,
            results=[
                SourceCycleResultResponse(
                    source_id=result.source_id,
                    ok=result.ok,
                    summary=(
                        SourceRunSummaryResponse.from_summary(result.summary)
                        if result.summary is not None
                        else None
                    ),
                    error=result.error,
                )
                for result in summary.results
            ],
        )


class IngestionSourceResponse(BaseModel):
    id: uuid.UUID
    name: str
    endpoint: str
    source_type: str
    default_type: str
    run_frequency_minutes: int
    enabled: bool
    last_run_at: datetime | None = None
    last_success_at: datetime | None = None

    @classmethod
    def from_config(cls, source: SourceConfig) -> "IngestionSourceResponse":
        return cls(
            id=source.id,
            name=source.name,
            endpoint=source.endpoint,
            source_type=source.source_type,
            default_type=source.default_type,
            run_frequency_minutes=source.run_frequency_minutes,
            enabled=source.enabled,
            last_run_at=source.last_run_at,
            last_success_at=source.last_success_at,
        )


class IngestionRunResponse(BaseModel):
    id: uuid.UUID
    source_id: uuid.UUID
    source_name: str | None = None
    status: str
    started_at: datetime
    ended_at: datetime | None = None
    fetched_count: int
    draft_created_count: int
    deduped_count: int
    rejected_count: int
    error_count: int
    error_summary: str | None = None

    @classmethod
    def from_record(cls, record: IngestionRunRecord) -> "IngestionRunResponse":
        return cls(
            id=record.id,
            source_id=record.source_id,
            source_name=record.source_name,
            status=record.status,
            started_at=record.started_at,
            ended_at=record.ended_at,
            fetched_count=record.fetched_count,
            draft_created_count=record.draft_created_count,
            deduped_count=record.deduped_count,
            rejected_count=record.rejected_count,
            error_count=record.error_count,
            error_summary=record.error_summary,
        )
