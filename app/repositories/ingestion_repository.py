"""
app/repositories/ingestion_repository.py

DB persistence for ingestion sources, runs and raw audit rows.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.ingestion import IngestionRunRecord, RawOpportunityRecord, RunCounters, SourceConfig
from app.repositories.base import IngestionStore
from db.models.ingestion_run import IngestionRun, IngestionRunStatus
from db.models.ingestion_source import IngestionSource
from db.models.raw_opportunity import RawOpportunity


def _to_source_config(row: IngestionSource) -> SourceConfig:
    return SourceConfig(
        id=row.id,
        name=row.name,
        endpoint=row.endpoint,
        source_type=row.source_type,
        default_type=row.default_type,
        run_frequency_minutes=row.run_frequency_minutes,
        enabled=row.enabled,
        last_run_at=row.last_run_at,
        last_success_at=row.last_success_at,
    )


class SQLAlchemyIngestionStore(IngestionStore):
    """
    Every write commits on its own; a run row stays RUNNING if the process
    dies before finish_run.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def _commit(self) -> None:
        try:
            self._session.commit()
        except SQLAlchemyError:
            self._session.rollback()
            raise

    def list_sources(self, *, enabled_only: bool = False) -> list[SourceConfig]:
        stmt = select(IngestionSource).order_by(IngestionSource.created_at.desc())
        if enabled_only:
            stmt = stmt.where(IngestionSource.enabled.is_(True))
        return [_to_source_config(row) for row in self._session.scalars(stmt)]

    def get_source(self, source_id: uuid.UUID) -> SourceConfig | None:
        row = self._session.get(IngestionSource, source_id)
        return _to_source_config(row) if row is not None else None

    def touch_source(
        self,
        source_id: uuid.UUID,
        *,
        last_run_at: datetime,
        last_success_at: datetime | None = None,
    ) -> None:
        row = self._session.get(IngestionSource, source_id)
        if row is None:
            return
        row.last_run_at = last_run_at
        if last_success_at is not None:
            row.last_success_at = last_success_at
        self._commit()

    def create_run(self, source_id: uuid.UUID, *, started_at: datetime) -> uuid.UUID:
        run = IngestionRun(
            id=uuid.uuid4(),
            source_id=source_id,
            status=IngestionRunStatus.RUNNING,
            started_at=started_at,
        )
        self._session.add(run)
        self._commit()
        return run.id

    def finish_run(
        self,
        run_id: uuid.UUID,
        *,
        status: str,
        ended_at: datetime,
        counters: RunCounters,
        error_summary: str | None,
    ) -> None:
        run = self._session.get(IngestionRun, run_id)
        if run is None:
            raise LookupError(f"Ingestion run {run_id} does not exist.")
        run.status = status
        run.ended_at = ended_at
        run.fetched_count = counters.fetched
        run.draft_created_count = counters.draft_created
        run.deduped_count = counters.deduped
        run.rejected_count = counters.rejected
        run.error_count = counters.errors
        run.error_summary = error_summary
        self._commit()

    def record_raw_opportunity(self, record: RawOpportunityRecord) -> None:
        self._session.add(
            RawOpportunity(
                source_id=record.source_id,
                ingestion_run_id=record.run_id,
                source_external_id=record.source_external_id,
                status=record.status,
                raw_payload=record.raw_payload,
                title=record.title,
                company=record.company,
                apply_link=record.apply_link,
                suggested_type=record.suggested_type,
                fresher_score=record.fresher_score,
                reason_flags=list(record.reason_flags),
                mapped_opportunity_id=record.mapped_posting_id,
                error_message=record.error_message,
            )
        )
        self._commit()

    def list_runs(
        self,
        *,
        source_id: uuid.UUID | None = None,
        limit: int = 25,
    ) -> list[IngestionRunRecord]:
        stmt = (
            select(IngestionRun, IngestionSource.name)
            .outerjoin(IngestionSource, IngestionSource.id == IngestionRun.source_id)
            .order_by(IngestionRun.started_at.desc())
            .limit(limit)
        )
        if source_id is not None:
            stmt = stmt.where(IngestionRun.source_id == source_id)

        return [
            IngestionRunRecord(
                id=run.id,
                source_id=run.source_id,
                source_name=source_name,
                status=run.status,
                started_at=run.started_at,
                ended_at=run.ended_at,
                fetched_count=run.fetched_count,
                draft_created_count=run.draft_created_count,
                deduped_count=run.deduped_count,
                rejected_count=run.rejected_count,
                error_count=run.error_count,
                error_summary=run.error_summary,
            )
            for run, source_name in self._session.execute(stmt).all()
        ]
