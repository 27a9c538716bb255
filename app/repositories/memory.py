"""
app/repositories/memory.py

Process-local stores backing the service tests.
"""

from __future__ import annotations

import threading
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone

from app.domain.ingestion import IngestionRunRecord, RawOpportunityRecord, RunCounters, SourceConfig
from app.domain.opportunity import DraftOpportunity
from app.repositories.base import IngestionStore, OpportunityStore
from db.models.ingestion_run import IngestionRunStatus
from db.models.opportunity import LinkHealth, OpportunityStatus
from verification.base import HealthUpdate, PostingHealth


class InMemoryIngestionStore(IngestionStore):
    def __init__(self, sources: list[SourceConfig] | None = None) -> None:
        self._lock = threading.Lock()
        self._sources: dict[uuid.UUID, SourceConfig] = {}
        self._runs: dict[uuid.UUID, IngestionRunRecord] = {}
        self.raw_records: list[RawOpportunityRecord] = []
        for source in sources or []:
            self.add_source(source)

    def add_source(self, source: SourceConfig) -> None:
        with self._lock:
            self._sources[source.id] = source

    def list_sources(self, *, enabled_only: bool = False) -> list[SourceConfig]:
        with self._lock:
            sources = list(self._sources.values())
        if enabled_only:
            sources = [source for source in sources if source.enabled]
        return sources

    def get_source(self, source_id: uuid.UUID) -> SourceConfig | None:
        with self._lock:
            return self._sources.get(source_id)

    def touch_source(
        self,
        source_id: uuid.UUID,
        *,
        last_run_at: datetime,
        last_success_at: datetime | None = None,
    ) -> None:
        with self._lock:
            source = self._sources.get(source_id)
            if source is None:
                return
            changes: dict[str, datetime] = {"last_run_at": last_run_at}
            if last_success_at is not None:
                changes["last_success_at"] = last_success_at
            self._sources[source_id] = replace(source, **changes)

    def create_run(self, source_id: uuid.UUID, *, started_at: datetime) -> uuid.UUID:
        run_id = uuid.uuid4()
        with self._lock:
            source = self._sources.get(source_id)
            self._runs[run_id] = IngestionRunRecord(
                id=run_id,
                source_id=source_id,
                source_name=source.name if source is not None else None,
                status=IngestionRunStatus.RUNNING,
                started_at=started_at,
                ended_at=None,
                fetched_count=0,
                draft_created_count=0,
                deduped_count=0,
                rejected_count=0,
                error_count=0,
                error_summary=None,
            )
        return run_id

    def finish_run(
        self,
        run_id: uuid.UUID,
        *,
        status: str,
        ended_at: datetime,
        counters: RunCounters,
        error_summary: str | None,
    ) -> None:
        with self._lock:
            run = self._runs.get(run_id)
            if run is None:
                raise LookupError(f"Ingestion run {run_id} does not exist.")
            self._runs[run_id] = replace(
                run,
                status=status,
                ended_at=ended_at,
                fetched_count=counters.fetched,
                draft_created_count=counters.draft_created,
                deduped_count=counters.deduped,
                rejected_count=counters.rejected,
                error_count=counters.errors,
                error_summary=error_summary,
            )

    def record_raw_opportunity(self, record: RawOpportunityRecord) -> None:
        with self._lock:
            self.raw_records.append(record)

    def list_runs(
        self,
        *,
        source_id: uuid.UUID | None = None,
        limit: int = 25,
    ) -> list[IngestionRunRecord]:
        with self._lock:
            runs = list(self._runs.values())
        if source_id is not None:
            runs = [run for run in runs if run.source_id == source_id]
        runs.sort(key=lambda run: run.started_at, reverse=True)
        return runs[:limit]

    def get_run(self, run_id: uuid.UUID) -> IngestionRunRecord | None:
        with self._lock:
            return self._runs.get(run_id)


@dataclass
class StoredOpportunity:
    """
    Mutable posting row held by InMemoryOpportunityStore.
    """

    id: uuid.UUID
    title: str
    company: str
    apply_link: str | None
    status: str = OpportunityStatus.DRAFT
    link_health: str = LinkHealth.HEALTHY
    verification_failures: int = 0
    last_verified_at: datetime | None = None
    deleted_at: datetime | None = None
    draft: DraftOpportunity | None = None
    posted_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class InMemoryOpportunityStore(OpportunityStore):
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.postings: dict[uuid.UUID, StoredOpportunity] = {}

    def add_posting(
        self,
        *,
        title: str,
        company: str,
        apply_link: str | None,
        status: str = OpportunityStatus.PUBLISHED,
        link_health: str = LinkHealth.HEALTHY,
        verification_failures: int = 0,
        last_verified_at: datetime | None = None,
        deleted_at: datetime | None = None,
        posting_id: uuid.UUID | None = None,
    ) -> uuid.UUID:
        posting = StoredOpportunity(
            id=posting_id or uuid.uuid4(),
            title=title,
            company=company,
            apply_link=apply_link,
            status=status,
            link_health=link_health,
            verification_failures=verification_failures,
            last_verified_at=last_verified_at,
            deleted_at=deleted_at,
        )
        with self._lock:
            self.postings[posting.id] = posting
        return posting.id

    def find_active_by_apply_link(self, apply_link: str) -> uuid.UUID | None:
        with self._lock:
            for posting in self.postings.values():
                if posting.deleted_at is None and posting.apply_link == apply_link:
                    return posting.id
        return None

    def create_draft(self, draft: DraftOpportunity) -> uuid.UUID:
        with self._lock:
            self.postings[draft.id] = StoredOpportunity(
                id=draft.id,
                title=draft.title,
                company=draft.company,
                apply_link=draft.apply_link,
                status=OpportunityStatus.DRAFT,
                draft=draft,
            )
        return draft.id

    def list_verification_candidates(
        self,
        *,
        stale_before: datetime,
        limit: int,
    ) -> list[PostingHealth]:
        with self._lock:
            eligible = [
                posting
                for posting in self.postings.values()
                if posting.status == OpportunityStatus.PUBLISHED
                and posting.deleted_at is None
                and (
                    posting.last_verified_at is None
                    or posting.last_verified_at < stale_before
                    or posting.link_health == LinkHealth.RETRYING
                )
            ]
        eligible.sort(
            key=lambda posting: (
                posting.last_verified_at is not None,
                posting.last_verified_at or stale_before,
            )
        )
        return [
            PostingHealth(
                id=posting.id,
                title=posting.title,
                company=posting.company,
                apply_link=posting.apply_link,
                link_health=posting.link_health,
                verification_failures=posting.verification_failures,
            )
            for posting in eligible[:limit]
        ]

    def apply_health_update(self, posting_id: uuid.UUID, update: HealthUpdate) -> None:
        with self._lock:
            posting = self.postings.get(posting_id)
            if posting is None:
                return
            posting.link_health = update.link_health
            posting.verification_failures = update.verification_failures
            posting.last_verified_at = update.last_verified_at
            if update.archive:
                posting.status = OpportunityStatus.ARCHIVED

    def count_published_by_link_health(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        with self._lock:
            for posting in self.postings.values():
                if posting.status != OpportunityStatus.PUBLISHED or posting.deleted_at is not None:
                    continue
                counts[posting.link_health] = counts.get(posting.link_health, 0) + 1
        return counts
