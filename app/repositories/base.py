"""
app/repositories/base.py

Store interfaces injected into the ingestion and verification services.
"""

from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from datetime import datetime

from app.domain.ingestion import IngestionRunRecord, RawOpportunityRecord, RunCounters, SourceConfig
from app.domain.opportunity import DraftOpportunity
from verification.base import HealthUpdate, PostingHealth


class IngestionStore(ABC):
    """
    Sources, runs and the raw audit trail.
    """

    @abstractmethod
    def list_sources(self, *, enabled_only: bool = False) -> list[SourceConfig]:
        """
        Return source configurations, newest first.
        """

    @abstractmethod
    def get_source(self, source_id: uuid.UUID) -> SourceConfig | None:
        """
        Return one source configuration, or None.
        """

    @abstractmethod
    def touch_source(
        self,
        source_id: uuid.UUID,
        *,
        last_run_at: datetime,
        last_success_at: datetime | None = None,
    ) -> None:
        """
        Record a run attempt; last_success_at is only written when given.
        """

    @abstractmethod
    def create_run(self, source_id: uuid.UUID, *, started_at: datetime) -> uuid.UUID:
        """
        Persist a RUNNING run and return its id.
        """

    @abstractmethod
    def finish_run(
        self,
        run_id: uuid.UUID,
        *,
        status: str,
        ended_at: datetime,
        counters: RunCounters,
        error_summary: str | None,
    ) -> None:
        """
        Move a run to its terminal status with final counters.
        """

    @abstractmethod
    def record_raw_opportunity(self, record: RawOpportunityRecord) -> None:
        """
        Append one write-once audit row.
        """

    @abstractmethod
    def list_runs(
        self,
        *,
        source_id: uuid.UUID | None = None,
        limit: int = 25,
    ) -> list[IngestionRunRecord]:
        """
        Return runs newest first.
        """


class OpportunityStore(ABC):
    """
    Postings: dedup lookups, draft inserts and link health.
    """

    @abstractmethod
    def find_active_by_apply_link(self, apply_link: str) -> uuid.UUID | None:
        """
        Return the id of a non-deleted posting with exactly this apply link.
        """

    @abstractmethod
    def create_draft(self, draft: DraftOpportunity) -> uuid.UUID:
        """
        Insert a DRAFT posting and return its id.
        """

    @abstractmethod
    def list_verification_candidates(
        self,
        *,
        stale_before: datetime,
        limit: int,
    ) -> list[PostingHealth]:
        """
        Published, non-deleted postings never verified or last verified before
        `stale_before`, plus any in RETRYING health; at most `limit`.
        """

    @abstractmethod
    def apply_health_update(self, posting_id: uuid.UUID, update: HealthUpdate) -> None:
        """
        Persist one posting's new health state.
        """

    @abstractmethod
    def count_published_by_link_health(self) -> dict[str, int]:
        """
        Published, non-deleted posting counts keyed by link health.
        """
