"""
app/services/draft_writer.py

Dedup-or-draft decision for one accepted candidate.
"""

from __future__ import annotations

import logging

from app.config import IngestionSettings, get_ingestion_settings
from app.domain.errors import ConfigurationError
from app.domain.opportunity import Candidate, WriteOutcome, WriteResult
from app.mappers.opportunity_mapper import build_draft
from app.repositories.base import OpportunityStore
from db.models.opportunity import OpportunityType

logger = logging.getLogger(__name__)


class DraftWriter:
    """
    Rejects link-less non-walk-ins, dedups on exact apply link against
    non-deleted postings, and otherwise inserts a DRAFT posting.
    """

    def __init__(
        self,
        *,
        opportunities: OpportunityStore,
        settings: IngestionSettings | None = None,
    ) -> None:
        self._opportunities = opportunities
        self._settings = settings or get_ingestion_settings()

    def write_or_skip(self, candidate: Candidate, *, source_name: str, score: int) -> WriteResult:
        if not candidate.apply_link and candidate.type != OpportunityType.WALKIN:
            return WriteResult(outcome=WriteOutcome.REJECTED)

        if candidate.apply_link:
            existing_id = self._opportunities.find_active_by_apply_link(candidate.apply_link)
            if existing_id is not None:
                return WriteResult(outcome=WriteOutcome.DEDUPED, posting_id=existing_id)

        owner_id = self._settings.default_admin_id
        if not owner_id:
            raise ConfigurationError(
                "INGESTION_DEFAULT_ADMIN_ID is required for creating ingestion drafts."
            )

        draft = build_draft(
            candidate,
            source_name=source_name,
            score=score,
            owner_id=owner_id,
            default_location=self._settings.default_location,
        )
        posting_id = self._opportunities.create_draft(draft)
        logger.debug("Draft created posting_id=%s slug=%s", posting_id, draft.slug)
        return WriteResult(outcome=WriteOutcome.CREATED, posting_id=posting_id)
