"""
app/repositories/opportunity_repository.py

DB persistence for postings: dedup lookups, draft inserts and link health.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.opportunity import DraftOpportunity
from app.repositories.base import OpportunityStore
from db.models.opportunity import LinkHealth, Opportunity, OpportunityStatus
from verification.base import HealthUpdate, PostingHealth


class SQLAlchemyOpportunityStore(OpportunityStore):
    def __init__(self, session: Session) -> None:
        self._session = session

    def _commit(self) -> None:
        try:
            self._session.commit()
        except SQLAlchemyError:
            self._session.rollback()
            raise

    def find_active_by_apply_link(self, apply_link: str) -> uuid.UUID | None:
        stmt = (
            select(Opportunity.id)
            .where(Opportunity.apply_link == apply_link)
            .where(Opportunity.deleted_at.is_(None))
            .limit(1)
        )
        return self._session.scalar(stmt)

    def create_draft(self, draft: DraftOpportunity) -> uuid.UUID:
        self._session.add(
            Opportunity(
                id=draft.id,
                slug=draft.slug,
                type=draft.type,
                title=draft.title[:500],
                company=draft.company[:255],
                description=draft.description,
                locations=list(draft.locations),
                work_mode=draft.work_mode,
                apply_link=draft.apply_link,
                experience_min=draft.experience_min,
                experience_max=draft.experience_max,
                allowed_degrees=list(draft.allowed_degrees),
                allowed_passout_years=list(draft.allowed_passout_years),
                required_skills=list(draft.required_skills),
                status=OpportunityStatus.DRAFT,
                posted_by_user_id=draft.posted_by_user_id,
                notes_highlights=draft.notes_highlights,
            )
        )
        self._commit()
        return draft.id

    def list_verification_candidates(
        self,
        *,
        stale_before: datetime,
        limit: int,
    ) -> list[PostingHealth]:
        stmt = (
            select(Opportunity)
            .where(Opportunity.status == OpportunityStatus.PUBLISHED)
            .where(Opportunity.deleted_at.is_(None))
            .where(
                or_(
                    Opportunity.last_verified_at.is_(None),
                    Opportunity.last_verified_at < stale_before,
                    Opportunity.link_health == LinkHealth.RETRYING,
                )
            )
            .order_by(Opportunity.last_verified_at.asc().nulls_first())
            .limit(limit)
        )
        return [
            PostingHealth(
                id=row.id,
                title=row.title,
                company=row.company,
                apply_link=row.apply_link,
                link_health=row.link_health,
                verification_failures=row.verification_failures,
            )
            for row in self._session.scalars(stmt)
        ]

    def apply_health_update(self, posting_id: uuid.UUID, update: HealthUpdate) -> None:
        row = self._session.get(Opportunity, posting_id)
        if row is None:
            return
        row.link_health = update.link_health
        row.verification_failures = update.verification_failures
        row.last_verified_at = update.last_verified_at
        if update.archive:
            row.status = OpportunityStatus.ARCHIVED
        self._commit()

    def count_published_by_link_health(self) -> dict[str, int]:
        stmt = (
            select(Opportunity.link_health, func.count(Opportunity.id))
            .where(Opportunity.status == OpportunityStatus.PUBLISHED)
            .where(Opportunity.deleted_at.is_(None))
            .group_by(Opportunity.link_health)
        )
        return {health: int(count) for health, count in self._session.execute(stmt).all()}
