"""
db/models/opportunity.py

Candidate-facing job / internship / walk-in posting.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Float, Index, Integer, String, Text, func
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class OpportunityType:
    JOB = "JOB"
    INTERNSHIP = "INTERNSHIP"
    WALKIN = "WALKIN"


class WorkMode:
    ONSITE = "ONSITE"
    HYBRID = "HYBRID"
    REMOTE = "REMOTE"

    ALL = (ONSITE, HYBRID, REMOTE)


class OpportunityStatus:
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    ARCHIVED = "ARCHIVED"


class LinkHealth:
    HEALTHY = "HEALTHY"
    RETRYING = "RETRYING"
    BROKEN = "BROKEN"


class Opportunity(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "opportunities"

    slug: Mapped[str] = mapped_column(String(120), nullable=False, unique=True)
    type: Mapped[str] = mapped_column(String(32), nullable=False, default=OpportunityType.JOB)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    company: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    locations: Mapped[list[str]] = mapped_column(ARRAY(String(255)), nullable=False, default=list)
    work_mode: Mapped[str | None] = mapped_column(String(16), nullable=True)
    apply_link: Mapped[str | None] = mapped_column(Text, nullable=True)
    experience_min: Mapped[float | None] = mapped_column(Float, nullable=True)
    experience_max: Mapped[float | None] = mapped_column(Float, nullable=True)
    allowed_degrees: Mapped[list[str]] = mapped_column(ARRAY(String(64)), nullable=False, default=list)
    allowed_courses: Mapped[list[str]] = mapped_column(ARRAY(String(128)), nullable=False, default=list)
    allowed_specializations: Mapped[list[str]] = mapped_column(
        ARRAY(String(128)),
        nullable=False,
        default=list,
    )
    allowed_passout_years: Mapped[list[int]] = mapped_column(ARRAY(Integer), nullable=False, default=list)
    required_skills: Mapped[list[str]] = mapped_column(ARRAY(String(128)), nullable=False, default=list)
    status: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default=OpportunityStatus.DRAFT,
        comment="DRAFT, PUBLISHED, ARCHIVED",
    )
    posted_by_user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    notes_highlights: Mapped[str | None] = mapped_column(Text, nullable=True)
    link_health: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default=LinkHealth.HEALTHY,
        comment="HEALTHY, RETRYING, BROKEN",
    )
    verification_failures: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_verified_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    posted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index("ix_opportunities_apply_link", "apply_link"),
        Index("ix_opportunities_status_deleted_at", "status", "deleted_at"),
        Index("ix_opportunities_link_health", "link_health"),
        Index("ix_opportunities_last_verified_at", "last_verified_at"),
    )
