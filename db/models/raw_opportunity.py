"""
db/models/raw_opportunity.py

Write-once audit row for every candidate processed by an ingestion run.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text, func
from sqlalchemy.dialects.postgresql import ARRAY, JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, UUIDPrimaryKeyMixin


class RawOpportunityStatus:
    FETCHED = "FETCHED"
    REJECTED = "REJECTED"
    DRAFT_CREATED = "DRAFT_CREATED"
    DEDUPED = "DEDUPED"
    ERROR = "ERROR"


class RawOpportunity(UUIDPrimaryKeyMixin, Base):
    __tablename__ = "raw_opportunities"

    source_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("ingestion_sources.id", ondelete="CASCADE"),
        nullable=False,
    )
    ingestion_run_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("ingestion_runs.id", ondelete="CASCADE"),
        nullable=False,
    )
    source_external_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    status: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        comment="REJECTED, DRAFT_CREATED, DEDUPED, ERROR",
    )
    raw_payload: Mapped[Any] = mapped_column(JSONB, nullable=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    company: Mapped[str] = mapped_column(String(255), nullable=False)
    apply_link: Mapped[str | None] = mapped_column(Text, nullable=True)
    suggested_type: Mapped[str] = mapped_column(String(32), nullable=False)
    fresher_score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    reason_flags: Mapped[list[str]] = mapped_column(ARRAY(String(64)), nullable=False, default=list)
    mapped_opportunity_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("opportunities.id", ondelete="SET NULL"),
        nullable=True,
    )
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    __table_args__ = (
        Index("ix_raw_opportunities_run_id", "ingestion_run_id"),
        Index("ix_raw_opportunities_source_id", "source_id"),
        Index("ix_raw_opportunities_status", "status"),
    )
