"""
db/models/ingestion_source.py

Operator-managed configuration for one external posting feed.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class IngestionSourceType:
    JSON_FEED = "JSON_FEED"
    WORKDAY = "WORKDAY"
    CUSTOM = "CUSTOM"

    ALL = (JSON_FEED, WORKDAY, CUSTOM)


class IngestionSource(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "ingestion_sources"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    endpoint: Mapped[str] = mapped_column(Text, nullable=False)
    source_type: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default=IngestionSourceType.JSON_FEED,
        comment="JSON_FEED, WORKDAY, CUSTOM",
    )
    default_type: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default="JOB",
        comment="Posting type used when an item does not declare one",
    )
    run_frequency_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=60)
    enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    last_run_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    last_success_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_by_user_id: Mapped[str | None] = mapped_column(String(64), nullable=True)

    __table_args__ = (
        Index("ix_ingestion_sources_enabled", "enabled"),
        Index("ix_ingestion_sources_created_at", "created_at"),
    )
