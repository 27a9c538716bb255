"""create ingestion pipeline tables

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 09:00:00
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "ingestion_sources",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("endpoint", sa.Text(), nullable=False),
        sa.Column("source_type", sa.String(length=32), nullable=False, comment="JSON_FEED, WORKDAY, CUSTOM"),
        sa.Column(
            "default_type",
            sa.String(length=32),
            nullable=False,
            comment="Posting type used when an item does not declare one",
        ),
        sa.Column("run_frequency_minutes", sa.Integer(), nullable=False),
        sa.Column("enabled", sa.Boolean(), nullable=False),
        sa.Column("last_run_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_success_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_by_user_id", sa.String(length=64), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_ingestion_sources_enabled", "ingestion_sources", ["enabled"], unique=False)
    op.create_index("ix_ingestion_sources_created_at", "ingestion_sources", ["created_at"], unique=False)

    op.create_table(
        "ingestion_runs",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("source_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("status", sa.String(length=32), nullable=False, comment="RUNNING, SUCCESS, PARTIAL, FAILED"),
        sa.Column("started_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("ended_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("fetched_count", sa.Integer(), nullable=False),
        sa.Column("draft_created_count", sa.Integer(), nullable=False),
        sa.Column("deduped_count", sa.Integer(), nullable=False),
        sa.Column("rejected_count", sa.Integer(), nullable=False),
        sa.Column("error_count", sa.Integer(), nullable=False),
        sa.Column("error_summary", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(["source_id"], ["ingestion_sources.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_ingestion_runs_source_id", "ingestion_runs", ["source_id"], unique=False)
    op.create_index("ix_ingestion_runs_started_at", "ingestion_runs", ["started_at"], unique=False)
    op.create_index("ix_ingestion_runs_status", "ingestion_runs", ["status"], unique=False)

    op.create_table(
        "opportunities",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("slug", sa.String(length=120), nullable=False),
        sa.Column("type", sa.String(length=32), nullable=False),
        sa.Column("title", sa.String(length=500), nullable=False),
        sa.Column("company", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("locations", postgresql.ARRAY(sa.String(length=255)), nullable=False),
        sa.Column("work_mode", sa.String(length=16), nullable=True),
        sa.Column("apply_link", sa.Text(), nullable=True),
        sa.Column("experience_min", sa.Float(), nullable=True),
        sa.Column("experience_max", sa.Float(), nullable=True),
        sa.Column("allowed_degrees", postgresql.ARRAY(sa.String(length=64)), nullable=False),
        sa.Column("allowed_courses", postgresql.ARRAY(sa.String(length=128)), nullable=False),
        sa.Column("allowed_specializations", postgresql.ARRAY(sa.String(length=128)), nullable=False),
        sa.Column("allowed_passout_years", postgresql.ARRAY(sa.Integer()), nullable=False),
        sa.Column("required_skills", postgresql.ARRAY(sa.String(length=128)), nullable=False),
        sa.Column("status", sa.String(length=32), nullable=False, comment="DRAFT, PUBLISHED, ARCHIVED"),
        sa.Column("posted_by_user_id", sa.String(length=64), nullable=False),
        sa.Column("notes_highlights", sa.Text(), nullable=True),
        sa.Column("link_health", sa.String(length=16), nullable=False, comment="HEALTHY, RETRYING, BROKEN"),
        sa.Column("verification_failures", sa.Integer(), nullable=False),
        sa.Column("last_verified_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("posted_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("slug"),
    )
    op.create_index("ix_opportunities_apply_link", "opportunities", ["apply_link"], unique=False)
    op.create_index(
        "ix_opportunities_status_deleted_at",
        "opportunities",
        ["status", "deleted_at"],
        unique=False,
    )
    op.create_index("ix_opportunities_link_health", "opportunities", ["link_health"], unique=False)
    op.create_index("ix_opportunities_last_verified_at", "opportunities", ["last_verified_at"], unique=False)

    op.create_table(
        "raw_opportunities",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("source_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("ingestion_run_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("source_external_id", sa.String(length=255), nullable=True),
        sa.Column("status", sa.String(length=32), nullable=False, comment="REJECTED, DRAFT_CREATED, DEDUPED, ERROR"),
        sa.Column("raw_payload", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column("title", sa.String(length=500), nullable=False),
        sa.Column("company", sa.String(length=255), nullable=False),
        sa.Column("apply_link", sa.Text(), nullable=True),
        sa.Column("suggested_type", sa.String(length=32), nullable=False),
        sa.Column("fresher_score", sa.Integer(), nullable=False),
        sa.Column("reason_flags", postgresql.ARRAY(sa.String(length=64)), nullable=False),
        sa.Column("mapped_opportunity_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.ForeignKeyConstraint(["source_id"], ["ingestion_sources.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["ingestion_run_id"], ["ingestion_runs.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["mapped_opportunity_id"], ["opportunities.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_raw_opportunities_run_id", "raw_opportunities", ["ingestion_run_id"], unique=False)
    op.create_index("ix_raw_opportunities_source_id", "raw_opportunities", ["source_id"], unique=False)
    op.create_index("ix_raw_opportunities_status", "raw_opportunities", ["status"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_raw_opportunities_status", table_name="raw_opportunities")
    op.drop_index("ix_raw_opportunities_source_id", table_name="raw_opportunities")
    op.drop_index("ix_raw_opportunities_run_id", table_name="raw_opportunities")
    op.drop_table("raw_opportunities")

    op.drop_index("ix_opportunities_last_verified_at", table_name="opportunities")
    op.drop_index("ix_opportunities_link_health", table_name="opportunities")
    op.drop_index("ix_opportunities_status_deleted_at", table_name="opportunities")
    op.drop_index("ix_opportunities_apply_link", table_name="opportunities")
    op.drop_table("opportunities")

    op.drop_index("ix_ingestion_runs_status", table_name="ingestion_runs")
    op.drop_index("ix_ingestion_runs_started_at", table_name="ingestion_runs")
    op.drop_index("ix_ingestion_runs_source_id", table_name="ingestion_runs")
    op.drop_table("ingestion_runs")

    op.drop_index("ix_ingestion_sources_created_at", table_name="ingestion_sources")
    op.drop_index("ix_ingestion_sources_enabled", table_name="ingestion_sources")
    op.drop_table("ingestion_sources")
