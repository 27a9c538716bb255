"""
Model package exports.

Import every SQLAlchemy model here so metadata registration and Alembic
autogeneration work without extra imports.
"""

from db.models.ingestion_run import IngestionRun, IngestionRunStatus
from db.models.ingestion_source import IngestionSource, IngestionSourceType
from db.models.opportunity import (
    LinkHealth,
    Opportunity,
    OpportunityStatus,
    OpportunityType,
    WorkMode,
)
from db.models.raw_opportunity import RawOpportunity, RawOpportunityStatus

__all__ = [
    "IngestionRun",
    "IngestionRunStatus",
    "IngestionSource",
    "IngestionSourceType",
    "LinkHealth",
    "Opportunity",
    "OpportunityStatus",
    "OpportunityType",
    "RawOpportunity",
    "RawOpportunityStatus",
    "WorkMode",
]
