"""
app/domain package marker.
"""

from app.domain.errors import (
    ConfigurationError,
    ItemProcessingError,
    PipelineError,
    ProbeError,
    SourceFetchError,
)
from app.domain.ingestion import (
    IngestionCycleSummary,
    IngestionRunRecord,
    ItemResult,
    RawOpportunityRecord,
    RunCounters,
    SourceConfig,
    SourceCycleResult,
    SourceRunSummary,
)
from app.domain.opportunity import Candidate, DraftOpportunity, FresherScore, WriteOutcome, WriteResult

__all__ = [
    "Candidate",
    "ConfigurationError",
    "DraftOpportunity",
    "FresherScore",
    "IngestionCycleSummary",
    "IngestionRunRecord",
    "ItemProcessingError",
    "ItemResult",
    "PipelineError",
    "ProbeError",
    "RawOpportunityRecord",
    "RunCounters",
    "SourceConfig",
    "SourceCycleResult",
    "SourceFetchError",
    "SourceRunSummary",
    "WriteOutcome",
    "WriteResult",
]
