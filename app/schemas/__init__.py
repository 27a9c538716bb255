"""
app/schemas package marker.
"""

from app.schemas.ingestion import (
    IngestionCycleResponse,
    IngestionRunResponse,
    IngestionSourceResponse,
    SourceCycleResultResponse,
    SourceRunSummaryResponse,
)
from app.schemas.verification import (
    LinkHealthStatsResponse,
    VerificationStatsResponse,
    VerificationSummaryResponse,
    VerificationTotalsResponse,
)

__all__ = [
    "IngestionCycleResponse",
    "IngestionRunResponse",
    "IngestionSourceResponse",
    "LinkHealthStatsResponse",
    "SourceCycleResultResponse",
    "SourceRunSummaryResponse",
    "VerificationStatsResponse",
    "VerificationSummaryResponse",
    "VerificationTotalsResponse",
]
