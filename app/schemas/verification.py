"""
app/schemas/verification.py

Response schemas for link verification.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class VerificationSummaryResponse(BaseModel):
    processed: int = Field(..., ge=0)
    healthy: int = Field(..., ge=0)
    soft_failures: int = Field(..., ge=0)
    hard_failures: int = Field(..., ge=0)
    archived: int = Field(..., ge=0)
    duration_seconds: float = Field(..., ge=0)


class VerificationTotalsResponse(BaseModel):
    processed: int = 0
    healthy: int = 0
    soft_failures: int = 0
    hard_failures: int = 0
    archived: int = 0


class VerificationStatsResponse(BaseModel):
    """
    Process-lifetime verification aggregate. Resets on restart.
    """

    total_runs: int = Field(..., ge=0)
    totals: VerificationTotalsResponse
    last_run_at: datetime | None = None
    last_run: VerificationSummaryResponse | None = None


class LinkHealthStatsResponse(BaseModel):
    """
    Published, non-deleted postings by link health.
    """

    healthy: int = 0
    retrying: int = 0
    broken: int = 0
