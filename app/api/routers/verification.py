"""
app/api/routers/verification.py

Operator endpoints for link verification.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from app.api.dependencies import (
    get_opportunity_store,
    get_verification_orchestrator,
    get_verification_stats,
)
from app.repositories.base import OpportunityStore
from app.schemas.verification import (
    LinkHealthStatsResponse,
    VerificationStatsResponse,
    VerificationSummaryResponse,
)
from db.models.opportunity import LinkHealth
from verification.orchestrator import LinkVerificationOrchestrator
from verification.stats import VerificationStats

router = APIRouter(prefix="/verification", tags=["verification"])


@router.post("/run", response_model=VerificationSummaryResponse)
def run_link_verification(
    orchestrator: LinkVerificationOrchestrator = Depends(get_verification_orchestrator),
    stats: VerificationStats = Depends(get_verification_stats),
) -> VerificationSummaryResponse:
    summary = orchestrator.run(stats)
    return VerificationSummaryResponse(**summary.as_dict())


@router.get("/stats", response_model=VerificationStatsResponse)
def get_link_verification_stats(
    stats: VerificationStats = Depends(get_verification_stats),
) -> VerificationStatsResponse:
    return VerificationStatsResponse(**stats.snapshot())


@router.get("/health-stats", response_model=LinkHealthStatsResponse)
def get_link_health_stats(
    store: OpportunityStore = Depends(get_opportunity_store),
) -> LinkHealthStatsResponse:
    counts = store.count_published_by_link_health()
    return LinkHealthStatsResponse(
        healthy=counts.get(LinkHealth.HEALTHY, 0),
        retrying=counts.get(LinkHealth.RETRYING, 0),
        broken=counts.get(LinkHealth.BROKEN, 0),
    )
