"""
app/api/routers/ingestion.py

Operator endpoints for ingestion cycles, manual source runs and run history.
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.api.dependencies import get_ingestion_service
from app.domain.errors import ConfigurationError, SourceFetchError
from app.schemas.ingestion import (
    IngestionCycleResponse,
    IngestionRunResponse,
    IngestionSourceResponse,
    SourceRunSummaryResponse,
)
from app.services.ingestion_run_service import IngestionRunService

router = APIRouter(prefix="/ingestion", tags=["ingestion"])


@router.post("/cycle", response_model=IngestionCycleResponse)
def run_ingestion_cycle(
    service: IngestionRunService = Depends(get_ingestion_service),
) -> IngestionCycleResponse:
    """
    Run every enabled source whose re-run interval has elapsed.
    """

    return IngestionCycleResponse.from_summary(service.run_cycle())


@router.post("/sources/{source_id}/run", response_model=SourceRunSummaryResponse)
def run_ingestion_source(
    source_id: uuid.UUID,
    service: IngestionRunService = Depends(get_ingestion_service),
) -> SourceRunSummaryResponse:
    try:
        summary = service.run_source(source_id)
    except ConfigurationError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(exc),
        ) from exc
    except SourceFetchError as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=str(exc),
        ) from exc

    return SourceRunSummaryResponse.from_summary(summary)


@router.get("/sources", response_model=list[IngestionSourceResponse])
def list_ingestion_sources(
    service: IngestionRunService = Depends(get_ingestion_service),
) -> list[IngestionSourceResponse]:
    return [IngestionSourceResponse.from_config(source) for source in service.list_sources()]


@router.get("/runs", response_model=list[IngestionRunResponse])
def list_ingestion_runs(
    source_id: uuid.UUID | None = Query(default=None, description="Optional source filter"),
    limit: int = Query(default=25, description="Clamped to 1..200"),
    service: IngestionRunService = Depends(get_ingestion_service),
) -> list[IngestionRunResponse]:
    runs = service.list_runs(source_id=source_id, limit=limit)
    return [IngestionRunResponse.from_record(run) for run in runs]
