"""
app/api/dependencies.py

Shared FastAPI dependencies wiring services to the request's DB session.
"""

from __future__ import annotations

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from app.repositories.base import OpportunityStore
from app.repositories.opportunity_repository import SQLAlchemyOpportunityStore
from app.services.ingestion_run_service import IngestionRunService, build_ingestion_service
from db.session import get_db
from verification.orchestrator import LinkVerificationOrchestrator, build_verification_orchestrator
from verification.stats import VerificationStats


def get_ingestion_service(db: Session = Depends(get_db)) -> IngestionRunService:
    return build_ingestion_service(db)


def get_verification_orchestrator(db: Session = Depends(get_db)) -> LinkVerificationOrchestrator:
    return build_verification_orchestrator(db)


def get_opportunity_store(db: Session = Depends(get_db)) -> OpportunityStore:
    return SQLAlchemyOpportunityStore(db)


def get_verification_stats(request: Request) -> VerificationStats:
    """
    The app-scoped stats object created in create_app.
    """

    return request.app.state.verification_stats
