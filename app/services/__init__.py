"""
app/services package marker.
"""

from app.services.draft_writer import DraftWriter
from app.services.fresher_score import score_candidate
from app.services.ingestion_run_service import IngestionRunService, build_ingestion_service

__all__ = [
    "DraftWriter",
    "IngestionRunService",
    "build_ingestion_service",
    "score_candidate",
]
