"""
app/repositories package marker.
"""

from app.repositories.base import IngestionStore, OpportunityStore
from app.repositories.ingestion_repository import SQLAlchemyIngestionStore
from app.repositories.memory import InMemoryIngestionStore, InMemoryOpportunityStore
from app.repositories.opportunity_repository import SQLAlchemyOpportunityStore

__all__ = [
    "InMemoryIngestionStore",
    "InMemoryOpportunityStore",
    "IngestionStore",
    "OpportunityStore",
    "SQLAlchemyIngestionStore",
    "SQLAlchemyOpportunityStore",
]
