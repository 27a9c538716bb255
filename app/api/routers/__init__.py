"""
app/api/routers package marker.
"""

from app.api.routers.ingestion import router as ingestion_router
from app.api.routers.verification import router as verification_router

__all__ = [
    "ingestion_router",
    "verification_router",
]
