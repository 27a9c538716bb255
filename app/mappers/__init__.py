"""
app/mappers package marker.
"""

from app.mappers.opportunity_mapper import build_draft, generate_slug, provenance_note

__all__ = [
    "build_draft",
    "generate_slug",
    "provenance_note",
]
