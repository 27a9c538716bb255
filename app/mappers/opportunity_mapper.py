"""
app/mappers/opportunity_mapper.py

Maps an accepted Candidate onto a draft Opportunity.
"""

from __future__ import annotations

import re
import uuid

from app.domain.opportunity import Candidate, DraftOpportunity

DEFAULT_ALLOWED_DEGREES = ("DEGREE",)

_NON_SLUG_CHARS = re.compile(r"[^\w\s-]", flags=re.ASCII)
_WHITESPACE = re.compile(r"\s+")
_HYPHEN_RUNS = re.compile(r"-+")


def _slug_part(value: str, max_length: int) -> str:
    slug = _NON_SLUG_CHARS.sub("", value.lower().strip())
    slug = _WHITESPACE.sub("-", slug)
    slug = _HYPHEN_RUNS.sub("-", slug)
    return slug[:max_length]


def generate_slug(title: str, company: str, posting_id: uuid.UUID | str | None = None) -> str:
    """
    "Software Engineer", "Google", id -> "software-engineer-at-google-1a2b3c4d".
    """

    suffix = f"-{str(posting_id)[:8]}" if posting_id else ""
    return f"{_slug_part(title, 50)}-at-{_slug_part(company, 30)}{suffix}"


def provenance_note(source_name: str, score: int) -> str:
    return f"[AUTO-INGEST:{source_name}] fresherScore={score}"


def build_draft(
    candidate: Candidate,
    *,
    source_name: str,
    score: int,
    owner_id: str,
    default_location: str,
    draft_id: uuid.UUID | None = None,
) -> DraftOpportunity:
    posting_id = draft_id or uuid.uuid4()
    return DraftOpportunity(
        id=posting_id,
        slug=generate_slug(candidate.title, candidate.company, posting_id),
        type=candidate.type,
        title=candidate.title,
        company=candidate.company,
        description=candidate.description,
        locations=list(candidate.locations) if candidate.locations else [default_location],
        work_mode=candidate.work_mode,
        apply_link=candidate.apply_link,
        experience_min=candidate.experience_min,
        experience_max=candidate.experience_max,
        allowed_degrees=list(DEFAULT_ALLOWED_DEGREES),
        allowed_passout_years=list(candidate.allowed_passout_years),
        required_skills=list(candidate.required_skills),
        posted_by_user_id=owner_id,
        notes_highlights=provenance_note(source_name, score),
    )
