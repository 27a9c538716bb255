"""
app/domain/opportunity.py

In-memory shapes for postings flowing through ingestion.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any

from db.models.opportunity import OpportunityType


@dataclass(frozen=True)
class Candidate:
    """
    Normalized external posting, alive only for one ingestion pass.
    """

    title: str
    company: str
    type: str = OpportunityType.JOB
    source_external_id: str | None = None
    description: str | None = None
    apply_link: str | None = None
    locations: list[str] = field(default_factory=list)
    work_mode: str | None = None
    experience_min: float | None = None
    experience_max: float | None = None
    allowed_passout_years: list[int] = field(default_factory=list)
    required_skills: list[str] = field(default_factory=list)
    raw: Any = None


@dataclass(frozen=True)
class FresherScore:
    """
    Classifier output: additive score plus the name of every rule that fired.
    """

    score: int
    flags: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class DraftOpportunity:
    """
    Fully-mapped draft posting ready for insertion.
    """

    id: uuid.UUID
    slug: str
    type: str
    title: str
    company: str
    description: str | None
    locations: list[str]
    work_mode: str | None
    apply_link: str | None
    experience_min: float | None
    experience_max: float | None
    allowed_degrees: list[str]
    allowed_passout_years: list[int]
    required_skills: list[str]
    posted_by_user_id: str
    notes_highlights: str


class WriteOutcome:
    CREATED = "created"
    DEDUPED = "deduped"
    REJECTED = "rejected"


@dataclass(frozen=True)
class WriteResult:
    """
    Draft writer decision for one candidate.
    """

    outcome: str
    posting_id: uuid.UUID | None = None
