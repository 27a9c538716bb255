"""
app/connectors/job_board_connector.py

Job-board schema with nested designation / organization objects
(GeeksforGeeks jobs API shape).
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from app.connectors.base import BaseSourceConnector
from app.connectors.normalization import (
    LooseRecord,
    extract_list,
    parse_experience_range,
    resolve_work_mode,
    strip_html,
    to_opportunity_type,
    to_string_list,
)
from app.domain.ingestion import SourceConfig
from app.domain.opportunity import Candidate
from db.models.ingestion_source import IngestionSourceType

BOARD_LIST_KEYS = ("jobs", "data", "results")
BOARD_LISTING_URL = "https://www.geeksforgeeks.org/jobs/{slug}/"


def _summary_lines(record: LooseRecord) -> list[str]:
    lines: list[str] = []
    for label, key in (
        ("Salary", "salary"),
        ("Employment", "employment_type"),
        ("Apply by", "last_apply_date_display"),
    ):
        value = record.text(key)
        if value:
            lines.append(f"{label}: {value}")
    return lines


class JobBoardConnector(BaseSourceConnector):
    """
    Salary, employment type and apply-by date are folded into the description.
    """

    source_type = IngestionSourceType.CUSTOM

    def parse_payload(self, payload: Any, source: SourceConfig) -> list[Candidate]:
        return self._normalize_items(extract_list(payload, BOARD_LIST_KEYS), source)

    def normalize_item(self, item: Mapping[str, Any], source: SourceConfig) -> Candidate | None:
        record = LooseRecord(item)
        designation = LooseRecord(record.mapping("designation"))
        organization = LooseRecord(record.mapping("organization"))

        title = designation.text("text") or record.text("role", "title")
        company = organization.text("name") or record.text("company")
        if not title or not company:
            return None

        base_description = strip_html(organization.get("about") or record.get("description"))
        description = "\n".join(
            line for line in [base_description, *_summary_lines(record)] if line
        ) or None

        experience_min, experience_max = parse_experience_range(record.get("experience"))
        if (
            experience_min is None
            and experience_max is None
            and record.text("experience_level").lower() == "fresher"
        ):
            experience_min, experience_max = 0.0, 0.0

        slug = record.text("slug")
        listing_link = BOARD_LISTING_URL.format(slug=slug) if slug else None

        return Candidate(
            source_external_id=record.text("job_id") or None,
            type=to_opportunity_type(record.get("job_category"), source.default_type),
            title=title,
            company=company,
            description=description,
            apply_link=record.text("apply_link") or listing_link,
            locations=to_string_list(record.get("location")),
            work_mode=resolve_work_mode(record.get("location_type"), title, description),
            experience_min=experience_min,
            experience_max=experience_max,
            raw=dict(item),
        )
