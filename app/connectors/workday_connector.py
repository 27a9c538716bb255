"""
app/connectors/workday_connector.py

ATS-style payloads (Workday and lookalikes): nested posting / requisition
lists with listing paths relative to the endpoint's own host.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any
from urllib.parse import urljoin

from app.connectors.base import BaseSourceConnector
from app.connectors.normalization import (
    LooseRecord,
    extract_list,
    infer_work_mode,
    strip_html,
    to_number,
    to_string_list,
)
from app.domain.ingestion import SourceConfig
from app.domain.opportunity import Candidate
from db.models.ingestion_source import IngestionSourceType
from db.models.opportunity import OpportunityType

ATS_LIST_KEYS = ("jobPostings", "jobRequisitions", "postings", "jobs")
_DESCRIPTION_FIELDS = (
    "description",
    "jobDescription",
    "shortDescription",
    "bulletFields",
    "additionalLocations",
)


def resolve_listing_url(path: str, endpoint: str) -> str | None:
    """
    Absolute URLs pass through; relative paths resolve against the endpoint.
    """

    if not path:
        return None
    if path.startswith("http"):
        return path
    return urljoin(endpoint, path)


class WorkdayConnector(BaseSourceConnector):
    """
    Company falls back to the source name; internship type is inferred from text.
    """

    source_type = IngestionSourceType.WORKDAY

    def parse_payload(self, payload: Any, source: SourceConfig) -> list[Candidate]:
        return self._normalize_items(extract_list(payload, ATS_LIST_KEYS), source)

    def normalize_item(self, item: Mapping[str, Any], source: SourceConfig) -> Candidate | None:
        record = LooseRecord(item)
        title = record.text("title", "jobTitle", "jobPostingTitle")
        if not title:
            return None
        company = record.text("company", "hiringOrganization", "companyName") or source.name

        parts: list[str] = []
        for field_name in _DESCRIPTION_FIELDS:
            value = record.get(field_name)
            if value is None:
                continue
            parts.append(value if isinstance(value, str) else json.dumps(value, default=str))
        description = strip_html("\n".join(parts)) or None

        content = f"{title} {description or ''}"
        inferred_type = OpportunityType.INTERNSHIP if "intern" in content.lower() else source.default_type

        return Candidate(
            source_external_id=record.text("id", "jobReqId", "bulletFieldId") or None,
            type=inferred_type,
            title=title,
            company=company,
            description=description,
            apply_link=resolve_listing_url(
                record.text("externalPath", "externalUrl", "url"),
                source.endpoint,
            ),
            locations=to_string_list(
                record.get("locationsText", "locations", "primaryLocation", "location")
            ),
            work_mode=infer_work_mode(content),
            experience_min=to_number(record.get("experienceMin", "minExperience")),
            experience_max=to_number(record.get("experienceMax", "maxExperience")),
            required_skills=to_string_list(record.get("skills", "keySkills")),
            raw=dict(item),
        )
