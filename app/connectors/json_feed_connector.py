"""
app/connectors/json_feed_connector.py

Generic list-of-objects JSON feed with loosely named fields.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from app.connectors.base import BaseSourceConnector
from app.connectors.normalization import (
    LooseRecord,
    extract_list,
    resolve_work_mode,
    strip_html,
    to_number,
    to_opportunity_type,
    to_string_list,
    to_year_list,
)
from app.domain.ingestion import SourceConfig
from app.domain.opportunity import Candidate
from db.models.ingestion_source import IngestionSourceType

FEED_LIST_KEYS = ("jobs", "data", "results")


class JSONFeedConnector(BaseSourceConnector):
    """
    Accepts a bare list or one wrapped under jobs / data / results.
    """

    source_type = IngestionSourceType.JSON_FEED

    def parse_payload(self, payload: Any, source: SourceConfig) -> list[Candidate]:
        return self._normalize_items(extract_list(payload, FEED_LIST_KEYS), source)

    def normalize_item(self, item: Mapping[str, Any], source: SourceConfig) -> Candidate | None:
        record = LooseRecord(item)
        title = record.text("title", "jobTitle", "position", "role")
        company = record.text("company", "companyName", "employer", "organization")
        if not title or not company:
            return None

        description = strip_html(record.get("description", "summary", "jobDescription")) or None
        return Candidate(
            source_external_id=record.text("id", "externalId", "jobId") or None,
            type=to_opportunity_type(record.get("type", "category", "jobType"), source.default_type),
            title=title,
            company=company,
            description=description,
            apply_link=record.text("applyLink", "applyUrl", "url", "link") or None,
            locations=to_string_list(record.get("locations", "location", "city")),
            work_mode=resolve_work_mode(record.get("workMode", "remoteType"), title, description),
            experience_min=to_number(record.get("experienceMin", "minExperience")),
            experience_max=to_number(record.get("experienceMax", "maxExperience")),
            allowed_passout_years=to_year_list(record.get("allowedPassoutYears", "passoutYears", "batch")),
            required_skills=to_string_list(record.get("requiredSkills", "skills")),
            raw=dict(item),
        )
