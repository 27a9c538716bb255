"""
tests/test_connectors.py

Source adapters: the three payload shapes, feed fetching and the registry.
"""

from __future__ import annotations

from typing import Any

import pytest
import requests

from app.config import INGESTION_USER_AGENT, ExternalHTTPSettings
from app.connectors import ConnectorRegistry, JobBoardConnector, JSONFeedConnector, WorkdayConnector
from app.connectors.workday_connector import resolve_listing_url
from app.domain.errors import SourceFetchError
from db.models.ingestion_source import IngestionSourceType
from db.models.opportunity import OpportunityType, WorkMode


class FakeSession:
    def __init__(self, responses: list[Any]) -> None:
        self._responses = list(responses)
        self.calls: list[dict[str, Any]] = []

    def get(self, url: str, **kwargs: Any) -> Any:
        self.calls.append({"url": url, **kwargs})
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture()
def http_settings() -> ExternalHTTPSettings:
    return ExternalHTTPSettings(max_retries=0)


class TestJSONFeedConnector:
    def test_loose_field_names_are_normalized(self, http_settings, make_source) -> None:
        connector = JSONFeedConnector(http_settings=http_settings)
        payload = {
            "jobs": [
                {
                    "id": "ext-1",
                    "Job_Title": "Graduate Engineer",
                    "companyName": "Acme",
                    "apply_url": "https://acme.example/jobs/1",
                    "description": "<p>Join our <b>remote</b> team &amp; grow</p>",
                    "location": "Pune, Bengaluru",
                    "type": "internship",
                    "passoutYears": [2024, "2025"],
                    "skills": ["Python", "SQL"],
                    "experienceMax": "1",
                }
            ]
        }

        candidates = connector.parse_payload(payload, make_source())

        assert len(candidates) == 1
        candidate = candidates[0]
        assert candidate.source_external_id == "ext-1"
        assert candidate.title == "Graduate Engineer"
        assert candidate.company == "Acme"
        assert candidate.type == OpportunityType.INTERNSHIP
        assert candidate.apply_link == "https://acme.example/jobs/1"
        assert candidate.description == "Join our remote team & grow"
        assert candidate.locations == ["Pune", "Bengaluru"]
        assert candidate.work_mode == WorkMode.REMOTE
        assert candidate.allowed_passout_years == [2024, 2025]
        assert candidate.required_skills == ["Python", "SQL"]
        assert candidate.experience_max == 1.0
        assert candidate.raw["companyName"] == "Acme"

    def test_malformed_entries_are_dropped(self, http_settings, make_source) -> None:
        connector = JSONFeedConnector(http_settings=http_settings)
        payload = [
            {"title": "Missing company"},
            {"company": "Missing title"},
            "not-an-object",
            None,
            {"title": "Analyst", "company": "Acme"},
        ]

        candidates = connector.parse_payload(payload, make_source())

        assert [candidate.title for candidate in candidates] == ["Analyst"]

    def test_explicit_work_mode_wins_over_keywords(self, http_settings, make_source) -> None:
        connector = JSONFeedConnector(http_settings=http_settings)
        candidates = connector.parse_payload(
            [{"title": "Remote Support Engineer", "company": "Acme", "workMode": "On-site"}],
            make_source(),
        )
        assert candidates[0].work_mode == WorkMode.ONSITE

    def test_unknown_type_falls_back_to_source_default(self, http_settings, make_source) -> None:
        connector = JSONFeedConnector(http_settings=http_settings)
        candidates = connector.parse_payload(
            {"results": [{"title": "Walk-in Drive", "company": "Acme", "type": "event"}]},
            make_source(default_type=OpportunityType.WALKIN),
        )
        assert candidates[0].type == OpportunityType.WALKIN

    def test_unrecognized_payload_yields_nothing(self, http_settings, make_source) -> None:
        connector = JSONFeedConnector(http_settings=http_settings)
        assert connector.parse_payload({"unexpected": {"jobs": []}}, make_source()) == []


class TestWorkdayConnector:
    ENDPOINT = "https://acme.wd1.myworkdayjobs.com/wday/cxs/acme/careers/jobs"

    def test_relative_paths_resolve_against_endpoint(self, http_settings, make_source) -> None:
        connector = WorkdayConnector(http_settings=http_settings)
        source = make_source(
            name="Acme Corp",
            endpoint=self.ENDPOINT,
            source_type=IngestionSourceType.WORKDAY,
        )
        payload = {
            "total": 2,
            "jobPostings": [
                {
                    "title": "Software Engineering Intern",
                    "externalPath": "/job/Bangalore/Software-Engineering-Intern_R123",
                    "locationsText": "Bangalore",
                    "bulletFields": ["R123"],
                },
                {"externalPath": "/job/no-title"},
            ],
        }

        candidates = connector.parse_payload(payload, source)

        assert len(candidates) == 1
        candidate = candidates[0]
        assert candidate.company == "Acme Corp"
        assert candidate.type == OpportunityType.INTERNSHIP
        assert candidate.locations == ["Bangalore"]
        assert candidate.apply_link == (
            "https://acme.wd1.myworkdayjobs.com/job/Bangalore/Software-Engineering-Intern_R123"
        )

    def test_description_html_is_stripped_and_mode_inferred(self, http_settings, make_source) -> None:
        connector = WorkdayConnector(http_settings=http_settings)
        payload = {
            "jobRequisitions": [
                {
                    "title": "Associate Engineer",
                    "company": "Globex",
                    "externalUrl": "https://globex.example/apply/9",
                    "jobDescription": "<ul><li>Hybrid role</li><li>3 days &lt;office&gt;</li></ul>",
                }
            ]
        }

        candidate = connector.parse_payload(payload, make_source(endpoint=self.ENDPOINT))[0]

        assert candidate.company == "Globex"
        assert candidate.type == OpportunityType.JOB
        assert candidate.apply_link == "https://globex.example/apply/9"
        assert candidate.description == "Hybrid role 3 days <office>"
        assert candidate.work_mode == WorkMode.HYBRID

    def test_resolve_listing_url(self) -> None:
        assert resolve_listing_url("", self.ENDPOINT) is None
        assert resolve_listing_url("https://elsewhere.example/x", self.ENDPOINT) == "https://elsewhere.example/x"


class TestJobBoardConnector:
    def test_nested_schema_and_folded_metadata(self, http_settings, make_source) -> None:
        connector = JobBoardConnector(http_settings=http_settings)
        payload = {
            "results": [
                {
                    "job_id": 101,
                    "slug": "graduate-trainee-acme",
                    "designation": {"text": "Graduate Trainee"},
                    "organization": {"name": "Acme", "about": "<div>We build&nbsp;things</div>"},
                    "salary": "4-6 LPA",
                    "employment_type": "Full Time",
                    "last_apply_date_display": "30 Nov 2026",
                    "experience": "0-1 years",
                    "location": ["Noida"],
                    "location_type": "hybrid",
                    "job_category": "JOB",
                }
            ]
        }

        candidate = connector.parse_payload(payload, make_source(source_type=IngestionSourceType.CUSTOM))[0]

        assert candidate.source_external_id == "101"
        assert candidate.title == "Graduate Trainee"
        assert candidate.company == "Acme"
        assert candidate.description == (
            "We build things\nSalary: 4-6 LPA\nEmployment: Full Time\nApply by: 30 Nov 2026"
        )
        assert (candidate.experience_min, candidate.experience_max) == (0.0, 1.0)
        assert candidate.apply_link == "https://www.geeksforgeeks.org/jobs/graduate-trainee-acme/"
        assert candidate.locations == ["Noida"]
        assert candidate.work_mode == WorkMode.HYBRID

    @pytest.mark.parametrize(
        ("item_extra", "expected"),
        [
            ({"experience": "fresher"}, (0.0, 0.0)),
            ({"experience_level": "Fresher"}, (0.0, 0.0)),
            ({"experience": "2 years"}, (2.0, 2.0)),
            ({}, (None, None)),
        ],
    )
    def test_experience_variants(self, http_settings, make_source, item_extra, expected) -> None:
        connector = JobBoardConnector(http_settings=http_settings)
        item = {
            "designation": {"text": "Trainee"},
            "organization": {"name": "Initech"},
            "apply_link": "https://initech.example/apply",
            **item_extra,
        }
        candidate = connector.parse_payload([item], make_source())[0]
        assert (candidate.experience_min, candidate.experience_max) == expected
        assert candidate.apply_link == "https://initech.example/apply"

    def test_missing_organization_is_dropped(self, http_settings, make_source) -> None:
        connector = JobBoardConnector(http_settings=http_settings)
        assert connector.parse_payload([{"designation": {"text": "Trainee"}}], make_source()) == []


class TestFetch:
    def test_fetch_sends_bot_headers_and_parses(self, http_settings, make_source, fake_response) -> None:
        session = FakeSession([fake_response(200, {"jobs": [{"title": "Analyst", "company": "Acme"}]})])
        connector = JSONFeedConnector(http_settings=http_settings, session=session)
        source = make_source()

        candidates = connector.fetch_candidates(source)

        assert [candidate.title for candidate in candidates] == ["Analyst"]
        call = session.calls[0]
        assert call["url"] == source.endpoint
        assert call["headers"]["User-Agent"] == INGESTION_USER_AGENT
        assert call["headers"]["Accept"] == "application/json,text/plain,*/*"
        assert call["timeout"] == http_settings.timeout_seconds

    def test_non_retryable_status_raises(self, http_settings, make_source, fake_response) -> None:
        connector = JSONFeedConnector(http_settings=http_settings, session=FakeSession([fake_response(404)]))
        with pytest.raises(SourceFetchError, match="Source responded 404"):
            connector.fetch_candidates(make_source())

    def test_invalid_json_raises(self, http_settings, make_source, fake_response) -> None:
        session = FakeSession([fake_response(200, invalid_json=True)])
        connector = JSONFeedConnector(http_settings=http_settings, session=session)
        with pytest.raises(SourceFetchError, match="not valid JSON"):
            connector.fetch_candidates(make_source())

    def test_network_error_raises(self, http_settings, make_source) -> None:
        session = FakeSession([requests.ConnectionError("connection refused")])
        connector = JSONFeedConnector(http_settings=http_settings, session=session)
        with pytest.raises(SourceFetchError):
            connector.fetch_candidates(make_source())

    def test_transient_failure_is_retried(self, make_source, fake_response, monkeypatch) -> None:
        sleeps: list[float] = []
        monkeypatch.setattr("app.connectors.base.time.sleep", sleeps.append)
        session = FakeSession(
            [
                fake_response(503),
                requests.Timeout("read timed out"),
                fake_response(200, [{"title": "Analyst", "company": "Acme"}]),
            ]
        )
        connector = JSONFeedConnector(
            http_settings=ExternalHTTPSettings(max_retries=2, backoff_initial_seconds=0.5),
            session=session,
        )

        candidates = connector.fetch_candidates(make_source())

        assert len(candidates) == 1
        assert len(session.calls) == 3
        assert sleeps == [0.5, 1.0]


class TestConnectorRegistry:
    def test_dispatch_by_type_tag(self, http_settings) -> None:
        registry = ConnectorRegistry(http_settings=http_settings)
        assert isinstance(registry.get(IngestionSourceType.JSON_FEED), JSONFeedConnector)
        assert isinstance(registry.get("workday"), WorkdayConnector)
        assert isinstance(registry.get(IngestionSourceType.CUSTOM), JobBoardConnector)

    def test_instances_are_reused(self, http_settings) -> None:
        registry = ConnectorRegistry(http_settings=http_settings)
        assert registry.get("JSON_FEED") is registry.get("json_feed")

    def test_unknown_type_raises(self, http_settings) -> None:
        registry = ConnectorRegistry(http_settings=http_settings)
        with pytest.raises(SourceFetchError, match="not implemented"):
            registry.get("RSS")

    def test_register_overrides_builtin(self, http_settings) -> None:
        registry = ConnectorRegistry(http_settings=http_settings)
        registry.register(source_type="custom", connector_class=JSONFeedConnector)
        assert isinstance(registry.get(IngestionSourceType.CUSTOM), JSONFeedConnector)
