from __future__ import annotations

import unittest

from app.config import IngestionSettings
from app.domain.errors import ConfigurationError
from app.domain.opportunity import Candidate, WriteOutcome
from app.repositories.memory import InMemoryOpportunityStore
from app.services.draft_writer import DraftWriter
from db.models.opportunity import OpportunityStatus, OpportunityType


class TestDraftWriter(unittest.TestCase):
    def setUp(self) -> None:
        self.store = InMemoryOpportunityStore()
        self.writer = DraftWriter(
            opportunities=self.store,
            settings=IngestionSettings(default_admin_id="admin-1"),
        )

    def test_creates_draft(self) -> None:
        candidate = Candidate(title="Trainee", company="Acme", apply_link="https://acme.example/1")

        result = self.writer.write_or_skip(candidate, source_name="Feed", score=60)

        self.assertEqual(result.outcome, WriteOutcome.CREATED)
        stored = self.store.postings[result.posting_id]
        self.assertEqual(stored.status, OpportunityStatus.DRAFT)
        self.assertEqual(stored.draft.notes_highlights, "[AUTO-INGEST:Feed] fresherScore=60")

    def test_rejects_missing_link_for_regular_job(self) -> None:
        candidate = Candidate(title="Trainee", company="Acme", type=OpportunityType.JOB)

        result = self.writer.write_or_skip(candidate, source_name="Feed", score=60)

        self.assertEqual(result.outcome, WriteOutcome.REJECTED)
        self.assertEqual(self.store.postings, {})

    def test_walkin_without_link_is_drafted(self) -> None:
        candidate = Candidate(title="Walk-in Drive", company="Acme", type=OpportunityType.WALKIN)

        result = self.writer.write_or_skip(candidate, source_name="Feed", score=60)

        self.assertEqual(result.outcome, WriteOutcome.CREATED)

    def test_dedups_on_exact_link(self) -> None:
        existing = self.store.add_posting(
            title="Trainee",
            company="Acme",
            apply_link="https://acme.example/1",
        )
        candidate = Candidate(title="Trainee (repost)", company="Acme", apply_link="https://acme.example/1")

        result = self.writer.write_or_skip(candidate, source_name="Feed", score=60)

        self.assertEqual(result.outcome, WriteOutcome.DEDUPED)
        self.assertEqual(result.posting_id, existing)
        self.assertEqual(len(self.store.postings), 1)

    def test_deleted_posting_does_not_dedup(self) -> None:
        from datetime import datetime, timezone

        self.store.add_posting(
            title="Trainee",
            company="Acme",
            apply_link="https://acme.example/1",
            deleted_at=datetime(2026, 1, 1, tzinfo=timezone.utc),
        )
        candidate = Candidate(title="Trainee", company="Acme", apply_link="https://acme.example/1")

        result = self.writer.write_or_skip(candidate, source_name="Feed", score=60)

        self.assertEqual(result.outcome, WriteOutcome.CREATED)

    def test_missing_owner_is_a_configuration_error(self) -> None:
        writer = DraftWriter(opportunities=self.store, settings=IngestionSettings(default_admin_id=None))
        candidate = Candidate(title="Trainee", company="Acme", apply_link="https://acme.example/2")

        with self.assertRaises(ConfigurationError):
            writer.write_or_skip(candidate, source_name="Feed", score=60)
        self.assertEqual(self.store.postings, {})


if __name__ == "__main__":
    unittest.main()
