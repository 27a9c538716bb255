from __future__ import annotations

import unittest
import uuid

from app.domain.opportunity import Candidate
from app.mappers.opportunity_mapper import build_draft, generate_slug, provenance_note
from db.models.opportunity import OpportunityType, WorkMode


class TestGenerateSlug(unittest.TestCase):
    def test_title_company_and_short_id(self) -> None:
        posting_id = uuid.UUID("1a2b3c4d-0000-4000-8000-000000000000")
        self.assertEqual(
            generate_slug("Software Engineer", "Google", posting_id),
            "software-engineer-at-google-1a2b3c4d",
        )

    def test_punctuation_removed_and_hyphens_collapsed(self) -> None:
        self.assertEqual(
            generate_slug("  C++ / Backend -- Developer! ", "Acme, Inc."),
            "c-backend-developer-at-acme-inc",
        )

    def test_parts_are_truncated(self) -> None:
        slug = generate_slug("a" * 80, "b" * 40)
        title_part, company_part = slug.split("-at-")
        self.assertEqual(len(title_part), 50)
        self.assertEqual(len(company_part), 30)


class TestBuildDraft(unittest.TestCase):
    def test_defaults_and_provenance(self) -> None:
        candidate = Candidate(
            title="Graduate Trainee",
            company="Acme",
            type=OpportunityType.JOB,
            apply_link="https://acme.example/jobs/1",
            work_mode=WorkMode.REMOTE,
            experience_max=0,
            allowed_passout_years=[2025],
            required_skills=["SQL"],
        )

        draft = build_draft(
            candidate,
            source_name="Acme Careers",
            score=55,
            owner_id="admin-1",
            default_location="India",
        )

        self.assertEqual(draft.locations, ["India"])
        self.assertEqual(draft.allowed_degrees, ["DEGREE"])
        self.assertEqual(draft.posted_by_user_id, "admin-1")
        self.assertEqual(draft.notes_highlights, "[AUTO-INGEST:Acme Careers] fresherScore=55")
        self.assertTrue(draft.slug.startswith("graduate-trainee-at-acme-"))
        self.assertTrue(draft.slug.endswith(str(draft.id)[:8]))
        self.assertEqual(draft.allowed_passout_years, [2025])
        self.assertEqual(draft.work_mode, WorkMode.REMOTE)

    def test_explicit_locations_are_kept(self) -> None:
        candidate = Candidate(title="Analyst", company="Acme", locations=["Pune", "Remote"])
        draft = build_draft(
            candidate,
            source_name="Feed",
            score=40,
            owner_id="admin-1",
            default_location="India",
        )
        self.assertEqual(draft.locations, ["Pune", "Remote"])

    def test_provenance_note(self) -> None:
        self.assertEqual(provenance_note("GfG", -5), "[AUTO-INGEST:GfG] fresherScore=-5")


if __name__ == "__main__":
    unittest.main()
