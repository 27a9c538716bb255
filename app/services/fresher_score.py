"""
app/services/fresher_score.py

Deterministic entry-level suitability score for ingested candidates.
"""

from __future__ import annotations

from app.domain.opportunity import Candidate, FresherScore
from db.models.opportunity import OpportunityType


class FresherScoreModel:
    """Additive keyword / experience heuristic.

    Every rule that fires contributes its weight and appends its flag, so the
    audit trail can explain any score. The result is unbounded in both
    directions and depends on nothing but the candidate.
    """

    EXP_MAX_LE_1_WEIGHT: int = 35
    EXP_MIN_GE_2_WEIGHT: int = -35
    FRESHER_KEYWORD_WEIGHT: int = 20
    PASSOUT_YEAR_WEIGHT: int = 15
    SENIOR_KEYWORD_WEIGHT: int = -40
    INTERNSHIP_TYPE_WEIGHT: int = 10

    POSITIVE_KEYWORDS: tuple[str, ...] = (
        "fresher",
        "entry level",
        "graduate",
        "trainee",
        "intern",
        "campus",
        "off-campus",
        "off campus",
    )
    SENIOR_KEYWORDS: tuple[str, ...] = ("senior", "lead", "manager", "architect", "principal")

    # Missing bounds never fire the experience rules.
    _UNKNOWN_MAX: float = 99.0
    _UNKNOWN_MIN: float = 0.0

    def compute(self, candidate: Candidate) -> FresherScore:
        content = f"{candidate.title} {candidate.description or ''}".lower()
        experience_max = (
            candidate.experience_max if candidate.experience_max is not None else self._UNKNOWN_MAX
        )
        experience_min = (
            candidate.experience_min if candidate.experience_min is not None else self._UNKNOWN_MIN
        )

        score = 0
        flags: list[str] = []

        if experience_max <= 1:
            score += self.EXP_MAX_LE_1_WEIGHT
            flags.append("exp_max_le_1")

        if experience_min >= 2:
            score += self.EXP_MIN_GE_2_WEIGHT
            flags.append("exp_min_ge_2")

        if any(keyword in content for keyword in self.POSITIVE_KEYWORDS):
            score += self.FRESHER_KEYWORD_WEIGHT
            flags.append("fresher_keyword")

        if candidate.allowed_passout_years:
            score += self.PASSOUT_YEAR_WEIGHT
            flags.append("passout_year_present")

        if any(keyword in content for keyword in self.SENIOR_KEYWORDS):
            score += self.SENIOR_KEYWORD_WEIGHT
            flags.append("senior_keyword")

        if candidate.type == OpportunityType.INTERNSHIP:
            score += self.INTERNSHIP_TYPE_WEIGHT
            flags.append("internship_type")

        return FresherScore(score=score, flags=flags)


_DEFAULT_MODEL = FresherScoreModel()


def score_candidate(candidate: Candidate) -> FresherScore:
    return _DEFAULT_MODEL.compute(candidate)
