from __future__ import annotations

from typing import Sequence

from core.config import CAREER_MAX_RECOMMENDATIONS, CAREER_TOP_MISSING, CAREER_TOP_ROLES
from studyhub.career.engine import round_half_up
from studyhub.career.models import FitResult, LearningRecommendation

# Share of a missing skill's weight assumed to be gained once it is learned.
ACQUISITION_EFFECTIVENESS = 80
MAX_SCORE = 100


def _candidates(
    ranked: Sequence[FitResult],
    top_roles: int,
    top_missing: int,
) -> list[LearningRecommendation]:
    candidates: list[LearningRecommendation] = []
    for result in list(ranked or ())[:top_roles]:
        for missing in result.missing_skills[:top_missing]:
            new_score = min(MAX_SCORE, result.fit_score + round_half_up(missing.weight * ACQUISITION_EFFECTIVENESS))
            candidates.append(
                LearningRecommendation(
                    skill_name=missing.skill_name,
                    current_score=result.fit_score,
                    new_score=new_score,
                    improvement=new_score - result.fit_score,
                    role_name=result.role.role_name,
                )
            )
    return candidates


def _dedupe(candidates: list[LearningRecommendation]) -> list[LearningRecommendation]:
    kept: list[LearningRecommendation] = []
    for candidate in candidates:
        existing = next((item for item in kept if item.skill_name == candidate.skill_name), None)
        if existing is None:
            kept.append(candidate)
        elif existing.improvement < candidate.improvement:
            # Replacement moves to the back, which decides order among equal improvements.
            kept = [item for item in kept if item.skill_name != candidate.skill_name]
            kept.append(candidate)
    return kept


def compute_recommendations(
    ranked: Sequence[FitResult],
    top_roles: int = CAREER_TOP_ROLES,
    top_missing: int = CAREER_TOP_MISSING,
    limit: int = CAREER_MAX_RECOMMENDATIONS,
) -> list[LearningRecommendation]:
    """Highest-leverage skills to learn next for the best-fitting roles.

    ``ranked`` must already be ordered by :func:`compute_fit`; only its
    leading roles and their leading missing skills are considered.
    """
    unique = _dedupe(_candidates(ranked, top_roles, top_missing))
    unique.sort(key=lambda item: item.improvement, reverse=True)
    return unique[:limit]
