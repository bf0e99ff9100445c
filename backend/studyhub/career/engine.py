from __future__ import annotations

import math
import sys
from typing import Iterable, Sequence

from core.config import CAREER_TOP_ROLES
from studyhub.career.models import (
    FitResult,
    JobRole,
    MatchedSkill,
    MissingSkill,
    ProjectRecommendation,
    Skill,
    fit_band,
)

__all__ = [
    "compute_fit",
    "collect_missing_skills",
    "recommend_projects",
    "fit_band",
    "normalize_skill_name",
    "round_half_up",
]


def normalize_skill_name(name: str) -> str:
    return (name or "").strip().lower()


def round_half_up(value: float) -> int:
    # Matches the rounding the web client displays (x.5 always goes up).
    # Overflowed sums saturate instead of raising; NaN rounds to 0.
    value = float(value)
    if math.isnan(value):
        return 0
    if math.isinf(value):
        return sys.maxsize if value > 0 else -sys.maxsize
    return int(math.floor(value + 0.5))


def _index_skills(skills: Iterable[Skill]) -> dict[str, Skill]:
    index: dict[str, Skill] = {}
    for skill in skills:
        key = normalize_skill_name(skill.name)
        if key and key not in index:
            index[key] = skill
    return index


def _score_role(role: JobRole, index: dict[str, Skill]) -> FitResult:
    fit_fraction = 0.0
    matched: list[MatchedSkill] = []
    missing: list[MissingSkill] = []

    for requirement in role.skills:
        weight = float(requirement.weight)
        user_skill = index.get(normalize_skill_name(requirement.skill_name))
        if user_skill is not None:
            fit_fraction += (user_skill.confidence / 100.0) * weight
            matched.append(
                MatchedSkill(
                    skill_name=requirement.skill_name,
                    confidence=user_skill.confidence,
                    weight=weight,
                )
            )
        else:
            missing.append(
                MissingSkill(
                    skill_name=requirement.skill_name,
                    weight=weight,
                    impact=weight * 100.0,
                )
            )

    missing.sort(key=lambda item: item.impact, reverse=True)
    return FitResult(
        role=role,
        fit_score=round_half_up(fit_fraction * 100.0),
        matched_skills=matched,
        missing_skills=missing,
    )


def compute_fit(skills: Sequence[Skill], roles: Sequence[JobRole]) -> list[FitResult]:
    """Score every role against the user's rated skills, best fit first.

    Each matched requirement contributes ``confidence / 100 * weight``; the
    sum is scaled to a percentage-like integer. Weights are not normalised,
    so a catalog whose weights sum above 1 can produce scores above 100.
    Both sorts are stable, so ties keep catalog order.
    """
    index = _index_skills(skills or ())
    results = [_score_role(role, index) for role in roles or ()]
    results.sort(key=lambda result: result.fit_score, reverse=True)
    return results


def collect_missing_skills(ranked: Sequence[FitResult], top_n: int = CAREER_TOP_ROLES) -> list[str]:
    seen: set[str] = set()
    names: list[str] = []
    for result in list(ranked or ())[:top_n]:
        for missing in result.missing_skills:
            if missing.skill_name in seen:
                continue
            seen.add(missing.skill_name)
            names.append(missing.skill_name)
    return names


def recommend_projects(ranked: Sequence[FitResult], top_n: int = CAREER_TOP_ROLES) -> list[ProjectRecommendation]:
    return [
        ProjectRecommendation(
            project_name=project.project_name,
            project_description=project.project_description,
            role_name=result.role.role_name,
            fit_score=result.fit_score,
        )
        for result in list(ranked or ())[:top_n]
        for project in result.role.projects
    ]
