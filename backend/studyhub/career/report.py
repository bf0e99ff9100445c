from __future__ import annotations

from typing import Sequence

from studyhub.career.engine import collect_missing_skills, compute_fit, recommend_projects
from studyhub.career.models import CareerReport, JobRole, Skill
from studyhub.career.recommendations import compute_recommendations


def build_career_report(skills: Sequence[Skill], roles: Sequence[JobRole]) -> CareerReport:
    ranked = compute_fit(skills, roles)
    return CareerReport(
        results=ranked,
        recommendations=compute_recommendations(ranked),
        missing_skills=collect_missing_skills(ranked),
        projects=recommend_projects(ranked),
    )
