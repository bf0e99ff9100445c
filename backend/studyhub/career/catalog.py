from __future__ import annotations

import logging
import math
from typing import Iterable

from studyhub.career.models import JobRole, ProjectIdea, RoleSkillRequirement, Skill
from studyhub.career.profile import SkillProfile
from studyhub.system_metrics import increment_metric

logger = logging.getLogger("studyhub.career.catalog")


def _coerce_weight(value) -> float | None:
    try:
        weight = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(weight) or weight <= 0:
        return None
    # Scores scale weights by 100; a weight that overflows there is unusable.
    if not math.isfinite(weight * 100.0):
        return None
    return weight


def _group_by_role(rows: Iterable[dict] | None) -> dict[str, list[dict]]:
    grouped: dict[str, list[dict]] = {}
    for row in rows or ():
        if not isinstance(row, dict):
            continue
        role_id = str(row.get("role_id") or "")
        if role_id:
            grouped.setdefault(role_id, []).append(row)
    return grouped


def _requirements(role_id: str, rows: list[dict]) -> tuple[RoleSkillRequirement, ...]:
    requirements: list[RoleSkillRequirement] = []
    for row in rows:
        name = str(row.get("skill_name") or "").strip()
        weight = _coerce_weight(row.get("weight"))
        if not name or weight is None:
            logger.warning(
                "dropping role skill row | role_id=%s skill=%r weight=%r",
                role_id,
                row.get("skill_name"),
                row.get("weight"),
            )
            increment_metric("catalog_rows_dropped")
            continue
        requirements.append(RoleSkillRequirement(skill_name=name, weight=weight))
    return tuple(requirements)


def _projects(rows: list[dict]) -> tuple[ProjectIdea, ...]:
    return tuple(
        ProjectIdea(
            project_name=str(row.get("project_name") or "").strip(),
            project_description=str(row.get("project_description") or ""),
        )
        for row in rows
        if str(row.get("project_name") or "").strip()
    )


def build_roles(
    role_rows: Iterable[dict] | None,
    skill_rows: Iterable[dict] | None = None,
    project_rows: Iterable[dict] | None = None,
) -> list[JobRole]:
    """Join role, role-skill and project rows into typed catalog entries."""
    skills_by_role = _group_by_role(skill_rows)
    projects_by_role = _group_by_role(project_rows)

    roles: list[JobRole] = []
    for row in role_rows or ():
        if not isinstance(row, dict):
            continue
        role_id = str(row.get("id") or "")
        role_name = str(row.get("role_name") or "").strip()
        if not role_id or not role_name:
            logger.warning("dropping job role row without id or name | id=%r", row.get("id"))
            increment_metric("catalog_rows_dropped")
            continue
        roles.append(
            JobRole(
                id=role_id,
                role_name=role_name,
                description=str(row.get("description") or ""),
                skills=_requirements(role_id, skills_by_role.get(role_id, [])),
                projects=_projects(projects_by_role.get(role_id, [])),
            )
        )
    return roles


def role_from_dict(payload: dict, fallback_id: str = "") -> JobRole:
    """Build a role from its nested JSON form (``skills`` and ``projects`` inline)."""
    role_id = str(payload.get("id") or fallback_id)
    nested_skills = [dict(item, role_id=role_id) for item in payload.get("skills") or () if isinstance(item, dict)]
    nested_projects = [dict(item, role_id=role_id) for item in payload.get("projects") or () if isinstance(item, dict)]
    built = build_roles([dict(payload, id=role_id)], nested_skills, nested_projects)
    if not built:
        raise ValueError("Job role requires an id and a role_name")
    return built[0]


def parse_skills(payload: Iterable[dict] | None) -> tuple[Skill, ...]:
    """Validate a request's skill list; raises SkillProfileError on blanks or duplicates."""
    profile = SkillProfile()
    for item in payload or ():
        profile.add_skill(item.get("skill_name") or item.get("name") or "", item.get("confidence", 50))
    return profile.snapshot()
