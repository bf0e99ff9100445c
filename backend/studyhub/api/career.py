import time

from fastapi import APIRouter, HTTPException, Request

from core.logger import log_event
from studyhub.auth import get_user_id_async
from studyhub.career.catalog import parse_skills, role_from_dict
from studyhub.career import SkillProfileError, build_career_report
from studyhub.db.career_repo import fetch_job_roles_async, fetch_user_skills_async, replace_user_skills_async
from studyhub.schemas import CareerReportRequest, SkillsUpdateRequest
from studyhub.system_metrics import increment_metric, observe_report_latency_ms

router = APIRouter(prefix="/api/career")


def _skills_to_dict(skills) -> list[dict]:
    return [{"skill_name": skill.name, "confidence": skill.confidence} for skill in skills]


@router.get("/roles")
async def list_roles():
    roles = await fetch_job_roles_async()
    return {"roles": [role.to_dict() for role in roles]}


@router.get("/skills")
async def get_skills(request: Request):
    user_id = await get_user_id_async(request)
    skills = await fetch_user_skills_async(user_id)
    return {"skills": _skills_to_dict(skills)}


@router.put("/skills")
async def save_skills(body: SkillsUpdateRequest, request: Request):
    user_id = await get_user_id_async(request)
    try:
        skills = parse_skills(item.model_dump() for item in body.skills)
    except SkillProfileError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    saved = await replace_user_skills_async(user_id, skills)
    if not saved:
        raise HTTPException(status_code=503, detail="Failed to save skills")

    log_event("career", "skills_saved", user_id, skill_count=len(skills))
    return {"skills": _skills_to_dict(skills)}


@router.post("/report")
async def career_report(body: CareerReportRequest):
    try:
        skills = parse_skills(item.model_dump() for item in body.skills)
    except SkillProfileError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    if body.roles is None:
        roles = await fetch_job_roles_async()
    else:
        try:
            roles = [
                role_from_dict(item.model_dump(), fallback_id=str(idx + 1))
                for idx, item in enumerate(body.roles)
            ]
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc))

    started = time.perf_counter()
    report = build_career_report(skills, roles)
    observe_report_latency_ms((time.perf_counter() - started) * 1000.0)
    increment_metric("fit_reports_computed")

    top = report.results[0] if report.results else None
    log_event(
        "career",
        "report_computed",
        "",
        role_count=len(roles),
        skill_count=len(skills),
        top_role=top.role.role_name if top else None,
        top_score=top.fit_score if top else None,
    )
    return report.to_dict()
