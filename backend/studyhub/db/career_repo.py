import asyncio
import logging
from typing import Iterable

from studyhub.career.catalog import build_roles
from studyhub.career.models import JobRole, Skill
from studyhub.career.profile import SkillProfile
from studyhub.db.supabase import supabase
from studyhub.system_metrics import increment_metric


logger = logging.getLogger("studyhub.db.career_repo")


def _get_client():
    return supabase


def _select_all(client, table: str, **filters) -> list[dict]:
    query = client.table(table).select("*")
    for column, value in filters.items():
        query = query.eq(column, value)
    res = query.execute()
    return list(getattr(res, "data", None) or [])


def fetch_job_roles() -> list[JobRole]:
    """
    Empty catalog if Supabase is unavailable
    """
    client = _get_client()
    if not client:
        return []
    try:
        role_rows = _select_all(client, "job_roles")
        skill_rows = _select_all(client, "job_role_skills")
        project_rows = _select_all(client, "role_projects")
    except Exception as exc:
        increment_metric("repo_failures")
        logger.warning("fetch_job_roles failed | err=%s", exc)
        return []
    return build_roles(role_rows, skill_rows, project_rows)


def fetch_user_skills(user_id: str) -> list[Skill]:
    """
    Empty profile if Supabase is unavailable
    """
    client = _get_client()
    if not client:
        return []
    try:
        rows = _select_all(client, "user_skills", user_id=user_id)
    except Exception as exc:
        increment_metric("repo_failures")
        logger.warning("fetch_user_skills failed | user_id=%s err=%s", user_id, exc)
        return []
    return list(SkillProfile.from_rows(rows).snapshot())


def replace_user_skills(user_id: str, skills: Iterable[Skill]) -> bool:
    """
    Delete the stored profile then insert the new one. False when nothing was written.
    """
    client = _get_client()
    if not client:
        return False

    rows = SkillProfile(skills).to_rows(user_id)
    try:
        client.table("user_skills").delete().eq("user_id", user_id).execute()
        if rows:
            client.table("user_skills").insert(rows).execute()
    except Exception as exc:
        increment_metric("repo_failures")
        logger.warning("replace_user_skills failed | user_id=%s err=%s", user_id, exc)
        return False
    return True


async def fetch_job_roles_async() -> list[JobRole]:
    return await asyncio.to_thread(fetch_job_roles)


async def fetch_user_skills_async(user_id: str) -> list[Skill]:
    return await asyncio.to_thread(fetch_user_skills, user_id)


async def replace_user_skills_async(user_id: str, skills: Iterable[Skill]) -> bool:
    return await asyncio.to_thread(replace_user_skills, user_id, list(skills))
