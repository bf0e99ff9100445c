from typing import Literal

from pydantic import BaseModel, Field


class SkillIn(BaseModel):
    skill_name: str
    confidence: float = 50


class RoleSkillIn(BaseModel):
    skill_name: str
    weight: float


class ProjectIn(BaseModel):
    project_name: str
    project_description: str = ""


class JobRoleIn(BaseModel):
    id: str | None = None
    role_name: str
    description: str = ""
    skills: list[RoleSkillIn] = Field(default_factory=list)
    projects: list[ProjectIn] = Field(default_factory=list)


class SkillsUpdateRequest(BaseModel):
    skills: list[SkillIn] = Field(default_factory=list)


class CareerReportRequest(BaseModel):
    skills: list[SkillIn] = Field(default_factory=list)
    roles: list[JobRoleIn] | None = None


class MindMapLayoutRequest(BaseModel):
    mind_map: dict | None = None
    content: str | None = None
    center_x: float = Field(400.0, allow_inf_nan=False)
    center_y: float = Field(300.0, allow_inf_nan=False)
    mode: Literal["2d", "3d"] = "2d"
