from dataclasses import dataclass, field, asdict
from typing import List, Tuple

STRONG_FIT_THRESHOLD = 70
MODERATE_FIT_THRESHOLD = 40


def fit_band(score: int) -> str:
    if score >= STRONG_FIT_THRESHOLD:
        return "strong"
    if score >= MODERATE_FIT_THRESHOLD:
        return "moderate"
    return "low"


@dataclass(frozen=True)
class Skill:
    name: str
    confidence: int


@dataclass(frozen=True)
class RoleSkillRequirement:
    skill_name: str
    weight: float


@dataclass(frozen=True)
class ProjectIdea:
    project_name: str
    project_description: str = ""


@dataclass(frozen=True)
class JobRole:
    id: str
    role_name: str
    description: str = ""
    skills: Tuple[RoleSkillRequirement, ...] = ()
    projects: Tuple[ProjectIdea, ...] = ()

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class MatchedSkill:
    skill_name: str
    confidence: int
    weight: float


@dataclass
class MissingSkill:
    skill_name: str
    weight: float
    impact: float


@dataclass
class FitResult:
    role: JobRole
    fit_score: int
    matched_skills: List[MatchedSkill] = field(default_factory=list)
    missing_skills: List[MissingSkill] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class LearningRecommendation:
    skill_name: str
    current_score: int
    new_score: int
    improvement: int
    role_name: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class ProjectRecommendation:
    project_name: str
    project_description: str
    role_name: str
    fit_score: int

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class CareerReport:
    results: List[FitResult]
    recommendations: List[LearningRecommendation]
    missing_skills: List[str]
    projects: List[ProjectRecommendation]

    def to_dict(self) -> dict:
        payload = asdict(self)
        for item, result in zip(payload["results"], self.results):
            item["fit_band"] = fit_band(result.fit_score)
        return payload
