from studyhub.career.engine import compute_fit, fit_band
from studyhub.career.profile import SkillProfile, SkillProfileError
from studyhub.career.recommendations import compute_recommendations
from studyhub.career.report import build_career_report

__all__ = [
    "SkillProfile",
    "SkillProfileError",
    "build_career_report",
    "compute_fit",
    "compute_recommendations",
    "fit_band",
]
