from __future__ import annotations

import logging
import math
from threading import Lock
from typing import Iterable

from studyhub.career.engine import normalize_skill_name, round_half_up
from studyhub.career.models import Skill

DEFAULT_CONFIDENCE = 50

logger = logging.getLogger("studyhub.career.profile")


class SkillProfileError(ValueError):
    pass


def _clamp_confidence(value) -> int:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise SkillProfileError(f"Invalid confidence: {value!r}")
    if not math.isfinite(number):
        raise SkillProfileError(f"Invalid confidence: {value!r}")
    return max(0, min(100, round_half_up(number)))


class SkillProfile:
    """Editable list of a user's rated skills, unique by case-insensitive name."""

    def __init__(self, skills: Iterable[Skill] | None = None):
        self._lock = Lock()
        self._skills: list[Skill] = []
        for skill in skills or ():
            self.add_skill(skill.name, skill.confidence)

    @classmethod
    def from_rows(cls, rows: Iterable[dict]) -> "SkillProfile":
        profile = cls()
        for row in rows or ():
            if not isinstance(row, dict):
                continue
            name = str(row.get("skill_name") or row.get("name") or "").strip()
            if not name or profile.get(name) is not None:
                continue
            try:
                profile.add_skill(name, row.get("confidence", DEFAULT_CONFIDENCE))
            except SkillProfileError as exc:
                logger.warning("skipping stored skill | name=%s err=%s", name, exc)
        return profile

    def __len__(self) -> int:
        return len(self._skills)

    def _position(self, name: str) -> int:
        key = normalize_skill_name(name)
        for idx, skill in enumerate(self._skills):
            if normalize_skill_name(skill.name) == key:
                return idx
        return -1

    def get(self, name: str) -> Skill | None:
        with self._lock:
            idx = self._position(name)
            return self._skills[idx] if idx >= 0 else None

    def add_skill(self, name: str, confidence=DEFAULT_CONFIDENCE) -> Skill:
        cleaned = str(name or "").strip()
        if not cleaned:
            raise SkillProfileError("Please enter a skill name")
        skill = Skill(name=cleaned, confidence=_clamp_confidence(confidence))
        with self._lock:
            if self._position(cleaned) >= 0:
                raise SkillProfileError(f"Skill already exists: {cleaned}")
            self._skills.append(skill)
        return skill

    def update_confidence(self, name: str, confidence) -> Skill:
        value = _clamp_confidence(confidence)
        with self._lock:
            idx = self._position(name)
            if idx < 0:
                raise SkillProfileError(f"Unknown skill: {name}")
            updated = Skill(name=self._skills[idx].name, confidence=value)
            self._skills[idx] = updated
        return updated

    def remove_skill(self, name: str) -> None:
        with self._lock:
            idx = self._position(name)
            if idx < 0:
                raise SkillProfileError(f"Unknown skill: {name}")
            del self._skills[idx]

    def snapshot(self) -> tuple[Skill, ...]:
        with self._lock:
            return tuple(self._skills)

    def to_rows(self, user_id: str) -> list[dict]:
        return [
            {"user_id": user_id, "skill_name": skill.name, "confidence": skill.confidence}
            for skill in self.snapshot()
        ]
