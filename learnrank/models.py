from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from learnrank.core.text_processing import normalize_term, normalize_terms, normalize_text


class ExperienceLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"

    @property
    def rank(self) -> int:
        return _LEVEL_RANK[self]

    @classmethod
    def parse(cls, value: Any) -> Optional["ExperienceLevel"]:
        return _parse_enum(cls, value)


_LEVEL_RANK = {
    ExperienceLevel.BEGINNER: 1,
    ExperienceLevel.INTERMEDIATE: 2,
    ExperienceLevel.ADVANCED: 3,
    ExperienceLevel.EXPERT: 4,
}


class Background(str, Enum):
    STUDENT = "student"
    PROFESSIONAL = "professional"
    SELF_LEARNER = "self-learner"
    CAREER_SWITCHER = "career-switcher"
    FREELANCER = "freelancer"

    @classmethod
    def parse(cls, value: Any) -> Optional["Background"]:
        return _parse_enum(cls, value)


class EducationLevel(str, Enum):
    HIGH_SCHOOL = "high-school"
    BACHELORS = "bachelors"
    MASTERS = "masters"
    PHD = "phd"
    BOOTCAMP = "bootcamp"
    SELF_TAUGHT = "self-taught"

    @classmethod
    def parse(cls, value: Any) -> Optional["EducationLevel"]:
        return _parse_enum(cls, value)


def _parse_enum(cls, value: Any):
    if isinstance(value, cls):
        return value
    term = normalize_term(value).replace("_", "-").replace(" ", "-")
    if not term:
        return None
    try:
        return cls(term)
    except ValueError:
        return None


def parse_bool(value: Any) -> bool:
    """Loose truthiness for flags coming from JSON rows ("true", 1, "yes")."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value == 1
    if isinstance(value, str):
        return value.strip().lower() in {"true", "1", "yes", "y", "on"}
    return False


def parse_timestamp(value: Any) -> Optional[datetime]:
    """ISO-8601 string or datetime -> aware UTC datetime; anything else -> None."""
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str) and value.strip():
        raw = value.strip()
        # fromisoformat only accepts a trailing "Z" from 3.11 on
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(raw)
        except ValueError:
            return None
    else:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _as_mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _text(value: Any) -> str:
    return normalize_text(value) if isinstance(value, str) else ""


@dataclass(frozen=True)
class ProfileRecord:
    """
    Stored profile attributes as returned by the profile source.
    All fields optional; from_dict never raises on odd shapes.
    """
    experience_level: Optional[ExperienceLevel] = None
    skills: Tuple[str, ...] = ()
    bio: str = ""
    job_title: str = ""
    company: str = ""
    country: Optional[str] = None
    background: Optional[Background] = None
    education_level: Optional[EducationLevel] = None
    goals: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "ProfileRecord":
        data = _as_mapping(data)
        # onboarding stores background/education/goals inside a nested learning_path object
        learning_path = _as_mapping(data.get("learning_path") or data.get("learningPath"))
        country = _text(data.get("country") or data.get("location")) or None
        return cls(
            experience_level=ExperienceLevel.parse(data.get("experience_level") or data.get("experienceLevel")),
            skills=normalize_terms(data.get("skills")),
            bio=_text(data.get("bio")),
            job_title=_text(data.get("job_title") or data.get("jobTitle")),
            company=_text(data.get("company")),
            country=country,
            background=Background.parse(learning_path.get("background") or data.get("background")),
            education_level=EducationLevel.parse(
                learning_path.get("education")
                or data.get("education_level")
                or data.get("educationLevel")
            ),
            goals=_text(learning_path.get("goals") or data.get("learning_goals") or data.get("goals")),
        )


@dataclass(frozen=True)
class PreferenceRecord:
    """Explicit, user-set preferences. Country/education here override the profile."""
    prefers_free: bool = False
    interests: Tuple[str, ...] = ()
    country: Optional[str] = None
    education_level: Optional[EducationLevel] = None

    @classmethod
    def from_dict(cls, data: Any) -> "PreferenceRecord":
        data = _as_mapping(data)
        return cls(
            prefers_free=parse_bool(data.get("prefers_free", data.get("prefersFree"))),
            interests=normalize_terms(
                data.get("interests") or data.get("learning_goals") or data.get("learningGoals")
            ),
            country=_text(data.get("country")) or None,
            education_level=EducationLevel.parse(data.get("education_level") or data.get("educationLevel")),
        )


@dataclass(frozen=True)
class ActivityEvent:
    """One recent interaction from the activity source (newest first)."""
    activity_type: str
    metadata: Mapping[str, Any] = field(default_factory=dict)
    created_at: Optional[datetime] = None
    post_id: Optional[str] = None
    roadmap_id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> "ActivityEvent":
        data = _as_mapping(data)
        return cls(
            activity_type=normalize_term(data.get("activity_type") or data.get("type")),
            metadata=dict(_as_mapping(data.get("metadata"))),
            created_at=parse_timestamp(data.get("created_at") or data.get("timestamp")),
            post_id=data.get("post_id") if isinstance(data.get("post_id"), str) else None,
            roadmap_id=data.get("roadmap_id") if isinstance(data.get("roadmap_id"), str) else None,
        )


@dataclass(frozen=True)
class UserContext:
    """
    Normalized snapshot of a user's interests; the only input the scorers read
    besides the item itself. Rebuilt by the caller whenever a source signal changes.
    """
    experience_level: Optional[ExperienceLevel] = None
    background: Optional[Background] = None
    education_level: Optional[EducationLevel] = None
    country: Optional[str] = None
    skills: frozenset = frozenset()
    learning_goals: frozenset = frozenset()
    prefers_free: bool = False
    recent_activity_weight: Mapping[str, float] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        # plain strings are accepted for the enumerated fields; unknown values become None
        object.__setattr__(self, "experience_level", ExperienceLevel.parse(self.experience_level))
        object.__setattr__(self, "background", Background.parse(self.background))
        object.__setattr__(self, "education_level", EducationLevel.parse(self.education_level))
        object.__setattr__(self, "skills", frozenset(normalize_terms(self.skills)))
        # goals of 3 characters or fewer are noise ("ai", "go", "the")
        goals = [g for g in normalize_terms(self.learning_goals) if len(g) > 3]
        object.__setattr__(self, "learning_goals", frozenset(goals))
        country = normalize_text(self.country) if isinstance(self.country, str) else ""
        object.__setattr__(self, "country", country or None)
        weights: Dict[str, float] = {}
        for k, v in dict(self.recent_activity_weight or {}).items():
            term = normalize_term(k)
            if term and isinstance(v, (int, float)) and not isinstance(v, bool) and math.isfinite(v) and v > 0:
                weights[term] = weights.get(term, 0.0) + float(v)
        object.__setattr__(self, "recent_activity_weight", MappingProxyType(dict(sorted(weights.items()))))

    def fingerprint_key(self) -> Tuple[Any, ...]:
        """Order-independent, hashable view used for change detection."""
        return (
            self.experience_level.value if self.experience_level else None,
            self.background.value if self.background else None,
            self.education_level.value if self.education_level else None,
            self.country,
            tuple(sorted(self.skills)),
            tuple(sorted(self.learning_goals)),
            self.prefers_free,
            tuple(self.recent_activity_weight.items()),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "experience_level": self.experience_level.value if self.experience_level else None,
            "background": self.background.value if self.background else None,
            "education_level": self.education_level.value if self.education_level else None,
            "country": self.country,
            "skills": sorted(self.skills),
            "learning_goals": sorted(self.learning_goals),
            "prefers_free": self.prefers_free,
            "recent_activity_weight": dict(self.recent_activity_weight),
        }
