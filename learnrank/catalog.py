from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, Union

from learnrank.core.text_processing import normalize_term, normalize_terms, normalize_text
from learnrank.models import ExperienceLevel, parse_bool

logger = logging.getLogger(__name__)


class CatalogDomain(str, Enum):
    CATEGORY = "category"
    EXAM = "exam"
    CERTIFICATION = "certification"
    LEARNING_PATH = "learning_path"
    DEGREE = "degree"
    RESOURCE = "resource"


def _text(value: Any) -> str:
    return normalize_text(value) if isinstance(value, str) else ""


def _optional_bool(value: Any) -> Optional[bool]:
    if value is None:
        return None
    return parse_bool(value)


def _merge_terms(*groups: Any) -> Tuple[str, ...]:
    out = []
    seen = set()
    for g in groups:
        for t in normalize_terms(g):
            if t not in seen:
                out.append(t)
                seen.add(t)
    return tuple(out)


@dataclass(frozen=True)
class CatalogItem:
    """
    The capability record every rankable entity projects to.
    The generic scorer reads nothing else.
    """
    title: str = ""
    description: str = ""
    tags: Tuple[str, ...] = ()
    difficulty: Optional[ExperienceLevel] = None
    relevant_backgrounds: Tuple[str, ...] = ()
    education_levels: Tuple[str, ...] = ()
    target_countries: Tuple[str, ...] = ()
    type: str = ""
    # None => unknown; scorers fall back to looking for "free" in the description
    is_free: Optional[bool] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "title", _text(self.title))
        object.__setattr__(self, "description", _text(self.description))
        object.__setattr__(self, "tags", normalize_terms(self.tags))
        object.__setattr__(self, "difficulty", ExperienceLevel.parse(self.difficulty))
        object.__setattr__(self, "relevant_backgrounds", normalize_terms(self.relevant_backgrounds))
        object.__setattr__(self, "education_levels", normalize_terms(self.education_levels))
        object.__setattr__(self, "target_countries", normalize_terms(self.target_countries))
        object.__setattr__(self, "type", normalize_term(self.type))
        if self.is_free is not None and not isinstance(self.is_free, bool):
            object.__setattr__(self, "is_free", parse_bool(self.is_free))

    @property
    def looks_free(self) -> bool:
        if self.is_free is not None:
            return self.is_free
        return "free" in self.description.lower()


# ---------------------------------------------------------------------------
# Domain variants. Each one carries its own display fields plus the audience
# attributes, and projects itself explicitly via to_catalog_item().
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Category:
    name: str
    description: str = ""
    related_skills: Tuple[str, ...] = ()
    difficulty: Optional[str] = None
    relevant_backgrounds: Tuple[str, ...] = ()
    is_tech: bool = True
    icon: Optional[str] = None

    domain = CatalogDomain.CATEGORY

    @property
    def title(self) -> str:
        return self.name

    def to_catalog_item(self) -> CatalogItem:
        return CatalogItem(
            title=self.name,
            description=self.description,
            # the category label itself is a topic signal for activity matching
            tags=_merge_terms(self.related_skills, self.name),
            difficulty=self.difficulty,
            relevant_backgrounds=self.relevant_backgrounds,
        )


@dataclass(frozen=True)
class Exam:
    title: str
    description: str = ""
    link: Optional[str] = None
    difficulty: Optional[str] = None
    relevant_backgrounds: Tuple[str, ...] = ()
    education_levels: Tuple[str, ...] = ()
    target_countries: Tuple[str, ...] = ()
    category: Optional[str] = None  # graduate | undergraduate | professional

    domain = CatalogDomain.EXAM

    def to_catalog_item(self) -> CatalogItem:
        return CatalogItem(
            title=self.title,
            description=self.description,
            tags=_merge_terms(self.title),
            difficulty=self.difficulty,
            relevant_backgrounds=self.relevant_backgrounds,
            education_levels=self.education_levels,
            target_countries=self.target_countries,
        )


@dataclass(frozen=True)
class Certification:
    title: str
    provider: str = ""
    description: str = ""
    link: Optional[str] = None
    difficulty: Optional[str] = None
    related_skills: Tuple[str, ...] = ()
    relevant_backgrounds: Tuple[str, ...] = ()
    is_free: Optional[bool] = None

    domain = CatalogDomain.CERTIFICATION

    def to_catalog_item(self) -> CatalogItem:
        return CatalogItem(
            title=self.title,
            description=self.description,
            tags=self.related_skills,
            difficulty=self.difficulty,
            relevant_backgrounds=self.relevant_backgrounds,
            is_free=self.is_free,
        )


@dataclass(frozen=True)
class LearningPath:
    title: str
    description: str = ""
    duration: str = ""
    difficulty: Optional[str] = None
    relevant_backgrounds: Tuple[str, ...] = ()
    education_levels: Tuple[str, ...] = ()
    related_skills: Tuple[str, ...] = ()
    target_role: str = ""
    prerequisites: Tuple[str, ...] = ()

    domain = CatalogDomain.LEARNING_PATH

    def to_catalog_item(self) -> CatalogItem:
        return CatalogItem(
            title=self.title,
            description=self.description,
            tags=self.related_skills,
            difficulty=self.difficulty,
            relevant_backgrounds=self.relevant_backgrounds,
            education_levels=self.education_levels,
        )


@dataclass(frozen=True)
class Degree:
    title: str
    description: str = ""
    field_of_study: str = ""
    duration: str = ""
    difficulty: Optional[str] = None
    related_skills: Tuple[str, ...] = ()
    relevant_backgrounds: Tuple[str, ...] = ()
    education_levels: Tuple[str, ...] = ()
    target_countries: Tuple[str, ...] = ()

    domain = CatalogDomain.DEGREE

    def to_catalog_item(self) -> CatalogItem:
        return CatalogItem(
            title=self.title,
            description=self.description,
            tags=_merge_terms(self.related_skills, self.field_of_study),
            difficulty=self.difficulty,
            relevant_backgrounds=self.relevant_backgrounds,
            education_levels=self.education_levels,
            target_countries=self.target_countries,
        )


@dataclass(frozen=True)
class Resource:
    """Search result or featured (trending) resource."""
    title: str
    description: str = ""
    type: str = ""  # youtube | book | course | website | reddit | discord | blog
    url: Optional[str] = None
    author: Optional[str] = None
    provider: Optional[str] = None
    duration: Optional[str] = None
    rating: Optional[float] = None
    difficulty: Optional[str] = None
    related_skills: Tuple[str, ...] = ()
    relevant_backgrounds: Tuple[str, ...] = ()
    is_free: Optional[bool] = None

    domain = CatalogDomain.RESOURCE

    def to_catalog_item(self) -> CatalogItem:
        return CatalogItem(
            title=self.title,
            description=self.description,
            tags=self.related_skills,
            difficulty=self.difficulty,
            relevant_backgrounds=self.relevant_backgrounds,
            type=self.type,
            is_free=self.is_free,
        )


CatalogEntry = Union[Category, Exam, Certification, LearningPath, Degree, Resource]

VARIANTS: Dict[CatalogDomain, type] = {
    CatalogDomain.CATEGORY: Category,
    CatalogDomain.EXAM: Exam,
    CatalogDomain.CERTIFICATION: Certification,
    CatalogDomain.LEARNING_PATH: LearningPath,
    CatalogDomain.DEGREE: Degree,
    CatalogDomain.RESOURCE: Resource,
}


def entry_to_dict(entry: Any) -> Dict[str, Any]:
    """JSON-friendly view of a catalog entry (variants, CatalogItem or raw mappings)."""
    if isinstance(entry, Mapping):
        return dict(entry)
    try:
        d = asdict(entry)
    except TypeError:
        return {"repr": repr(entry)}
    domain = getattr(entry, "domain", None)
    if isinstance(domain, CatalogDomain):
        d["domain"] = domain.value
    if isinstance(d.get("difficulty"), ExperienceLevel):
        d["difficulty"] = d["difficulty"].value
    return {k: (list(v) if isinstance(v, tuple) else v) for k, v in d.items()}


# ---------------------------------------------------------------------------
# Raw records (rows from the data backend, JSON files) -> variants
# ---------------------------------------------------------------------------

# camelCase keys used by the web client -> dataclass field names
_KEY_ALIASES = {
    "relatedSkills": "related_skills",
    "relevantBackgrounds": "relevant_backgrounds",
    "educationLevels": "education_levels",
    "targetCountries": "target_countries",
    "targetRole": "target_role",
    "isFree": "is_free",
    "isTech": "is_tech",
    "fieldOfStudy": "field_of_study",
    "field": "field_of_study",
    "resource_type": "type",
}


def _field_value(name: str, raw: Any) -> Any:
    if name in {"title", "name", "description", "provider", "duration", "target_role", "field_of_study"}:
        return _text(raw)
    if name in {"related_skills", "relevant_backgrounds", "education_levels", "target_countries",
                "prerequisites", "tags"}:
        return normalize_terms(raw)
    if name in {"is_free"}:
        return _optional_bool(raw)
    if name == "is_tech":
        return parse_bool(raw) if raw is not None else True
    if name == "rating":
        return float(raw) if isinstance(raw, (int, float)) and not isinstance(raw, bool) else None
    if name == "type":
        return normalize_term(raw)
    if name == "difficulty":
        level = ExperienceLevel.parse(raw)
        return level.value if level else None
    return raw if isinstance(raw, str) else None


def variant_from_dict(domain: CatalogDomain, data: Mapping[str, Any]) -> CatalogEntry:
    """
    Build the variant for `domain` from a loosely-typed record.
    Wrong-typed fields degrade to empty values instead of raising.
    """
    cls = VARIANTS[domain]
    wanted = set(cls.__dataclass_fields__)
    kwargs: Dict[str, Any] = {}
    for key, raw in data.items():
        name = _KEY_ALIASES.get(key, key)
        if domain is CatalogDomain.RESOURCE and name == "link":
            name = "url"
        if name not in wanted or name in kwargs:
            continue
        kwargs[name] = _field_value(name, raw)

    # required display field
    if domain is CatalogDomain.CATEGORY:
        kwargs["name"] = kwargs.get("name") or _text(data.get("title"))
    else:
        kwargs["title"] = kwargs.get("title") or _text(data.get("name"))
    return cls(**kwargs)


def _project_mapping(data: Mapping[str, Any]) -> CatalogItem:
    get = data.get
    return CatalogItem(
        title=_text(get("title") or get("name")),
        description=_text(get("description")),
        tags=_merge_terms(get("tags"), get("related_skills"), get("relatedSkills"), get("category")),
        difficulty=get("difficulty"),
        relevant_backgrounds=get("relevant_backgrounds", get("relevantBackgrounds")),
        education_levels=get("education_levels", get("educationLevels")),
        target_countries=get("target_countries", get("targetCountries")),
        type=get("type") or get("resource_type"),
        is_free=_optional_bool(get("is_free", get("isFree"))),
    )


def project(item: Any) -> CatalogItem:
    """
    Explicit projection to the shared capability record.

    - variants use their own to_catalog_item()
    - CatalogItem passes through
    - mappings are read by known keys (snake_case or camelCase)
    - anything else (or a variant holding wrong-typed fields) degrades to an
      empty record, which scores at the base value
    """
    if isinstance(item, CatalogItem):
        return item
    projector: Optional[Callable[[], CatalogItem]] = getattr(item, "to_catalog_item", None)
    try:
        if projector is not None and isinstance(item, tuple(VARIANTS.values())):
            return projector()
        if isinstance(item, Mapping):
            return _project_mapping(item)
    except (TypeError, ValueError, AttributeError) as exc:
        logger.debug("Catalog item of type %s could not be projected: %s", type(item).__name__, exc)
        return CatalogItem()
    logger.debug("Unsupported catalog item type %s; scoring as empty record", type(item).__name__)
    return CatalogItem()
