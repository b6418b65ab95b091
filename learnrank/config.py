from __future__ import annotations

import math
import os
from dataclasses import dataclass, fields
from typing import Dict


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    # non-finite or negative values fall back to the default
    if not math.isfinite(value) or value < 0:
        return default
    return value


# --- Activity folding ---

# Recency half-life for activity events, measured from the newest event (or an explicit "now").
ACTIVITY_HALF_LIFE_HOURS: float = _env_float("LEARNRANK_ACTIVITY_HALF_LIFE_HOURS", 72.0) or 72.0

# Matches the page size the activity source returns (newest first).
ACTIVITY_MAX_EVENTS: int = max(0, _env_int("LEARNRANK_ACTIVITY_MAX_EVENTS", 50))

# Recency factor for events without a usable timestamp.
ACTIVITY_UNDATED_FACTOR = 0.25

ACTIVITY_TYPE_MULTIPLIERS: Dict[str, float] = {
    "view": 1.0,
    "search": 1.0,
    "like": 1.5,
    "comment": 1.5,
    "save": 2.0,
    "bookmark": 2.0,
    "enroll": 2.0,
    "complete": 2.5,
}
ACTIVITY_DEFAULT_MULTIPLIER = 1.0

# --- Explore page ---

DEFAULT_EXPLORE_LIMITS: Dict[str, int] = {
    "tech_categories": 8,
    "non_tech_categories": 5,
    "exams": 5,
    "certifications": 10,
    "learning_paths": 6,
    "degrees": 8,
    "trending_resources": 6,
}

# Sections the caller invents get this many entries.
FALLBACK_SECTION_LIMIT = 10


def parse_limits(raw: str | None) -> Dict[str, int]:
    """
    Parses: "exams=3, degrees=4" -> {"exams": 3, "degrees": 4}
    Malformed parts are skipped.
    """
    if not raw:
        return {}
    out: Dict[str, int] = {}
    for part in raw.split(","):
        part = part.strip()
        if not part or "=" not in part:
            continue
        name, value = part.split("=", 1)
        name = name.strip().lower()
        try:
            limit = int(value.strip())
        except ValueError:
            continue
        if name and limit >= 0:
            out[name] = limit
    return out


def load_explore_limits() -> Dict[str, int]:
    limits = dict(DEFAULT_EXPLORE_LIMITS)
    limits.update(parse_limits(os.getenv("LEARNRANK_EXPLORE_LIMITS")))
    return limits


# --- Generic catalog scoring ---

@dataclass(frozen=True)
class CatalogWeights:
    """
    Additive bonuses for the generic catalog scorer.
    Every weight is non-negative so that dropping a signal can never raise a score.
    """
    base: float = 5.0
    skill_match: float = 4.0
    background_match: float = 6.0
    education_match: float = 4.0
    country_match: float = 3.0
    difficulty_exact: float = 3.0
    difficulty_adjacent: float = 1.5
    goal_match: float = 2.0
    free_match: float = 2.0
    activity_scale: float = 2.0


def load_catalog_weights() -> CatalogWeights:
    """Defaults, each overridable by LEARNRANK_WEIGHT_<NAME> (e.g. LEARNRANK_WEIGHT_SKILL_MATCH=5)."""
    defaults = CatalogWeights()
    values = {
        f.name: _env_float(f"LEARNRANK_WEIGHT_{f.name.upper()}", getattr(defaults, f.name))
        for f in fields(CatalogWeights)
    }
    return CatalogWeights(**values)


# Resolved once at import; scorers never read the environment per call.
CATALOG_WEIGHTS: CatalogWeights = load_catalog_weights()
