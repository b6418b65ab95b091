from __future__ import annotations

from typing import Iterable, List, Mapping, Optional, Sequence, Tuple

from learnrank.core.text_processing import contains_ci
from learnrank.models import ExperienceLevel

# Containment matching ("react" ~ "react.js") only for terms at least this long,
# so one-letter skills like "c" or "r" don't hit every tag.
_MIN_CONTAINMENT_LEN = 3


def terms_match(a: str, b: str) -> bool:
    if not a or not b:
        return False
    if a == b:
        return True
    shorter, longer = (a, b) if len(a) <= len(b) else (b, a)
    return len(shorter) >= _MIN_CONTAINMENT_LEN and shorter in longer


def skill_overlap(user_skills: Iterable[str], item_tags: Sequence[str]) -> List[str]:
    """
    Item tags (in item order) that match at least one user skill.
    Each tag counts once, so adding skills can only grow the list.
    """
    skills = sorted(set(user_skills or ()))
    if not skills:
        return []
    return [tag for tag in item_tags if any(terms_match(tag, s) for s in skills)]


def audience_match(value: Optional[str], candidates: Sequence[str]) -> bool:
    if not value or not candidates:
        return False
    wanted = value.strip().lower()
    return wanted in candidates


def difficulty_alignment_score(
        user_level: Optional[ExperienceLevel],
        item_level: Optional[ExperienceLevel],
        *,
        exact: float,
        adjacent: float,
) -> Tuple[float, Optional[str]]:
    """
    exact > adjacent > distant (0). Unknown on either side contributes nothing.
    """
    if user_level is None or item_level is None:
        return 0.0, None
    distance = abs(user_level.rank - item_level.rank)
    if distance == 0:
        return exact, f"Perfect match for {user_level.value} level"
    if distance == 1:
        return adjacent, "Good match for your level"
    return 0.0, None


def goal_hits(goals: Iterable[str], text: str) -> List[str]:
    """Goals (length > 3) that appear as substrings of text, in sorted order for stable output."""
    return [g for g in sorted(set(goals or ())) if len(g) > 3 and contains_ci(text, g)]


def activity_overlap(weights: Mapping[str, float], item_terms: Sequence[str]) -> Tuple[float, List[str]]:
    """Sum of recent-activity weights for item terms the user recently engaged with."""
    if not weights or not item_terms:
        return 0.0, []
    hits = [t for t in dict.fromkeys(item_terms) if t in weights]
    return float(sum(weights[t] for t in hits)), hits
