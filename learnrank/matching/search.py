from __future__ import annotations

from typing import Any, List, Tuple

from learnrank.catalog import project
from learnrank.core.text_processing import contains_ci
from learnrank.models import ExperienceLevel, UserContext

# Fixed weights for search-style results; not tunable through config.
SEARCH_BASE = 5
SKILL_HIT = 8
GOAL_HIT = 6
FREE_FOR_FREE_SEEKER = 5
BEGINNER_FRIENDLY = 7
ADVANCED_MATERIAL = 7
BOOK_FOR_MID_LEVEL = 4
CERTIFICATE_COURSE = 6


def _search_signals(result: Any, ctx: UserContext) -> Tuple[int, List[Tuple[int, str]]]:
    rec = project(result)
    title = rec.title.lower()
    desc = rec.description.lower()
    combined = f"{title} {desc}"
    rtype = rec.type
    level = ctx.experience_level

    score = SEARCH_BASE
    signals: List[Tuple[int, str]] = []

    skill_hits = [s for s in sorted(ctx.skills) if contains_ci(combined, s)]
    if skill_hits:
        score += SKILL_HIT * len(skill_hits)
        signals.append((SKILL_HIT * len(skill_hits), f"Covers {', '.join(skill_hits[:2])}"))

    goal_hits = [g for g in sorted(ctx.learning_goals) if len(g) > 3 and contains_ci(combined, g)]
    if goal_hits:
        score += GOAL_HIT * len(goal_hits)
        signals.append((GOAL_HIT * len(goal_hits), "Aligns with your goals"))

    if ctx.prefers_free and "free" in desc:
        score += FREE_FOR_FREE_SEEKER
        signals.append((FREE_FOR_FREE_SEEKER, "Free resource"))

    if level is ExperienceLevel.BEGINNER and (rtype == "youtube" or "beginner" in desc):
        score += BEGINNER_FRIENDLY
        signals.append((BEGINNER_FRIENDLY, "Beginner friendly"))

    if level in (ExperienceLevel.ADVANCED, ExperienceLevel.EXPERT) and ("advanced" in desc or "expert" in desc):
        score += ADVANCED_MATERIAL
        signals.append((ADVANCED_MATERIAL, "In-depth material for your level"))

    if level in (ExperienceLevel.INTERMEDIATE, ExperienceLevel.ADVANCED) and rtype == "book":
        score += BOOK_FOR_MID_LEVEL
        signals.append((BOOK_FOR_MID_LEVEL, "Book for deeper study"))

    if rtype == "course" and "certificate" in desc:
        score += CERTIFICATE_COURSE
        signals.append((CERTIFICATE_COURSE, "Includes a certificate"))

    return score, signals


def score_search_result(result: Any, ctx: UserContext) -> float:
    """
    Keyword/type heuristics for free-text search results.

    base 5; +8 per user skill and +6 per goal (len > 3) found in title+description;
    +5 free for free-seekers; +7 beginner & (youtube or "beginner");
    +7 advanced/expert & ("advanced" or "expert"); +4 intermediate/advanced & book;
    +6 course with "certificate". Case-insensitive, uncapped.
    """
    score, _ = _search_signals(result, ctx)
    return float(score)


def explain_search_result(result: Any, ctx: UserContext) -> str:
    _, signals = _search_signals(result, ctx)
    if not signals:
        return "Recommended for you"
    # strongest signal first; ties keep rule order
    best = max(signals, key=lambda s: s[0])
    return best[1]
