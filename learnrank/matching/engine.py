from __future__ import annotations

import logging
import math
from typing import Any, Callable, List, Optional, Sequence, Tuple, TypeVar

from learnrank import config
from learnrank.catalog import project
from learnrank.config import CatalogWeights
from learnrank.models import UserContext
from .scoring import (
    activity_overlap,
    audience_match,
    difficulty_alignment_score,
    goal_hits,
    skill_overlap,
)
from .search import explain_search_result, score_search_result
from .types import MatchBreakdown, ScoredItem

logger = logging.getLogger(__name__)

T = TypeVar("T")

Scorer = Callable[[Any, UserContext], float]
Explainer = Callable[[Any, UserContext], Optional[str]]

DEFAULT_REASON = "Recommended for you"


def score_breakdown(item: Any, ctx: UserContext, weights: Optional[CatalogWeights] = None) -> MatchBreakdown:
    """
    Generic catalog score: a fixed base plus independent, additive, non-negative
    bonuses. Removing any one signal (from the item or the context) can only
    lower or hold the total.
    """
    w = weights or config.CATALOG_WEIGHTS
    rec = project(item)

    matched_skills = skill_overlap(ctx.skills, rec.tags)
    s_skill = w.skill_match * len(matched_skills)

    background = ctx.background.value if ctx.background else None
    s_background = w.background_match if audience_match(background, rec.relevant_backgrounds) else 0.0

    education = ctx.education_level.value if ctx.education_level else None
    s_education = w.education_match if audience_match(education, rec.education_levels) else 0.0

    s_country = w.country_match if audience_match(ctx.country, rec.target_countries) else 0.0

    s_difficulty, difficulty_reason = difficulty_alignment_score(
        ctx.experience_level,
        rec.difficulty,
        exact=w.difficulty_exact,
        adjacent=w.difficulty_adjacent,
    )

    matched_goals = goal_hits(ctx.learning_goals, f"{rec.title} {rec.description}")
    s_goal = w.goal_match * len(matched_goals)

    s_free = w.free_match if (ctx.prefers_free and rec.looks_free) else 0.0

    activity_sum, activity_hits = activity_overlap(ctx.recent_activity_weight, rec.tags)
    s_activity = w.activity_scale * activity_sum

    total = w.base + s_skill + s_background + s_education + s_country + s_difficulty + s_goal + s_free + s_activity

    # (contribution, reason) in a fixed signal order; ties keep this order
    candidates: List[Tuple[float, str]] = []
    if s_difficulty > 0 and difficulty_reason:
        candidates.append((s_difficulty, difficulty_reason))
    if matched_skills:
        if len(matched_skills) >= 2:
            candidates.append((s_skill, f"Matches your skills: {', '.join(matched_skills[:2])}"))
        else:
            candidates.append((s_skill, f"Related to {matched_skills[0]}"))
    if s_background > 0 and background:
        candidates.append((s_background, f"Perfect for {background}s"))
    if s_goal > 0:
        candidates.append((s_goal, "Aligns with your goals"))
    if s_education > 0 and education:
        candidates.append((s_education, f"Fits your {education} education"))
    if s_country > 0 and ctx.country:
        candidates.append((s_country, f"Relevant in {ctx.country}"))
    if s_free > 0:
        candidates.append((s_free, "Free to start"))
    if s_activity > 0 and activity_hits:
        candidates.append((s_activity, f"Because you explored {activity_hits[0]}"))

    ranked_reasons = [r for _, r in sorted(candidates, key=lambda c: c[0], reverse=True)]

    return MatchBreakdown(
        total_score=round(total, 4),
        base_score=w.base,
        skill_score=s_skill,
        background_score=s_background,
        education_score=s_education,
        country_score=s_country,
        difficulty_score=s_difficulty,
        goal_score=s_goal,
        free_score=s_free,
        activity_score=round(s_activity, 4),
        details={
            "matched_skills": matched_skills,
            "matched_goals": matched_goals,
            "activity_hits": activity_hits,
            "difficulty": rec.difficulty.value if rec.difficulty else None,
        },
        reasons=ranked_reasons or [DEFAULT_REASON],
    )


def score_item(item: Any, ctx: UserContext, weights: Optional[CatalogWeights] = None) -> float:
    return score_breakdown(item, ctx, weights).total_score


def explain_item(item: Any, ctx: UserContext, weights: Optional[CatalogWeights] = None) -> str:
    return score_breakdown(item, ctx, weights).reasons[0]


def score_catalog_item(item: T, ctx: UserContext, weights: Optional[CatalogWeights] = None) -> ScoredItem[T]:
    b = score_breakdown(item, ctx, weights)
    return ScoredItem(item=item, score=b.total_score, reason=b.reasons[0])


def _safe_score(scorer: Scorer, item: Any, ctx: UserContext, idx: int) -> float:
    try:
        value = scorer(item, ctx)
    except Exception as exc:
        # one bad item must not abort the batch
        logger.warning("Scorer failed on item #%d (%s); ranking it last", idx, type(exc).__name__)
        return 0.0
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value) or value < 0:
        logger.warning("Scorer returned unusable value for item #%d; treating as 0", idx)
        return 0.0
    return float(value)


def _safe_reason(explain: Explainer, item: Any, ctx: UserContext, idx: int) -> Optional[str]:
    try:
        reason = explain(item, ctx)
    except Exception as exc:
        logger.warning("Explainer failed on item #%d (%s)", idx, type(exc).__name__)
        return None
    return reason if isinstance(reason, str) else None


def rank_and_truncate(
        items: Sequence[T],
        scorer: Scorer,
        ctx: UserContext,
        limit: Optional[int] = None,
        *,
        explain: Optional[Explainer] = None,
) -> List[ScoredItem[T]]:
    """
    Score each item independently, stable-sort by score (descending), keep the
    first `limit` entries (all when limit is None, none when limit <= 0).
    Equal scores keep their input order.
    """
    if not items:
        return []
    if limit is not None and limit <= 0:
        return []

    scored = [
        ScoredItem(
            item=item,
            score=_safe_score(scorer, item, ctx, idx),
            reason=_safe_reason(explain, item, ctx, idx) if explain is not None else None,
        )
        for idx, item in enumerate(items)
    ]
    # list.sort is stable; reverse=True keeps equal elements in original order
    scored.sort(key=lambda s: s.score, reverse=True)
    return scored if limit is None else scored[:limit]


def rank_catalog(
        items: Sequence[T],
        ctx: UserContext,
        limit: Optional[int] = None,
        *,
        weights: Optional[CatalogWeights] = None,
) -> List[ScoredItem[T]]:
    w = weights or config.CATALOG_WEIGHTS
    return rank_and_truncate(
        items,
        lambda item, c: score_item(item, c, w),
        ctx,
        limit,
        explain=lambda item, c: explain_item(item, c, w),
    )


def rank_search_results(results: Sequence[T], ctx: UserContext, limit: Optional[int] = None) -> List[ScoredItem[T]]:
    return rank_and_truncate(results, score_search_result, ctx, limit, explain=explain_search_result)
