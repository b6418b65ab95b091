"""
LearnRank: personalization and ranking for learning catalogs.

Pure, synchronous scoring functions; callers fetch the inputs and decide when
to recompute.
"""
from learnrank.explore import (
    ExplorePage,
    ExploreRecomputer,
    build_explore_page,
    group_personalized_resources,
    personalize_resources,
)
from learnrank.matching import (
    ScoredItem,
    rank_and_truncate,
    rank_catalog,
    rank_search_results,
    score_item,
    score_search_result,
)
from learnrank.models import UserContext
from learnrank.profile import build_user_context
from learnrank.skills import get_skills_for_domain

__all__ = [
    "ExplorePage",
    "ExploreRecomputer",
    "ScoredItem",
    "UserContext",
    "build_explore_page",
    "build_user_context",
    "get_skills_for_domain",
    "group_personalized_resources",
    "personalize_resources",
    "rank_and_truncate",
    "rank_catalog",
    "rank_search_results",
    "score_item",
    "score_search_result",
]
