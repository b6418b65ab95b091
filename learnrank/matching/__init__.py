from .engine import (
    explain_item,
    rank_and_truncate,
    rank_catalog,
    rank_search_results,
    score_breakdown,
    score_catalog_item,
    score_item,
)
from .search import explain_search_result, score_search_result
from .types import MatchBreakdown, ScoredItem

__all__ = [
    "explain_item",
    "explain_search_result",
    "rank_and_truncate",
    "rank_catalog",
    "rank_search_results",
    "score_breakdown",
    "score_catalog_item",
    "score_item",
    "score_search_result",
    "MatchBreakdown",
    "ScoredItem",
]
