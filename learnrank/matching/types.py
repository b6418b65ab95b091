from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Generic, List, Optional, TypeVar

from learnrank.catalog import entry_to_dict

T = TypeVar("T")


@dataclass(frozen=True)
class MatchBreakdown:
    """Per-signal contributions of one generic catalog score. Sum of the parts == total_score."""
    total_score: float
    base_score: float
    skill_score: float = 0.0
    background_score: float = 0.0
    education_score: float = 0.0
    country_score: float = 0.0
    difficulty_score: float = 0.0
    goal_score: float = 0.0
    free_score: float = 0.0
    activity_score: float = 0.0
    # Human-friendly explanation payload (stable, deterministic)
    details: Dict[str, Any] = field(default_factory=dict)
    # Ordered strongest-first; first entry is what the UI badge shows
    reasons: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class ScoredItem(Generic[T]):
    item: T
    score: float
    reason: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "item": entry_to_dict(self.item),
            "score": self.score,
            "reason": self.reason,
        }
