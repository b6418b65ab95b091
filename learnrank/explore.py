from __future__ import annotations

import argparse
import hashlib
import json
import logging
import sys
import time
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

from learnrank import config
from learnrank.catalog import entry_to_dict, project
from learnrank.config import CatalogWeights
from learnrank.io.loaders import SEARCH_SECTION, SECTION_DOMAINS, load_catalog_dir, load_json_file, records_to_entries
from learnrank.matching.engine import rank_catalog, rank_search_results
from learnrank.matching.types import ScoredItem
from learnrank.models import UserContext
from learnrank.profile import build_user_context

logger = logging.getLogger(__name__)

# Display order of the explore page.
SECTION_ORDER = (
    "tech_categories",
    "non_tech_categories",
    "exams",
    "certifications",
    "learning_paths",
    "degrees",
    "trending_resources",
)


@dataclass(frozen=True)
class ExplorePage:
    sections: Dict[str, List[ScoredItem[Any]]]
    limits: Dict[str, int]
    duration_ms: int = 0
    search_results: List[ScoredItem[Any]] = field(default_factory=list)

    def section(self, name: str) -> List[ScoredItem[Any]]:
        return self.sections.get(name, [])

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sections": {name: [s.to_dict() for s in items] for name, items in self.sections.items()},
            "search_results": [s.to_dict() for s in self.search_results],
            "limits": dict(self.limits),
            "duration_ms": self.duration_ms,
        }


def _resolve_limits(overrides: Optional[Mapping[str, int]]) -> Dict[str, int]:
    limits = config.load_explore_limits()
    for name, value in (overrides or {}).items():
        if isinstance(value, int) and not isinstance(value, bool):
            limits[name] = value
    return limits


def build_explore_page(
        ctx: UserContext,
        catalogs: Mapping[str, Sequence[Any]],
        limits: Optional[Mapping[str, int]] = None,
        *,
        search_results: Optional[Sequence[Any]] = None,
        weights: Optional[CatalogWeights] = None,
) -> ExplorePage:
    """
    Rank every catalog section against one context. Each section is an
    independent rank call; a section never sees another section's results.
    Known sections are always present (empty when their catalog is missing).
    """
    start = time.time()
    resolved = _resolve_limits(limits)
    w = weights or config.CATALOG_WEIGHTS

    names = list(SECTION_ORDER) + sorted(n for n in catalogs if n not in SECTION_ORDER)
    sections: Dict[str, List[ScoredItem[Any]]] = {}
    for name in names:
        items = catalogs.get(name) or []
        limit = resolved.get(name, config.FALLBACK_SECTION_LIMIT)
        sections[name] = rank_catalog(list(items), ctx, limit, weights=w)
        logger.debug("Ranked section %s: %d candidates -> %d shown", name, len(items), len(sections[name]))

    ranked_search: List[ScoredItem[Any]] = []
    if search_results:
        ranked_search = rank_search_results(list(search_results), ctx, resolved.get("search_results"))

    return ExplorePage(
        sections=sections,
        limits=resolved,
        duration_ms=int((time.time() - start) * 1000),
        search_results=ranked_search,
    )


def personalize_resources(results: Sequence[Any], ctx: UserContext, limit: Optional[int] = None) -> List[Any]:
    """Search results reordered by the search scorer (items only)."""
    return [s.item for s in rank_search_results(list(results or []), ctx, limit)]


def group_personalized_resources(results: Sequence[Any], ctx: UserContext) -> Dict[str, List[Any]]:
    """Personalized order, bucketed by resource type ("other" when missing). Rank order kept per bucket."""
    grouped: Dict[str, List[Any]] = {}
    for item in personalize_resources(results, ctx):
        rtype = project(item).type or "other"
        grouped.setdefault(rtype, []).append(item)
    return grouped


def inputs_fingerprint(
        ctx: UserContext,
        catalogs: Mapping[str, Sequence[Any]],
        limits: Optional[Mapping[str, int]] = None,
        *,
        search_results: Optional[Sequence[Any]] = None,
        weights: Optional[CatalogWeights] = None,
) -> str:
    """
    Stable digest of everything the explore page depends on.
    Catalog entries are fingerprinted via their JSON view, so equal content hashes equal.
    """
    payload = {
        "ctx": ctx.fingerprint_key(),
        "weights": asdict(weights or config.CATALOG_WEIGHTS),
        "search_results": [entry_to_dict(e) for e in (search_results or [])],
        "catalogs": {
            name: [entry_to_dict(e) for e in (catalogs.get(name) or [])]
            for name in sorted(catalogs)
        },
        "limits": dict(sorted(_resolve_limits(limits).items())),
    }
    raw = json.dumps(payload, sort_keys=True, default=repr)
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()[:16]


class ExploreRecomputer:
    """
    Caller-side guard around build_explore_page: recompute only when the
    inputs changed since the last call.
    """

    def __init__(self) -> None:
        self._fingerprint: Optional[str] = None
        self._page: Optional[ExplorePage] = None
        self.recomputations = 0

    def refresh(
            self,
            ctx: UserContext,
            catalogs: Mapping[str, Sequence[Any]],
            limits: Optional[Mapping[str, int]] = None,
            *,
            search_results: Optional[Sequence[Any]] = None,
            weights: Optional[CatalogWeights] = None,
    ) -> ExplorePage:
        fp = inputs_fingerprint(ctx, catalogs, limits, search_results=search_results, weights=weights)
        if self._page is not None and fp == self._fingerprint:
            return self._page
        self._page = build_explore_page(ctx, catalogs, limits, search_results=search_results, weights=weights)
        self._fingerprint = fp
        self.recomputations += 1
        return self._page

    def invalidate(self) -> None:
        self._fingerprint = None
        self._page = None


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------


def _title_of(item: Any) -> str:
    return project(item).title or "(untitled)"


def print_human_summary(page: ExplorePage, ctx: UserContext) -> None:
    print("\n=== LearnRank Explore ===")
    level = ctx.experience_level.value if ctx.experience_level else "unknown"
    background = ctx.background.value if ctx.background else "unknown"
    print(f"Level: {level} | Background: {background} | Skills: {len(ctx.skills)}")
    print(f"Duration: {page.duration_ms}ms")

    for name, items in page.sections.items():
        if not items:
            continue
        print(f"\n{name.replace('_', ' ').title()}:")
        for idx, s in enumerate(items, start=1):
            reason = f"  ({s.reason})" if s.reason else ""
            print(f"  {idx}) {_title_of(s.item)}  score: {s.score}{reason}")

    if page.search_results:
        print("\nSearch Results:")
        for idx, s in enumerate(page.search_results, start=1):
            reason = f"  ({s.reason})" if s.reason else ""
            print(f"  {idx}) {_title_of(s.item)}  score: {s.score}{reason}")


def _parse_limit_args(values: Sequence[str]) -> Dict[str, int]:
    return config.parse_limits(",".join(values or []))


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="LearnRank personalized explore page")
    parser.add_argument("--profile", type=str, default="", help="Path to a profile.json")
    parser.add_argument("--preferences", type=str, default="", help="Optional path to preferences.json")
    parser.add_argument("--activity", type=str, default="", help="Optional path to activity.json (newest first)")
    parser.add_argument("--catalog-dir", type=str, default="", help="Directory holding <section>.json catalogs")
    parser.add_argument("--search", type=str, default="", help="Optional JSON list of search results to rank")
    parser.add_argument("--limit", action="append", default=[], help="Section limit override, e.g. exams=3")
    parser.add_argument("--json", action="store_true", help="Print JSON only (machine-readable)")
    parser.add_argument("--verbose", action="store_true", help="Debug logging on stderr")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="[LearnRank] %(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    if args.profile and not Path(args.profile).exists():
        print(f"\n[LearnRank] Profile file not found: {args.profile}")
        print("Tip: pass an absolute path, or omit --profile to rank with an empty profile\n")
        raise SystemExit(2)

    profile = load_json_file(args.profile or None)
    preferences = load_json_file(args.preferences or None)
    activity = load_json_file(args.activity or None)
    for label, loaded in (("profile", profile), ("preferences", preferences), ("activity", activity)):
        if loaded.path and loaded.source == "none":
            print(f"[LearnRank] WARNING: {label} could not be read, continuing without it", file=sys.stderr)

    ctx = build_user_context(
        profile.data,
        preferences.data,
        activity.data if isinstance(activity.data, list) else None,
    )

    catalogs = load_catalog_dir(args.catalog_dir or None)
    search = records_to_entries(SECTION_DOMAINS[SEARCH_SECTION], load_json_file(args.search or None).data)

    page = build_explore_page(ctx, catalogs, _parse_limit_args(args.limit), search_results=search)

    if args.json:
        print(json.dumps(page.to_dict(), indent=2))
    else:
        print_human_summary(page, ctx)
        print("\nJSON Output (for agents):")
        print(json.dumps(page.to_dict(), indent=2))


if __name__ == "__main__":
    main()
