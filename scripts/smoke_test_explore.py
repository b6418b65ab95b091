from __future__ import annotations

from pathlib import Path
from pprint import pprint

from learnrank import build_explore_page, build_user_context, get_skills_for_domain
from learnrank.io.loaders import SEARCH_SECTION, SECTION_DOMAINS, load_catalog_dir, load_json_file, records_to_entries

FIXTURES = Path(__file__).resolve().parent.parent / "tests" / "fixtures"


def main() -> int:
    # --- Preflight ---
    if not (FIXTURES / "catalogs").is_dir():
        print(f"ERROR: fixture catalogs not found under {FIXTURES}")
        return 2

    print("=== LearnRank Smoke Test: Explore ===")
    print(f"Fixtures: {FIXTURES}")
    print("")

    # --- Context ---
    print(">>> Building user context...")
    ctx = build_user_context(
        load_json_file(str(FIXTURES / "profile.json")).data,
        load_json_file(str(FIXTURES / "preferences.json")).data,
        load_json_file(str(FIXTURES / "activity.json")).data,
    )
    pprint(ctx.to_dict())
    print("")

    # --- Explore page ---
    print(">>> Ranking fixture catalogs...")
    catalogs = load_catalog_dir(str(FIXTURES / "catalogs"))
    search = records_to_entries(
        SECTION_DOMAINS[SEARCH_SECTION],
        load_json_file(str(FIXTURES / "search_results.json")).data,
    )
    page = build_explore_page(ctx, catalogs, search_results=search)
    for name, items in page.sections.items():
        print(f"{name}: {len(items)}")
    if page.search_results:
        print("Top search result:")
        pprint(page.search_results[0].to_dict())
    print("")

    # --- Basic invariants ---
    print(">>> Running basic invariants...")
    for items in list(page.sections.values()) + [page.search_results]:
        scores = [s.score for s in items]
        assert scores == sorted(scores, reverse=True)
        assert all(s >= 0 for s in scores)
    assert get_skills_for_domain("ai/ml fundamentals")
    assert get_skills_for_domain(None) == []
    print("OK ✅")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
