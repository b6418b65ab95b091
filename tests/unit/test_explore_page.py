from __future__ import annotations

import json

import pytest

from learnrank.catalog import Category, Exam, Resource
from learnrank.config import CatalogWeights
from learnrank.explore import (
    SECTION_ORDER,
    ExploreRecomputer,
    build_explore_page,
    group_personalized_resources,
    inputs_fingerprint,
    main,
    personalize_resources,
)
from learnrank.matching import rank_catalog
from learnrank.models import UserContext
from learnrank.profile import build_user_context

CTX = UserContext(experience_level="beginner", background="student", skills=["react", "python"], prefers_free=True)

TECH = [
    Category(name="Blockchain", related_skills=("Solidity",), difficulty="advanced"),
    Category(name="Web Development", related_skills=("React",), difficulty="beginner", relevant_backgrounds=("student",)),
    Category(name="AI/ML", related_skills=("Python",), difficulty="intermediate"),
]
EXAMS = [
    Exam(title="GRE", relevant_backgrounds=("student",)),
    Exam(title="GMAT", relevant_backgrounds=("professional",)),
]


def _titles(scored):
    return [getattr(s.item, "title", None) for s in scored]


def test_all_known_sections_present_even_when_missing():
    page = build_explore_page(CTX, {"tech_categories": TECH})
    assert list(page.sections)[: len(SECTION_ORDER)] == list(SECTION_ORDER)
    assert page.section("degrees") == []
    assert page.section("not-a-section") == []


def test_sections_are_ranked_independently():
    together = build_explore_page(CTX, {"tech_categories": TECH, "exams": EXAMS})
    alone = build_explore_page(CTX, {"tech_categories": TECH})
    assert _titles(together.section("tech_categories")) == _titles(alone.section("tech_categories"))
    assert _titles(together.section("tech_categories")) == _titles(rank_catalog(TECH, CTX))
    assert _titles(together.section("exams")) == ["GRE", "GMAT"]


def test_section_limits_apply():
    page = build_explore_page(CTX, {"tech_categories": TECH, "exams": EXAMS}, {"tech_categories": 1, "exams": 0})
    assert _titles(page.section("tech_categories")) == ["Web Development"]
    assert page.section("exams") == []
    assert page.limits["tech_categories"] == 1
    assert page.limits["degrees"] == 8


def test_extra_sections_use_fallback_limit():
    extra = [Category(name=f"Topic {i}") for i in range(15)]
    page = build_explore_page(CTX, {"bootcamps": extra})
    assert len(page.section("bootcamps")) == 10
    assert list(page.sections)[-1] == "bootcamps"


def test_env_limits_are_used(monkeypatch):
    monkeypatch.setenv("LEARNRANK_EXPLORE_LIMITS", "tech_categories=2")
    page = build_explore_page(CTX, {"tech_categories": TECH})
    assert len(page.section("tech_categories")) == 2


def test_search_results_ranked_on_the_page():
    results = [
        Resource(title="Designing Data-Intensive Applications", description="Advanced", type="book"),
        Resource(title="React for Beginners", description="A free course", type="youtube"),
    ]
    page = build_explore_page(CTX, {}, search_results=results)
    assert _titles(page.search_results) == ["React for Beginners", "Designing Data-Intensive Applications"]
    assert build_explore_page(CTX, {}).search_results == []


def test_page_to_dict_is_json_serializable():
    page = build_explore_page(CTX, {"tech_categories": TECH})
    payload = json.loads(json.dumps(page.to_dict()))
    top = payload["sections"]["tech_categories"][0]
    assert top["item"]["name"] == "Web Development"
    assert top["item"]["domain"] == "category"
    assert top["reason"]
    assert payload["sections"]["exams"] == []


# ------------------------------------------------------------------
# personalize / group
# ------------------------------------------------------------------

def test_personalize_and_group_resources(load_json):
    ctx = build_user_context(load_json("profile.json"), load_json("preferences.json"))
    results = [r for r in load_json("search_results.json") if isinstance(r, dict)]

    ordered = personalize_resources(results, ctx)
    assert [r["title"] for r in ordered] == [
        "React for Beginners",
        "Machine Learning Specialization",
        "Designing Data-Intensive Applications",
    ]
    assert [r["title"] for r in personalize_resources(results, ctx, limit=1)] == ["React for Beginners"]

    grouped = group_personalized_resources(results, ctx)
    assert set(grouped) == {"youtube", "course", "book"}
    assert grouped["course"][0]["title"] == "Machine Learning Specialization"


def test_group_uses_other_for_untyped_results():
    grouped = group_personalized_resources([{"title": "Mystery"}], UserContext())
    assert grouped == {"other": [{"title": "Mystery"}]}
    assert personalize_resources([], UserContext()) == []


# ------------------------------------------------------------------
# recomputation guard
# ------------------------------------------------------------------

def test_recomputer_only_rebuilds_on_change():
    guard = ExploreRecomputer()
    catalogs = {"tech_categories": TECH}

    first = guard.refresh(CTX, catalogs)
    again = guard.refresh(CTX, {"tech_categories": list(TECH)})
    assert again is first
    assert guard.recomputations == 1

    guard.refresh(UserContext(skills=["python"]), catalogs)
    assert guard.recomputations == 2

    guard.refresh(UserContext(skills=["python"]), catalogs, {"tech_categories": 1})
    assert guard.recomputations == 3

    guard.invalidate()
    guard.refresh(UserContext(skills=["python"]), catalogs, {"tech_categories": 1})
    assert guard.recomputations == 4


def test_fingerprint_is_stable_and_order_insensitive_for_context():
    a = UserContext(skills=["react", "python"])
    b = UserContext(skills=["python", "react"])
    assert inputs_fingerprint(a, {"exams": EXAMS}) == inputs_fingerprint(b, {"exams": EXAMS})
    assert inputs_fingerprint(a, {"exams": EXAMS}) != inputs_fingerprint(a, {"exams": EXAMS[:1]})


def test_recomputer_rebuilds_when_weights_change():
    guard = ExploreRecomputer()
    catalogs = {"tech_categories": TECH}
    ctx = UserContext(skills=["react"])

    default = guard.refresh(ctx, catalogs)
    heavy = guard.refresh(ctx, catalogs, weights=CatalogWeights(skill_match=40.0))
    assert guard.recomputations == 2
    assert heavy.section("tech_categories")[0].score == 45.0
    assert default.section("tech_categories")[0].score == 9.0


def test_recomputer_passes_and_fingerprints_search_results():
    guard = ExploreRecomputer()
    results = [Resource(title="React for Beginners", description="A free course", type="youtube")]

    plain = guard.refresh(CTX, {})
    assert plain.search_results == []
    page = guard.refresh(CTX, {}, search_results=results)
    assert guard.recomputations == 2
    assert _titles(page.search_results) == ["React for Beginners"]

    assert guard.refresh(CTX, {}, search_results=list(results)) is page
    assert guard.recomputations == 2


# ------------------------------------------------------------------
# CLI
# ------------------------------------------------------------------

def test_cli_json_output(fixtures_dir, capsys):
    main([
        "--profile", str(fixtures_dir / "profile.json"),
        "--preferences", str(fixtures_dir / "preferences.json"),
        "--activity", str(fixtures_dir / "activity.json"),
        "--catalog-dir", str(fixtures_dir / "catalogs"),
        "--search", str(fixtures_dir / "search_results.json"),
        "--limit", "tech_categories=2",
        "--json",
    ])
    payload = json.loads(capsys.readouterr().out)
    tech = payload["sections"]["tech_categories"]
    assert [t["item"]["name"] for t in tech] == ["AI/ML", "Web Development"]
    assert [e["item"]["title"] for e in payload["sections"]["exams"]] == ["CAT", "GRE"]
    assert payload["sections"]["degrees"] == []
    assert payload["search_results"][0]["item"]["title"] == "React for Beginners"
    assert payload["search_results"][0]["score"] == 25.0


def test_cli_human_summary_then_json(fixtures_dir, capsys):
    main(["--catalog-dir", str(fixtures_dir / "catalogs")])
    out = capsys.readouterr().out
    assert "=== LearnRank Explore ===" in out
    assert "Level: unknown" in out
    head, _, tail = out.partition("JSON Output (for agents):")
    assert "Tech Categories:" in head
    assert json.loads(tail)["limits"]["exams"] == 5


def test_cli_missing_profile_exits(tmp_path, capsys):
    with pytest.raises(SystemExit) as exc:
        main(["--profile", str(tmp_path / "nope.json")])
    assert exc.value.code == 2
    assert "Profile file not found" in capsys.readouterr().out


def test_cli_unreadable_inputs_warn_and_continue(tmp_path, capsys):
    bad = tmp_path / "prefs.json"
    bad.write_text("{ nope", encoding="utf-8")
    main(["--preferences", str(bad), "--json"])
    captured = capsys.readouterr()
    assert "WARNING: preferences could not be read" in captured.err
    assert json.loads(captured.out)["sections"]["tech_categories"] == []
