from __future__ import annotations

import pytest

from learnrank.skills import DEFAULT_SKILLS, DOMAIN_SKILLS, get_skills_for_domain, list_domains


def test_table_shape():
    assert len(DOMAIN_SKILLS) == 16
    assert all(len(skills) == 10 for skills in DOMAIN_SKILLS.values())
    assert len(DEFAULT_SKILLS) == 10
    assert list_domains()[0] == "AI/ML"


def test_exact_match():
    assert get_skills_for_domain("DevOps") == list(DOMAIN_SKILLS["DevOps"])


def test_case_insensitive_match():
    assert get_skills_for_domain("ai/ml") == list(DOMAIN_SKILLS["AI/ML"])


@pytest.mark.parametrize(
    "label, domain",
    [
        ("AI/ML fundamentals", "AI/ML"),
        ("devops engineer", "DevOps"),
        ("web", "Web Development"),
        ("gre", "Exam Prep - GRE"),
    ],
)
def test_substring_match_either_direction(label, domain):
    assert get_skills_for_domain(label) == list(DOMAIN_SKILLS[domain])


def test_first_domain_in_table_order_wins():
    # "development" is contained in several keys; Web Development comes first
    assert get_skills_for_domain("development") == list(DOMAIN_SKILLS["Web Development"])


def test_unmatched_label_gets_default_list():
    assert get_skills_for_domain("Underwater Basket Weaving") == list(DEFAULT_SKILLS)


@pytest.mark.parametrize("label", [None, "", "   ", 42])
def test_empty_or_invalid_label_returns_empty(label):
    assert get_skills_for_domain(label) == []


def test_returned_list_is_a_fresh_copy():
    first = get_skills_for_domain("AI/ML")
    first.append("Prompt Engineering")
    first.clear()
    assert get_skills_for_domain("AI/ML") == list(DOMAIN_SKILLS["AI/ML"])
    assert get_skills_for_domain("AI/ML") is not get_skills_for_domain("AI/ML")
