from __future__ import annotations

from learnrank.catalog import (
    CatalogDomain,
    CatalogItem,
    Category,
    Certification,
    Degree,
    Exam,
    LearningPath,
    Resource,
    entry_to_dict,
    project,
    variant_from_dict,
)
from learnrank.models import ExperienceLevel


def test_category_projects_name_and_skills_into_tags():
    item = project(
        Category(
            name="Web Development",
            related_skills=("HTML", "React"),
            difficulty="Beginner",
            relevant_backgrounds=("Student",),
        )
    )
    assert item.title == "Web Development"
    assert item.tags == ("html", "react", "web development")
    assert item.difficulty is ExperienceLevel.BEGINNER
    assert item.relevant_backgrounds == ("student",)
    assert item.education_levels == ()


def test_each_variant_projects_its_audience_fields():
    exam = project(Exam(title="CAT", education_levels=("bachelors",), target_countries=("India",)))
    assert exam.target_countries == ("india",)
    assert exam.education_levels == ("bachelors",)

    cert = project(Certification(title="AWS Cloud Practitioner", related_skills=("AWS",), is_free=False))
    assert cert.tags == ("aws",)
    assert cert.is_free is False

    path = project(LearningPath(title="Frontend Path", related_skills=("React",), education_levels=("self-taught",)))
    assert path.tags == ("react",)
    assert path.education_levels == ("self-taught",)

    degree = project(Degree(title="BSc Computer Science", field_of_study="Computer Science"))
    assert degree.tags == ("computer science",)

    res = project(Resource(title="DDIA", type="Book"))
    assert res.type == "book"


def test_mapping_projection_reads_snake_and_camel_case():
    item = project(
        {
            "name": "Cloud Computing",
            "relatedSkills": ["AWS"],
            "relevantBackgrounds": ["professional"],
            "isFree": "yes",
            "difficulty": "advanced",
        }
    )
    assert item.title == "Cloud Computing"
    assert item.tags == ("aws",)
    assert item.relevant_backgrounds == ("professional",)
    assert item.is_free is True
    assert item.difficulty is ExperienceLevel.ADVANCED


def test_unsupported_items_project_to_empty_record():
    assert project(42) == CatalogItem()
    assert project(None) == CatalogItem()
    assert project("a string") == CatalogItem()


def test_catalog_item_passes_through_unchanged():
    item = CatalogItem(title="X", tags=("a",))
    assert project(item) is item


def test_wrong_typed_fields_degrade_instead_of_raising():
    item = project({"title": 7, "tags": 3, "difficulty": ["hard"], "relevant_backgrounds": "student"})
    assert item.title == ""
    assert item.tags == ()
    assert item.difficulty is None
    assert item.relevant_backgrounds == ("student",)


def test_looks_free_uses_flag_then_description():
    assert CatalogItem(is_free=True).looks_free is True
    assert CatalogItem(is_free=False, description="Free trial").looks_free is False
    assert CatalogItem(description="Completely FREE course").looks_free is True
    assert CatalogItem(description="Paid course").looks_free is False


def test_variant_from_dict_handles_aliases():
    cat = variant_from_dict(CatalogDomain.CATEGORY, {"title": "AI/ML", "relatedSkills": ["Python"], "isTech": "false"})
    assert isinstance(cat, Category)
    assert cat.name == "AI/ML"
    assert cat.related_skills == ("python",)
    assert cat.is_tech is False

    res = variant_from_dict(
        CatalogDomain.RESOURCE,
        {"name": "The Odin Project", "link": "https://www.theodinproject.com/", "rating": "5", "unknown": 1},
    )
    assert isinstance(res, Resource)
    assert res.title == "The Odin Project"
    assert res.url == "https://www.theodinproject.com/"
    assert res.rating is None


def test_entry_to_dict_is_json_friendly():
    d = entry_to_dict(Category(name="Blockchain", related_skills=("solidity",)))
    assert d["domain"] == "category"
    assert d["name"] == "Blockchain"
    assert d["related_skills"] == ["solidity"]
    assert entry_to_dict({"title": "raw"}) == {"title": "raw"}
