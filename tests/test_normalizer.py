"""Tests for coercing parsed model output into CVRecord."""

from __future__ import annotations

import pytest

from cv_portfolio.config import SKILL_CATEGORIES
from cv_portfolio.cv_pipeline.normalizer import normalize_cv, normalize_skills
from cv_portfolio.schemas.cv_record import CVRecord


@pytest.mark.parametrize(
    "skills",
    [
        None,
        {},
        {"Backend": ["Python"]},
        {category: ["x"] for category in SKILL_CATEGORIES},
        {"Backend": ["Go"], "Cooking": ["Pasta"], "Underwater Basket Weaving": []},
        "Python, Go",
    ],
)
def test_all_fourteen_categories_always_present(skills) -> None:
    record = normalize_cv({"skills": skills})
    assert list(record.skills) == list(SKILL_CATEGORIES)
    assert len(record.skills) == 14


def test_unknown_categories_are_dropped() -> None:
    skills = normalize_skills({"Backend": ["Go"], "Cooking": ["Pasta"]})
    assert "Cooking" not in skills
    assert skills["Backend"] == ["Go"]


def test_category_names_match_loosely() -> None:
    skills = normalize_skills({"cloud/devops": ["AWS"], "AI/Tools": ["LangChain"], "version control": ["Git"]})
    assert skills["Cloud / DevOps"] == ["AWS"]
    assert skills["AI / Tools"] == ["LangChain"]
    assert skills["Version Control"] == ["Git"]


def test_skill_items_cleaned() -> None:
    skills = normalize_skills({"Backend": ["Python", " Python ", "", None, 3, "Go"], "Testing": "pytest, tox"})
    assert skills["Backend"] == ["Python", "3", "Go"]
    assert skills["Testing"] == ["pytest", "tox"]


def test_missing_fields_get_defaults() -> None:
    record = normalize_cv({})
    assert record == CVRecord()
    assert record.name == ""
    assert record.experience == []
    assert record.contact.email == ""
    assert record.contact.location == ""


def test_non_object_input_gives_empty_record() -> None:
    assert normalize_cv(["not", "an", "object"]) == CVRecord()
    assert normalize_cv(None) == CVRecord()


def test_scalars_coerced_to_strings() -> None:
    record = normalize_cv({"name": None, "experience_years": 7, "position": ["x"], "github": True})
    assert record.name == ""
    assert record.experience_years == "7"
    assert record.position == ""
    assert record.github == ""


def test_experience_description_string_becomes_list() -> None:
    record = normalize_cv(
        {
            "experience": [
                {"company": "Acme", "title": "Engineer", "start": "2019", "end": "2021", "description": "Built APIs"},
                {"company": "Beta", "role": "Lead", "description": ["Led team", "", "Hired 4"]},
                "Freelance consulting",
                42,
            ]
        }
    )
    first, second, third = record.experience
    assert first.role == "Engineer"
    assert first.start_date == "2019"
    assert first.end_date == "2021"
    assert first.description == ["Built APIs"]
    assert second.description == ["Led team", "Hired 4"]
    assert third.description == ["Freelance consulting"]


def test_projects_tech_list_is_joined() -> None:
    record = normalize_cv({"projects": [{"name": "Ledger", "tech": ["Python", "Kafka"], "description": ["a", "b"]}]})
    project = record.projects[0]
    assert project.title == "Ledger"
    assert project.tech == "Python, Kafka"
    assert project.description == "a b"


def test_loose_lists_keep_strings_and_objects() -> None:
    record = normalize_cv(
        {
            "education": [{"degree": "BSc"}, "MSc Physics", "", {}],
            "certifications": "AWS SAA",
            "keywords": ["python", 3],
            "awards": None,
        }
    )
    assert record.education == [{"degree": "BSc"}, "MSc Physics"]
    assert record.certifications == ["AWS SAA"]
    assert record.keywords == ["python", "3"]
    assert record.awards == []


def test_contact_non_object_gives_empty_contact() -> None:
    assert normalize_cv({"contact": "jane@example.com"}).contact.email == ""


def test_summary_is_not_truncated() -> None:
    long_summary = " ".join(["word"] * 120)
    assert normalize_cv({"professional_summary": long_summary}).professional_summary == long_summary
