"""Structured CV record extracted from an uploaded résumé (PDF/DOCX/TXT)."""

from typing import Any, Dict, List, Union

from pydantic import BaseModel, Field

from cv_portfolio.config import SKILL_CATEGORIES

# Awards, education, certifications, keywords: strings or small objects, not validated further
LooseEntry = Union[str, Dict[str, Any]]


def empty_skills() -> Dict[str, List[str]]:
    return {category: [] for category in SKILL_CATEGORIES}


class Contact(BaseModel):
    email: str = Field(default="", description="Contact email; identity key once normalized")
    phone: str = Field(default="", description="Phone number as written in the CV")
    location: str = Field(default="", description="City / country")


class ExperienceEntry(BaseModel):
    company: str = Field(default="", description="Employer name")
    role: str = Field(default="", description="Job title held")
    start_date: str = Field(default="", description="Start date as written in the CV")
    end_date: str = Field(default="", description="End date as written, or 'Present'")
    description: List[str] = Field(default_factory=list, description="Responsibilities / achievements")


class ProjectEntry(BaseModel):
    title: str = Field(default="", description="Project name")
    tech: str = Field(default="", description="Technologies used, comma separated")
    description: str = Field(default="", description="Short project description")


class CVRecord(BaseModel):
    """Canonical normalized CV data; every field always present."""

    name: str = Field(default="", description="Full name")
    position: str = Field(default="", description="Current or target position")
    professional_summary: str = Field(default="", description="Short professional summary")
    experience_years: str = Field(default="", description="Years of experience as free text (e.g. '5', '3+')")
    linkedin: str = Field(default="", description="LinkedIn profile URL")
    github: str = Field(default="", description="GitHub profile URL")
    skills: Dict[str, List[str]] = Field(default_factory=empty_skills, description="Skills by fixed category")
    experience: List[ExperienceEntry] = Field(default_factory=list)
    projects: List[ProjectEntry] = Field(default_factory=list)
    awards: List[LooseEntry] = Field(default_factory=list)
    education: List[LooseEntry] = Field(default_factory=list)
    certifications: List[LooseEntry] = Field(default_factory=list)
    contact: Contact = Field(default_factory=Contact)
    keywords: List[LooseEntry] = Field(default_factory=list)


class CVExtraction(BaseModel):
    """Result of one upload run through the CV pipeline."""

    record: CVRecord
    raw: str = Field(default="", description="Raw model completion, kept for diagnostics")
    text_chars: int = Field(default=0, description="Length of the extracted CV text")
    original_name: str = Field(default="", description="Uploaded file name")
