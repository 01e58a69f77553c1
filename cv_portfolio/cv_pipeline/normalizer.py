"""Coerce a parsed LLM object into the canonical CVRecord shape.

Malformed shapes are coerced, never rejected: missing scalars become "",
missing lists become [], and the skills mapping always carries exactly the
fixed categories.
"""

import re
from typing import Any, Dict, List, Optional

from cv_portfolio.config import SKILL_CATEGORIES
from cv_portfolio.schemas.cv_record import Contact, CVRecord, ExperienceEntry, ProjectEntry

_SCALAR_FIELDS = ("name", "position", "professional_summary", "experience_years", "linkedin", "github")
_LOOSE_LIST_FIELDS = ("awards", "education", "certifications", "keywords")

# Input key aliases the model sometimes uses for experience entries
_EXPERIENCE_ALIASES = {
    "company": ("company", "employer", "organization"),
    "role": ("role", "title", "position"),
    "start_date": ("start_date", "start", "from"),
    "end_date": ("end_date", "end", "to"),
}


def _category_key(name: str) -> str:
    return re.sub(r"\s+", "", str(name)).lower()


_CATEGORY_LOOKUP = {_category_key(c): c for c in SKILL_CATEGORIES}


def _as_text(value: Any) -> str:
    if value is None or isinstance(value, bool):
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (int, float)):
        return str(value)
    return ""


def _as_list(value: Any) -> List[Any]:
    """Lists pass through; a lone non-empty value becomes a one-element list."""
    if value is None:
        return []
    if isinstance(value, list):
        return value
    if isinstance(value, tuple):
        return list(value)
    if isinstance(value, str) and not value.strip():
        return []
    return [value]


def _text_items(value: Any) -> List[str]:
    items = []
    for item in _as_list(value):
        text = _as_text(item)
        if text:
            items.append(text)
    return items


def _first(entry: Dict[str, Any], keys: tuple) -> Any:
    for key in keys:
        if entry.get(key) not in (None, ""):
            return entry[key]
    return None


def normalize_skills(value: Any) -> Dict[str, List[str]]:
    """All fixed categories, in order; unknown categories dropped, items de-duplicated."""
    skills: Dict[str, List[str]] = {category: [] for category in SKILL_CATEGORIES}
    if not isinstance(value, dict):
        return skills
    for raw_name, raw_items in value.items():
        category = _CATEGORY_LOOKUP.get(_category_key(raw_name))
        if category is None:
            continue
        if isinstance(raw_items, str):
            raw_items = raw_items.split(",")
        for item in _text_items(raw_items):
            if item not in skills[category]:
                skills[category].append(item)
    return skills


def _normalize_experience_entry(entry: Any) -> Optional[ExperienceEntry]:
    if isinstance(entry, str):
        return ExperienceEntry(description=[entry.strip()]) if entry.strip() else None
    if not isinstance(entry, dict):
        return None
    fields = {name: _as_text(_first(entry, keys)) for name, keys in _EXPERIENCE_ALIASES.items()}
    description = _first(entry, ("description", "responsibilities", "highlights"))
    return ExperienceEntry(description=_text_items(description), **fields)


def _normalize_project_entry(entry: Any) -> Optional[ProjectEntry]:
    if isinstance(entry, str):
        return ProjectEntry(title=entry.strip()) if entry.strip() else None
    if not isinstance(entry, dict):
        return None
    tech = entry.get("tech", entry.get("technologies"))
    description = entry.get("description")
    return ProjectEntry(
        title=_as_text(_first(entry, ("title", "name"))),
        tech=", ".join(_text_items(tech)) if isinstance(tech, list) else _as_text(tech),
        description=" ".join(_text_items(description)) if isinstance(description, list) else _as_text(description),
    )


def _normalize_loose_entry(entry: Any) -> Optional[Any]:
    if isinstance(entry, dict):
        return {str(k): v for k, v in entry.items()} if entry else None
    if isinstance(entry, list):
        text = ", ".join(_text_items(entry))
        return text or None
    return _as_text(entry) or None


def _normalize_contact(value: Any) -> Contact:
    if not isinstance(value, dict):
        return Contact()
    return Contact(
        email=_as_text(value.get("email")),
        phone=_as_text(value.get("phone")),
        location=_as_text(value.get("location")),
    )


def normalize_cv(parsed: Any) -> CVRecord:
    """Build a CVRecord from any parsed JSON value. Never raises on bad shapes."""
    if not isinstance(parsed, dict):
        return CVRecord()

    data: Dict[str, Any] = {name: _as_text(parsed.get(name)) for name in _SCALAR_FIELDS}
    data["skills"] = normalize_skills(parsed.get("skills"))
    data["experience"] = [
        e for e in (_normalize_experience_entry(x) for x in _as_list(parsed.get("experience"))) if e is not None
    ]
    data["projects"] = [
        p for p in (_normalize_project_entry(x) for x in _as_list(parsed.get("projects"))) if p is not None
    ]
    for name in _LOOSE_LIST_FIELDS:
        data[name] = [
            e for e in (_normalize_loose_entry(x) for x in _as_list(parsed.get(name))) if e is not None
        ]
    data["contact"] = _normalize_contact(parsed.get("contact"))
    return CVRecord(**data)
