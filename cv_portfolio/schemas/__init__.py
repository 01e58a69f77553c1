"""Schema exports."""

from .cv_record import Contact, CVExtraction, CVRecord, ExperienceEntry, ProjectEntry
from .portfolio import PortfolioRecord, PublishResult, ViewCounter, ViewEvent

__all__ = [
    "CVRecord",
    "CVExtraction",
    "Contact",
    "ExperienceEntry",
    "ProjectEntry",
    "PortfolioRecord",
    "PublishResult",
    "ViewCounter",
    "ViewEvent",
]
