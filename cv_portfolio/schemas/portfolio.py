"""Persisted portfolio metadata and view counters."""

from typing import List

from pydantic import BaseModel, ConfigDict, Field


class PortfolioRecord(BaseModel):
    """Identity-map value: one live artifact per normalized owner email."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="Short random hex token; immutable")
    owner_email: str = Field(..., alias="ownerEmail", description="Normalized owner email")
    created_at: str = Field(..., alias="createdAt", description="ISO-8601 UTC creation time")
    theme: str = Field(default="", description="Theme selected at publish time")


class ViewEvent(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    timestamp: str
    source_address: str = Field(default="unknown", alias="sourceAddress")


class ViewCounter(BaseModel):
    """Access counters for one published portfolio."""

    model_config = ConfigDict(populate_by_name=True)

    total_views: int = Field(default=0, alias="totalViews")
    unique_views: int = Field(default=0, alias="uniqueViews")
    last_viewed: str = Field(default="", alias="lastViewed")
    view_history: List[ViewEvent] = Field(default_factory=list, alias="viewHistory")


class PublishResult(BaseModel):
    id: str
    url: str
    is_existing: bool = False
