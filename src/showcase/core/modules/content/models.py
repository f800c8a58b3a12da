"""Shared shape of content records (blogs, events, gallery items, works, services, hero slides)."""

from datetime import datetime
from enum import StrEnum
from uuid import UUID

from pydantic import BaseModel, Field

from showcase.core.db import SequencedModel
from showcase.utils import now


class ContentType(StrEnum):
    """Content resource types. Each value is also the id sequence key."""

    BLOG = "blog"
    EVENT = "event"
    GALLERY = "gallery"
    WORK = "work"
    SERVICE = "service"
    HERO_SLIDER = "hero_slider"


class ActiveStatus(StrEnum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class ContentRecord(SequencedModel):
    """Base for content records with a sequential id allocated on create."""

    title: str
    views: int = 0
    author_id: UUID | None = None  # Admin who created the record
    created_at: datetime = Field(default_factory=now)
    updated_at: datetime = Field(default_factory=now)


class SluggedRecord(ContentRecord):
    """Content record addressable by a slug derived from its title."""

    slug: str


class ListFilters(BaseModel):
    """Optional filters for list endpoints."""

    search: str | None = Field(None, description="Case-insensitive substring match on title")
    category: list[str] = Field(default_factory=list, description="Match any of these categories")
    tag: list[str] = Field(default_factory=list, description="Match any of these tags")
    status: str | None = Field(None, description="Exact status match")


class ContentStats(BaseModel):
    """Record count of one content resource."""

    total: int = Field(..., description="Number of stored records")
    last_id: int = Field(..., description="Last allocated id (0 if none)")
