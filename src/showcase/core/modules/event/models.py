from datetime import datetime
from enum import StrEnum

from pydantic import Field

from showcase.core.modules.content.fields import ContentField, ContentSchema, FieldKind, MediaSlot
from showcase.core.modules.content.models import SluggedRecord


class EventStatus(StrEnum):
    UPCOMING = "upcoming"
    COMPLETED = "completed"


class Event(SluggedRecord):
    """Event with a display date and a photo gallery. Indexed on slug - unique, display_date."""

    tags: list[str] = Field(default_factory=list)
    image: str = ""
    excerpt: str
    paragraphs: list[str] = Field(default_factory=list)
    display_date: datetime
    location: str
    category: list[str] = Field(default_factory=list)
    status: EventStatus = EventStatus.UPCOMING
    images: list[str] = Field(default_factory=list)
    duration: str = ""
    know_more_link: str = ""
    know_more_link_enabled: bool = True


EVENT_SCHEMA = ContentSchema(
    fields=[
        ContentField(name="title", required=True, max_length=200),
        ContentField(name="tags", kind=FieldKind.STRING_LIST),
        ContentField(name="excerpt", required=True, max_length=500),
        ContentField(name="paragraphs", kind=FieldKind.STRING_LIST),
        ContentField(name="display_date", kind=FieldKind.DATETIME, required=True),
        ContentField(name="location", required=True),
        ContentField(name="category", kind=FieldKind.STRING_LIST),
        ContentField(name="status", kind=FieldKind.CHOICE, choices=list(EventStatus)),
        ContentField(name="duration"),
        ContentField(name="know_more_link"),
        ContentField(name="know_more_link_enabled", kind=FieldKind.BOOLEAN),
    ],
    media=[
        MediaSlot(name="image", folder="events"),
        MediaSlot(name="images", folder="event-images", multiple=True, allow_csv=True),
    ],
)
