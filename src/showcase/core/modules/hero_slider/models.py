from enum import StrEnum

from showcase.core.modules.content.fields import ContentField, ContentSchema, FieldKind, MediaSlot
from showcase.core.modules.content.models import ActiveStatus, ContentRecord
from showcase.core.modules.media.models import MediaKind


class SlideMediaType(StrEnum):
    VIDEO = "video"
    IMAGE = "image"


class HeroSlide(ContentRecord):
    """Home page hero slide showing either a video or a desktop/mobile image pair."""

    title: str = ""
    media_type: SlideMediaType
    video_url: str = ""
    desktop_image: str = ""
    mobile_image: str = ""
    subtitle: str = ""
    button_text: str = ""
    button_link: str = ""
    order: int = 0
    status: ActiveStatus = ActiveStatus.ACTIVE


HERO_SLIDE_SCHEMA = ContentSchema(
    fields=[
        ContentField(name="media_type", kind=FieldKind.CHOICE, choices=list(SlideMediaType), required=True),
        ContentField(name="title", max_length=200),
        ContentField(name="subtitle", max_length=300),
        ContentField(name="button_text", max_length=100),
        ContentField(name="button_link"),
        ContentField(name="order", kind=FieldKind.INT, min_value=0),
        ContentField(name="status", kind=FieldKind.CHOICE, choices=list(ActiveStatus)),
    ],
    media=[
        MediaSlot(name="video_url", folder="hero-videos", kind=MediaKind.VIDEO),
        MediaSlot(name="desktop_image", folder="hero-desktop"),
        MediaSlot(name="mobile_image", folder="hero-mobile"),
    ],
    sluggable=False,
)
