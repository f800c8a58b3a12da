from pydantic import Field

from showcase.core.modules.content.fields import ContentField, ContentSchema, FieldKind, MediaSlot
from showcase.core.modules.content.models import ActiveStatus, SluggedRecord

MAX_SERVICE_IMAGES = 4


class ServiceOffering(SluggedRecord):
    """A service the company offers. Indexed on slug - unique."""

    hero_image: str = ""
    images: list[str] = Field(default_factory=list)  # At most MAX_SERVICE_IMAGES
    paragraphs: list[str]
    status: ActiveStatus = ActiveStatus.ACTIVE


SERVICE_SCHEMA = ContentSchema(
    fields=[
        ContentField(name="title", required=True, max_length=200),
        ContentField(name="paragraphs", kind=FieldKind.STRING_LIST, required=True),
        ContentField(name="status", kind=FieldKind.CHOICE, choices=list(ActiveStatus)),
    ],
    media=[
        MediaSlot(name="hero_image", folder="services"),
        MediaSlot(name="images", folder="service-images", multiple=True, cap=MAX_SERVICE_IMAGES),
    ],
)
