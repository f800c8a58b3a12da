from pydantic import Field

from showcase.core.modules.content.fields import ContentField, ContentSchema, FieldKind, MediaSlot
from showcase.core.modules.content.models import ActiveStatus, SluggedRecord


class Blog(SluggedRecord):
    """Blog post. Indexed on slug - unique."""

    tags: list[str] = Field(default_factory=list)
    image: str = ""
    short_description: str
    paragraphs: list[str] = Field(default_factory=list)
    category: list[str] = Field(default_factory=list)
    is_published: bool = False  # Informational, does not hide the post from public reads
    medium_link: str = ""
    medium_link_enabled: bool = True
    status: ActiveStatus = ActiveStatus.ACTIVE


BLOG_SCHEMA = ContentSchema(
    fields=[
        ContentField(name="title", required=True, max_length=200),
        ContentField(name="tags", kind=FieldKind.STRING_LIST),
        ContentField(name="short_description", required=True, max_length=500),
        ContentField(name="paragraphs", kind=FieldKind.STRING_LIST),
        ContentField(name="category", kind=FieldKind.STRING_LIST),
        ContentField(name="is_published", kind=FieldKind.BOOLEAN),
        ContentField(name="medium_link"),
        ContentField(name="medium_link_enabled", kind=FieldKind.BOOLEAN),
        ContentField(name="status", kind=FieldKind.CHOICE, choices=list(ActiveStatus)),
    ],
    media=[MediaSlot(name="image", folder="blogs")],
)
