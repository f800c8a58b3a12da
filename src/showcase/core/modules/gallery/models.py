from showcase.core.modules.content.fields import ContentField, ContentSchema, FieldKind
from showcase.core.modules.content.models import ActiveStatus, SluggedRecord

YOUTUBE_URL_RE = r"^(https?://)?(www\.|m\.)?(youtube\.com/(watch\?v=|embed/|shorts/)|youtu\.be/)[\w-]{6,}"


class GalleryItem(SluggedRecord):
    """YouTube video shown in the gallery. Indexed on slug - unique, order."""

    description: str
    youtube_url: str
    is_published: bool = False
    order: int = 0
    status: ActiveStatus = ActiveStatus.ACTIVE


GALLERY_SCHEMA = ContentSchema(
    fields=[
        ContentField(name="title", required=True, max_length=200),
        ContentField(name="description", required=True, max_length=1000),
        ContentField(name="youtube_url", required=True, pattern=YOUTUBE_URL_RE),
        ContentField(name="is_published", kind=FieldKind.BOOLEAN),
        ContentField(name="order", kind=FieldKind.INT, min_value=0),
        ContentField(name="status", kind=FieldKind.CHOICE, choices=list(ActiveStatus)),
    ],
)
