from showcase.core.modules.content.fields import ContentField, ContentSchema, FieldKind, MediaSlot
from showcase.core.modules.content.models import ActiveStatus, SluggedRecord

RANDOM_ORDER_START = 41  # Lower positions are kept for manually pinned works


class Work(SluggedRecord):
    """Portfolio entry. Indexed on slug - unique, order."""

    category: str
    image: str = ""
    order: int = 0
    status: ActiveStatus = ActiveStatus.ACTIVE


WORK_SCHEMA = ContentSchema(
    fields=[
        ContentField(name="title", required=True, max_length=200),
        ContentField(name="category", required=True),
        ContentField(name="order", kind=FieldKind.INT),
        ContentField(name="status", kind=FieldKind.CHOICE, choices=list(ActiveStatus)),
    ],
    media=[MediaSlot(name="image", folder="works")],
)
