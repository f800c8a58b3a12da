from showcase.core.modules.content.models import ContentType
from showcase.core.modules.content.service import PublishableContentService
from showcase.core.modules.gallery.models import GALLERY_SCHEMA, GalleryItem


class GalleryService(PublishableContentService[GalleryItem]):
    content_type = ContentType.GALLERY
    collection_name = "gallery"
    record_type = GalleryItem
    schema = GALLERY_SCHEMA
    label = "Gallery item"
    sort = [("order", 1), ("created_at", -1)]
    indexes = [[("order", 1)]]
