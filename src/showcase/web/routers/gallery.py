from fastapi import APIRouter

from showcase.core.modules.content.models import ContentType
from showcase.core.modules.gallery.models import GalleryItem
from showcase.web.routers.content import add_content_routes, add_publish_route

router = APIRouter(prefix="/gallery", tags=["gallery"])

add_publish_route(router, ContentType.GALLERY, GalleryItem, "GalleryItem")
add_content_routes(router, ContentType.GALLERY, GalleryItem, "GalleryItem", "GalleryItems")
