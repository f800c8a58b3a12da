from fastapi import APIRouter

from showcase.core.modules.blog.models import Blog
from showcase.core.modules.content.models import ContentType
from showcase.web.routers.content import add_content_routes, add_publish_route

router = APIRouter(prefix="/blogs", tags=["blogs"])

add_publish_route(router, ContentType.BLOG, Blog, "Blog")
add_content_routes(router, ContentType.BLOG, Blog, "Blog", "Blogs")
