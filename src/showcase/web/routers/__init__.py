from showcase.web.routers.admin import router as admin_router
from showcase.web.routers.auth import router as auth_router
from showcase.web.routers.blogs import router as blogs_router
from showcase.web.routers.events import router as events_router
from showcase.web.routers.gallery import router as gallery_router
from showcase.web.routers.hero_sliders import router as hero_sliders_router
from showcase.web.routers.media import router as media_router
from showcase.web.routers.services import router as services_router
from showcase.web.routers.works import router as works_router

__all__ = [
    "admin_router",
    "auth_router",
    "blogs_router",
    "events_router",
    "gallery_router",
    "hero_sliders_router",
    "media_router",
    "services_router",
    "works_router",
]
