from fastapi import APIRouter

from showcase.core.modules.content.models import ContentType
from showcase.core.modules.service.models import ServiceOffering
from showcase.web.routers.content import add_content_routes

router = APIRouter(prefix="/services", tags=["services"])

add_content_routes(router, ContentType.SERVICE, ServiceOffering, "Service", "Services")
