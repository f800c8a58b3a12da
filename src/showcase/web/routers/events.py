from fastapi import APIRouter

from showcase.core.modules.content.models import ContentType
from showcase.core.modules.event.models import Event
from showcase.web.routers.content import add_content_routes

router = APIRouter(prefix="/events", tags=["events"])

add_content_routes(router, ContentType.EVENT, Event, "Event", "Events")
