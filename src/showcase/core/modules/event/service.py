from showcase.core.modules.content.models import ContentType
from showcase.core.modules.content.service import ContentService
from showcase.core.modules.event.models import EVENT_SCHEMA, Event


class EventService(ContentService[Event]):
    """Events, latest display date first. Upcoming and completed events are both public."""

    content_type = ContentType.EVENT
    collection_name = "events"
    record_type = Event
    schema = EVENT_SCHEMA
    label = "Event"
    public_statuses = None
    sort = [("display_date", -1), ("created_at", -1)]
    indexes = [[("display_date", -1)], [("tags", 1)], [("category", 1)]]
