from showcase.core.modules.content.models import ContentType
from showcase.core.modules.content.service import ContentService
from showcase.core.modules.service.models import SERVICE_SCHEMA, ServiceOffering


class ServiceOfferingService(ContentService[ServiceOffering]):
    """Service offerings. Extra images beyond the cap are dropped, never rejected."""

    content_type = ContentType.SERVICE
    collection_name = "services"
    record_type = ServiceOffering
    schema = SERVICE_SCHEMA
    label = "Service"
