from pydantic import BaseModel, Field

from showcase.core.modules.content.models import ContentStats
from showcase.core.modules.user.models import UserStats


class AdminStats(BaseModel):
    """Dashboard counters for the admin panel."""

    users: UserStats = Field(..., description="User counts")
    content: dict[str, ContentStats] = Field(..., description="Record counts per content type")
