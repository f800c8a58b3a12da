"""Auto-incrementing counters for sequential record ids."""

from pydantic import Field

from showcase.core.db import Document


class Counter(Document):
    """Atomic counter for sequential ids, one document per sequence key.

    The sequence key (e.g. "event", "service") is the document `_id`.
    """

    key: str = Field(alias="_id", serialization_alias="key")
    seq: int = 0  # Current value; next id will be seq + 1
