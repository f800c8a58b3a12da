from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, Self
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field
from pymongo.asynchronous.cursor import AsyncCursor
from pymongo.errors import ConnectionFailure

from showcase.errors import StorageUnavailableError


class Document(BaseModel):
    """Base for documents stored in MongoDB, exposing `_id` as `id`."""

    model_config = ConfigDict(
        populate_by_name=True,
        arbitrary_types_allowed=True,
        json_schema_serialization_defaults_required=True,
    )

    def to_mongo(self) -> dict[str, Any]:
        """Convert the model to a dictionary for MongoDB storage with _id field."""
        data = self.model_dump()
        if "id" in data:
            data["_id"] = data.pop("id")  # Rename id → _id for MongoDB
        return data

    @classmethod
    async def list_cursor(cls, cursor: AsyncCursor[dict[str, Any]]) -> list[Self]:
        """Iterate over an AsyncCursor and return a list of model instances."""
        return [cls.model_validate(item) async for item in cursor]


class MongoModel(Document):
    id: UUID = Field(alias="_id", serialization_alias="id", default_factory=uuid4)


class SequencedModel(Document):
    """Document keyed by a sequential integer allocated from a counter."""

    id: int = Field(alias="_id", serialization_alias="id")


@contextmanager
def storage_errors() -> Iterator[None]:
    """Translate lost connections and server selection timeouts into StorageUnavailableError."""
    try:
        yield
    except ConnectionFailure as e:
        raise StorageUnavailableError(f"Document store unavailable: {e}") from e
