"""Shared pytest fixtures.

Services run against `FakeDatabase`, an in-memory stand-in for the async
pymongo database covering the subset of the collection API the services use.
Every collection call suspends once before touching the data, like a server
round trip, so concurrent tasks interleave between calls. Each call then
applies its read-modify-write in one step, like a single-document server write.
"""

import asyncio
import copy
import re
from typing import Any

import pytest
from pymongo.errors import DuplicateKeyError

from showcase.config import Config
from showcase.core.core import Core, Services  # Imported first: the registry imports every service module
from showcase.core.modules.media.models import MediaFile


class InsertResult:
    def __init__(self, inserted_id: Any) -> None:
        self.inserted_id = inserted_id


class UpdateResult:
    def __init__(self, matched_count: int) -> None:
        self.matched_count = matched_count
        self.modified_count = matched_count


class DeleteResult:
    def __init__(self, deleted_count: int) -> None:
        self.deleted_count = deleted_count


def _matches_value(actual: Any, condition: Any) -> bool:
    if isinstance(condition, dict):
        if "$in" in condition:
            options = condition["$in"]
            if isinstance(actual, list):
                return any(item in options for item in actual)
            return actual in options
        if "$regex" in condition:
            flags = re.IGNORECASE if "i" in condition.get("$options", "") else 0
            return isinstance(actual, str) and re.search(condition["$regex"], actual, flags) is not None
        raise NotImplementedError(f"Unsupported condition: {condition}")
    if isinstance(actual, list) and not isinstance(condition, list):
        return condition in actual
    return actual == condition


def matches(doc: dict[str, Any], query: dict[str, Any]) -> bool:
    return all(_matches_value(doc.get(key), condition) for key, condition in query.items())


async def round_trip() -> None:
    await asyncio.sleep(0)


class FakeCursor:
    def __init__(self, docs: list[dict[str, Any]]) -> None:
        self._docs = docs
        self._skip = 0
        self._limit = 0

    def sort(self, keys: list[tuple[str, int]]) -> "FakeCursor":
        for key, direction in reversed(keys):
            self._docs.sort(key=lambda doc, key=key: doc.get(key), reverse=direction < 0)
        return self

    def skip(self, count: int) -> "FakeCursor":
        self._skip = count
        return self

    def limit(self, count: int) -> "FakeCursor":
        self._limit = count
        return self

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        docs = self._docs[self._skip :]
        if self._limit:
            docs = docs[: self._limit]
        for doc in docs:
            yield copy.deepcopy(doc)


class FakeCollection:
    """In-memory collection with `_id` and unique index enforcement."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.docs: dict[Any, dict[str, Any]] = {}
        self.unique_fields: set[str] = set()
        self.indexes: list[list[tuple[str, int]]] = []

    async def create_index(self, keys: list[tuple[str, int]], unique: bool = False, **_: Any) -> str:
        await round_trip()
        self.indexes.append(keys)
        if unique:
            self.unique_fields.add(keys[0][0])
        return "_".join(f"{key}_{direction}" for key, direction in keys)

    async def find_one(self, query: dict[str, Any]) -> dict[str, Any] | None:
        await round_trip()
        doc = self._first(query)
        return copy.deepcopy(doc) if doc is not None else None

    def find(self, query: dict[str, Any] | None = None, projection: dict[str, Any] | None = None) -> FakeCursor:
        docs = [doc for doc in self.docs.values() if matches(doc, query or {})]
        if projection:
            docs = [{key: doc[key] for key in {"_id", *projection} if key in doc} for doc in docs]
        return FakeCursor(docs)

    async def count_documents(self, query: dict[str, Any]) -> int:
        await round_trip()
        return sum(1 for doc in self.docs.values() if matches(doc, query))

    async def insert_one(self, doc: dict[str, Any]) -> InsertResult:
        await round_trip()
        if doc["_id"] in self.docs:
            raise self._duplicate("_id", doc["_id"])
        self._check_unique(doc, exclude_id=None)
        self.docs[doc["_id"]] = copy.deepcopy(doc)
        return InsertResult(doc["_id"])

    async def update_one(self, query: dict[str, Any], update: dict[str, Any]) -> UpdateResult:
        await round_trip()
        doc = self._first(query)
        if doc is None:
            return UpdateResult(0)
        updated = self._apply(copy.deepcopy(doc), update)
        self._check_unique(updated, exclude_id=doc["_id"])
        self.docs[doc["_id"]] = updated
        return UpdateResult(1)

    async def find_one_and_update(
        self, query: dict[str, Any], update: dict[str, Any], upsert: bool = False, return_document: Any = None
    ) -> dict[str, Any] | None:
        await round_trip()
        doc = self._first(query)
        if doc is None:
            if not upsert:
                return None
            doc = {key: value for key, value in query.items() if not isinstance(value, dict)}
            self.docs[doc["_id"]] = doc
        updated = self._apply(copy.deepcopy(doc), update)
        self.docs[doc["_id"]] = updated
        return copy.deepcopy(updated)

    async def find_one_and_delete(self, query: dict[str, Any]) -> dict[str, Any] | None:
        await round_trip()
        doc = self._first(query)
        if doc is None:
            return None
        del self.docs[doc["_id"]]
        return doc

    async def delete_one(self, query: dict[str, Any]) -> DeleteResult:
        await round_trip()
        doc = self._first(query)
        if doc is None:
            return DeleteResult(0)
        del self.docs[doc["_id"]]
        return DeleteResult(1)

    async def delete_many(self, query: dict[str, Any]) -> DeleteResult:
        await round_trip()
        ids = [doc_id for doc_id, doc in self.docs.items() if matches(doc, query)]
        for doc_id in ids:
            del self.docs[doc_id]
        return DeleteResult(len(ids))

    def _first(self, query: dict[str, Any]) -> dict[str, Any] | None:
        return next((doc for doc in self.docs.values() if matches(doc, query)), None)

    @staticmethod
    def _apply(doc: dict[str, Any], update: dict[str, Any]) -> dict[str, Any]:
        for key, value in update.get("$set", {}).items():
            doc[key] = copy.deepcopy(value)
        for key, value in update.get("$inc", {}).items():
            doc[key] = doc.get(key, 0) + value
        return doc

    def _check_unique(self, doc: dict[str, Any], exclude_id: Any) -> None:
        for field in self.unique_fields:
            for other in self.docs.values():
                if other["_id"] != exclude_id and field in doc and other.get(field) == doc[field]:
                    raise self._duplicate(field, doc[field])

    def _duplicate(self, field: str, value: Any) -> DuplicateKeyError:
        return DuplicateKeyError(
            f"E11000 duplicate key error collection: {self.name} dup key: {{ {field}: {value!r} }}",
            11000,
            {"keyPattern": {field: 1}, "keyValue": {field: value}},
        )


class FakeDatabase:
    def __init__(self) -> None:
        self.collections: dict[str, FakeCollection] = {}

    def get_collection(self, name: str) -> FakeCollection:
        if name not in self.collections:
            self.collections[name] = FakeCollection(name)
        return self.collections[name]


class FakeCore:
    """Core with the real service registry wired to a FakeDatabase."""

    def __init__(self, config: Config, database: FakeDatabase) -> None:
        self.config = config
        self.database = database
        self.services = Services(database)  # type: ignore[arg-type]
        self.services.set_core(self)  # type: ignore[arg-type]


@pytest.fixture
def config(tmp_path):
    """Create a config pointing media storage at a temporary directory."""
    return Config(
        database_url="mongodb://localhost:27017/showcase_test",
        jwt_secret="test-secret-with-enough-length-for-hs256",
        media_path=str(tmp_path / "media"),
        media_url="http://testserver/media",
        _env_file=None,
    )


@pytest.fixture
def database():
    return FakeDatabase()


@pytest.fixture
def core(config, database) -> Core:
    """Create a core whose services use the in-memory database."""
    return FakeCore(config, database)  # type: ignore[return-value]


@pytest.fixture
def image_file():
    """Create a small in-memory PNG upload."""
    return MediaFile(filename="cover photo.png", content=b"\x89PNG\r\n\x1a\nfake", content_type="image/png")

