import asyncio
import re
from collections.abc import Mapping
from typing import Any, ClassVar
from uuid import UUID

import pydantic
import structlog
from pymongo import ReturnDocument
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import DuplicateKeyError

from showcase.core.core import Service
from showcase.core.db import storage_errors
from showcase.core.modules.content.fields import ContentSchema
from showcase.core.modules.content.models import ActiveStatus, ContentRecord, ContentType, ListFilters
from showcase.core.modules.content.payload import RawPayload, decode_payload, ensure_required
from showcase.core.modules.content.reconcile import media_urls, orphaned_media, reconcile
from showcase.core.modules.media.models import MediaFile, MediaKind, UploadedMedia
from showcase.core.pagination import PaginationResult, page_offset
from showcase.errors import DuplicateError, DuplicateIdError, DuplicateSlugError, NotFoundError, ValidationError
from showcase.utils import now

logger = structlog.get_logger(__name__)

ID_KEY_RE = re.compile(r"\d{1,18}", re.ASCII)  # Fits a BSON int64


class ContentService[R: ContentRecord](Service):
    """CRUD for one content resource, shared by all resource services.

    Subclasses declare the collection, the record model, the field table and
    how public reads are filtered and sorted.
    """

    content_type: ClassVar[ContentType]
    collection_name: ClassVar[str]
    record_type: type[R]
    schema: ClassVar[ContentSchema]
    label: ClassVar[str] = "Record"
    public_statuses: ClassVar[tuple[str, ...] | None] = (ActiveStatus.ACTIVE,)  # None: every status is public
    sort: ClassVar[list[tuple[str, int]]] = [("created_at", -1)]
    indexes: ClassVar[list[list[tuple[str, int]]]] = []

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection(self.collection_name)

    async def on_start(self) -> None:
        """Create indexes for slug lookup and listing."""
        if self.schema.sluggable:
            await self._collection.create_index([("slug", 1)], unique=True)
        await self._collection.create_index([("status", 1), ("created_at", -1)])
        for keys in self.indexes:
            await self._collection.create_index(keys)

    async def get(self, record_id: int) -> R:
        """Get record by sequential id."""
        with storage_errors():
            doc = await self._collection.find_one({"_id": record_id})
        if not doc:
            raise NotFoundError(f"{self.label} not found: {record_id}")
        return self.record_type.model_validate(doc)

    async def find(self, key: str) -> R:
        """Get record by id or, for sluggable resources, by slug.

        Numeric keys are tried as ids first, so a slug made only of digits
        is still reachable when no record has that id.
        """
        if ID_KEY_RE.fullmatch(key):
            try:
                return await self.get(int(key))
            except NotFoundError:
                if not self.schema.sluggable:
                    raise
        if self.schema.sluggable:
            with storage_errors():
                doc = await self._collection.find_one({"slug": key})
            if doc:
                return self.record_type.model_validate(doc)
        raise NotFoundError(f"{self.label} not found: {key}")

    async def get_public(self, key: str) -> R:
        """Get a publicly visible record and count the view."""
        record = await self.find(key)
        if not self.is_public(record):
            raise NotFoundError(f"{self.label} not found: {key}")
        with storage_errors():
            doc = await self._collection.find_one_and_update(
                {"_id": record.id}, {"$inc": {"views": 1}}, return_document=ReturnDocument.AFTER
            )
        if doc is None:
            raise NotFoundError(f"{self.label} not found: {key}")
        return self.record_type.model_validate(doc)

    def is_public(self, record: R) -> bool:
        if self.public_statuses is None:
            return True
        return getattr(record, "status", None) in self.public_statuses

    async def list_records(
        self, page: int = 1, limit: int = 10, filters: ListFilters | None = None, public: bool = True
    ) -> PaginationResult[R]:
        """Get a page of records, newest or lowest `order` first depending on the resource."""
        query = self.build_query(filters or ListFilters(), public)
        with storage_errors():
            total = await self._collection.count_documents(query)
            cursor = self._collection.find(query).sort(self.sort).skip(page_offset(page, limit)).limit(limit)
            items = await self.record_type.list_cursor(cursor)

        logger.debug("list_records", content_type=self.content_type, query=query, total=total, page=page, limit=limit)
        return PaginationResult(items=items, total=total, page=page, limit=limit)

    async def list_all(self, public: bool = True) -> list[R]:
        """Get every record without pagination."""
        query = self.build_query(ListFilters(), public)
        with storage_errors():
            return await self.record_type.list_cursor(self._collection.find(query).sort(self.sort))

    def build_query(self, filters: ListFilters, public: bool) -> dict[str, Any]:
        query: dict[str, Any] = {}

        statuses: set[str] | None = None
        if public and self.public_statuses is not None:
            statuses = set(self.public_statuses)
        if filters.status is not None:
            statuses = {filters.status} if statuses is None else statuses & {filters.status}
        if statuses is not None:
            query["status"] = {"$in": sorted(statuses)}

        if filters.search:
            query["title"] = {"$regex": re.escape(filters.search), "$options": "i"}
        if filters.category and self.schema.get_field("category") is not None:
            query["category"] = {"$in": filters.category}
        if filters.tag and self.schema.get_field("tags") is not None:
            query["tags"] = {"$in": filters.tag}
        return query

    async def count(self) -> int:
        with storage_errors():
            return await self._collection.count_documents({})

    async def create(self, payload: RawPayload, author_id: UUID | None = None) -> R:
        """Create a record from a raw payload.

        The payload is fully decoded and files are validated before anything
        is uploaded or an id is allocated. If allocation or the write fails,
        files uploaded for this request are discarded.
        """
        changes = decode_payload(self.schema, payload.fields)
        ensure_required(self.schema, changes)
        files = self._collect_files(payload.files)
        uploads = await self._upload(files)

        try:
            record_id = await self.core.services.counter.next_id(self.content_type)
            timestamp = now()
            state = reconcile(self.schema, None, changes, uploads)
            state.update({"_id": record_id, "author_id": author_id, "created_at": timestamp, "updated_at": timestamp})
            record = self._build(state)
            await self._insert(record)
        except Exception:
            await self.core.services.media.discard_urls(_flatten(uploads))
            raise

        await self.core.services.media.discard_urls(self._unused_uploads(uploads, record))
        logger.info("content_created", content_type=self.content_type, record_id=record.id)
        return record

    async def update(self, record_id: int, payload: RawPayload) -> R:
        """Apply a partial update.

        Fields missing from the payload keep their stored values. After a
        successful write, uploaded media the record no longer references is
        deleted on a best-effort basis.
        """
        current = await self.get(record_id)
        changes = decode_payload(self.schema, payload.fields)
        ensure_required(self.schema, changes, partial=True)
        files = self._collect_files(payload.files)
        uploads = await self._upload(files)

        before = current.to_mongo()
        try:
            state = reconcile(self.schema, before, changes, uploads)
            state["updated_at"] = now()
            record = self._build(state)
            await self._save(record, self._written_fields(changes, uploads))
        except Exception:
            await self.core.services.media.discard_urls(_flatten(uploads))
            raise

        await self.core.services.media.discard_urls(self._unused_uploads(uploads, record))
        await self.core.services.media.discard_urls(orphaned_media(self.schema, before, record.to_mongo()))
        logger.info("content_updated", content_type=self.content_type, record_id=record_id, fields=sorted(changes))
        return await self.get(record_id)

    async def delete(self, record_id: int) -> None:
        """Delete a record and, best-effort, the media it references."""
        record = await self.get(record_id)
        with storage_errors():
            await self._collection.delete_one({"_id": record_id})
        await self.core.services.media.discard_urls(media_urls(self.schema, record.to_mongo()))
        logger.info("content_deleted", content_type=self.content_type, record_id=record_id)

    async def upload_images(self, files: list[MediaFile]) -> list[UploadedMedia]:
        """Upload standalone images into this resource's folder, e.g. for use in rich text."""
        if not files:
            raise ValidationError("No files uploaded")
        self.core.services.media.validate_files(files, MediaKind.IMAGE)
        uploaded = await self.core.services.media.upload_many(files, self.collection_name)
        logger.info("content_images_uploaded", content_type=self.content_type, count=len(uploaded))
        return uploaded

    def validate_record(self, record: R) -> None:
        """Cross-field checks on the merged record. Override in subclasses."""

    def _build(self, state: Mapping[str, Any]) -> R:
        try:
            record = self.record_type.model_validate(state)
        except pydantic.ValidationError as e:
            error = e.errors()[0]
            location = ".".join(str(part) for part in error["loc"])
            raise ValidationError(f"Invalid {self.label.lower()} field '{location}': {error['msg']}") from e
        self.validate_record(record)
        return record

    def _collect_files(self, files: Mapping[str, list[MediaFile]]) -> dict[str, list[MediaFile]]:
        """Pick the uploaded files belonging to media slots and validate them."""
        collected: dict[str, list[MediaFile]] = {}
        for slot in self.schema.media:
            slot_files = files.get(slot.name, [])
            if not slot_files:
                continue
            if not slot.multiple and len(slot_files) > 1:
                raise ValidationError(f"Only one file allowed for '{slot.name}'")
            self.core.services.media.validate_files(slot_files, slot.kind)
            collected[slot.name] = slot_files
        return collected

    async def _upload(self, files: Mapping[str, list[MediaFile]]) -> dict[str, list[str]]:
        """Upload files of all slots concurrently and return their URLs per slot."""
        names = list(files)
        results = await asyncio.gather(
            *(self.core.services.media.upload_many(files[name], self._folder(name)) for name in names)
        )
        return {name: [media.url for media in uploaded] for name, uploaded in zip(names, results, strict=True)}

    def _unused_uploads(self, uploads: Mapping[str, list[str]], record: R) -> list[str]:
        """Uploads that did not make it into the record, e.g. cut off by a slot cap."""
        referenced = set(media_urls(self.schema, record.to_mongo()))
        return [url for url in _flatten(uploads) if url not in referenced]

    def _folder(self, slot_name: str) -> str:
        slot = self.schema.get_slot(slot_name)
        if slot is None:
            raise ValueError(f"Unknown media slot: {slot_name}")
        return slot.folder

    async def _insert(self, record: R) -> None:
        try:
            with storage_errors():
                await self._collection.insert_one(record.to_mongo())
        except DuplicateKeyError as e:
            raise self._duplicate_error(e, record) from e

    def _written_fields(self, changes: Mapping[str, Any], uploads: Mapping[str, list[str]]) -> set[str]:
        """Payload keys and slots that received uploads, plus the fields derived from them."""
        fields = {*changes, *uploads, "updated_at"}
        if self.schema.sluggable and "title" in changes:
            fields.add("slug")
        return fields

    async def _save(self, record: R, fields: set[str]) -> None:
        """Write only `fields`. Stored values of every other field are left as they are."""
        doc = {key: value for key, value in record.to_mongo().items() if key in fields}
        try:
            with storage_errors():
                result = await self._collection.update_one({"_id": record.id}, {"$set": doc})
        except DuplicateKeyError as e:
            raise self._duplicate_error(e, record) from e
        if result.matched_count == 0:
            raise NotFoundError(f"{self.label} not found: {record.id}")

    def _duplicate_error(self, error: DuplicateKeyError, record: R) -> DuplicateError:
        key_pattern = (error.details or {}).get("keyPattern") or {}
        slug = getattr(record, "slug", None)
        if slug is not None and ("slug" in key_pattern or (not key_pattern and "slug" in str(error))):
            return DuplicateSlugError(slug)
        return DuplicateIdError(record.id)


class PublishableContentService[R: ContentRecord](ContentService[R]):
    """Content service for records with an `is_published` flag."""

    async def toggle_published(self, record_id: int) -> R:
        """Flip the published flag and return the updated record."""
        record = await self.get(record_id)
        published = not getattr(record, "is_published")
        with storage_errors():
            await self._collection.update_one(
                {"_id": record_id}, {"$set": {"is_published": published, "updated_at": now()}}
            )
        logger.info("content_publish_toggled", content_type=self.content_type, record_id=record_id, published=published)
        return await self.get(record_id)


def _flatten(uploads: Mapping[str, list[str]]) -> list[str]:
    return [url for urls in uploads.values() for url in urls]
