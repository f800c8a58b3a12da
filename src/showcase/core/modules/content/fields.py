"""Declarative field tables describing how each resource decodes and merges its payload."""

from enum import StrEnum

from pydantic import BaseModel, Field

from showcase.core.modules.media.models import MediaKind


class FieldKind(StrEnum):
    """Wire encodings a content field can be decoded from."""

    STRING = "string"
    STRING_LIST = "string_list"  # JSON array string, native list, or comma-separated when allowed
    BOOLEAN = "boolean"  # JSON "true"/"false" or native bool
    INT = "int"
    DATETIME = "datetime"  # ISO-8601
    CHOICE = "choice"  # One of `choices`


class ContentField(BaseModel):
    """A plain (non-media) field of a content record."""

    name: str
    kind: FieldKind = FieldKind.STRING
    required: bool = False  # Must be present on create, cannot be cleared on update
    max_length: int | None = None
    min_value: int | None = None
    choices: list[str] = Field(default_factory=list)
    allow_csv: bool = False
    pattern: str | None = None  # Regex the value must match (searched from the start)


class MediaSlot(BaseModel):
    """A media field, fed by uploaded files and/or URLs in the payload.

    Single slots hold one URL. Multiple slots hold an ordered URL list,
    optionally capped at `cap` entries.
    """

    name: str
    folder: str
    kind: MediaKind = MediaKind.IMAGE
    multiple: bool = False
    cap: int | None = None
    allow_csv: bool = False


class ContentSchema(BaseModel):
    fields: list[ContentField]
    media: list[MediaSlot] = Field(default_factory=list)
    sluggable: bool = True

    def get_field(self, name: str) -> ContentField | None:
        for field in self.fields:
            if field.name == name:
                return field
        return None

    def get_slot(self, name: str) -> MediaSlot | None:
        for slot in self.media:
            if slot.name == name:
                return slot
        return None
