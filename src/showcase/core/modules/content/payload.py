"""Decoding of loosely-typed request payloads into typed sparse change sets.

A change set is a dict holding only the keys present in the payload, with
values already converted to their field types. A key that is missing means
"leave unchanged"; a key mapped to "" or [] means "clear".
"""

import json
import re
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field

from showcase.core.modules.content.fields import ContentField, ContentSchema, FieldKind, MediaSlot
from showcase.core.modules.media.models import MediaFile
from showcase.core.modules.media.utils import is_absolute_url
from showcase.errors import InvalidPayloadError, ValidationError

INT_RE = re.compile(r"^-?\d+$")


class RawPayload(BaseModel):
    """Request body split into plain values and uploaded files, keyed by form field name."""

    fields: dict[str, Any] = Field(default_factory=dict)
    files: dict[str, list[MediaFile]] = Field(default_factory=dict)


def decode_payload(schema: ContentSchema, raw: Mapping[str, Any]) -> dict[str, Any]:
    """Decode every schema field present in `raw`. Unknown keys are ignored.

    Raises:
        InvalidPayloadError: If a value has a malformed encoding
        ValidationError: If a decoded value breaks a length or pattern rule
    """
    changes: dict[str, Any] = {}
    for field in schema.fields:
        if field.name in raw:
            changes[field.name] = decode_value(field, raw[field.name])
    for slot in schema.media:
        if slot.name in raw:
            changes[slot.name] = decode_media_value(slot, raw[slot.name])
    return changes


def ensure_required(schema: ContentSchema, changes: Mapping[str, Any], partial: bool = False) -> None:
    """Check that required fields carry non-empty values.

    On create every required field must be present. With `partial` (updates)
    only the required fields present in `changes` are checked, so a required
    field can be left out but not cleared.
    """
    for field in schema.fields:
        if not field.required:
            continue
        if partial and field.name not in changes:
            continue
        value = changes.get(field.name)
        if value is None or value == "" or value == []:
            raise ValidationError(f"Field '{field.name}' is required")


def decode_value(field: ContentField, raw: Any) -> Any:
    match field.kind:
        case FieldKind.STRING:
            value = decode_string(field.name, raw)
            if field.max_length is not None and len(value) > field.max_length:
                raise ValidationError(f"Field '{field.name}' cannot be more than {field.max_length} characters")
            if field.pattern is not None and value and not re.match(field.pattern, value):
                raise ValidationError(f"Field '{field.name}' has an invalid format")
            return value
        case FieldKind.STRING_LIST:
            return decode_list(field.name, raw, allow_csv=field.allow_csv)
        case FieldKind.BOOLEAN:
            return decode_bool(field.name, raw)
        case FieldKind.INT:
            value = decode_int(field.name, raw)
            if field.min_value is not None and value < field.min_value:
                raise InvalidPayloadError(field.name, f"Field '{field.name}' must be at least {field.min_value}")
            return value
        case FieldKind.DATETIME:
            return decode_datetime(field.name, raw)
        case FieldKind.CHOICE:
            value = decode_string(field.name, raw)
            if value not in field.choices:
                allowed = ", ".join(field.choices)
                raise InvalidPayloadError(field.name, f"Field '{field.name}' must be one of: {allowed}")
            return value


def decode_media_value(slot: MediaSlot, raw: Any) -> str | list[str]:
    """Decode a URL (single slot) or a URL list (multiple slot).

    List entries that are not absolute http(s) URLs are dropped, so
    placeholder values sent by form widgets never reach the record.
    """
    if slot.multiple:
        return [url for url in decode_list(slot.name, raw, allow_csv=slot.allow_csv) if is_absolute_url(url)]
    return decode_string(slot.name, raw)


def decode_string(name: str, raw: Any) -> str:
    if raw is None:
        return ""
    if not isinstance(raw, str):
        raise InvalidPayloadError(name, f"Field '{name}' must be a string")
    return raw.strip()


def decode_list(name: str, raw: Any, allow_csv: bool = False) -> list[str]:
    """Decode an array field.

    Accepts a native list of strings, a JSON-encoded array string, or
    (when `allow_csv`) a comma-separated string. An empty string or null
    decodes to an empty list.
    """
    if raw is None:
        return []
    if isinstance(raw, list):
        return _string_items(name, raw)
    if not isinstance(raw, str):
        raise InvalidPayloadError(name, f"Field '{name}' must be an array")

    text = raw.strip()
    if not text:
        return []
    try:
        parsed = json.loads(text)
    except ValueError:
        parsed = None
    if isinstance(parsed, list):
        return _string_items(name, parsed)
    if allow_csv:
        return [item.strip() for item in text.split(",") if item.strip()]
    raise InvalidPayloadError(name, f"Field '{name}' must be a valid JSON array")


def decode_bool(name: str, raw: Any) -> bool:
    """Decode a boolean from a native bool or a JSON "true"/"false" literal."""
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, str):
        try:
            parsed = json.loads(raw.strip())
        except ValueError:
            parsed = None
        if isinstance(parsed, bool):
            return parsed
    raise InvalidPayloadError(name, f"Field '{name}' must be true or false")


def decode_int(name: str, raw: Any) -> int:
    if isinstance(raw, bool):
        raise InvalidPayloadError(name, f"Field '{name}' must be an integer")
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str) and INT_RE.fullmatch(raw.strip()):
        return int(raw.strip())
    raise InvalidPayloadError(name, f"Field '{name}' must be an integer")


def decode_datetime(name: str, raw: Any) -> datetime:
    """Decode an ISO-8601 date or datetime. Naive values are taken as UTC."""
    if isinstance(raw, datetime):
        value = raw
    elif isinstance(raw, str):
        try:
            value = datetime.fromisoformat(raw.strip())
        except ValueError as e:
            raise InvalidPayloadError(name, f"Field '{name}' must be an ISO-8601 date") from e
    else:
        raise InvalidPayloadError(name, f"Field '{name}' must be an ISO-8601 date")

    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _string_items(name: str, items: list[Any]) -> list[str]:
    if not all(isinstance(item, str) for item in items):
        raise InvalidPayloadError(name, f"Field '{name}' must be an array of strings")
    return [item.strip() for item in items]
