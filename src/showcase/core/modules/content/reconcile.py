"""Merging a typed change set into the stored state of a content record.

All functions here are pure: they take plain dicts and return new ones.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from showcase.core.modules.content.fields import ContentSchema, MediaSlot
from showcase.errors import ValidationError
from showcase.utils import slugify


def resolve_single_media(uploaded: str | None, provided: str | None, existing: str | None) -> str:
    """Pick the URL for a single media slot.

    Precedence: freshly uploaded file, then a URL given in the payload
    (an explicit "" clears), then the stored value. Defaults to "".
    """
    for candidate in (uploaded, provided, existing):
        if candidate is not None:
            return candidate
    return ""


def resolve_multiple_media(
    uploaded: list[str], provided: list[str] | None, existing: list[str] | None, cap: int | None = None
) -> list[str]:
    """Build the URL list for a multiple media slot.

    The base list is the one given in the payload, or the stored list when
    the payload has none. Uploaded URLs are appended in upload order and the
    result is truncated to `cap`.
    """
    base = provided if provided is not None else (existing or [])
    urls = [*base, *uploaded]
    if cap is not None:
        return urls[:cap]
    return urls


def reconcile(
    schema: ContentSchema,
    existing: Mapping[str, Any] | None,
    changes: Mapping[str, Any],
    uploads: Mapping[str, list[str]],
) -> dict[str, Any]:
    """Compute the next state of a record.

    Args:
        schema: Field table of the resource
        existing: Stored state, or None on create
        changes: Typed sparse change set from `decode_payload`
        uploads: URLs of files uploaded in this request, per media slot

    Returns:
        New state dict. Fields absent from both `existing` and `changes` are
        left out so the record model applies its defaults.

    Raises:
        ValidationError: If a new title yields an empty slug
    """
    state = dict(existing) if existing is not None else {}
    media_names = {slot.name for slot in schema.media}

    for name, value in changes.items():
        if name not in media_names:
            state[name] = value

    for slot in schema.media:
        state[slot.name] = _resolve_slot(slot, existing, changes, uploads.get(slot.name, []))

    if schema.sluggable and "title" in changes:
        slug = slugify(changes["title"])
        if not slug:
            raise ValidationError("Title must contain at least one letter or digit")
        state["slug"] = slug

    return state


def media_urls(schema: ContentSchema, state: Mapping[str, Any]) -> list[str]:
    """All non-empty media URLs referenced by a record state."""
    urls: list[str] = []
    for slot in schema.media:
        value = state.get(slot.name)
        if slot.multiple:
            urls.extend(url for url in value or [] if url)
        elif value:
            urls.append(value)
    return urls


def orphaned_media(schema: ContentSchema, before: Mapping[str, Any], after: Mapping[str, Any]) -> list[str]:
    """URLs referenced before an update and no longer referenced after it."""
    still_used = set(media_urls(schema, after))
    return _unique(url for url in media_urls(schema, before) if url not in still_used)


def _resolve_slot(
    slot: MediaSlot, existing: Mapping[str, Any] | None, changes: Mapping[str, Any], uploaded: list[str]
) -> str | list[str]:
    stored = existing.get(slot.name) if existing is not None else None
    if slot.multiple:
        return resolve_multiple_media(uploaded, changes.get(slot.name), stored, slot.cap)
    return resolve_single_media(uploaded[0] if uploaded else None, changes.get(slot.name), stored)


def _unique(urls: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(urls))
