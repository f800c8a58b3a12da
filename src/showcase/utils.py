import re
from datetime import UTC, datetime

SLUG_RE = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


def is_slug(value: str) -> bool:
    return bool(SLUG_RE.fullmatch(value))


def slugify(title: str) -> str:
    """Derive a lowercase, hyphenated slug from a title.

    Non-ASCII letters and punctuation are dropped, not transliterated.
    """
    slug = title.lower()
    slug = re.sub(r"[^a-z0-9 ]", "", slug)
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")


def now() -> datetime:
    return datetime.now(UTC)
