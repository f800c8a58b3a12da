"""Utility functions for media naming and URL handling."""

import re
from pathlib import Path
from urllib.parse import urlparse
from uuid import uuid4


def build_public_id(folder: str, filename: str) -> str:
    """Build a unique store key `<folder>/<hex>__<sanitized filename>`."""
    return f"{folder}/{uuid4().hex}__{sanitize_filename(filename)}"


def build_media_url(media_url: str, public_id: str) -> str:
    return f"{media_url.rstrip('/')}/{public_id}"


def public_id_from_url(media_url: str, url: str) -> str | None:
    """Recover the store key from a public URL.

    Returns None for URLs that do not point into this media store, such as
    images hosted elsewhere and pasted in as plain URLs.
    """
    prefix = media_url.rstrip("/") + "/"
    if not url.startswith(prefix):
        return None
    public_id = url[len(prefix) :]
    if not is_valid_public_id(public_id):
        return None
    return public_id


def is_valid_public_id(public_id: str) -> bool:
    """Check that a store key is exactly `<folder>/<name>` with no traversal."""
    parts = public_id.split("/")
    return len(parts) == 2 and all(part and part not in {".", ".."} for part in parts)


def is_absolute_url(value: str) -> bool:
    """Check for a well-formed absolute http(s) URL."""
    parsed = urlparse(value)
    return parsed.scheme in {"http", "https"} and bool(parsed.netloc)


def sanitize_filename(filename: str) -> str:
    """Sanitize filename for use in a storage key and a URL path.

    Removes path components and anything outside ASCII letters, digits,
    dots, hyphens and underscores, while preserving the file extension.

    Args:
        filename: Original filename from user

    Returns:
        Sanitized filename safe for filesystem and URL use
    """
    # Remove path components to prevent traversal attacks
    filename = Path(filename).name

    # Remove leading dots to prevent hidden files
    filename = filename.lstrip(".")

    # Whitespace becomes hyphens, other unsafe characters become underscores
    sanitized = re.sub(r"\s+", "-", filename.strip())
    sanitized = re.sub(r"[^A-Za-z0-9._-]", "_", sanitized)
    sanitized = re.sub(r"_+", "_", sanitized)
    sanitized = re.sub(r"-+", "-", sanitized)

    # Limit length to 100 characters while preserving extension
    if len(sanitized) > 100:
        parts = sanitized.rsplit(".", 1)
        if len(parts) == 2:
            name, ext = parts
            max_name_len = 96 - len(ext)
            sanitized = f"{name[:max_name_len]}.{ext}" if max_name_len > 0 else f"file.{ext[:95]}"
        else:
            sanitized = sanitized[:100]

    # Only separators left means nothing meaningful survived
    if not sanitized or not re.sub(r"[._-]", "", sanitized):
        sanitized = "unnamed_file"

    return sanitized
