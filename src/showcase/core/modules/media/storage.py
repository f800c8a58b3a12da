"""File storage operations for uploaded media."""

from pathlib import Path

from showcase.core.modules.media.utils import is_valid_public_id


def write_media_file(media_path: str, public_id: str, content: bytes) -> Path:
    """Write media file to disk.

    Args:
        media_path: Base path for media storage
        public_id: Store key `<folder>/<name>`
        content: File content bytes

    Returns:
        Absolute path to written file
    """
    file_path = get_media_file_path(media_path, public_id)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_bytes(content)
    return file_path


def delete_media_file(media_path: str, public_id: str) -> bool:
    """Delete media file from disk.

    Returns:
        True if a file was removed, False if it did not exist
    """
    file_path = get_media_file_path(media_path, public_id)
    if not file_path.exists():
        return False
    file_path.unlink()
    return True


def get_media_file_path(media_path: str, public_id: str) -> Path:
    """Get absolute path to a media file.

    Raises:
        ValueError: If the store key could escape the media directory
    """
    if not is_valid_public_id(public_id):
        raise ValueError(f"Invalid media id: {public_id}")
    return Path(media_path) / public_id
