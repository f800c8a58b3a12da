import asyncio
from collections.abc import Iterable
from pathlib import Path

import structlog

from showcase.core.core import Service
from showcase.core.modules.media.models import MediaFile, MediaKind, UploadedMedia
from showcase.core.modules.media.storage import delete_media_file, get_media_file_path, write_media_file
from showcase.core.modules.media.utils import build_media_url, build_public_id, public_id_from_url
from showcase.errors import NotFoundError, ValidationError

logger = structlog.get_logger(__name__)

MAX_FILES_PER_REQUEST = 10


class MediaService(Service):
    """Stores uploaded images and videos and serves them back by URL."""

    async def on_start(self) -> None:
        """Ensure the media directory exists."""
        Path(self.core.config.media_path).mkdir(parents=True, exist_ok=True)

    def validate_file(self, file: MediaFile, kind: MediaKind) -> None:
        """Check content type and size of a file before it is uploaded.

        Raises:
            ValidationError: If the file is of the wrong kind or too large
        """
        if not file.content_type.startswith(f"{kind.value}/"):
            raise ValidationError(f"Only {kind.value} files are allowed: {file.filename}")

        max_size = self.core.config.max_video_size if kind == MediaKind.VIDEO else self.core.config.max_image_size
        if file.size > max_size:
            raise ValidationError(f"File too large: {file.filename} ({file.size} bytes, max {max_size})")

    def validate_files(self, files: list[MediaFile], kind: MediaKind) -> None:
        if len(files) > MAX_FILES_PER_REQUEST:
            raise ValidationError(f"Maximum {MAX_FILES_PER_REQUEST} files allowed per request")
        for file in files:
            self.validate_file(file, kind)

    async def upload(self, file: MediaFile, folder: str) -> UploadedMedia:
        """Store a file under a folder and return its public URL and id."""
        public_id = build_public_id(folder, file.filename)
        await asyncio.to_thread(write_media_file, self.core.config.media_path, public_id, file.content)
        url = build_media_url(self.core.config.media_url, public_id)
        logger.debug("media_uploaded", public_id=public_id, size=file.size, content_type=file.content_type)
        return UploadedMedia(url=url, public_id=public_id)

    async def upload_many(self, files: list[MediaFile], folder: str) -> list[UploadedMedia]:
        """Upload files concurrently; results keep the input order.

        If any upload fails the error propagates and siblings already written stay on disk.
        """
        return list(await asyncio.gather(*(self.upload(file, folder) for file in files)))

    async def delete(self, public_id: str) -> None:
        """Delete a stored file. Missing files are ignored."""
        removed = await asyncio.to_thread(delete_media_file, self.core.config.media_path, public_id)
        logger.debug("media_deleted", public_id=public_id, removed=removed)

    async def discard_urls(self, urls: Iterable[str]) -> None:
        """Best-effort cleanup of media no longer referenced by any record.

        Foreign URLs are skipped. Failures are logged and never raised.
        """
        for url in urls:
            public_id = self.public_id_from_url(url)
            if public_id is None:
                continue
            try:
                await self.delete(public_id)
            except (OSError, ValueError) as e:
                logger.warning("media_cleanup_failed", url=url, error=str(e))

    def public_id_from_url(self, url: str) -> str | None:
        return public_id_from_url(self.core.config.media_url, url)

    def get_file_path(self, folder: str, filename: str) -> Path:
        """Resolve a stored file for download.

        Raises:
            NotFoundError: If the file does not exist
        """
        try:
            file_path = get_media_file_path(self.core.config.media_path, f"{folder}/{filename}")
        except ValueError as e:
            raise NotFoundError(f"Media not found: {folder}/{filename}") from e
        if not file_path.is_file():
            raise NotFoundError(f"Media not found: {folder}/{filename}")
        return file_path
