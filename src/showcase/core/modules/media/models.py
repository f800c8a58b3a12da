from enum import StrEnum

from pydantic import BaseModel, Field


class MediaKind(StrEnum):
    """Kinds of media accepted by upload slots."""

    IMAGE = "image"
    VIDEO = "video"


class MediaFile(BaseModel):
    """File received from a client, held in memory until uploaded."""

    filename: str
    content: bytes
    content_type: str

    @property
    def size(self) -> int:
        return len(self.content)


class UploadedMedia(BaseModel):
    """Result of storing a file in the media store."""

    url: str = Field(..., description="Public URL of the stored file")
    public_id: str = Field(..., description="Store key, used to delete the file")
