from datetime import datetime
from uuid import UUID

from pydantic import Field

from showcase.core.db import MongoModel
from showcase.utils import now


class PasswordReset(MongoModel):
    """Single-use password reset token.

    Only the sha256 of the token is stored. Indexed on token_hash - unique,
    expires_at (TTL).
    """

    user_id: UUID
    token_hash: str
    expires_at: datetime
    created_at: datetime = Field(default_factory=now)
