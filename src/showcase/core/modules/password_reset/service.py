import hashlib
import secrets
from datetime import timedelta
from typing import Any

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from showcase.core.core import Service
from showcase.core.db import storage_errors
from showcase.core.modules.password_reset.models import PasswordReset
from showcase.core.modules.user.validators import validate_password
from showcase.errors import NotFoundError, ValidationError
from showcase.utils import now

logger = structlog.get_logger(__name__)

RESET_TOKEN_TTL = timedelta(minutes=15)


def hash_reset_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


class PasswordResetService(Service):
    """Issues and redeems password reset tokens."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("password_resets")

    async def on_start(self) -> None:
        """Create indexes on startup."""
        await self._collection.create_index([("token_hash", 1)], unique=True)
        # TTL index removes expired tokens
        await self._collection.create_index([("expires_at", 1)], expireAfterSeconds=0)

    async def request_reset(self, email: str) -> str | None:
        """Create a reset token for the account with this email.

        Returns:
            The raw token, or None when no such account exists (callers must not reveal which)
        """
        users = self.core.services.user
        if not users.has_email(email):
            logger.debug("password_reset_unknown_email")
            return None

        user = users.get_user_by_email(email)
        token = secrets.token_urlsafe(32)
        reset = PasswordReset(user_id=user.id, token_hash=hash_reset_token(token), expires_at=now() + RESET_TOKEN_TTL)
        with storage_errors():
            await self._collection.delete_many({"user_id": user.id})
            await self._collection.insert_one(reset.to_mongo())
        logger.info("password_reset_requested", user_id=user.id)
        return token

    async def reset_password(self, token: str, password: str) -> None:
        """Set a new password using a reset token. The token is consumed.

        Raises:
            ValidationError: If the password is too weak or the token is unknown or expired
        """
        validate_password(password)
        with storage_errors():
            doc = await self._collection.find_one_and_delete({"token_hash": hash_reset_token(token)})
        if doc is None:
            raise ValidationError("Invalid or expired reset token")

        reset = PasswordReset.model_validate(doc)
        if reset.expires_at <= now():
            raise ValidationError("Invalid or expired reset token")
        try:
            await self.core.services.user.set_password(reset.user_id, password)
        except NotFoundError as e:
            raise ValidationError("Invalid or expired reset token") from e
        logger.info("password_reset_completed", user_id=reset.user_id)
