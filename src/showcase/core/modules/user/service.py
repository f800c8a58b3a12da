from types import MappingProxyType
from typing import Any
from uuid import UUID

import bcrypt
import structlog
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import DuplicateKeyError

from showcase.core.core import Service
from showcase.core.db import storage_errors
from showcase.core.modules.user.models import User, UserRole
from showcase.core.modules.user.validators import normalize_email, validate_name, validate_password
from showcase.core.pagination import PaginationResult, page_offset
from showcase.errors import AuthenticationError, DuplicateError, NotFoundError

logger = structlog.get_logger(__name__)


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def check_password(password: str, password_hash: str) -> bool:
    return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))


class UserService(Service):
    """Manages users with in-memory cache."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("users")
        self._users: dict[UUID, User] = {}

    def get_user(self, user_id: UUID) -> User:
        """Get user by ID from cache."""
        if user_id not in self._users:
            raise NotFoundError(f"User '{user_id}' not found")
        return self._users[user_id]

    def get_user_by_email(self, email: str) -> User:
        """Get user by email from cache."""
        email = email.strip().lower()
        user = next((u for u in self._users.values() if u.email == email), None)
        if user is None:
            raise NotFoundError(f"User '{email}' not found")
        return user

    def has_user(self, user_id: UUID) -> bool:
        """Check if user exists by ID."""
        return user_id in self._users

    def has_email(self, email: str) -> bool:
        """Check if email is registered."""
        email = email.strip().lower()
        return any(user.email == email for user in self._users.values())

    def has_admin(self) -> bool:
        """Check if at least one admin account exists."""
        return any(user.is_admin for user in self._users.values())

    def get_all_users(self) -> list[User]:
        """Get all users from cache, newest first."""
        return sorted(self._users.values(), key=lambda u: u.created_at, reverse=True)

    def get_user_cache(self) -> MappingProxyType[UUID, User]:
        """Get read-only view of user cache."""
        return MappingProxyType(self._users)

    def list_users(self, page: int = 1, limit: int = 10) -> PaginationResult[User]:
        users = self.get_all_users()
        offset = page_offset(page, limit)
        return PaginationResult(items=users[offset : offset + limit], total=len(users), page=page, limit=limit)

    def count_users(self, role: UserRole | None = None) -> int:
        if role is None:
            return len(self._users)
        return sum(1 for user in self._users.values() if user.role == role)

    async def create_user(self, name: str, email: str, password: str, role: UserRole = UserRole.USER) -> User:
        """Create user with hashed password."""
        name = validate_name(name)
        email = normalize_email(email)
        if self.has_email(email):
            raise DuplicateError(f"User '{email}' already exists")

        validate_password(password)
        user = User(name=name, email=email, password_hash=hash_password(password), role=role)
        try:
            with storage_errors():
                res = await self._collection.insert_one(user.to_mongo())
        except DuplicateKeyError as e:
            raise DuplicateError(f"User '{email}' already exists") from e

        logger.info("user_created", user_id=user.id, role=role)
        return await self.update_user_cache(res.inserted_id)

    def verify_credentials(self, email: str, password: str) -> User:
        """Check email and password of an active user.

        Raises:
            AuthenticationError: On unknown email, wrong password or inactive account
        """
        email = email.strip().lower()
        user = next((u for u in self._users.values() if u.email == email), None)
        if user is None or not check_password(password, user.password_hash):
            raise AuthenticationError("Invalid email or password")
        if not user.is_active:
            raise AuthenticationError("Account is deactivated")
        return user

    async def set_role(self, user_id: UUID, role: UserRole) -> User:
        self.get_user(user_id)
        await self._update(user_id, {"role": role})
        logger.info("user_role_changed", user_id=user_id, role=role)
        return await self.update_user_cache(user_id)

    async def set_active(self, user_id: UUID, is_active: bool) -> User:
        self.get_user(user_id)
        await self._update(user_id, {"is_active": is_active})
        logger.info("user_status_changed", user_id=user_id, is_active=is_active)
        return await self.update_user_cache(user_id)

    async def set_password(self, user_id: UUID, password: str) -> None:
        """Replace the password without checking the current one (used by password reset)."""
        self.get_user(user_id)
        validate_password(password)
        await self._update(user_id, {"password_hash": hash_password(password)})
        await self.update_user_cache(user_id)

    async def delete_user(self, user_id: UUID) -> None:
        """Delete a user from the system."""
        if not self.has_user(user_id):
            raise NotFoundError(f"User '{user_id}' not found")

        with storage_errors():
            await self._collection.delete_one({"_id": user_id})
        del self._users[user_id]
        logger.info("user_deleted", user_id=user_id)

    async def update_all_users_cache(self) -> None:
        """Reload all users cache from database."""
        with storage_errors():
            users = await User.list_cursor(self._collection.find())
        self._users = {user.id: user for user in users}

    async def update_user_cache(self, user_id: UUID) -> User:
        """Reload a specific user cache from database."""
        with storage_errors():
            user = await self._collection.find_one({"_id": user_id})
        if user is None:
            raise NotFoundError(f"User '{user_id}' not found")
        self._users[user_id] = User.model_validate(user)
        return self._users[user_id]

    async def _update(self, user_id: UUID, fields: dict[str, Any]) -> None:
        with storage_errors():
            await self._collection.update_one({"_id": user_id}, {"$set": fields})

    async def on_start(self) -> None:
        """Initialize indexes and cache."""
        await self._collection.create_index([("email", 1)], unique=True)
        await self.update_all_users_cache()
        logger.debug("user_service_started", user_count=len(self._users))
