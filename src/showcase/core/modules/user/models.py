from datetime import datetime
from enum import StrEnum
from uuid import UUID

from pydantic import BaseModel, Field

from showcase.core.db import MongoModel
from showcase.utils import now


class UserRole(StrEnum):
    USER = "user"
    ADMIN = "admin"


class User(MongoModel):
    """User domain model with credentials. Indexed on email - unique."""

    name: str
    email: str  # Stored lower-cased
    password_hash: str  # bcrypt hash
    role: UserRole = UserRole.USER
    is_active: bool = True
    created_at: datetime = Field(default_factory=now)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


class UserView(BaseModel):
    """User account information (API representation)."""

    id: UUID = Field(..., description="User ID")
    name: str = Field(..., description="Display name")
    email: str = Field(..., description="Email address")
    role: UserRole = Field(..., description="User role")
    is_active: bool = Field(..., description="Whether the user can log in")
    created_at: datetime = Field(..., description="Registration timestamp")

    @classmethod
    def from_domain(cls, user: User) -> "UserView":
        """Create view model from domain model."""
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            role=user.role,
            is_active=user.is_active,
            created_at=user.created_at,
        )


class UserStats(BaseModel):
    total: int = Field(..., description="Number of registered users")
    admins: int = Field(..., description="Number of admin users")
    active: int = Field(..., description="Number of active users")
