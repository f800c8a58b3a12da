"""Authentication token types."""

from typing import NewType

from pydantic import BaseModel, Field

from showcase.core.modules.user.models import UserView

AuthToken = NewType("AuthToken", str)


class AuthSession(BaseModel):
    """Issued token together with the authenticated user."""

    token: str = Field(..., description="JWT to send as 'Authorization: Bearer <token>'")
    user: UserView = Field(..., description="Authenticated user")
