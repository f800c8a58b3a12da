from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any
from uuid import UUID

from showcase.config import Config
from showcase.core.core import Core
from showcase.core.modules.access.models import AdminStats
from showcase.core.modules.auth.models import AuthSession, AuthToken
from showcase.core.modules.content.models import ContentStats, ContentType, ListFilters
from showcase.core.modules.content.payload import RawPayload
from showcase.core.modules.content.service import PublishableContentService
from showcase.core.modules.media.models import MediaFile, UploadedMedia
from showcase.core.modules.user.models import UserRole, UserStats, UserView
from showcase.core.pagination import PaginationResult
from showcase.errors import ValidationError


class App:
    """Facade for all application operations, validates permissions before delegating to Core."""

    def __init__(self, config: Config) -> None:
        self._core = Core(config)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Application lifespan management - delegates to Core."""
        async with self._core.lifespan():
            yield

    # Authentication

    async def is_auth_token_valid(self, auth_token: AuthToken) -> bool:
        """Check if authentication token is valid."""
        return self._core.services.auth.is_auth_token_valid(auth_token)

    async def register(self, name: str, email: str, password: str) -> AuthSession:
        """Register a regular user account and log it in."""
        return await self._core.services.auth.register(name, email, password)

    async def login(self, email: str, password: str) -> AuthSession:
        return self._core.services.auth.login(email, password)

    async def get_current_user(self, auth_token: AuthToken) -> UserView:
        user = await self._core.services.access.ensure_authenticated(auth_token)
        return UserView.from_domain(user)

    async def logout(self, auth_token: AuthToken) -> None:
        """Tokens are stateless, so logout only checks that the caller is authenticated."""
        await self._core.services.access.ensure_authenticated(auth_token)

    async def register_admin(self, auth_token: AuthToken | None, name: str, email: str, password: str) -> AuthSession:
        """Register an admin account.

        Open while no admin exists, afterwards only admins may register new admins.
        """
        if self._core.services.user.has_admin():
            if auth_token is None:
                raise ValidationError("Admin already exists. Log in as admin to register another one.")
            await self._core.services.access.ensure_admin(auth_token)
        return await self._core.services.auth.register(name, email, password, UserRole.ADMIN)

    async def login_admin(self, email: str, password: str) -> AuthSession:
        return await self._core.services.auth.login_admin(email, password)

    async def forgot_password(self, email: str) -> str | None:
        """Start a password reset.

        Returns the reset token only in debug mode, since there is no mail
        delivery. The response never reveals whether the email is registered.
        """
        token = await self._core.services.password_reset.request_reset(email)
        return token if self._core.config.debug else None

    async def reset_password(self, token: str, password: str) -> None:
        await self._core.services.password_reset.reset_password(token, password)

    # User administration

    async def get_users(self, auth_token: AuthToken, page: int, limit: int) -> PaginationResult[UserView]:
        """Get paginated users (admin only)."""
        await self._core.services.access.ensure_admin(auth_token)
        result = self._core.services.user.list_users(page, limit)
        return PaginationResult(
            items=[UserView.from_domain(user) for user in result.items], total=result.total, page=page, limit=limit
        )

    async def get_user(self, auth_token: AuthToken, user_id: UUID) -> UserView:
        await self._core.services.access.ensure_admin(auth_token)
        return UserView.from_domain(self._core.services.user.get_user(user_id))

    async def set_user_role(self, auth_token: AuthToken, user_id: UUID, role: UserRole) -> UserView:
        """Change a user's role (admin only, cannot demote self)."""
        current_user = await self._core.services.access.ensure_admin(auth_token)
        if user_id == current_user.id and role != UserRole.ADMIN:
            raise ValidationError("Cannot remove your own admin role")
        return UserView.from_domain(await self._core.services.user.set_role(user_id, role))

    async def set_user_status(self, auth_token: AuthToken, user_id: UUID, is_active: bool) -> UserView:
        """Activate or deactivate a user (admin only, cannot deactivate self)."""
        current_user = await self._core.services.access.ensure_admin(auth_token)
        if user_id == current_user.id and not is_active:
            raise ValidationError("Cannot deactivate yourself")
        return UserView.from_domain(await self._core.services.user.set_active(user_id, is_active))

    async def delete_user(self, auth_token: AuthToken, user_id: UUID) -> None:
        """Delete a user (admin only, cannot delete self)."""
        current_user = await self._core.services.access.ensure_admin(auth_token)
        if user_id == current_user.id:
            raise ValidationError("Cannot delete yourself")
        await self._core.services.user.delete_user(user_id)

    async def get_stats(self, auth_token: AuthToken) -> AdminStats:
        await self._core.services.access.ensure_admin(auth_token)
        users = self._core.services.user
        content: dict[str, ContentStats] = {}
        for content_type in ContentType:
            content[content_type.value] = ContentStats(
                total=await self._core.services.content(content_type).count(),
                last_id=await self._core.services.counter.current_id(content_type),
            )
        return AdminStats(
            users=UserStats(
                total=users.count_users(),
                admins=users.count_users(UserRole.ADMIN),
                active=sum(1 for user in users.get_all_users() if user.is_active),
            ),
            content=content,
        )

    # Content

    async def get_content_list(
        self, content_type: ContentType, page: int, limit: int, filters: ListFilters
    ) -> PaginationResult[Any]:
        """Get publicly visible records (no authentication)."""
        return await self._core.services.content(content_type).list_records(page, limit, filters, public=True)

    async def get_all_public_content(self, content_type: ContentType) -> list[Any]:
        """Get every publicly visible record, unpaginated (no authentication)."""
        return await self._core.services.content(content_type).list_all(public=True)

    async def get_content(self, content_type: ContentType, key: str) -> Any:
        """Get a publicly visible record by id or slug and count the view."""
        return await self._core.services.content(content_type).get_public(key)

    async def get_admin_content_list(
        self, auth_token: AuthToken, content_type: ContentType, page: int, limit: int, filters: ListFilters
    ) -> PaginationResult[Any]:
        """Get records of every status (admin only)."""
        await self._core.services.access.ensure_admin(auth_token)
        return await self._core.services.content(content_type).list_records(page, limit, filters, public=False)

    async def get_all_content(self, content_type: ContentType) -> list[Any]:
        """Get every record regardless of status, unpaginated (no authentication)."""
        return await self._core.services.content(content_type).list_all(public=False)

    async def create_content(self, auth_token: AuthToken, content_type: ContentType, payload: RawPayload) -> Any:
        """Create a record (admin only)."""
        current_user = await self._core.services.access.ensure_admin(auth_token)
        return await self._core.services.content(content_type).create(payload, current_user.id)

    async def update_content(
        self, auth_token: AuthToken, content_type: ContentType, record_id: int, payload: RawPayload
    ) -> Any:
        """Partially update a record (admin only)."""
        await self._core.services.access.ensure_admin(auth_token)
        return await self._core.services.content(content_type).update(record_id, payload)

    async def delete_content(self, auth_token: AuthToken, content_type: ContentType, record_id: int) -> None:
        await self._core.services.access.ensure_admin(auth_token)
        await self._core.services.content(content_type).delete(record_id)

    async def toggle_published(self, auth_token: AuthToken, content_type: ContentType, record_id: int) -> Any:
        """Flip `is_published` of a blog post or gallery item (admin only)."""
        await self._core.services.access.ensure_admin(auth_token)
        service = self._core.services.content(content_type)
        if not isinstance(service, PublishableContentService):
            raise ValidationError(f"Publishing is not supported for {content_type}")
        return await service.toggle_published(record_id)

    async def randomize_work_order(self, auth_token: AuthToken) -> int:
        await self._core.services.access.ensure_admin(auth_token)
        return await self._core.services.work.randomize_order()

    async def upload_content_images(
        self, auth_token: AuthToken, content_type: ContentType, files: list[MediaFile]
    ) -> list[UploadedMedia]:
        """Upload standalone images for a resource (admin only)."""
        await self._core.services.access.ensure_admin(auth_token)
        return await self._core.services.content(content_type).upload_images(files)

    # Media

    def get_media_file_path(self, folder: str, filename: str) -> Path:
        """Resolve a stored media file (public)."""
        return self._core.services.media.get_file_path(folder, filename)
