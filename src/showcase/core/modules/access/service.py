from showcase.core.core import Service
from showcase.core.modules.auth.models import AuthToken
from showcase.core.modules.user.models import User
from showcase.errors import AccessDeniedError


class AccessService(Service):
    async def ensure_authenticated(self, auth_token: AuthToken) -> User:
        """Ensure the user is authenticated."""
        return self.core.services.auth.get_authenticated_user(auth_token)

    async def ensure_admin(self, auth_token: AuthToken) -> User:
        """Ensure the authenticated user is admin, raise AccessDeniedError if not."""
        user = self.core.services.auth.get_authenticated_user(auth_token)
        if not user.is_admin:
            raise AccessDeniedError("Admin privileges required")
        return user
