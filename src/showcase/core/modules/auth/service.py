from datetime import timedelta
from uuid import UUID

import jwt
import structlog

from showcase.core.core import Service
from showcase.core.modules.auth.models import AuthSession, AuthToken
from showcase.core.modules.user.models import User, UserRole, UserView
from showcase.errors import AccessDeniedError, AuthenticationError
from showcase.utils import now

logger = structlog.get_logger(__name__)


class AuthService(Service):
    """Issues and verifies stateless JWT access tokens."""

    def issue_token(self, user: User) -> AuthToken:
        config = self.core.config
        issued_at = now()
        payload = {
            "sub": str(user.id),
            "role": user.role.value,
            "iat": issued_at,
            "exp": issued_at + timedelta(days=config.jwt_expire_days),
        }
        return AuthToken(jwt.encode(payload, config.jwt_secret, algorithm=config.jwt_algorithm))

    def get_authenticated_user(self, auth_token: AuthToken) -> User:
        """Resolve a token to an active user.

        Raises:
            AuthenticationError: If the token is invalid, expired, or the user is gone or inactive
        """
        config = self.core.config
        try:
            payload = jwt.decode(auth_token, config.jwt_secret, algorithms=[config.jwt_algorithm])
            user_id = UUID(str(payload["sub"]))
        except (jwt.InvalidTokenError, KeyError, ValueError) as e:
            raise AuthenticationError("Invalid or expired token") from e

        if not self.core.services.user.has_user(user_id):
            raise AuthenticationError("Invalid or expired token")
        user = self.core.services.user.get_user(user_id)
        if not user.is_active:
            raise AuthenticationError("Account is deactivated")
        return user

    def is_auth_token_valid(self, auth_token: AuthToken) -> bool:
        try:
            self.get_authenticated_user(auth_token)
        except AuthenticationError:
            return False
        return True

    def session(self, user: User) -> AuthSession:
        return AuthSession(token=self.issue_token(user), user=UserView.from_domain(user))

    async def register(self, name: str, email: str, password: str, role: UserRole = UserRole.USER) -> AuthSession:
        user = await self.core.services.user.create_user(name, email, password, role)
        return self.session(user)

    def login(self, email: str, password: str) -> AuthSession:
        user = self.core.services.user.verify_credentials(email, password)
        logger.debug("user_logged_in", user_id=user.id)
        return self.session(user)

    async def login_admin(self, email: str, password: str) -> AuthSession:
        """Log in to the admin panel.

        While no admin exists, the first user to log in here is promoted to admin.
        """
        users = self.core.services.user
        user = users.verify_credentials(email, password)
        if not user.is_admin:
            if users.has_admin():
                raise AccessDeniedError("Admin privileges required")
            user = await users.set_role(user.id, UserRole.ADMIN)
            logger.warning("first_admin_promoted", user_id=user.id)
        return self.session(user)
