"""Tests for registration, login, tokens and password reset."""

import asyncio
from datetime import timedelta

import jwt
import pytest

from showcase.app import App
from showcase.core.modules.auth.models import AuthToken
from showcase.core.modules.content.models import ContentType
from showcase.core.modules.content.payload import RawPayload
from showcase.core.modules.user.models import UserRole
from showcase.errors import AccessDeniedError, AuthenticationError, DuplicateError, ValidationError
from showcase.utils import now


@pytest.fixture
def app(core):
    """Create an App facade around the in-memory core."""
    instance = App.__new__(App)
    instance._core = core
    asyncio.run(core.services.start_all())
    return instance


class TestTokens:
    """Tests for JWT issue and verification."""

    @pytest.fixture(autouse=True)
    def setup(self, core, app):
        """Set up a registered user for all tests in this class."""
        self.core = core
        self.auth = core.services.auth
        self.session = asyncio.run(app.register("Ada", "Ada@Example.com", "secret1"))

    def test_register_normalizes_email(self):
        """Test that emails are stored lower-cased and the user is a regular user."""
        assert self.session.user.email == "ada@example.com"
        assert self.session.user.role == UserRole.USER

    def test_token_resolves_user(self):
        """Test that the issued token authenticates its user."""
        user = self.auth.get_authenticated_user(AuthToken(self.session.token))
        assert user.id == self.session.user.id

    def test_tampered_token_rejected(self):
        """Test that a token signed with another secret is rejected."""
        forged = jwt.encode({"sub": str(self.session.user.id)}, "other-secret-with-enough-length-xx", algorithm="HS256")
        assert not self.auth.is_auth_token_valid(AuthToken(forged))
        with pytest.raises(AuthenticationError):
            self.auth.get_authenticated_user(AuthToken("not-a-jwt"))

    def test_expired_token_rejected(self):
        """Test that expired tokens are rejected."""
        config = self.core.config
        payload = {"sub": str(self.session.user.id), "exp": now() - timedelta(minutes=1)}
        expired = jwt.encode(payload, config.jwt_secret, algorithm=config.jwt_algorithm)
        assert not self.auth.is_auth_token_valid(AuthToken(expired))

    def test_login(self):
        """Test login with correct and wrong passwords."""
        session = self.auth.login("ada@example.com", "secret1")
        assert session.user.id == self.session.user.id
        with pytest.raises(AuthenticationError, match="Invalid email or password"):
            self.auth.login("ada@example.com", "wrong-password")

    def test_duplicate_email(self):
        """Test that an email can be registered once."""
        with pytest.raises(DuplicateError):
            asyncio.run(self.auth.register("Other", "ada@example.com", "secret2"))

    def test_weak_password(self):
        """Test the minimum password length."""
        with pytest.raises(ValidationError, match="at least 6"):
            asyncio.run(self.auth.register("Bob", "bob@example.com", "abc"))

    def test_deactivated_user_cannot_authenticate(self):
        """Test that deactivation locks out both login and existing tokens."""
        asyncio.run(self.core.services.user.set_active(self.session.user.id, False))
        with pytest.raises(AuthenticationError, match="deactivated"):
            self.auth.login("ada@example.com", "secret1")
        assert not self.auth.is_auth_token_valid(AuthToken(self.session.token))


class TestAdminBootstrap:
    """Tests for the first-admin rules."""

    @pytest.fixture(autouse=True)
    def setup(self, app):
        """Set up the app for all tests in this class."""
        self.app = app

    def test_admin_register_open_until_first_admin(self):
        """Test that admin registration needs an admin token once an admin exists."""
        first = asyncio.run(self.app.register_admin(None, "Root", "root@example.com", "secret1"))
        assert first.user.role == UserRole.ADMIN

        with pytest.raises(ValidationError, match="Admin already exists"):
            asyncio.run(self.app.register_admin(None, "Eve", "eve@example.com", "secret1"))

        second = asyncio.run(self.app.register_admin(AuthToken(first.token), "Sam", "sam@example.com", "secret1"))
        assert second.user.role == UserRole.ADMIN

    def test_non_admin_cannot_register_admin(self):
        """Test that a regular user's token is refused once an admin exists."""
        asyncio.run(self.app.register_admin(None, "Root", "root@example.com", "secret1"))
        user = asyncio.run(self.app.register("Eve", "eve@example.com", "secret1"))
        with pytest.raises(AccessDeniedError):
            asyncio.run(self.app.register_admin(AuthToken(user.token), "Mal", "mal@example.com", "secret1"))

    def test_first_admin_login_promotes(self):
        """Test that the first admin login promotes the user, later non-admins are refused."""
        asyncio.run(self.app.register("Ada", "ada@example.com", "secret1"))
        asyncio.run(self.app.register("Bob", "bob@example.com", "secret1"))

        session = asyncio.run(self.app.login_admin("ada@example.com", "secret1"))
        assert session.user.role == UserRole.ADMIN
        with pytest.raises(AccessDeniedError):
            asyncio.run(self.app.login_admin("bob@example.com", "secret1"))

    def test_admin_cannot_demote_or_delete_self(self):
        """Test the self-protection rules of user administration."""
        admin = asyncio.run(self.app.register_admin(None, "Root", "root@example.com", "secret1"))
        token = AuthToken(admin.token)
        with pytest.raises(ValidationError, match="own admin role"):
            asyncio.run(self.app.set_user_role(token, admin.user.id, UserRole.USER))
        with pytest.raises(ValidationError, match="deactivate yourself"):
            asyncio.run(self.app.set_user_status(token, admin.user.id, False))
        with pytest.raises(ValidationError, match="delete yourself"):
            asyncio.run(self.app.delete_user(token, admin.user.id))

    def test_content_writes_require_admin(self):
        """Test that regular users cannot create content."""
        user = asyncio.run(self.app.register("Eve", "eve@example.com", "secret1"))
        payload = RawPayload(fields={"title": "Hack", "short_description": "s"})
        with pytest.raises(AccessDeniedError):
            asyncio.run(self.app.create_content(AuthToken(user.token), ContentType.BLOG, payload))

    def test_stats(self):
        """Test dashboard counters."""
        admin = asyncio.run(self.app.register_admin(None, "Root", "root@example.com", "secret1"))
        token = AuthToken(admin.token)
        payload = RawPayload(fields={"title": "Hello", "short_description": "s"})
        created = asyncio.run(self.app.create_content(token, ContentType.BLOG, payload))
        assert created.author_id == admin.user.id

        stats = asyncio.run(self.app.get_stats(token))
        assert stats.users.total == 1
        assert stats.users.admins == 1
        assert stats.content["blog"].total == 1
        assert stats.content["blog"].last_id == 1
        assert stats.content["event"].total == 0


class TestPasswordReset:
    """Tests for the forgot/reset password flow."""

    @pytest.fixture(autouse=True)
    def setup(self, core, app):
        """Set up a registered user for all tests in this class."""
        self.core = core
        self.app = app
        self.resets = core.services.password_reset
        asyncio.run(app.register("Ada", "ada@example.com", "secret1"))

    def test_reset_and_login(self):
        """Test that a reset token sets a new password exactly once."""
        token = asyncio.run(self.resets.request_reset("ada@example.com"))
        assert token is not None
        asyncio.run(self.resets.reset_password(token, "new-secret"))

        assert self.core.services.auth.login("ada@example.com", "new-secret")
        with pytest.raises(ValidationError, match="Invalid or expired"):
            asyncio.run(self.resets.reset_password(token, "another-secret"))

    def test_unknown_email(self):
        """Test that unknown emails get no token."""
        assert asyncio.run(self.resets.request_reset("nobody@example.com")) is None

    def test_token_hidden_outside_debug(self):
        """Test that the facade only returns the token in debug mode."""
        assert asyncio.run(self.app.forgot_password("ada@example.com")) is None
        self.core.config.debug = True
        assert asyncio.run(self.app.forgot_password("ada@example.com")) is not None

    def test_expired_token(self, database):
        """Test that expired tokens are rejected."""
        token = asyncio.run(self.resets.request_reset("ada@example.com"))
        for doc in database.get_collection("password_resets").docs.values():
            doc["expires_at"] = now() - timedelta(seconds=1)
        with pytest.raises(ValidationError, match="Invalid or expired"):
            asyncio.run(self.resets.reset_password(token, "new-secret"))

    def test_weak_password_keeps_token(self):
        """Test that a rejected password does not consume the token."""
        token = asyncio.run(self.resets.request_reset("ada@example.com"))
        with pytest.raises(ValidationError, match="at least 6"):
            asyncio.run(self.resets.reset_password(token, "abc"))
        asyncio.run(self.resets.reset_password(token, "new-secret"))
