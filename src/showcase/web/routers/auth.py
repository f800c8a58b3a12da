from fastapi import APIRouter
from pydantic import BaseModel, Field

from showcase.core.modules.auth.models import AuthSession
from showcase.core.modules.user.models import UserView
from showcase.web.deps import AppDep, AuthTokenDep, OptionalAuthTokenDep
from showcase.web.openapi import ErrorResponse

router = APIRouter(prefix="/auth", tags=["auth"])


class RegisterRequest(BaseModel):
    """Account registration request."""

    name: str = Field(..., description="Display name")
    email: str = Field(..., description="Email address, used to log in")
    password: str = Field(..., description="Password, at least 6 characters")


class LoginRequest(BaseModel):
    """Authentication request."""

    email: str = Field(..., description="Email for authentication")
    password: str = Field(..., description="Password for authentication")


class ForgotPasswordRequest(BaseModel):
    email: str = Field(..., description="Email of the account to reset")


class ForgotPasswordResponse(BaseModel):
    message: str = Field(..., description="Confirmation message")
    reset_token: str | None = Field(None, description="Reset token, only returned in debug mode")


class ResetPasswordRequest(BaseModel):
    token: str = Field(..., description="Reset token from the forgot-password step")
    password: str = Field(..., description="New password")


@router.post(
    "/register",
    summary="Register",
    description="Create a user account and receive a token.",
    operation_id="register",
    status_code=201,
    responses={
        201: {"description": "Account created"},
        400: {"model": ErrorResponse, "description": "Invalid name, email or password"},
        409: {"model": ErrorResponse, "description": "Email already registered"},
    },
)
async def register(data: RegisterRequest, app: AppDep) -> AuthSession:
    return await app.register(data.name, data.email, data.password)


@router.post(
    "/login",
    summary="Authenticate user",
    description="Authenticate with email and password to receive a token.",
    operation_id="login",
    responses={
        200: {"description": "Successfully authenticated"},
        401: {"model": ErrorResponse, "description": "Invalid credentials or deactivated account"},
    },
)
async def login(data: LoginRequest, app: AppDep) -> AuthSession:
    return await app.login(data.email, data.password)


@router.get(
    "/me",
    summary="Current user",
    description="Get the account behind the bearer token.",
    operation_id="getCurrentUser",
    responses={
        200: {"description": "Current user"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def get_me(app: AppDep, auth_token: AuthTokenDep) -> UserView:
    return await app.get_current_user(auth_token)


@router.post(
    "/logout",
    summary="Log out",
    description="Tokens are stateless; clients discard theirs. Only checks the token is valid.",
    operation_id="logout",
    status_code=204,
    responses={
        204: {"description": "Successfully logged out"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def logout(app: AppDep, auth_token: AuthTokenDep) -> None:
    await app.logout(auth_token)


@router.post(
    "/admin/register",
    summary="Register admin",
    description="Create an admin account. Open until the first admin exists, then requires an admin token.",
    operation_id="registerAdmin",
    status_code=201,
    responses={
        201: {"description": "Admin account created"},
        400: {"model": ErrorResponse, "description": "Invalid data, or an admin exists and no token was sent"},
        401: {"model": ErrorResponse, "description": "Invalid token"},
        403: {"model": ErrorResponse, "description": "Admin privileges required"},
        409: {"model": ErrorResponse, "description": "Email already registered"},
    },
)
async def register_admin(data: RegisterRequest, app: AppDep, auth_token: OptionalAuthTokenDep) -> AuthSession:
    return await app.register_admin(auth_token, data.name, data.email, data.password)


@router.post(
    "/admin/login",
    summary="Authenticate admin",
    description="Log in to the admin panel. While no admin exists, the first user to log in is promoted.",
    operation_id="loginAdmin",
    responses={
        200: {"description": "Successfully authenticated"},
        401: {"model": ErrorResponse, "description": "Invalid credentials"},
        403: {"model": ErrorResponse, "description": "Not an admin"},
    },
)
async def login_admin(data: LoginRequest, app: AppDep) -> AuthSession:
    return await app.login_admin(data.email, data.password)


@router.post(
    "/forgot-password",
    summary="Request password reset",
    description="Create a reset token valid for 15 minutes. The response is the same whether or not the email exists.",
    operation_id="forgotPassword",
)
async def forgot_password(data: ForgotPasswordRequest, app: AppDep) -> ForgotPasswordResponse:
    token = await app.forgot_password(data.email)
    return ForgotPasswordResponse(message="If the email is registered, a reset link has been issued", reset_token=token)


@router.post(
    "/reset-password",
    summary="Reset password",
    description="Set a new password using a reset token. Each token works once.",
    operation_id="resetPassword",
    status_code=204,
    responses={
        204: {"description": "Password changed"},
        400: {"model": ErrorResponse, "description": "Invalid or expired token, or weak password"},
    },
)
async def reset_password(data: ResetPasswordRequest, app: AppDep) -> None:
    await app.reset_password(data.token, data.password)
