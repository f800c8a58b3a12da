from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query
from pydantic import BaseModel, Field

from showcase.core.modules.access.models import AdminStats
from showcase.core.modules.user.models import UserRole, UserView
from showcase.core.pagination import PaginationResult
from showcase.web.deps import AppDep, AuthTokenDep
from showcase.web.openapi import ErrorResponse

router = APIRouter(prefix="/admin", tags=["admin"])

ADMIN_ERRORS = {
    401: {"model": ErrorResponse, "description": "Not authenticated"},
    403: {"model": ErrorResponse, "description": "Admin privileges required"},
}
USER_ERRORS = {**ADMIN_ERRORS, 404: {"model": ErrorResponse, "description": "User not found"}}


class UpdateRoleRequest(BaseModel):
    role: UserRole = Field(..., description="New role")


class UpdateStatusRequest(BaseModel):
    is_active: bool = Field(..., description="Whether the user can log in")


@router.get(
    "/users",
    summary="List users",
    description="Get users, newest first, with pagination.",
    operation_id="listUsers",
    responses=ADMIN_ERRORS,
)
async def list_users(
    app: AppDep,
    auth_token: AuthTokenDep,
    page: Annotated[int, Query(ge=1, description="Page number (1-based)")] = 1,
    limit: Annotated[int, Query(ge=1, le=100, description="Items per page")] = 10,
) -> PaginationResult[UserView]:
    return await app.get_users(auth_token, page, limit)


@router.get(
    "/users/{user_id}",
    summary="Get user",
    operation_id="getUser",
    responses=USER_ERRORS,
)
async def get_user(user_id: UUID, app: AppDep, auth_token: AuthTokenDep) -> UserView:
    return await app.get_user(auth_token, user_id)


@router.put(
    "/users/{user_id}/role",
    summary="Change user role",
    description="Promote or demote a user. Admins cannot demote themselves.",
    operation_id="updateUserRole",
    responses={**USER_ERRORS, 400: {"model": ErrorResponse, "description": "Cannot demote yourself"}},
)
async def update_user_role(user_id: UUID, data: UpdateRoleRequest, app: AppDep, auth_token: AuthTokenDep) -> UserView:
    return await app.set_user_role(auth_token, user_id, data.role)


@router.put(
    "/users/{user_id}/status",
    summary="Activate or deactivate user",
    description="Deactivated users cannot log in. Admins cannot deactivate themselves.",
    operation_id="updateUserStatus",
    responses={**USER_ERRORS, 400: {"model": ErrorResponse, "description": "Cannot deactivate yourself"}},
)
async def update_user_status(
    user_id: UUID, data: UpdateStatusRequest, app: AppDep, auth_token: AuthTokenDep
) -> UserView:
    return await app.set_user_status(auth_token, user_id, data.is_active)


@router.delete(
    "/users/{user_id}",
    summary="Delete user",
    description="Delete a user account. Admins cannot delete themselves.",
    operation_id="deleteUser",
    status_code=204,
    responses={**USER_ERRORS, 400: {"model": ErrorResponse, "description": "Cannot delete yourself"}},
)
async def delete_user(user_id: UUID, app: AppDep, auth_token: AuthTokenDep) -> None:
    await app.delete_user(auth_token, user_id)


@router.get(
    "/stats",
    summary="Dashboard statistics",
    description="User counts and record counts per content type.",
    operation_id="getAdminStats",
    responses=ADMIN_ERRORS,
)
async def get_stats(app: AppDep, auth_token: AuthTokenDep) -> AdminStats:
    return await app.get_stats(auth_token)
