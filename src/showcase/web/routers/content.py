"""Standard CRUD routes shared by all content resources."""

from typing import Annotated, Any

from fastapi import APIRouter, Path, Query
from pydantic import BaseModel

from showcase.core.modules.content.models import ContentType
from showcase.core.modules.media.models import UploadedMedia
from showcase.core.pagination import PaginationResult
from showcase.errors import ValidationError
from showcase.web.deps import AppDep, AuthTokenDep, FilesDep, ListFiltersDep, PayloadDep
from showcase.web.openapi import ErrorResponse

PageQuery = Annotated[int, Query(ge=1, description="Page number (1-based)")]
LimitQuery = Annotated[int, Query(ge=1, le=100, description="Items per page")]
RecordIdPath = Annotated[int, Path(ge=1, description="Record id")]

ADMIN_ERRORS: dict[int | str, dict[str, Any]] = {
    401: {"model": ErrorResponse, "description": "Not authenticated"},
    403: {"model": ErrorResponse, "description": "Admin privileges required"},
}
WRITE_ERRORS: dict[int | str, dict[str, Any]] = {
    **ADMIN_ERRORS,
    400: {"model": ErrorResponse, "description": "Invalid payload or failed validation"},
    409: {"model": ErrorResponse, "description": "Slug already taken"},
    503: {"model": ErrorResponse, "description": "Document store unavailable"},
}


def add_content_routes(
    router: APIRouter,
    content_type: ContentType,
    record_model: type[BaseModel],
    name: str,
    plural: str,
    paginated_public: bool = True,
) -> None:
    """Register list, get, create, update, delete and image upload routes on a resource router.

    Routes with fixed paths that could clash with `/{key}` must be registered
    on the router before calling this.
    """
    label = name.lower()

    if paginated_public:

        @router.get(
            "",
            summary=f"List {plural.lower()}",
            description=f"Get active {plural.lower()} with optional filters and pagination.",
            operation_id=f"list{plural}",
            response_model=PaginationResult[record_model],  # type: ignore[valid-type]
        )
        async def list_records(
            app: AppDep, filters: ListFiltersDep, page: PageQuery = 1, limit: LimitQuery = 10
        ) -> PaginationResult[Any]:
            return await app.get_content_list(content_type, page, limit, filters)

    else:

        @router.get(
            "",
            summary=f"List {plural.lower()}",
            description=f"Get all active {plural.lower()}.",
            operation_id=f"list{plural}",
            response_model=list[record_model],  # type: ignore[valid-type]
        )
        async def list_all_records(app: AppDep) -> list[Any]:
            return await app.get_all_public_content(content_type)

    @router.get(
        "/admin/all",
        summary=f"List all {plural.lower()} (admin)",
        description=f"Get {plural.lower()} of every status with optional filters and pagination.",
        operation_id=f"listAll{plural}",
        response_model=PaginationResult[record_model],  # type: ignore[valid-type]
        responses=ADMIN_ERRORS,
    )
    async def list_admin_records(
        app: AppDep, auth_token: AuthTokenDep, filters: ListFiltersDep, page: PageQuery = 1, limit: LimitQuery = 10
    ) -> PaginationResult[Any]:
        return await app.get_admin_content_list(auth_token, content_type, page, limit, filters)

    @router.post(
        "/upload-image",
        summary="Upload image",
        description=f"Upload a single image for use in {plural.lower()} and get its URL.",
        operation_id=f"upload{name}Image",
        status_code=201,
        responses=WRITE_ERRORS,
    )
    async def upload_image(app: AppDep, auth_token: AuthTokenDep, files: FilesDep) -> UploadedMedia:
        if len(files) != 1:
            raise ValidationError("Exactly one image file is required")
        uploaded = await app.upload_content_images(auth_token, content_type, files)
        return uploaded[0]

    @router.post(
        "/upload-images",
        summary="Upload images",
        description=f"Upload up to 10 images for use in {plural.lower()} and get their URLs.",
        operation_id=f"upload{name}Images",
        status_code=201,
        responses=WRITE_ERRORS,
    )
    async def upload_images(app: AppDep, auth_token: AuthTokenDep, files: FilesDep) -> list[UploadedMedia]:
        return await app.upload_content_images(auth_token, content_type, files)

    @router.get(
        "/{key}",
        summary=f"Get {label}",
        description=f"Get an active {label} by numeric id or slug. Counts a view.",
        operation_id=f"get{name}",
        response_model=record_model,
        responses={404: {"model": ErrorResponse, "description": f"{name} not found"}},
    )
    async def get_record(key: str, app: AppDep) -> Any:
        return await app.get_content(content_type, key)

    @router.post(
        "",
        summary=f"Create {label}",
        description=(
            f"Create a {label} from multipart form data or JSON. "
            "Array fields accept JSON-encoded arrays, booleans accept 'true'/'false'."
        ),
        operation_id=f"create{name}",
        status_code=201,
        response_model=record_model,
        responses=WRITE_ERRORS,
    )
    async def create_record(app: AppDep, auth_token: AuthTokenDep, payload: PayloadDep) -> Any:
        return await app.create_content(auth_token, content_type, payload)

    @router.put(
        "/{record_id}",
        summary=f"Update {label}",
        description="Same as PATCH: fields missing from the payload keep their values.",
        operation_id=f"replace{name}",
        response_model=record_model,
        responses={**WRITE_ERRORS, 404: {"model": ErrorResponse, "description": f"{name} not found"}},
    )
    @router.patch(
        "/{record_id}",
        summary=f"Update {label}",
        description="Partially update: fields missing from the payload keep their values, empty values clear them.",
        operation_id=f"update{name}",
        response_model=record_model,
        responses={**WRITE_ERRORS, 404: {"model": ErrorResponse, "description": f"{name} not found"}},
    )
    async def update_record(record_id: RecordIdPath, app: AppDep, auth_token: AuthTokenDep, payload: PayloadDep) -> Any:
        return await app.update_content(auth_token, content_type, record_id, payload)

    @router.delete(
        "/{record_id}",
        summary=f"Delete {label}",
        description=f"Delete a {label} and its uploaded media.",
        operation_id=f"delete{name}",
        status_code=204,
        responses={**ADMIN_ERRORS, 404: {"model": ErrorResponse, "description": f"{name} not found"}},
    )
    async def delete_record(record_id: RecordIdPath, app: AppDep, auth_token: AuthTokenDep) -> None:
        await app.delete_content(auth_token, content_type, record_id)


def add_publish_route(router: APIRouter, content_type: ContentType, record_model: type[BaseModel], name: str) -> None:
    """Register `PATCH /{record_id}/publish` toggling `is_published`."""

    @router.patch(
        "/{record_id}/publish",
        summary=f"Toggle {name.lower()} published flag",
        description="Flip is_published. The flag is informational and does not hide the record from public reads.",
        operation_id=f"toggle{name}Published",
        response_model=record_model,
        responses={**ADMIN_ERRORS, 404: {"model": ErrorResponse, "description": f"{name} not found"}},
    )
    async def toggle_published(record_id: RecordIdPath, app: AppDep, auth_token: AuthTokenDep) -> Any:
        return await app.toggle_published(auth_token, content_type, record_id)
