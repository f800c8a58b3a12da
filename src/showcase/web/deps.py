from typing import Annotated, Any, cast

from fastapi import Depends, Query, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from starlette.datastructures import UploadFile

from showcase.app import App
from showcase.core.modules.auth.models import AuthToken
from showcase.core.modules.content.models import ListFilters
from showcase.core.modules.content.payload import RawPayload
from showcase.core.modules.media.models import MediaFile
from showcase.errors import AuthenticationError, ValidationError

# Security schemes
bearer_scheme = HTTPBearer(auto_error=False)


async def get_app(request: Request) -> App:
    return cast(App, request.app.state.app)


async def get_auth_token(
    app: Annotated[App, Depends(get_app)],
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)] = None,
) -> AuthToken:
    """Get and validate auth token from Authorization Bearer header."""
    if credentials and credentials.scheme.lower() == "bearer":
        auth_token = AuthToken(credentials.credentials)
        if await app.is_auth_token_valid(auth_token):
            return auth_token

    raise AuthenticationError


async def get_optional_auth_token(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)] = None,
) -> AuthToken | None:
    """Get the bearer token if one was sent, without validating it."""
    if credentials and credentials.scheme.lower() == "bearer":
        return AuthToken(credentials.credentials)
    return None


async def get_list_filters(
    search: Annotated[str | None, Query(description="Case-insensitive substring match on title")] = None,
    category: Annotated[str | None, Query(description="Comma-separated categories, any match")] = None,
    tag: Annotated[str | None, Query(description="Comma-separated tags, any match")] = None,
    status: Annotated[str | None, Query(description="Exact status match")] = None,
) -> ListFilters:
    return ListFilters(
        search=(search or "").strip() or None,
        category=_split_csv(category),
        tag=_split_csv(tag),
        status=status or None,
    )


async def read_payload(request: Request) -> RawPayload:
    """Read a create/update body as raw values plus uploaded files.

    JSON bodies keep their native types. Form bodies are read without
    coercion so that an absent key and an empty value stay distinct;
    repeated keys become lists.
    """
    if request.headers.get("content-type", "").startswith("application/json"):
        try:
            body = await request.json()
        except ValueError as e:
            raise ValidationError("Request body is not valid JSON") from e
        if not isinstance(body, dict):
            raise ValidationError("Request body must be a JSON object")
        return RawPayload(fields=body)

    fields: dict[str, Any] = {}
    files: dict[str, list[MediaFile]] = {}
    form = await request.form()
    for key, value in form.multi_items():
        if isinstance(value, UploadFile):
            media_file = await _read_upload(value)
            if media_file is not None:
                files.setdefault(key, []).append(media_file)
        elif key in fields:
            previous = fields[key]
            fields[key] = [*previous, value] if isinstance(previous, list) else [previous, value]
        else:
            fields[key] = value
    return RawPayload(fields=fields, files=files)


async def read_files(request: Request) -> list[MediaFile]:
    """Read every uploaded file of a multipart body, whatever its field name."""
    form = await request.form()
    files: list[MediaFile] = []
    for _, value in form.multi_items():
        if isinstance(value, UploadFile):
            media_file = await _read_upload(value)
            if media_file is not None:
                files.append(media_file)
    return files


async def _read_upload(upload: UploadFile) -> MediaFile | None:
    content = await upload.read()
    if not upload.filename and not content:
        return None  # Empty file input submitted by a browser form
    return MediaFile(
        filename=upload.filename or "upload",
        content=content,
        content_type=upload.content_type or "application/octet-stream",
    )


def _split_csv(value: str | None) -> list[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


# Type aliases for dependencies
AppDep = Annotated[App, Depends(get_app)]
AuthTokenDep = Annotated[AuthToken, Depends(get_auth_token)]
OptionalAuthTokenDep = Annotated[AuthToken | None, Depends(get_optional_auth_token)]
ListFiltersDep = Annotated[ListFilters, Depends(get_list_filters)]
PayloadDep = Annotated[RawPayload, Depends(read_payload)]
FilesDep = Annotated[list[MediaFile], Depends(read_files)]
