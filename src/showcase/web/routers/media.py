from fastapi import APIRouter
from fastapi.responses import FileResponse

from showcase.web.deps import AppDep
from showcase.web.openapi import ErrorResponse

router = APIRouter(tags=["media"])


@router.get(
    "/media/{folder}/{filename}",
    summary="Download media",
    description="Serve an uploaded image or video.",
    operation_id="getMedia",
    response_class=FileResponse,
    responses={
        200: {"description": "File content"},
        404: {"model": ErrorResponse, "description": "Media not found"},
    },
)
async def get_media(folder: str, filename: str, app: AppDep) -> FileResponse:
    file_path = app.get_media_file_path(folder, filename)
    return FileResponse(path=file_path, headers={"Cache-Control": "public, max-age=31536000, immutable"})
