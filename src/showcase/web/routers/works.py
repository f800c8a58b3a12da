from fastapi import APIRouter
from pydantic import BaseModel, Field

from showcase.core.modules.content.models import ContentType
from showcase.core.modules.work.models import Work
from showcase.web.deps import AppDep, AuthTokenDep
from showcase.web.openapi import ErrorResponse
from showcase.web.routers.content import add_content_routes

router = APIRouter(prefix="/works", tags=["works"])


class RandomizeOrderResponse(BaseModel):
    updated: int = Field(..., description="Number of works reordered")


@router.post(
    "/randomize-order",
    summary="Shuffle works",
    description="Assign every work a random position, starting at order 41.",
    operation_id="randomizeWorksOrder",
    responses={
        200: {"description": "Works reordered"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Admin privileges required"},
    },
)
async def randomize_order(app: AppDep, auth_token: AuthTokenDep) -> RandomizeOrderResponse:
    return RandomizeOrderResponse(updated=await app.randomize_work_order(auth_token))


add_content_routes(router, ContentType.WORK, Work, "Work", "Works")
