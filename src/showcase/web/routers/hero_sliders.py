from fastapi import APIRouter
from pydantic import BaseModel, Field

from showcase.core.modules.content.models import ContentType
from showcase.core.modules.hero_slider.models import HeroSlide
from showcase.web.deps import AppDep
from showcase.web.routers.content import add_content_routes

router = APIRouter(prefix="/hero-sliders", tags=["hero-sliders"])


class HeroSlideListResponse(BaseModel):
    items: list[HeroSlide] = Field(..., description="All slides in display order")
    count: int = Field(..., description="Number of slides")


@router.get(
    "/all",
    summary="List all hero slides",
    description="Get every slide regardless of status, in display order. Public display endpoint.",
    operation_id="listAllHeroSlidesUnpaginated",
    responses={200: {"description": "All slides"}},
)
async def list_all_slides(app: AppDep) -> HeroSlideListResponse:
    slides = await app.get_all_content(ContentType.HERO_SLIDER)
    return HeroSlideListResponse(items=slides, count=len(slides))


add_content_routes(router, ContentType.HERO_SLIDER, HeroSlide, "HeroSlide", "HeroSlides", paginated_public=False)
