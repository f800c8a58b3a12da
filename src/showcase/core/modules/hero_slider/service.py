from showcase.core.modules.content.models import ContentType
from showcase.core.modules.content.service import ContentService
from showcase.core.modules.hero_slider.models import HERO_SLIDE_SCHEMA, HeroSlide, SlideMediaType
from showcase.errors import ValidationError


class HeroSliderService(ContentService[HeroSlide]):
    content_type = ContentType.HERO_SLIDER
    collection_name = "hero_sliders"
    record_type = HeroSlide
    schema = HERO_SLIDE_SCHEMA
    label = "Hero slide"
    sort = [("order", 1), ("created_at", -1)]
    indexes = [[("order", 1)]]

    def validate_record(self, record: HeroSlide) -> None:
        """A video slide needs a video, an image slide needs both image variants."""
        if record.media_type == SlideMediaType.VIDEO and not record.video_url:
            raise ValidationError("Video URL is required for video slides")
        if record.media_type == SlideMediaType.IMAGE and not (record.desktop_image and record.mobile_image):
            raise ValidationError("Desktop and mobile images are required for image slides")
