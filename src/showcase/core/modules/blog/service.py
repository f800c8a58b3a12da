from showcase.core.modules.blog.models import BLOG_SCHEMA, Blog
from showcase.core.modules.content.models import ContentType
from showcase.core.modules.content.service import PublishableContentService


class BlogService(PublishableContentService[Blog]):
    """Blog posts, newest first."""

    content_type = ContentType.BLOG
    collection_name = "blogs"
    record_type = Blog
    schema = BLOG_SCHEMA
    label = "Blog"
    indexes = [[("tags", 1)], [("category", 1)]]
