from typing import Any

from django.urls import reverse
from django.utils.html import strip_tags
from pydantic import Field
from pydantic import field_validator

from folio.blog.constants import BlogPostStatus
from folio.content.models import ContentEntity
from folio.content.models import empty_list_if_null

CONTENT_PREVIEW_MAX_LENGTH = 200


class BlogPost(ContentEntity):
    """A post on the public blog, as stored in the ``blog_posts`` table."""

    excerpt: str = ""
    content: str = ""
    published: bool = False
    featured_image: str | None = None
    tags: list[str] = Field(default_factory=list)

    @field_validator("tags", mode="before")
    @classmethod
    def _tags_not_null(cls, value: Any) -> Any:
        return empty_list_if_null(value)

    def __str__(self):
        return self.title

    @property
    def status(self) -> BlogPostStatus:
        return BlogPostStatus.PUBLISHED if self.published else BlogPostStatus.DRAFT

    def get_content_preview(self) -> str:
        content = (self.content or "").strip()
        if not content:
            return ""
        preview = strip_tags(content).strip()
        return (
            (preview[:CONTENT_PREVIEW_MAX_LENGTH] + "...")
            if len(preview) > CONTENT_PREVIEW_MAX_LENGTH
            else preview
        )

    def get_absolute_url(self) -> str:
        return reverse("blog:detail", kwargs={"slug": self.slug})
