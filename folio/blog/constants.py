"""Blog-level constants shared across views, services, and templates."""

from django.db import models
from django.utils.translation import gettext_lazy as _


class BlogPostStatus(models.TextChoices):
    """Publication state used by the admin list filter.

    Stored rows only carry a ``published`` flag; draft posts are visible in
    the admin area while published posts surface on the public blog.
    """

    DRAFT = "draft", _("Draft")
    PUBLISHED = "published", _("Published")


# Number of related posts shown under a post.
RELATED_POSTS_LIMIT = 3
