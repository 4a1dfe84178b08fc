"""
Blog post workflow on top of the shared content machinery, plus the
read-only queries behind the public blog pages.
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from typing import Any

from folio.blog.constants import RELATED_POSTS_LIMIT
from folio.blog.constants import BlogPostStatus
from folio.blog.forms import BlogPostForm
from folio.blog.models import BlogPost
from folio.content.controller import ContentFormController
from folio.content.listing import STATUS_ALL
from folio.content.listing import ContentListing
from folio.content.media import MediaField
from folio.core.constants import CREATED_AT
from folio.core.constants import MediaBucket
from folio.core.constants import RemoteTable

if TYPE_CHECKING:
    from folio.core.session import RemoteSession

FEATURED_IMAGE = MediaField(name="featured_image", bucket=MediaBucket.BLOG_IMAGES)


class BlogPostController(ContentFormController):
    table = RemoteTable.BLOG_POSTS
    form_class = BlogPostForm
    entity_class = BlogPost
    media_fields = (FEATURED_IMAGE,)
    delimited_fields = ("tags",)

    def build_row(self, cleaned: dict[str, Any]) -> dict[str, Any]:
        return {
            "title": cleaned["title"],
            "excerpt": cleaned["excerpt"],
            "content": cleaned["content"],
            "tags": cleaned["tags"],
            "published": bool(cleaned.get("published")),
        }


class BlogPostListing(ContentListing):
    table = RemoteTable.BLOG_POSTS
    entity_class = BlogPost
    media_fields = (FEATURED_IMAGE,)
    secondary_search_field = "excerpt"
    status_choices = ((STATUS_ALL, "All"), *BlogPostStatus.choices)

    def matches_status(self, item: BlogPost, status: str) -> bool:
        return item.status == status.lower()


def published_posts(session: RemoteSession) -> list[BlogPost]:
    """Published posts, newest first."""
    rows = session.select(
        RemoteTable.BLOG_POSTS,
        filters={"published": True},
        order_by=CREATED_AT,
        descending=True,
    )
    return [BlogPost.from_row(row) for row in rows]


def published_post(session: RemoteSession, slug: str) -> BlogPost | None:
    """The published post with ``slug``; the newest one when slugs collide."""
    rows = session.select(
        RemoteTable.BLOG_POSTS,
        filters={"slug": slug, "published": True},
        order_by=CREATED_AT,
        descending=True,
        limit=1,
    )
    return BlogPost.from_row(rows[0]) if rows else None


def related_posts(session: RemoteSession, post: BlogPost) -> list[BlogPost]:
    """Other published posts sharing a tag with ``post``, newest first."""
    tags = set(post.tags)
    if not tags:
        return []
    related = [
        other
        for other in published_posts(session)
        if other.id != post.id and tags.intersection(other.tags)
    ]
    return related[:RELATED_POSTS_LIMIT]
