"""
Numbers and recent activity for the admin dashboard.
"""

from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
from datetime import UTC
from datetime import datetime
from typing import TYPE_CHECKING

from folio.blog.models import BlogPost
from folio.core.constants import UPDATED_AT
from folio.core.constants import RemoteTable
from folio.showcase.models import AppListing

if TYPE_CHECKING:
    from folio.content.models import ContentEntity
    from folio.core.session import RemoteSession

RECENT_ITEMS_LIMIT = 3


@dataclass
class RecentItem:
    kind: str
    entity: ContentEntity
    url_namespace: str

    @property
    def updated_at(self) -> datetime:
        return self.entity.updated_at or datetime.min.replace(tzinfo=UTC)


@dataclass
class DashboardStats:
    app_count: int = 0
    post_count: int = 0
    recent: list[RecentItem] = field(default_factory=list)


def dashboard_stats(session: RemoteSession) -> DashboardStats:
    """
    Count apps and posts and collect the most recently updated items.

    The newest few of each kind are fetched, merged and cut down to
    ``RECENT_ITEMS_LIMIT``. RemoteServiceError propagates.
    """
    app_rows = session.select(
        RemoteTable.IOS_APPS,
        order_by=UPDATED_AT,
        descending=True,
        limit=RECENT_ITEMS_LIMIT,
    )
    post_rows = session.select(
        RemoteTable.BLOG_POSTS,
        order_by=UPDATED_AT,
        descending=True,
        limit=RECENT_ITEMS_LIMIT,
    )
    recent = [
        RecentItem("app", AppListing.from_row(row), "showcase_admin") for row in app_rows
    ] + [RecentItem("post", BlogPost.from_row(row), "blog_admin") for row in post_rows]
    recent.sort(key=lambda item: item.updated_at, reverse=True)

    return DashboardStats(
        app_count=session.count(RemoteTable.IOS_APPS),
        post_count=session.count(RemoteTable.BLOG_POSTS),
        recent=recent[:RECENT_ITEMS_LIMIT],
    )
