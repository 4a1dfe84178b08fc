"""
App listing workflow on top of the shared content machinery, plus the
read-only queries behind the home page and the public iOS apps pages.
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from typing import Any

from folio.content.controller import ContentFormController
from folio.content.listing import STATUS_ALL
from folio.content.listing import ContentListing
from folio.content.media import MediaField
from folio.core.constants import CREATED_AT
from folio.core.constants import UPDATED_AT
from folio.core.constants import MediaBucket
from folio.core.constants import RemoteTable
from folio.showcase.constants import FEATURED_APPS_LIMIT
from folio.showcase.constants import AppStatus
from folio.showcase.forms import AppListingForm
from folio.showcase.models import AppListing
from folio.showcase.models import release_for

if TYPE_CHECKING:
    from folio.core.session import RemoteSession

SCREENSHOT = MediaField(
    name="image",
    bucket=MediaBucket.APP_SCREENSHOTS,
    column="image_url",
)
ICON = MediaField(
    name="icon",
    bucket=MediaBucket.APP_ICONS,
    purpose="icon",
    column="icon_url",
)


class AppListingController(ContentFormController):
    table = RemoteTable.IOS_APPS
    form_class = AppListingForm
    entity_class = AppListing
    media_fields = (SCREENSHOT, ICON)
    delimited_fields = ("features", "technologies")

    def instance_to_initial(self, instance: AppListing) -> dict[str, Any]:
        return {
            "title": instance.title,
            "description": instance.description,
            "status": instance.status,
            "app_store_link": instance.app_store_link or "",
            "expected_release": instance.expected_release or "",
            "features": instance.features,
            "technologies": instance.technologies,
            "is_featured": instance.is_featured,
        }

    def build_row(self, cleaned: dict[str, Any]) -> dict[str, Any]:
        release = release_for(
            cleaned["status"],
            app_store_link=cleaned.get("app_store_link"),
            expected_release=(cleaned.get("expected_release") or "").strip(),
        )
        return {
            "title": cleaned["title"],
            "description": cleaned["description"],
            "features": cleaned["features"],
            "technologies": cleaned["technologies"],
            "is_featured": bool(cleaned.get("is_featured")),
            **release.to_columns(),
        }


class AppListingListing(ContentListing):
    table = RemoteTable.IOS_APPS
    entity_class = AppListing
    media_fields = (SCREENSHOT, ICON)
    secondary_search_field = "description"
    status_choices = ((STATUS_ALL, "All"), *AppStatus.choices)

    def matches_status(self, item: AppListing, status: str) -> bool:
        return item.status.lower() == status.lower()


def showcase_apps(session: RemoteSession) -> list[AppListing]:
    """Every listing, featured apps first, then newest first."""
    rows = session.select(RemoteTable.IOS_APPS, order_by=CREATED_AT, descending=True)
    apps = [AppListing.from_row(row) for row in rows]
    # sorted() is stable, so the newest-first order holds within each group.
    return sorted(apps, key=lambda app: not app.is_featured)


def featured_apps(session: RemoteSession) -> list[AppListing]:
    """The most recently updated featured apps, for the home page."""
    rows = session.select(
        RemoteTable.IOS_APPS,
        filters={"is_featured": True},
        order_by=UPDATED_AT,
        descending=True,
        limit=FEATURED_APPS_LIMIT,
    )
    return [AppListing.from_row(row) for row in rows]


def showcase_app(session: RemoteSession, slug: str) -> AppListing | None:
    """The app listed under ``slug``; the newest one when slugs collide."""
    rows = session.select(
        RemoteTable.IOS_APPS,
        filters={"slug": slug},
        order_by=CREATED_AT,
        descending=True,
        limit=1,
    )
    return AppListing.from_row(rows[0]) if rows else None
