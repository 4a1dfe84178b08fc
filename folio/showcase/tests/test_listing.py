import pytest

from folio.conftest import PNG_BYTES
from folio.core.constants import MediaBucket
from folio.core.constants import RemoteTable
from folio.showcase.models import AppListing
from folio.showcase.services import AppListingListing
from folio.showcase.services import featured_apps
from folio.showcase.services import showcase_app
from folio.showcase.services import showcase_apps
from folio.showcase.tests.factories import AppListingRowFactory
from folio.showcase.tests.factories import create_app


def listing_from(**row):
    return AppListing.from_row({"id": row.pop("id"), **AppListingRowFactory(**row)})


@pytest.fixture
def apps():
    return [
        listing_from(id="1", title="Weather App", description="Forecasts", released=True),
        listing_from(id="2", title="Focus Timer", description="Pomodoro timer", planning=True),
    ]


@pytest.fixture
def listing(remote_session):
    return AppListingListing(remote_session)


class TestFilter:
    def test_status_is_case_insensitive(self, listing, apps):
        assert [a.title for a in listing.filter(apps, status="planning")] == ["Focus Timer"]
        assert [a.title for a in listing.filter(apps, status="Released")] == ["Weather App"]

    def test_search(self, listing, apps):
        assert [a.title for a in listing.filter(apps, search="weather")] == ["Weather App"]

    def test_search_description(self, listing, apps):
        assert [a.title for a in listing.filter(apps, search="POMODORO")] == ["Focus Timer"]

    def test_no_status_matches(self, listing, apps):
        assert listing.filter(apps, status="In development") == []

    def test_all(self, listing, apps):
        assert listing.filter(apps, status="All") == apps


class TestShowcaseApps:
    def test_featured_first_then_newest(self, remote_session):
        create_app(remote_session, title="Oldest")
        create_app(remote_session, title="Featured", is_featured=True)
        create_app(remote_session, title="Newest")

        titles = [app.title for app in showcase_apps(remote_session)]

        assert titles == ["Featured", "Newest", "Oldest"]

    def test_readable_without_signing_in(self, remote_session, anonymous_session):
        create_app(remote_session, title="Public")
        assert [app.title for app in showcase_apps(anonymous_session)] == ["Public"]


class TestFeaturedApps:
    def test_featured_only_most_recently_updated_first(self, remote_session):
        rows = [
            create_app(remote_session, title=f"App {n}", is_featured=True) for n in range(4)
        ]
        create_app(remote_session, title="Not featured")
        remote_session.update(RemoteTable.IOS_APPS, rows[0]["id"], {"description": "Touched"})

        titles = [app.title for app in featured_apps(remote_session)]

        assert titles == ["App 0", "App 3", "App 2"]

    def test_none_featured(self, remote_session):
        create_app(remote_session)
        assert featured_apps(remote_session) == []


class TestShowcaseApp:
    def test_by_slug(self, remote_session, anonymous_session):
        create_app(remote_session, title="Weather App")
        app = showcase_app(anonymous_session, "weather-app")
        assert app.title == "Weather App"

    def test_missing(self, remote_session):
        assert showcase_app(remote_session, "no-such-app") is None


class TestDelete:
    def test_foreign_media_url_leaves_bucket_alone(self, listing, remote_session, backend):
        remote_session.upload(
            MediaBucket.APP_SCREENSHOTS,
            "screenshot.png",
            PNG_BYTES,
            content_type="image/png",
        )
        row = create_app(remote_session, image_url="https://cdn.example.com/screenshot.png")

        listing.delete(AppListing.from_row(row))

        assert remote_session.get(RemoteTable.IOS_APPS, row["id"]) is None
        assert backend.list_objects(MediaBucket.APP_SCREENSHOTS) == ["screenshot.png"]

    def test_own_media_removed(self, listing, remote_session, backend):
        remote_session.upload(MediaBucket.APP_ICONS, "icon.png", PNG_BYTES, content_type="image/png")
        icon_url = remote_session.public_url(MediaBucket.APP_ICONS, "icon.png")
        row = create_app(remote_session, icon_url=icon_url)

        listing.delete(AppListing.from_row(row))

        assert backend.list_objects(MediaBucket.APP_ICONS) == []
