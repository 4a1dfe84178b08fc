import logging

import pytest

from folio.showcase.constants import AppStatus
from folio.showcase.models import AppListing
from folio.showcase.models import InDevelopment
from folio.showcase.models import Planning
from folio.showcase.models import Released
from folio.showcase.models import normalize_status
from folio.showcase.models import release_for
from folio.showcase.tests.factories import AppListingRowFactory


class TestNormalizeStatus:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("Released", "Released"),
            ("released", "Released"),
            ("  IN DEVELOPMENT ", "In development"),
            ("planning", "Planning"),
        ],
    )
    def test_known(self, value, expected):
        assert normalize_status(value) == expected

    @pytest.mark.parametrize("value", [None, "", "Archived"])
    def test_unknown_falls_back_to_planning(self, value, caplog):
        with caplog.at_level(logging.WARNING):
            assert normalize_status(value) == AppStatus.PLANNING
        assert "Unknown app status" in caplog.text


class TestReleaseFor:
    def test_released_drops_expected_release(self):
        release = release_for("Released", "https://apps.apple.com/app/id1", "Soon")
        assert release == Released(app_store_link="https://apps.apple.com/app/id1")
        assert release.to_columns()["expected_release"] is None

    @pytest.mark.parametrize("status", ["In development", "Planning"])
    def test_unreleased_drops_store_link(self, status):
        release = release_for(status, "https://apps.apple.com/app/id1", "Spring")
        assert isinstance(release, InDevelopment | Planning)
        columns = release.to_columns()
        assert columns["app_store_link"] is None
        assert columns["expected_release"] == "Spring"
        assert columns["status"] == status

    def test_blank_details_become_null(self):
        assert release_for("Released", "", "").app_store_link is None
        assert release_for("Planning", "", "").expected_release is None


class TestAppListing:
    def test_release_built_from_columns(self):
        app = AppListing.from_row({"id": 7, **AppListingRowFactory(released=True)})
        assert app.id == "7"
        assert isinstance(app.release, Released)
        assert app.status == "Released"
        assert app.app_store_link == "https://apps.apple.com/app/id1234567890"
        assert app.expected_release is None

    def test_stale_store_link_ignored_for_unreleased_row(self):
        row = AppListingRowFactory(planning=True, app_store_link="https://example.com")
        app = AppListing.from_row({"id": "1", **row})
        assert app.app_store_link is None
        assert app.expected_release == "Someday"

    def test_null_lists(self):
        row = AppListingRowFactory(features=None, technologies=None)
        app = AppListing.from_row({"id": "1", **row})
        assert app.features == []
        assert app.technologies == []

    def test_release_from_tagged_dict(self):
        app = AppListing.model_validate(
            {"id": "1", "release": {"status": "In development", "expected_release": "Q3"}},
        )
        assert isinstance(app.release, InDevelopment)
        assert app.expected_release == "Q3"
