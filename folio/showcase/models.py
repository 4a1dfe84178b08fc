"""
App listings shown on the iOS apps page.

A listing's release stage decides which extra detail it carries: released
apps link to the App Store, unreleased ones give an expected release. The
stage is modelled as a tagged variant so the two details can never both be
set; the remote row stores it flat as ``status``, ``app_store_link`` and
``expected_release``, with the unused column always null.
"""

from __future__ import annotations

import logging
from typing import Annotated
from typing import Any
from typing import Literal

from django.urls import reverse
from pydantic import BaseModel
from pydantic import Field
from pydantic import field_validator
from pydantic import model_validator

from folio.content.models import ContentEntity
from folio.content.models import empty_list_if_null
from folio.showcase.constants import AppStatus

logger = logging.getLogger(__name__)


class Released(BaseModel):
    status: Literal["Released"] = AppStatus.RELEASED.value
    app_store_link: str | None = None

    def to_columns(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "app_store_link": self.app_store_link,
            "expected_release": None,
        }


class InDevelopment(BaseModel):
    status: Literal["In development"] = AppStatus.IN_DEVELOPMENT.value
    expected_release: str | None = None

    def to_columns(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "app_store_link": None,
            "expected_release": self.expected_release,
        }


class Planning(BaseModel):
    status: Literal["Planning"] = AppStatus.PLANNING.value
    expected_release: str | None = None

    def to_columns(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "app_store_link": None,
            "expected_release": self.expected_release,
        }


Release = Annotated[Released | InDevelopment | Planning, Field(discriminator="status")]

_STATUS_BY_LOWER = {status.value.lower(): status.value for status in AppStatus}


def normalize_status(value: str | None) -> str:
    """Map any casing of a status name onto its stored spelling."""
    status = _STATUS_BY_LOWER.get((value or "").strip().lower())
    if status is None:
        logger.warning("Unknown app status %r, treating as Planning", value)
        return AppStatus.PLANNING.value
    return status


def release_for(
    status: str | None,
    app_store_link: str | None = None,
    expected_release: str | None = None,
) -> Released | InDevelopment | Planning:
    """Build the release variant for ``status``; the irrelevant detail is dropped."""
    status = normalize_status(status)
    if status == AppStatus.RELEASED:
        return Released(app_store_link=app_store_link or None)
    if status == AppStatus.IN_DEVELOPMENT:
        return InDevelopment(expected_release=expected_release or None)
    return Planning(expected_release=expected_release or None)


class AppListing(ContentEntity):
    """An iOS app, as stored in the ``ios_apps`` table."""

    description: str = ""
    release: Release = Field(default_factory=Planning)
    features: list[str] = Field(default_factory=list)
    technologies: list[str] = Field(default_factory=list)
    image_url: str | None = None
    icon_url: str | None = None
    is_featured: bool = False

    @model_validator(mode="before")
    @classmethod
    def _release_from_columns(cls, data: Any) -> Any:
        if isinstance(data, dict) and "release" not in data:
            data = dict(data)
            data["release"] = release_for(
                data.pop("status", None),
                data.pop("app_store_link", None),
                data.pop("expected_release", None),
            )
        return data

    @field_validator("features", "technologies", mode="before")
    @classmethod
    def _lists_not_null(cls, value: Any) -> Any:
        return empty_list_if_null(value)

    def __str__(self):
        return self.title

    @property
    def status(self) -> str:
        return self.release.status

    @property
    def app_store_link(self) -> str | None:
        return getattr(self.release, "app_store_link", None)

    @property
    def expected_release(self) -> str | None:
        return getattr(self.release, "expected_release", None)

    def get_absolute_url(self) -> str:
        return reverse("showcase:detail", kwargs={"slug": self.slug})
