"""
Base shape of a content row.

Rows come back from the remote service as plain dicts. Each content kind
parses them into a pydantic model so views and templates work with typed
attributes, and columns the site does not know about are ignored.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import field_validator


class ContentEntity(BaseModel):
    """Columns every content kind shares."""

    model_config = ConfigDict(extra="ignore")

    id: str
    title: str = ""
    slug: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> str:
        return str(value)

    @classmethod
    def from_row(cls, row: dict[str, Any]):
        return cls.model_validate(row)


def empty_list_if_null(value: Any) -> Any:
    """Array columns may come back as null on older rows."""
    return [] if value is None else value
