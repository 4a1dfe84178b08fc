"""
Admin list pages: fetch, filter and delete content.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from folio.content.exceptions import PersistError
from folio.content.media import MediaUploader
from folio.core.constants import UPDATED_AT
from folio.core.remote import RemoteServiceError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from folio.content.media import MediaField
    from folio.content.models import ContentEntity
    from folio.core.session import RemoteSession

logger = logging.getLogger(__name__)

STATUS_ALL = "all"


class ContentListing:
    """
    List operations for one content kind.

    Subclasses set ``table``, ``entity_class``, ``media_fields`` and
    ``secondary_search_field`` and implement :meth:`matches_status`.
    """

    table: str = ""
    entity_class: type[ContentEntity]
    media_fields: tuple[MediaField, ...] = ()
    secondary_search_field: str = ""
    status_choices: tuple[tuple[str, str], ...] = ((STATUS_ALL, "All"),)

    def __init__(self, session: RemoteSession):
        self.session = session

    def fetch(self) -> list[ContentEntity]:
        """All rows, most recently updated first. RemoteServiceError propagates."""
        rows = self.session.select(self.table, order_by=UPDATED_AT, descending=True)
        return [self.entity_class.from_row(row) for row in rows]

    def matches_status(self, item: ContentEntity, status: str) -> bool:
        raise NotImplementedError

    def matches_search(self, item: ContentEntity, needle: str) -> bool:
        haystacks = [item.title]
        if self.secondary_search_field:
            haystacks.append(getattr(item, self.secondary_search_field, "") or "")
        return any(needle in text.lower() for text in haystacks)

    def filter(
        self,
        items: Iterable[ContentEntity],
        search: str = "",
        status: str = STATUS_ALL,
    ) -> list[ContentEntity]:
        """
        Keep items matching both the search text and the status.

        Search is a case-insensitive substring match over the title and the
        secondary field. ``status`` of "all" (or empty) keeps everything.
        """
        needle = (search or "").strip().lower()
        status = (status or STATUS_ALL).strip()
        return [
            item
            for item in items
            if (not needle or self.matches_search(item, needle))
            and (status.lower() == STATUS_ALL or self.matches_status(item, status))
        ]

    def delete(self, item: ContentEntity) -> None:
        """
        Delete the row, then best-effort remove its media objects.

        Raises:
            PersistError: The row could not be deleted (media is untouched).
        """
        try:
            self.session.delete(self.table, item.id)
        except RemoteServiceError as exc:
            logger.warning("Deleting %s %s failed: %s", self.table, item.id, exc)
            raise PersistError("delete", exc.message) from exc
        logger.info("Deleted %s %s (%s)", self.table, item.id, item.slug)

        uploader = MediaUploader(self.session)
        for field in self.media_fields:
            uploader.discard(field, getattr(item, field.row_column, None))
