"""
Create and edit workflow shared by every content kind.

A controller drives one submission through a fixed sequence:

    idle -> validating -> invalid
                       -> uploading -> failed
                                    -> persisting -> failed
                                                  -> succeeded

1. validate the form; invalid input never reaches the remote service
2. derive the slug from the title
3. upload each media field that carries a new file, in declared order;
   fields without a new file keep the URL already stored (none on create)
4. turn delimited text into lists and let the subclass shape the row
5. insert (create) or update by id (edit)
6. once saved, discard the objects the new uploads replaced

When an upload fails, the objects uploaded earlier in the same submission
are removed before the error propagates. When saving fails, the uploads are
left in place and the stored row keeps pointing at its previous media.

Subclasses declare ``table``, ``form_class``, ``entity_class``,
``media_fields`` and ``delimited_fields`` and implement :meth:`build_row`.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING
from typing import Any

from django.utils.translation import gettext as _

from folio.content.exceptions import ContentValidationError
from folio.content.exceptions import NotFoundError
from folio.content.exceptions import PersistError
from folio.content.exceptions import UploadError
from folio.content.media import MediaUploader
from folio.core.remote import RemoteServiceError
from folio.core.text import join_delimited
from folio.core.text import parse_delimited
from folio.core.text import slugify_title

if TYPE_CHECKING:
    from folio.content.forms import ContentForm
    from folio.content.media import MediaField
    from folio.content.models import ContentEntity
    from folio.core.remote.base import Row
    from folio.core.session import RemoteSession

logger = logging.getLogger(__name__)

_SERVER_COLUMNS = {"id", "created_at", "updated_at"}


class FormState(Enum):
    """Where a submission currently is."""

    IDLE = "idle"
    VALIDATING = "validating"
    INVALID = "invalid"
    UPLOADING = "uploading"
    PERSISTING = "persisting"
    FAILED = "failed"
    SUCCEEDED = "succeeded"


class ContentFormController:
    table: str = ""
    form_class: type[ContentForm]
    entity_class: type[ContentEntity]
    media_fields: tuple[MediaField, ...] = ()
    delimited_fields: tuple[str, ...] = ()

    def __init__(self, session: RemoteSession):
        self.session = session
        self.instance: ContentEntity | None = None
        self.state = FormState.IDLE

    @property
    def is_edit(self) -> bool:
        return self.instance is not None

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load(self, row_id: str) -> ContentEntity:
        """
        Fetch the row being edited.

        Raises:
            NotFoundError: No row has this id.
            RemoteServiceError: The service could not be queried.
        """
        row = self.session.get(self.table, row_id)
        if row is None:
            raise NotFoundError(self.table, row_id)
        self.instance = self.entity_class.from_row(row)
        return self.instance

    def instance_to_initial(self, instance: ContentEntity) -> dict[str, Any]:
        """Map a loaded entity onto form field values."""
        media_columns = {f.row_column for f in self.media_fields}
        media_names = {f.name for f in self.media_fields}
        return {
            key: value
            for key, value in instance.model_dump().items()
            if key not in _SERVER_COLUMNS | media_columns | media_names
        }

    def initial(self) -> dict[str, Any]:
        if self.instance is None:
            return {}
        data = self.instance_to_initial(self.instance)
        for name in self.delimited_fields:
            data[name] = join_delimited(data.get(name))
        return data

    def media_previews(self) -> dict[str, str]:
        if self.instance is None:
            return {}
        previews = {}
        for field in self.media_fields:
            url = getattr(self.instance, field.row_column, None)
            if url:
                previews[field.name] = url
        return previews

    def get_form(self, data=None, files=None) -> ContentForm:
        return self.form_class(
            data=data,
            files=files,
            initial=self.initial(),
            media_previews=self.media_previews(),
        )

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    def build_row(self, cleaned: dict[str, Any]) -> dict[str, Any]:
        """
        Return the non-media columns to store.

        ``cleaned`` is the form's cleaned data with delimited fields already
        split into lists. The slug and media columns are filled in by the
        controller.
        """
        raise NotImplementedError

    def _fail_validation(self, form: ContentForm) -> ContentValidationError:
        self.state = FormState.INVALID
        errors = {
            field: [str(message) for message in messages]
            for field, messages in form.errors.items()
        }
        return ContentValidationError(errors)

    def submit(self, form: ContentForm) -> ContentEntity:
        """
        Validate, upload media and save the entity.

        Raises:
            ContentValidationError: The form is invalid (nothing remote done).
            UploadError: A media upload failed (this submission's uploads
                were rolled back).
            PersistError: The row could not be saved.
        """
        self.state = FormState.VALIDATING
        if not form.is_valid():
            raise self._fail_validation(form)

        slug = slugify_title(form.cleaned_data["title"])
        if not slug:
            form.add_error("title", _("Title must contain at least one letter or digit."))
            raise self._fail_validation(form)

        cleaned = dict(form.cleaned_data)
        for name in self.delimited_fields:
            cleaned[name] = parse_delimited(cleaned.get(name))
        row = self.build_row(cleaned)
        row["slug"] = slug

        self.state = FormState.UPLOADING
        uploader = MediaUploader(self.session)
        replaced: list[tuple[MediaField, str]] = []
        for field in self.media_fields:
            prior_url = getattr(self.instance, field.row_column, None) if self.instance else None
            upload = cleaned.get(field.name)
            if not upload:
                row[field.row_column] = prior_url
                continue
            try:
                row[field.row_column] = uploader.upload(field, upload, slug)
            except UploadError:
                self.state = FormState.FAILED
                uploader.rollback()
                raise
            if prior_url:
                replaced.append((field, prior_url))

        self.state = FormState.PERSISTING
        stored = self._persist(row)

        self.state = FormState.SUCCEEDED
        self._warn_on_slug_collision(stored)
        for field, prior_url in replaced:
            uploader.discard(field, prior_url)
        return self.entity_class.from_row(stored)

    def _persist(self, row: dict[str, Any]) -> Row:
        try:
            if self.instance is None:
                stored = self.session.insert(self.table, row)
                logger.info("Created %s %s (%s)", self.table, stored.get("id"), row["slug"])
                return stored
            stored = self.session.update(self.table, self.instance.id, row)
        except RemoteServiceError as exc:
            self.state = FormState.FAILED
            operation = "update" if self.instance else "create"
            logger.warning("Saving %s failed: %s", self.table, exc)
            raise PersistError(operation, exc.message) from exc

        if stored is None:
            self.state = FormState.FAILED
            logger.warning("Row %s vanished from %s during edit", self.instance.id, self.table)
            raise PersistError("update", _("the item no longer exists"))
        logger.info("Updated %s %s (%s)", self.table, self.instance.id, row["slug"])
        return stored

    def _warn_on_slug_collision(self, stored: Row) -> None:
        slug = stored.get("slug")
        try:
            others = self.session.select(self.table, filters={"slug": slug}, columns="id")
        except RemoteServiceError as exc:
            logger.debug("Slug collision check skipped for %s: %s", slug, exc)
            return
        if any(str(other.get("id")) != str(stored.get("id")) for other in others):
            logger.warning("Slug %s in %s is shared by more than one row", slug, self.table)
