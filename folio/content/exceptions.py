"""
Errors raised by the content workflow.

Views catch :class:`ContentError` subclasses and turn them into a 400
re-render (validation), a 404 (missing row) or an error banner above the
still-filled form (upload and persist failures). Cleanup failures are never
raised; see :class:`PartialCleanupFailure`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence


class ContentError(Exception):
    """Base class for errors a content submission can end in."""

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ContentValidationError(ContentError):
    """
    The form did not validate. Nothing remote was touched.

    ``errors`` maps field name to a list of messages, as produced by
    ``form.errors.get_json_data()`` flattened to strings.
    """

    def __init__(self, errors: dict[str, list[str]]):
        super().__init__("Please correct the errors below.")
        self.errors = errors


class NotFoundError(ContentError):
    """The row being edited or deleted does not exist."""

    def __init__(self, table: str, row_id: str):
        super().__init__(f"No row {row_id} in {table}.")
        self.table = table
        self.row_id = row_id


class UploadError(ContentError):
    """The remote store rejected a media upload."""

    def __init__(self, field_name: str, reason: str):
        super().__init__(f"Could not upload {field_name}: {reason}")
        self.field_name = field_name
        self.reason = reason


class PersistError(ContentError):
    """The remote store rejected an insert, update or delete."""

    def __init__(self, operation: str, reason: str):
        super().__init__(f"Could not {operation}: {reason}")
        self.operation = operation
        self.reason = reason


class PartialCleanupFailure(Exception):
    """
    Best-effort object removal did not complete.

    Instances are logged, never raised, so operators can remove the orphaned
    objects by hand.
    """

    def __init__(self, bucket: str, paths: Sequence[str], reason: str):
        super().__init__(f"Could not remove {list(paths)} from {bucket}: {reason}")
        self.bucket = bucket
        self.paths = list(paths)
        self.reason = reason
