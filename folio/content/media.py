"""
Media upload step for content submissions.

An entity declares its media fields with :class:`MediaField`. When a form is
submitted, each field that carries a new file is uploaded to its public
bucket and the row stores the resulting public URL, never the bytes.

Object keys are built from the entity slug, the field's purpose and the
upload time so a new file never overwrites an old one:

    my-first-post-1718000000000.png
    weather-app-icon-1718000000000.png

:class:`MediaUploader` remembers what it uploaded during one submission so
the controller can roll the whole media step back when a later upload fails,
and discards replaced objects once the row has been saved.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import TYPE_CHECKING

from django.conf import settings
from django.core.exceptions import ValidationError
from django.template.defaultfilters import filesizeformat
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from folio.content.exceptions import PartialCleanupFailure
from folio.content.exceptions import UploadError
from folio.core.filesafety import IMAGE_TYPE_FOR_EXT
from folio.core.filesafety import MAGIC_BYTES_NEEDED
from folio.core.filesafety import detect_image_type
from folio.core.filesafety import is_allowed_image_extension
from folio.core.filesafety import safe_extension
from folio.core.remote import RemoteServiceError

if TYPE_CHECKING:
    from datetime import datetime

    from django.core.files.uploadedfile import UploadedFile

    from folio.core.session import RemoteSession

logger = logging.getLogger(__name__)

DEFAULT_MAX_IMAGE_BYTES = 5 * 1024 * 1024


@dataclass(frozen=True)
class MediaField:
    """
    One media slot on an entity.

    ``name`` is the form field carrying the upload; ``column`` is the row
    column holding the public URL (defaults to ``name``). ``purpose`` is
    embedded in object keys and may be empty.
    """

    name: str
    bucket: str
    purpose: str = ""
    column: str = ""

    @property
    def row_column(self) -> str:
        return self.column or self.name


def build_object_key(
    slug: str,
    purpose: str,
    filename: str,
    now: datetime | None = None,
) -> str:
    """
    Return ``{slug}-{purpose}-{epoch_millis}{.ext}``.

    The purpose segment is omitted when empty. The extension comes from the
    sanitized original filename, lowercased.

        >>> build_object_key("weather-app", "icon", "Icon.PNG", now)
        'weather-app-icon-1718000000000.png'
    """
    now = now or timezone.now()
    millis = int(now.timestamp() * 1000)
    parts = [slug, purpose, str(millis)] if purpose else [slug, str(millis)]
    return "-".join(parts) + safe_extension(filename)


def max_image_bytes() -> int:
    return getattr(settings, "FOLIO_MAX_IMAGE_BYTES", DEFAULT_MAX_IMAGE_BYTES)


def _read_head(upload: UploadedFile) -> bytes:
    upload.seek(0)
    head = upload.read(MAGIC_BYTES_NEEDED)
    upload.seek(0)
    return head


def validate_image_upload(upload: UploadedFile) -> None:
    """
    Reject uploads that are not a supported image or are too large.

    Raises:
        ValidationError: With a message fit for the form field.
    """
    if not is_allowed_image_extension(upload.name):
        allowed = ", ".join(sorted(ext.lstrip(".") for ext in IMAGE_TYPE_FOR_EXT))
        raise ValidationError(
            _("Unsupported image type. Use one of: %(allowed)s."),
            code="invalid_extension",
            params={"allowed": allowed},
        )
    limit = max_image_bytes()
    if upload.size is not None and upload.size > limit:
        raise ValidationError(
            _("Image is too large (max %(limit)s)."),
            code="too_large",
            params={"limit": filesizeformat(limit)},
        )
    if detect_image_type(_read_head(upload)) is None:
        raise ValidationError(
            _("The file does not look like an image."),
            code="invalid_image",
        )


class MediaUploader:
    """
    Uploads media for one submission and cleans up after it.

    Uploads go out one at a time in the order they are requested.
    """

    def __init__(self, session: RemoteSession):
        self.session = session
        self.uploaded: list[tuple[MediaField, str]] = []

    def upload(self, field: MediaField, upload: UploadedFile, slug: str) -> str:
        """
        Upload ``upload`` for ``field`` and return its public URL.

        Raises:
            UploadError: The remote store rejected the object.
        """
        upload.seek(0)
        content = upload.read()
        content_type = (
            detect_image_type(content[:MAGIC_BYTES_NEEDED])
            or IMAGE_TYPE_FOR_EXT.get(safe_extension(upload.name))
            or getattr(upload, "content_type", None)
            or "application/octet-stream"
        )
        key = build_object_key(slug, field.purpose, upload.name)
        try:
            path = self.session.upload(
                field.bucket,
                key,
                content,
                content_type=content_type,
            )
        except RemoteServiceError as exc:
            logger.warning(
                "Upload of %s to %s/%s failed: %s",
                field.name,
                field.bucket,
                key,
                exc,
            )
            raise UploadError(field.name, exc.message) from exc

        self.uploaded.append((field, path))
        logger.info("Uploaded %s to %s/%s", field.name, field.bucket, path)
        return self.session.public_url(field.bucket, path)

    def rollback(self) -> list[PartialCleanupFailure]:
        """Remove every object uploaded so far in this submission."""
        by_bucket: dict[str, list[str]] = defaultdict(list)
        for field, path in self.uploaded:
            by_bucket[field.bucket].append(path)
        self.uploaded = []

        failures = []
        for bucket, paths in by_bucket.items():
            failure = self._remove(bucket, paths)
            if failure is not None:
                failures.append(failure)
            else:
                logger.info("Rolled back %d upload(s) in %s", len(paths), bucket)
        return failures

    def discard(self, field: MediaField, url: str | None) -> PartialCleanupFailure | None:
        """
        Remove a previously stored object identified by its public URL.

        Never raises; a failure is logged and returned.
        """
        if not url:
            return None
        path = self.session.path_from_public_url(field.bucket, url)
        if path is None:
            logger.debug("Not discarding %s: not an object in %s", url, field.bucket)
            return None
        return self._remove(field.bucket, [path])

    def _remove(self, bucket: str, paths: list[str]) -> PartialCleanupFailure | None:
        try:
            self.session.remove(bucket, paths)
        except RemoteServiceError as exc:
            failure = PartialCleanupFailure(bucket, paths, exc.message)
            logger.warning("%s", failure)
            return failure
        return None
