"""
Upload safety helpers for images headed to the public buckets.

Everything an admin uploads ends up world-readable, so uploads are checked
twice: the extension must be one of the image types we serve, and the file
header must actually look like that kind of image. The helpers here are
dependency-free so forms and the media step can share them.

Typical usage::

    from folio.core.filesafety import (
        detect_image_type,
        safe_extension,
    )

    ext = safe_extension(upload.name)
    if detect_image_type(upload.read(16)) is None:
        raise ValidationError("Not an image")
"""

import re
import unicodedata
from pathlib import Path

IMAGE_TYPE_FOR_EXT = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
}

# (prefix, offset, content type). WebP needs a second marker at offset 8.
_IMAGE_SIGNATURES = (
    (b"\xff\xd8\xff", 0, "image/jpeg"),
    (b"\x89PNG\r\n\x1a\n", 0, "image/png"),
    (b"GIF87a", 0, "image/gif"),
    (b"GIF89a", 0, "image/gif"),
    (b"WEBP", 8, "image/webp"),
)

# Bytes needed to recognise every signature above.
MAGIC_BYTES_NEEDED = 12

_FILENAME_SAFE = re.compile(r"[^A-Za-z0-9._\-]+")

# ASCII control characters fall below 32; DEL (127) is disallowed as well.
_ASCII_MIN_PRINTABLE = 32
_ASCII_MAX_EXCLUSIVE = 127


def sanitize_filename(candidate: str, *, fallback: str = "image") -> str:
    """
    Return a safe version of a user-supplied filename.

    Strips directory components, normalizes Unicode, drops control
    characters, replaces anything outside ``[A-Za-z0-9._-]`` with ``_`` and
    removes leading/trailing dots. Falls back to ``fallback`` when nothing
    usable remains.

    Examples::

        >>> sanitize_filename("../../etc/passwd")
        'passwd'
        >>> sanitize_filename("My Screenshot.PNG")
        'My_Screenshot.PNG'
    """
    name = Path(candidate or fallback).name
    name = unicodedata.normalize("NFKC", name)
    name = "".join(
        ch for ch in name if _ASCII_MIN_PRINTABLE <= ord(ch) < _ASCII_MAX_EXCLUSIVE
    )
    name = _FILENAME_SAFE.sub("_", name.strip())
    name = name.strip(".")
    return name[:100] or fallback


def safe_extension(filename: str) -> str:
    """
    Return the lowercased extension of ``filename`` (with the dot).

    Returns ``""`` when the sanitized name has no extension.
    """
    return Path(sanitize_filename(filename)).suffix.lower()


def is_allowed_image_extension(filename: str) -> bool:
    return safe_extension(filename) in IMAGE_TYPE_FOR_EXT


def detect_image_type(raw: bytes) -> str | None:
    """
    Return the image content type implied by the header bytes, or None.

    This is a shallow check that catches renamed executables and documents;
    it does not validate the whole image.
    """
    for prefix, offset, content_type in _IMAGE_SIGNATURES:
        if raw[offset : offset + len(prefix)] == prefix:
            if content_type == "image/webp" and not raw.startswith(b"RIFF"):
                continue
            return content_type
    return None
