"""
Text helpers shared by the content forms.

Slugs are derived from titles at save time and never edited by hand. The
delimited helpers convert between the comma-separated text the admin forms
accept and the lists stored on the remote rows.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

_NON_ALNUM_RUN = re.compile(r"[^a-z0-9]+")

DELIMITER = ","
JOIN_SEPARATOR = ", "


def slugify_title(title: str) -> str:
    """
    Return a URL-safe slug for ``title``.

    Lowercases, collapses every run of characters outside ``[a-z0-9]`` into a
    single hyphen and strips leading/trailing hyphens. Non-ASCII letters are
    treated as separators, so a title made only of symbols yields ``""``;
    callers must guard against that.

        >>> slugify_title("Hello, World! 2024")
        'hello-world-2024'
    """
    return _NON_ALNUM_RUN.sub("-", (title or "").lower()).strip("-")


def parse_delimited(text: str | None) -> list[str]:
    """Split comma-separated ``text`` into trimmed, non-empty entries."""
    if not text:
        return []
    return [part.strip() for part in text.split(DELIMITER) if part.strip()]


def join_delimited(items: Iterable[str] | None) -> str:
    """Inverse of :func:`parse_delimited` for pre-filling edit forms."""
    if not items:
        return ""
    return JOIN_SEPARATOR.join(item.strip() for item in items if item and item.strip())
