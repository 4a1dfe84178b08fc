"""
Abstract base class for remote data service backends.

The remote data service is the hosted backend-as-a-service that owns all
portfolio content. It exposes three surfaces and every backend implements
all of them:

* rows: named tables supporting select (equality filters, ordering, limit),
  insert, update-by-id, delete-by-id and count
* objects: named public buckets supporting upload, delete and listing, plus
  a stable public URL per object
* auth: password sign-in returning bearer tokens, token refresh, sign-out

Row and object calls accept the caller's ``access_token``. Backends send it
as the bearer credential so the service can apply row level security; when
it is None the call runs with anonymous privileges.

Public URL format (shared by all backends):

    {base_url}/storage/v1/object/public/{bucket}/{path}
"""

from __future__ import annotations

from abc import ABC
from abc import abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING
from typing import Any
from urllib.parse import quote
from urllib.parse import unquote
from urllib.parse import urlparse

if TYPE_CHECKING:
    from collections.abc import Mapping
    from collections.abc import Sequence

Row = dict[str, Any]

PUBLIC_OBJECT_PREFIX = "/storage/v1/object/public/"


class RemoteServiceError(Exception):
    """
    Raised when the remote service rejects a call or cannot be reached.

    ``status_code`` is the HTTP status when the service answered, None for
    transport failures.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        operation: str = "",
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.operation = operation

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class AuthUser:
    """The signed-in account as reported by the remote auth API."""

    id: str
    email: str


@dataclass(frozen=True)
class AuthTokens:
    """Bearer credentials issued by the remote auth API."""

    access_token: str
    refresh_token: str
    expires_at: int
    """Unix timestamp after which ``access_token`` is rejected."""

    user: AuthUser


class RemoteBackend(ABC):
    """
    Abstract base class for the remote data service.

    Implementations translate these calls to their transport (HTTP for the
    hosted service, plain dictionaries for the in-process backend). All
    failures surface as :class:`RemoteServiceError`.
    """

    base_url: str

    # ------------------------------------------------------------------
    # Rows
    # ------------------------------------------------------------------

    @abstractmethod
    def select(
        self,
        table: str,
        *,
        filters: Mapping[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
        columns: str = "*",
        access_token: str | None = None,
    ) -> list[Row]:
        """
        Return rows of ``table`` matching every equality filter.

        Args:
            table: Collection name (e.g. "blog_posts")
            filters: Column -> value equality filters, ANDed together
            order_by: Column to sort on
            descending: Sort direction for ``order_by``
            limit: Maximum number of rows to return
            columns: Comma-separated column list, or "*"
            access_token: Caller's bearer token

        Returns:
            Matching rows as plain dicts
        """

    def get(
        self,
        table: str,
        row_id: str,
        *,
        access_token: str | None = None,
    ) -> Row | None:
        """Return the row with ``id == row_id`` or None."""
        rows = self.select(
            table,
            filters={"id": row_id},
            limit=1,
            access_token=access_token,
        )
        return rows[0] if rows else None

    @abstractmethod
    def insert(
        self,
        table: str,
        row: Mapping[str, Any],
        *,
        access_token: str | None = None,
    ) -> Row:
        """
        Insert one row and return it as stored.

        The service assigns ``id``, ``created_at`` and ``updated_at``.
        """

    @abstractmethod
    def update(
        self,
        table: str,
        row_id: str,
        values: Mapping[str, Any],
        *,
        access_token: str | None = None,
    ) -> Row | None:
        """
        Update the row with ``id == row_id``.

        Returns:
            The updated row, or None when no row matched
        """

    @abstractmethod
    def delete(
        self,
        table: str,
        row_id: str,
        *,
        access_token: str | None = None,
    ) -> None:
        """Delete the row with ``id == row_id``. Missing rows are not an error."""

    @abstractmethod
    def count(self, table: str, *, access_token: str | None = None) -> int:
        """Return the number of rows in ``table``."""

    # ------------------------------------------------------------------
    # Objects
    # ------------------------------------------------------------------

    @abstractmethod
    def upload(
        self,
        bucket: str,
        path: str,
        content: bytes,
        *,
        content_type: str,
        access_token: str | None = None,
    ) -> str:
        """
        Store ``content`` under ``path`` in ``bucket``.

        Existing objects are never overwritten; uploading to a taken path
        fails.

        Returns:
            The stored object's path
        """

    @abstractmethod
    def remove(
        self,
        bucket: str,
        paths: Sequence[str],
        *,
        access_token: str | None = None,
    ) -> None:
        """Delete objects from ``bucket``. Missing paths are ignored."""

    @abstractmethod
    def list_objects(
        self,
        bucket: str,
        *,
        limit: int = 100,
        access_token: str | None = None,
    ) -> list[str]:
        """Return up to ``limit`` object paths stored in ``bucket``."""

    def public_url(self, bucket: str, path: str) -> str:
        """Return the durable public URL for an object."""
        return (
            f"{self.base_url.rstrip('/')}{PUBLIC_OBJECT_PREFIX}"
            f"{bucket}/{quote(path)}"
        )

    def path_from_public_url(self, bucket: str, url: str) -> str | None:
        """
        Recover an object path from a URL built by :meth:`public_url`.

        URLs for another bucket or another host yield None. A bare object
        name (no scheme, no host) is returned as is, which matches how older
        rows stored media.

        Examples:
            >>> backend.path_from_public_url(
            ...     "blog_images",
            ...     "https://x.supabase.co/storage/v1/object/public/blog_images/a-1.png",
            ... )
            'a-1.png'
        """
        if not url:
            return None
        parsed = urlparse(url)
        if parsed.netloc and parsed.netloc != urlparse(self.base_url).netloc:
            return None
        marker = f"{PUBLIC_OBJECT_PREFIX}{bucket}/"
        if marker in parsed.path:
            return unquote(parsed.path.split(marker, 1)[1]) or None
        if parsed.scheme or parsed.netloc or PUBLIC_OBJECT_PREFIX in parsed.path:
            return None
        return unquote(parsed.path.lstrip("/")) or None

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    @abstractmethod
    def sign_in(self, email: str, password: str) -> AuthTokens:
        """Exchange credentials for tokens. Bad credentials raise."""

    @abstractmethod
    def refresh(self, refresh_token: str) -> AuthTokens:
        """Exchange a refresh token for a fresh token pair."""

    @abstractmethod
    def sign_out(self, access_token: str) -> None:
        """Revoke the session behind ``access_token``."""

    @abstractmethod
    def get_user(self, access_token: str) -> AuthUser:
        """Return the account behind ``access_token``. Invalid tokens raise."""
