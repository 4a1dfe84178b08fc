"""
In-process backend for the remote data service.

Keeps tables, buckets and sessions in dictionaries guarded by a lock. It
mirrors the hosted service closely enough for tests and offline local
development:

- ``id``, ``created_at`` and ``updated_at`` are assigned by the "server"
- unknown tables and buckets are rejected
- writes require a signed-in access token (row level security stand-in)
- uploads never overwrite an existing object
- public URLs use the same format as the hosted service
"""

from __future__ import annotations

import copy
import logging
import secrets
import threading
import time
import uuid
from datetime import UTC
from datetime import datetime
from datetime import timedelta
from typing import TYPE_CHECKING
from typing import Any

from folio.core.constants import MediaBucket
from folio.core.constants import RemoteTable
from folio.core.remote.base import AuthTokens
from folio.core.remote.base import AuthUser
from folio.core.remote.base import RemoteBackend
from folio.core.remote.base import RemoteServiceError
from folio.core.remote.base import Row

if TYPE_CHECKING:
    from collections.abc import Iterable
    from collections.abc import Mapping
    from collections.abc import Sequence

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://memory.supabase.local"
TOKEN_LIFETIME_SECONDS = 3600
_SERVER_COLUMNS = ("id", "created_at")


class MemoryBackend(RemoteBackend):
    """
    Dictionary-backed remote data service.

    Args:
        base_url: Prefix for public object URLs
        users: Mapping of email -> password accepted by :meth:`sign_in`
        tables: Table names to create (defaults to every RemoteTable)
        buckets: Bucket names to create (defaults to every MediaBucket)
        require_auth_for_writes: Reject row/object writes without a valid
            access token
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        users: Mapping[str, str] | None = None,
        tables: Iterable[str] | None = None,
        buckets: Iterable[str] | None = None,
        *,
        require_auth_for_writes: bool = True,
    ):
        self.base_url = base_url.rstrip("/")
        self.require_auth_for_writes = require_auth_for_writes
        self._lock = threading.Lock()
        self._users = dict(users or {})
        self._tables: dict[str, dict[str, Row]] = {
            name: {} for name in (tables or RemoteTable.values)
        }
        self._buckets: dict[str, dict[str, tuple[bytes, str]]] = {
            name: {} for name in (buckets or MediaBucket.values)
        }
        self._sessions: dict[str, tuple[AuthUser, int]] = {}
        self._refresh_tokens: dict[str, AuthUser] = {}
        self._last_stamp: datetime | None = None

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _now_iso(self) -> str:
        # Strictly increasing, so back-to-back writes still order correctly.
        now = datetime.now(UTC)
        if self._last_stamp is not None and now <= self._last_stamp:
            now = self._last_stamp + timedelta(microseconds=1)
        self._last_stamp = now
        return now.isoformat(timespec="microseconds")

    def _table(self, table: str, operation: str) -> dict[str, Row]:
        try:
            return self._tables[table]
        except KeyError:
            msg = f'relation "public.{table}" does not exist'
            raise RemoteServiceError(msg, status_code=404, operation=operation) from None

    def _bucket(self, bucket: str, operation: str) -> dict[str, tuple[bytes, str]]:
        try:
            return self._buckets[bucket]
        except KeyError:
            msg = "Bucket not found"
            raise RemoteServiceError(msg, status_code=404, operation=operation) from None

    def _authorize_write(self, access_token: str | None, operation: str) -> None:
        if not self.require_auth_for_writes:
            return
        session = self._sessions.get(access_token or "")
        if session is None or session[1] < time.time():
            msg = "new row violates row-level security policy"
            raise RemoteServiceError(msg, status_code=401, operation=operation)

    @staticmethod
    def _project(row: Row, columns: str) -> Row:
        if columns.strip() == "*":
            return copy.deepcopy(row)
        wanted = [col.strip() for col in columns.split(",") if col.strip()]
        return {col: copy.deepcopy(row.get(col)) for col in wanted}

    # ------------------------------------------------------------------
    # Rows
    # ------------------------------------------------------------------

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
        with self._lock:
            rows = list(self._table(table, "select").values())
            for column, value in (filters or {}).items():
                rows = [row for row in rows if row.get(column) == value]
            if order_by:
                # Nulls sort last in both directions, as in PostgreSQL's
                # default for DESC and this backend's choice for ASC.
                present = [row for row in rows if row.get(order_by) is not None]
                missing = [row for row in rows if row.get(order_by) is None]
                present.sort(key=lambda row: row[order_by], reverse=descending)
                rows = present + missing
            if limit is not None:
                rows = rows[:limit]
            return [self._project(row, columns) for row in rows]

    def insert(
        self,
        table: str,
        row: Mapping[str, Any],
        *,
        access_token: str | None = None,
    ) -> Row:
        with self._lock:
            rows = self._table(table, "insert")
            self._authorize_write(access_token, "insert")
            now = self._now_iso()
            stored = copy.deepcopy(dict(row))
            stored["id"] = str(uuid.uuid4())
            stored["created_at"] = now
            stored["updated_at"] = now
            rows[stored["id"]] = stored
            return copy.deepcopy(stored)

    def update(
        self,
        table: str,
        row_id: str,
        values: Mapping[str, Any],
        *,
        access_token: str | None = None,
    ) -> Row | None:
        with self._lock:
            rows = self._table(table, "update")
            self._authorize_write(access_token, "update")
            stored = rows.get(str(row_id))
            if stored is None:
                return None
            for column, value in values.items():
                if column in _SERVER_COLUMNS:
                    continue
                stored[column] = copy.deepcopy(value)
            stored["updated_at"] = self._now_iso()
            return copy.deepcopy(stored)

    def delete(
        self,
        table: str,
        row_id: str,
        *,
        access_token: str | None = None,
    ) -> None:
        with self._lock:
            rows = self._table(table, "delete")
            self._authorize_write(access_token, "delete")
            rows.pop(str(row_id), None)

    def count(self, table: str, *, access_token: str | None = None) -> int:
        with self._lock:
            return len(self._table(table, "count"))

    # ------------------------------------------------------------------
    # Objects
    # ------------------------------------------------------------------

    def upload(
        self,
        bucket: str,
        path: str,
        content: bytes,
        *,
        content_type: str,
        access_token: str | None = None,
    ) -> str:
        with self._lock:
            objects = self._bucket(bucket, "upload")
            self._authorize_write(access_token, "upload")
            if path in objects:
                msg = "The resource already exists"
                raise RemoteServiceError(msg, status_code=409, operation="upload")
            objects[path] = (bytes(content), content_type)
        logger.debug("Stored %d bytes at %s/%s", len(content), bucket, path)
        return path

    def remove(
        self,
        bucket: str,
        paths: Sequence[str],
        *,
        access_token: str | None = None,
    ) -> None:
        with self._lock:
            objects = self._bucket(bucket, "remove")
            self._authorize_write(access_token, "remove")
            for path in paths:
                objects.pop(path, None)

    def list_objects(
        self,
        bucket: str,
        *,
        limit: int = 100,
        access_token: str | None = None,
    ) -> list[str]:
        with self._lock:
            return sorted(self._bucket(bucket, "list"))[:limit]

    def read_object(self, bucket: str, path: str) -> bytes:
        """Return stored bytes. Only the in-process backend offers this."""
        with self._lock:
            objects = self._bucket(bucket, "read")
            if path not in objects:
                msg = "Object not found"
                raise RemoteServiceError(msg, status_code=404, operation="read")
            return objects[path][0]

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    def _issue(self, user: AuthUser) -> AuthTokens:
        access_token = secrets.token_urlsafe(24)
        refresh_token = secrets.token_urlsafe(24)
        expires_at = int(time.time()) + TOKEN_LIFETIME_SECONDS
        self._sessions[access_token] = (user, expires_at)
        self._refresh_tokens[refresh_token] = user
        return AuthTokens(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_at=expires_at,
            user=user,
        )

    def sign_in(self, email: str, password: str) -> AuthTokens:
        with self._lock:
            expected = self._users.get(email)
            if expected is None or not secrets.compare_digest(expected, password):
                msg = "Invalid login credentials"
                raise RemoteServiceError(msg, status_code=400, operation="sign_in")
            user = AuthUser(id=str(uuid.uuid5(uuid.NAMESPACE_URL, email)), email=email)
            return self._issue(user)

    def refresh(self, refresh_token: str) -> AuthTokens:
        with self._lock:
            user = self._refresh_tokens.pop(refresh_token, None)
            if user is None:
                msg = "Invalid Refresh Token"
                raise RemoteServiceError(msg, status_code=400, operation="refresh")
            return self._issue(user)

    def sign_out(self, access_token: str) -> None:
        with self._lock:
            session = self._sessions.pop(access_token, None)
            if session is None:
                return
            user = session[0]
            stale = [token for token, owner in self._refresh_tokens.items() if owner == user]
            for token in stale:
                del self._refresh_tokens[token]

    def get_user(self, access_token: str) -> AuthUser:
        with self._lock:
            session = self._sessions.get(access_token)
            if session is None or session[1] < time.time():
                msg = "Invalid JWT"
                raise RemoteServiceError(msg, status_code=401, operation="get_user")
            return session[0]
