"""
Supabase backend for the remote data service.

Talks to the three Supabase HTTP APIs with a single httpx client:

    /rest/v1/{table}                 PostgREST rows
    /storage/v1/object/{bucket}/...  Storage objects
    /auth/v1/...                     GoTrue auth

Every request carries the project's anon key in ``apikey``. The
``Authorization`` bearer is the signed-in user's access token when one is
given, otherwise the anon key, so row level security policies decide what
an anonymous visitor may read and what only the admin may write.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING
from typing import Any
from urllib.parse import quote

import httpx
from django.conf import settings

from folio.core.remote.base import AuthTokens
from folio.core.remote.base import AuthUser
from folio.core.remote.base import RemoteBackend
from folio.core.remote.base import RemoteServiceError
from folio.core.remote.base import Row

if TYPE_CHECKING:
    from collections.abc import Mapping
    from collections.abc import Sequence

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0


def _error_message(response: httpx.Response) -> str:
    """Pull the human readable message out of a Supabase error body."""
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict):
        for key in ("message", "msg", "error_description", "error"):
            value = body.get(key)
            if value:
                return str(value)
    return response.reason_phrase


def _content_range_total(header: str | None) -> int:
    """Parse the total out of ``Content-Range: 0-24/573`` (or ``*/573``)."""
    if not header or "/" not in header:
        return 0
    total = header.rsplit("/", 1)[1]
    return int(total) if total.isdigit() else 0


class SupabaseBackend(RemoteBackend):
    """
    Remote data service backed by a Supabase project.

    Configuration via settings (constructor arguments take precedence):
        SUPABASE_URL: Project URL, e.g. https://abcd.supabase.co
        SUPABASE_ANON_KEY: Project anon (public) API key
        FOLIO_REMOTE_TIMEOUT: Per-request timeout in seconds
    """

    def __init__(
        self,
        url: str | None = None,
        anon_key: str | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.base_url = (url or getattr(settings, "SUPABASE_URL", "")).rstrip("/")
        self.anon_key = anon_key or getattr(settings, "SUPABASE_ANON_KEY", "")
        if not self.base_url or not self.anon_key:
            msg = "SUPABASE_URL and SUPABASE_ANON_KEY must be configured."
            raise ValueError(msg)
        if timeout is None:
            timeout = getattr(settings, "FOLIO_REMOTE_TIMEOUT", DEFAULT_TIMEOUT_SECONDS)
        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={"apikey": self.anon_key},
        )

    def close(self) -> None:
        self._client.close()

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _headers(self, access_token: str | None, **extra: str) -> dict[str, str]:
        headers = {"Authorization": f"Bearer {access_token or self.anon_key}"}
        headers.update(extra)
        return headers

    def _request(
        self,
        operation: str,
        method: str,
        url: str,
        **kwargs: Any,
    ) -> httpx.Response:
        try:
            response = self._client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("Supabase %s failed to reach %s: %s", operation, url, exc)
            msg = f"Could not reach the data service: {exc}"
            raise RemoteServiceError(msg, operation=operation) from exc

        if response.is_error:
            message = _error_message(response)
            logger.warning(
                "Supabase %s rejected with %s: %s",
                operation,
                response.status_code,
                message,
            )
            raise RemoteServiceError(
                message,
                status_code=response.status_code,
                operation=operation,
            )
        return response

    @staticmethod
    def _eq_params(filters: Mapping[str, Any] | None) -> dict[str, str]:
        params: dict[str, str] = {}
        for column, value in (filters or {}).items():
            if value is None:
                params[column] = "is.null"
            elif isinstance(value, bool):
                params[column] = f"eq.{str(value).lower()}"
            else:
                params[column] = f"eq.{value}"
        return params

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
        params = {"select": columns, **self._eq_params(filters)}
        if order_by:
            params["order"] = f"{order_by}.{'desc' if descending else 'asc'}"
        if limit is not None:
            params["limit"] = str(limit)
        response = self._request(
            "select",
            "GET",
            f"/rest/v1/{table}",
            params=params,
            headers=self._headers(access_token),
        )
        return response.json()

    def insert(
        self,
        table: str,
        row: Mapping[str, Any],
        *,
        access_token: str | None = None,
    ) -> Row:
        response = self._request(
            "insert",
            "POST",
            f"/rest/v1/{table}",
            json=[dict(row)],
            headers=self._headers(access_token, Prefer="return=representation"),
        )
        rows = response.json()
        if not rows:
            msg = f"Insert into {table} returned no row."
            raise RemoteServiceError(msg, operation="insert")
        return rows[0]

    def update(
        self,
        table: str,
        row_id: str,
        values: Mapping[str, Any],
        *,
        access_token: str | None = None,
    ) -> Row | None:
        response = self._request(
            "update",
            "PATCH",
            f"/rest/v1/{table}",
            params=self._eq_params({"id": row_id}),
            json=dict(values),
            headers=self._headers(access_token, Prefer="return=representation"),
        )
        rows = response.json()
        return rows[0] if rows else None

    def delete(
        self,
        table: str,
        row_id: str,
        *,
        access_token: str | None = None,
    ) -> None:
        self._request(
            "delete",
            "DELETE",
            f"/rest/v1/{table}",
            params=self._eq_params({"id": row_id}),
            headers=self._headers(access_token, Prefer="return=minimal"),
        )

    def count(self, table: str, *, access_token: str | None = None) -> int:
        response = self._request(
            "count",
            "HEAD",
            f"/rest/v1/{table}",
            params={"select": "id"},
            headers=self._headers(access_token, Prefer="count=exact"),
        )
        return _content_range_total(response.headers.get("content-range"))

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
        self._request(
            "upload",
            "POST",
            f"/storage/v1/object/{bucket}/{quote(path)}",
            content=content,
            headers=self._headers(
                access_token,
                **{"Content-Type": content_type, "x-upsert": "false"},
            ),
        )
        logger.info("Uploaded %d bytes to %s/%s", len(content), bucket, path)
        return path

    def remove(
        self,
        bucket: str,
        paths: Sequence[str],
        *,
        access_token: str | None = None,
    ) -> None:
        if not paths:
            return
        self._request(
            "remove",
            "DELETE",
            f"/storage/v1/object/{bucket}",
            json={"prefixes": list(paths)},
            headers=self._headers(access_token),
        )
        logger.info("Removed %d object(s) from %s", len(paths), bucket)

    def list_objects(
        self,
        bucket: str,
        *,
        limit: int = 100,
        access_token: str | None = None,
    ) -> list[str]:
        response = self._request(
            "list",
            "POST",
            f"/storage/v1/object/list/{bucket}",
            json={"prefix": "", "limit": limit, "offset": 0},
            headers=self._headers(access_token),
        )
        return [entry["name"] for entry in response.json()]

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    def _tokens_from(self, payload: dict[str, Any]) -> AuthTokens:
        user = payload.get("user") or {}
        expires_at = payload.get("expires_at") or int(time.time()) + int(
            payload.get("expires_in", 3600),
        )
        return AuthTokens(
            access_token=payload["access_token"],
            refresh_token=payload.get("refresh_token", ""),
            expires_at=int(expires_at),
            user=AuthUser(id=str(user.get("id", "")), email=user.get("email", "")),
        )

    def sign_in(self, email: str, password: str) -> AuthTokens:
        response = self._request(
            "sign_in",
            "POST",
            "/auth/v1/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        return self._tokens_from(response.json())

    def refresh(self, refresh_token: str) -> AuthTokens:
        response = self._request(
            "refresh",
            "POST",
            "/auth/v1/token",
            params={"grant_type": "refresh_token"},
            json={"refresh_token": refresh_token},
        )
        return self._tokens_from(response.json())

    def sign_out(self, access_token: str) -> None:
        self._request(
            "sign_out",
            "POST",
            "/auth/v1/logout",
            headers=self._headers(access_token),
        )

    def get_user(self, access_token: str) -> AuthUser:
        response = self._request(
            "get_user",
            "GET",
            "/auth/v1/user",
            headers=self._headers(access_token),
        )
        payload = response.json()
        return AuthUser(id=str(payload.get("id", "")), email=payload.get("email", ""))
