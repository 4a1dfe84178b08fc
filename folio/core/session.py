"""
Explicit session context for the remote data service.

A :class:`RemoteSession` binds the configured backend to one visitor's
credentials. It is the only handle content code uses to reach the remote
service, so every row or object call carries the right bearer token.

Lifecycle:
    1. ``RemoteSession.sign_in()`` exchanges credentials for tokens and
       :func:`store_session` writes them into the Django session.
    2. ``RemoteSessionMiddleware`` rebuilds the context on every request as
       ``request.remote_session`` (anonymous when nobody is signed in),
       refreshing expired tokens.
    3. :func:`end_session` revokes the tokens remotely, forgets them locally
       and closes the context; a closed context refuses further calls.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING
from typing import Any

from folio.core.remote.base import AuthTokens
from folio.core.remote.base import AuthUser
from folio.core.remote.base import RemoteServiceError

if TYPE_CHECKING:
    from collections.abc import Mapping
    from collections.abc import Sequence

    from django.http import HttpRequest

    from folio.core.remote.base import RemoteBackend
    from folio.core.remote.base import Row

logger = logging.getLogger(__name__)

SESSION_KEY = "_folio_remote_session"

# Refresh a little before the service would start rejecting the token.
EXPIRY_LEEWAY_SECONDS = 30


class SessionClosedError(RuntimeError):
    """Raised when a torn-down session context is used."""


class RemoteSession:
    """
    Remote backend bound to one visitor's credentials.

    Anonymous contexts (``tokens is None``) may read whatever the service
    exposes publicly; writes need a signed-in context.
    """

    def __init__(self, backend: RemoteBackend, tokens: AuthTokens | None = None):
        self.backend = backend
        self.tokens = tokens
        self.closed = False

    def __repr__(self) -> str:
        who = self.tokens.user.email if self.tokens else "anonymous"
        state = "closed" if self.closed else "open"
        return f"<RemoteSession {who} ({state})>"

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def anonymous(cls, backend: RemoteBackend) -> RemoteSession:
        return cls(backend)

    @classmethod
    def sign_in(cls, backend: RemoteBackend, email: str, password: str) -> RemoteSession:
        """Authenticate against the remote service. Raises RemoteServiceError."""
        tokens = backend.sign_in(email, password)
        logger.info("Remote session opened for %s", tokens.user.email)
        return cls(backend, tokens)

    @classmethod
    def from_session_data(
        cls,
        backend: RemoteBackend,
        data: Mapping[str, Any] | None,
    ) -> RemoteSession:
        """Rebuild a context from :meth:`to_session_data` output."""
        if not data:
            return cls.anonymous(backend)
        try:
            tokens = AuthTokens(
                access_token=data["access_token"],
                refresh_token=data.get("refresh_token", ""),
                expires_at=int(data["expires_at"]),
                user=AuthUser(id=data["user_id"], email=data.get("email", "")),
            )
        except (KeyError, TypeError, ValueError):
            logger.warning("Discarding malformed remote session data")
            return cls.anonymous(backend)
        return cls(backend, tokens)

    def to_session_data(self) -> dict[str, Any] | None:
        if self.tokens is None:
            return None
        return {
            "access_token": self.tokens.access_token,
            "refresh_token": self.tokens.refresh_token,
            "expires_at": self.tokens.expires_at,
            "user_id": self.tokens.user.id,
            "email": self.tokens.user.email,
        }

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def is_authenticated(self) -> bool:
        return self.tokens is not None and not self.closed

    @property
    def user(self) -> AuthUser | None:
        return self.tokens.user if self.is_authenticated else None

    @property
    def access_token(self) -> str | None:
        self._ensure_open()
        return self.tokens.access_token if self.tokens else None

    def is_expired(self, now: float | None = None) -> bool:
        if self.tokens is None:
            return False
        now = time.time() if now is None else now
        return self.tokens.expires_at - EXPIRY_LEEWAY_SECONDS <= now

    def fetch_user(self) -> AuthUser | None:
        """Ask the service who the current token belongs to."""
        token = self.access_token
        if token is None:
            return None
        return self.backend.get_user(token)

    def refresh(self) -> None:
        """
        Swap expired tokens for fresh ones.

        Raises:
            RemoteServiceError: The service rejected the refresh, or there is
                no refresh token to present.
        """
        self._ensure_open()
        if self.tokens is None:
            return
        if not self.tokens.refresh_token:
            msg = "Session expired and has no refresh token"
            raise RemoteServiceError(msg, status_code=401, operation="refresh")
        self.tokens = self.backend.refresh(self.tokens.refresh_token)
        logger.debug("Remote session refreshed for %s", self.tokens.user.email)

    def close(self) -> None:
        """
        Revoke the remote session and refuse further use.

        Revocation is best-effort: the tokens are forgotten locally even if
        the service cannot be reached.
        """
        if self.closed:
            return
        if self.tokens is not None:
            try:
                self.backend.sign_out(self.tokens.access_token)
            except RemoteServiceError as exc:
                logger.warning(
                    "Remote sign-out failed for %s: %s",
                    self.tokens.user.email,
                    exc,
                )
            else:
                logger.info("Remote session closed for %s", self.tokens.user.email)
        self.tokens = None
        self.closed = True

    def _ensure_open(self) -> None:
        if self.closed:
            msg = "This remote session has been closed."
            raise SessionClosedError(msg)

    # ------------------------------------------------------------------
    # Bound operations
    # ------------------------------------------------------------------

    def select(self, table: str, **kwargs: Any) -> list[Row]:
        return self.backend.select(table, access_token=self.access_token, **kwargs)

    def get(self, table: str, row_id: str) -> Row | None:
        return self.backend.get(table, row_id, access_token=self.access_token)

    def insert(self, table: str, row: Mapping[str, Any]) -> Row:
        return self.backend.insert(table, row, access_token=self.access_token)

    def update(self, table: str, row_id: str, values: Mapping[str, Any]) -> Row | None:
        return self.backend.update(table, row_id, values, access_token=self.access_token)

    def delete(self, table: str, row_id: str) -> None:
        self.backend.delete(table, row_id, access_token=self.access_token)

    def count(self, table: str) -> int:
        return self.backend.count(table, access_token=self.access_token)

    def upload(self, bucket: str, path: str, content: bytes, *, content_type: str) -> str:
        return self.backend.upload(
            bucket,
            path,
            content,
            content_type=content_type,
            access_token=self.access_token,
        )

    def remove(self, bucket: str, paths: Sequence[str]) -> None:
        self.backend.remove(bucket, paths, access_token=self.access_token)

    def list_objects(self, bucket: str, *, limit: int = 100) -> list[str]:
        return self.backend.list_objects(bucket, limit=limit, access_token=self.access_token)

    def public_url(self, bucket: str, path: str) -> str:
        return self.backend.public_url(bucket, path)

    def path_from_public_url(self, bucket: str, url: str) -> str | None:
        return self.backend.path_from_public_url(bucket, url)


def store_session(request: HttpRequest, session: RemoteSession) -> None:
    """Persist ``session`` for later requests and attach it to ``request``."""
    request.session.cycle_key()
    request.session[SESSION_KEY] = session.to_session_data()
    request.remote_session = session


def end_session(request: HttpRequest) -> None:
    """Close the request's remote session and forget it."""
    session: RemoteSession | None = getattr(request, "remote_session", None)
    if session is not None:
        session.close()
        request.remote_session = RemoteSession.anonymous(session.backend)
    request.session.flush()
