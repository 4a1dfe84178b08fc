"""
Client side of the remote data service.

Folio keeps no content of its own. Blog posts, app listings, their images and
the admin's sign-in all live in a hosted backend-as-a-service reached over
HTTP. This package hides that service behind :class:`RemoteBackend` so the
content workflow can run against the hosted service in production and an
in-process stand-in during tests.

Usage:
    from folio.core.remote import get_remote_backend

    backend = get_remote_backend()
    backend.count("ios_apps")
"""

from folio.core.remote.base import AuthTokens
from folio.core.remote.base import AuthUser
from folio.core.remote.base import RemoteBackend
from folio.core.remote.base import RemoteServiceError
from folio.core.remote.registry import get_remote_backend

__all__ = [
    "AuthTokens",
    "AuthUser",
    "RemoteBackend",
    "RemoteServiceError",
    "get_remote_backend",
]
