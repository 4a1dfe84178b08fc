"""
Remote backend registry and factory.

This module provides the central access point for the configured remote data
service backend. The backend is selected by the REMOTE_BACKEND setting.

Usage:
    from folio.core.remote import get_remote_backend

    backend = get_remote_backend()
    rows = backend.select("blog_posts", order_by="updated_at", descending=True)

Most code should not call this directly: views receive a
:class:`folio.core.session.RemoteSession` on ``request.remote_session``,
which binds the backend to the signed-in user's tokens.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import TYPE_CHECKING

from django.conf import settings
from django.utils.module_loading import import_string

if TYPE_CHECKING:
    from folio.core.remote.base import RemoteBackend

logger = logging.getLogger(__name__)

BACKEND_ALIASES = {
    "supabase": "folio.core.remote.supabase.SupabaseBackend",
    "memory": "folio.core.remote.memory.MemoryBackend",
}


@lru_cache(maxsize=1)
def get_remote_backend() -> RemoteBackend:
    """
    Get the configured remote backend.

    Configuration:
        REMOTE_BACKEND: "supabase" (default), "memory", or a full class path
        REMOTE_BACKEND_OPTIONS: Dict of options passed to the constructor

    Returns:
        Configured RemoteBackend instance (cached singleton)

    Example settings:
        # Hosted Supabase project (URL and key read from settings)
        REMOTE_BACKEND = "supabase"

        # Offline development
        REMOTE_BACKEND = "memory"
        REMOTE_BACKEND_OPTIONS = {"users": {"me@example.com": "secret"}}
    """
    backend_setting = getattr(settings, "REMOTE_BACKEND", "supabase")
    options = getattr(settings, "REMOTE_BACKEND_OPTIONS", {}) or {}

    backend_class_path = BACKEND_ALIASES.get(backend_setting, backend_setting)

    logger.info("Initializing remote backend: %s", backend_class_path)

    try:
        backend_class = import_string(backend_class_path)
    except ImportError as e:
        msg = f"Could not import remote backend '{backend_class_path}': {e}"
        raise ImportError(msg) from e

    try:
        return backend_class(**options)
    except (TypeError, ValueError) as e:
        msg = f"Could not instantiate remote backend '{backend_class_path}': {e}"
        raise RuntimeError(msg) from e


def clear_backend_cache() -> None:
    """
    Clear the cached backend instance.

    Useful for testing or when settings change at runtime.
    """
    get_remote_backend.cache_clear()
