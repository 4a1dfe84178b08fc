"""
Attach the remote session context to every request.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from folio.core.remote import RemoteServiceError
from folio.core.remote import get_remote_backend
from folio.core.session import SESSION_KEY
from folio.core.session import RemoteSession

if TYPE_CHECKING:
    from django.http import HttpRequest
    from django.http import HttpResponse

logger = logging.getLogger(__name__)


class RemoteSessionMiddleware:
    """
    Build ``request.remote_session`` from the Django session.

    Expired tokens are refreshed transparently; if the refresh is rejected
    the visitor continues anonymously and the stale tokens are dropped.

    This middleware must come after SessionMiddleware.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        backend = get_remote_backend()
        session = RemoteSession.from_session_data(backend, request.session.get(SESSION_KEY))

        if session.is_expired():
            try:
                session.refresh()
            except RemoteServiceError as exc:
                logger.info("Remote session refresh failed, signing out: %s", exc)
                session = RemoteSession.anonymous(backend)
                request.session.pop(SESSION_KEY, None)
            else:
                request.session[SESSION_KEY] = session.to_session_data()

        request.remote_session = session
        return self.get_response(request)
