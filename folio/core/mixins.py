import copy
from urllib.parse import urlencode

from django.conf import settings
from django.shortcuts import redirect
from django.shortcuts import resolve_url


class RemoteSessionRequiredMixin:
    """
    Send anonymous visitors to the sign-in page.

    Admin pages are gated on ``request.remote_session`` rather than Django's
    auth framework because the admin account lives in the remote service.
    The original path is passed along as ``?next=``.
    """

    redirect_field_name = "next"

    def dispatch(self, request, *args, **kwargs):
        session = getattr(request, "remote_session", None)
        if session is None or not session.is_authenticated:
            query = urlencode({self.redirect_field_name: request.get_full_path()})
            return redirect(f"{resolve_url(settings.LOGIN_URL)}?{query}")
        return super().dispatch(request, *args, **kwargs)


class BreadcrumbMixin:
    """
    A mixin to add breadcrumb navigation to a view.
    Override `get_breadcrumbs()` to return a list of breadcrumb items.
    Each breadcrumb is a dict with keys:
      - 'name': The text to display.
      - 'url': (Optional) The URL for that breadcrumb. For the current page,
          you may leave it empty.
    """

    default_breadcrumbs = []
    breadcrumbs = []

    def get_breadcrumbs(self) -> list[dict[str, str]]:
        breadcrumbs = self.default_breadcrumbs + self.breadcrumbs
        return copy.deepcopy(breadcrumbs)

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["breadcrumbs"] = self.get_breadcrumbs()
        return context
