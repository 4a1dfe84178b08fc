import logging
from typing import Any

from django.utils.translation import gettext_lazy as _
from django.views.generic import TemplateView

from folio.core.mixins import BreadcrumbMixin
from folio.core.mixins import RemoteSessionRequiredMixin
from folio.core.remote import RemoteServiceError
from folio.dashboard.services import dashboard_stats

logger = logging.getLogger(__name__)


class DashboardView(RemoteSessionRequiredMixin, BreadcrumbMixin, TemplateView):
    """Admin landing page with content counts and recent changes."""

    template_name = "dashboard/home.html"
    breadcrumbs = [{"name": _("Dashboard"), "url": ""}]

    def get_context_data(self, **kwargs: Any) -> dict[str, Any]:
        context = super().get_context_data(**kwargs)
        stats = None
        load_error = None
        try:
            stats = dashboard_stats(self.request.remote_session)
        except RemoteServiceError as exc:
            logger.warning("Could not load dashboard stats: %s", exc)
            load_error = _("Could not load dashboard data: %(reason)s") % {
                "reason": exc.message,
            }
        context.update({"stats": stats, "load_error": load_error})
        return context
