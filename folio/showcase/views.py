import logging
from typing import Any

from django.http import Http404
from django.urls import reverse_lazy
from django.utils.translation import gettext_lazy as _
from django.views.generic import TemplateView

from folio.content.views import ContentDeleteView
from folio.content.views import ContentFormView
from folio.content.views import ContentListView
from folio.core.mixins import BreadcrumbMixin
from folio.core.remote import RemoteServiceError
from folio.showcase.services import AppListingController
from folio.showcase.services import AppListingListing
from folio.showcase.services import featured_apps
from folio.showcase.services import showcase_app
from folio.showcase.services import showcase_apps

logger = logging.getLogger(__name__)


class AppShowcase(BreadcrumbMixin, TemplateView):
    template_name = "showcase/app_list.html"
    breadcrumbs = [
        {
            "name": _("iOS apps"),
            "url": reverse_lazy("showcase:list"),
        },
    ]

    def get_context_data(self, **kwargs: Any) -> dict[str, Any]:
        context = super().get_context_data(**kwargs)
        load_error = None
        apps = []
        try:
            apps = showcase_apps(self.request.remote_session)
        except RemoteServiceError as exc:
            logger.warning("Could not load app listings: %s", exc)
            load_error = _("The app list is unavailable right now. Please try again later.")
        context.update(
            {
                "section": "apps",
                "page_title": _("iOS apps"),
                "apps": apps,
                "load_error": load_error,
            },
        )
        return context


class AppDetail(BreadcrumbMixin, TemplateView):
    template_name = "showcase/app_detail.html"

    def get(self, request, *args, **kwargs):
        self.object = showcase_app(request.remote_session, kwargs["slug"])
        if self.object is None:
            raise Http404(_("No app with that address."))
        return super().get(request, *args, **kwargs)

    def get_breadcrumbs(self):
        breadcrumbs = super().get_breadcrumbs()
        breadcrumbs.append({"name": _("iOS apps"), "url": reverse_lazy("showcase:list")})
        breadcrumbs.append({"name": self.object.title, "url": ""})
        return breadcrumbs

    def get_context_data(self, **kwargs: Any) -> dict[str, Any]:
        context = super().get_context_data(**kwargs)
        app = self.object
        context.update(
            {
                "section": "apps",
                "app": app,
                "page_title": app.title,
                "meta_description": (app.description or app.title)[:300],
            },
        )
        return context


class HomeView(TemplateView):
    """Landing page with the featured apps."""

    template_name = "pages/home.html"

    def get_context_data(self, **kwargs: Any) -> dict[str, Any]:
        context = super().get_context_data(**kwargs)
        load_error = None
        apps = []
        try:
            apps = featured_apps(self.request.remote_session)
        except RemoteServiceError as exc:
            logger.warning("Could not load featured apps: %s", exc)
            load_error = _("Featured apps are unavailable right now.")
        context.update({"featured_apps": apps, "load_error": load_error})
        return context


class AppAdminMixin:
    url_namespace = "showcase_admin"
    verbose_name = _("app")
    verbose_name_plural = _("apps")


class AppListingAdminList(AppAdminMixin, ContentListView):
    listing_class = AppListingListing
    template_name = "showcase/admin/app_list.html"
    empty_message = _("No apps yet. Add your first one.")
    filtered_empty_message = _("No apps match your filters")


class AppListingAdminForm(AppAdminMixin, ContentFormView):
    controller_class = AppListingController


class AppListingAdminDelete(AppAdminMixin, ContentDeleteView):
    controller_class = AppListingController
    listing_class = AppListingListing
