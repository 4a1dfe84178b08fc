"""
Admin views shared by every content kind.

Each content app subclasses these with its controller/listing class, its
template names and its URL namespace. Every failure keeps the admin on the
page they were on with an explicit message.
"""

import logging
from typing import Any

from django.contrib import messages
from django.http import Http404
from django.http import HttpResponseRedirect
from django.urls import reverse
from django.utils.translation import gettext_lazy as _
from django.views.generic import TemplateView

from folio.content.exceptions import ContentValidationError
from folio.content.exceptions import NotFoundError
from folio.content.exceptions import PersistError
from folio.content.exceptions import UploadError
from folio.content.listing import STATUS_ALL
from folio.core.mixins import BreadcrumbMixin
from folio.core.mixins import RemoteSessionRequiredMixin
from folio.core.remote import RemoteServiceError

logger = logging.getLogger(__name__)


class ContentAdminMixin(RemoteSessionRequiredMixin, BreadcrumbMixin):
    """Common attributes for the admin content pages."""

    url_namespace = ""
    verbose_name = _("item")
    verbose_name_plural = _("items")

    def list_url(self) -> str:
        return reverse(f"{self.url_namespace}:list")

    def load_failed(self, exc: RemoteServiceError) -> HttpResponseRedirect:
        logger.warning("Could not load %s: %s", self.verbose_name, exc)
        messages.error(
            self.request,
            _("Could not load %(item)s: %(reason)s")
            % {"item": self.verbose_name, "reason": exc.message},
        )
        return HttpResponseRedirect(self.list_url())

    def get_breadcrumbs(self) -> list[dict[str, str]]:
        breadcrumbs = super().get_breadcrumbs()
        breadcrumbs.insert(0, {"name": _("Dashboard"), "url": reverse("dashboard:home")})
        breadcrumbs.insert(
            1,
            {"name": str(self.verbose_name_plural).capitalize(), "url": self.list_url()},
        )
        return breadcrumbs

    def get_context_data(self, **kwargs: Any) -> dict[str, Any]:
        context = super().get_context_data(**kwargs)
        context.update(
            {
                "url_namespace": self.url_namespace,
                "verbose_name": self.verbose_name,
                "verbose_name_plural": self.verbose_name_plural,
            },
        )
        return context


class ContentListView(ContentAdminMixin, TemplateView):
    """
    List, search and filter one content kind.

    Renders exactly one of: the load error banner, the matching items, or
    an empty-state message.
    """

    listing_class = None
    template_name = "content/content_list.html"
    empty_message = _("Nothing here yet.")
    filtered_empty_message = _("No items match your filters.")

    def get_context_data(self, **kwargs: Any) -> dict[str, Any]:
        context = super().get_context_data(**kwargs)
        listing = self.listing_class(self.request.remote_session)
        search = self.request.GET.get("q", "").strip()
        status = self.request.GET.get("status", STATUS_ALL).strip() or STATUS_ALL
        filters_active = bool(search) or status.lower() != STATUS_ALL

        load_error = None
        items = []
        try:
            items = listing.filter(listing.fetch(), search=search, status=status)
        except RemoteServiceError as exc:
            logger.warning("Could not load %s: %s", listing.table, exc)
            load_error = _("Could not load %(items)s: %(reason)s") % {
                "items": self.verbose_name_plural,
                "reason": exc.message,
            }

        context.update(
            {
                "items": items,
                "load_error": load_error,
                "search": search,
                "status": status,
                "status_choices": listing.status_choices,
                "filters_active": filters_active,
                "empty_message": (
                    self.filtered_empty_message if filters_active else self.empty_message
                ),
            },
        )
        return context


class ContentFormView(ContentAdminMixin, TemplateView):
    """
    Create (no ``pk``) or edit (``pk`` in the URL) one content item.
    """

    controller_class = None
    template_name = "content/content_form.html"

    def _load_controller(self):
        controller = self.controller_class(self.request.remote_session)
        pk = self.kwargs.get("pk")
        if pk:
            try:
                controller.load(pk)
            except NotFoundError as exc:
                raise Http404(str(exc)) from exc
        return controller

    def get_breadcrumbs(self) -> list[dict[str, str]]:
        breadcrumbs = super().get_breadcrumbs()
        if self.kwargs.get("pk"):
            breadcrumbs.append({"name": _("Edit"), "url": ""})
        else:
            breadcrumbs.append({"name": _("New"), "url": ""})
        return breadcrumbs

    def get_context_data(self, **kwargs: Any) -> dict[str, Any]:
        context = super().get_context_data(**kwargs)
        context.update(
            {
                "form": kwargs.get("form") or self.controller.get_form(),
                "object": self.controller.instance,
                "is_edit": self.controller.is_edit,
                "form_state": self.controller.state.value,
            },
        )
        return context

    def get(self, request, *args, **kwargs):
        try:
            self.controller = self._load_controller()
        except RemoteServiceError as exc:
            return self.load_failed(exc)
        return super().get(request, *args, **kwargs)

    def post(self, request, *args, **kwargs):
        try:
            self.controller = self._load_controller()
        except RemoteServiceError as exc:
            return self.load_failed(exc)

        form = self.controller.get_form(data=request.POST, files=request.FILES)
        try:
            entity = self.controller.submit(form)
        except ContentValidationError:
            context = self.get_context_data(form=form)
            return self.render_to_response(context, status=400)
        except (UploadError, PersistError) as exc:
            messages.error(request, exc.message)
            context = self.get_context_data(form=form)
            return self.render_to_response(context)

        if self.controller.is_edit:
            messages.success(request, _("Saved “%(title)s”.") % {"title": entity.title})
        else:
            messages.success(request, _("Created “%(title)s”.") % {"title": entity.title})
        return HttpResponseRedirect(self.list_url())


class ContentDeleteView(ContentAdminMixin, TemplateView):
    """Confirm on GET, delete on POST, then return to the list."""

    listing_class = None
    controller_class = None
    template_name = "content/content_confirm_delete.html"

    def _get_object(self):
        controller = self.controller_class(self.request.remote_session)
        try:
            return controller.load(self.kwargs["pk"])
        except NotFoundError as exc:
            raise Http404(str(exc)) from exc

    def get_breadcrumbs(self) -> list[dict[str, str]]:
        breadcrumbs = super().get_breadcrumbs()
        breadcrumbs.append({"name": _("Delete"), "url": ""})
        return breadcrumbs

    def get(self, request, *args, **kwargs):
        try:
            self.object = self._get_object()
        except RemoteServiceError as exc:
            return self.load_failed(exc)
        return self.render_to_response(self.get_context_data(object=self.object))

    def post(self, request, *args, **kwargs):
        try:
            item = self._get_object()
        except RemoteServiceError as exc:
            return self.load_failed(exc)

        try:
            self.listing_class(request.remote_session).delete(item)
        except PersistError as exc:
            messages.error(request, exc.message)
            return HttpResponseRedirect(self.list_url())

        messages.success(request, _("Deleted “%(title)s”.") % {"title": item.title})
        return HttpResponseRedirect(self.list_url())
