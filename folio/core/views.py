import logging
from http import HTTPStatus

from django.conf import settings
from django.contrib import messages
from django.shortcuts import redirect
from django.shortcuts import render
from django.shortcuts import resolve_url
from django.utils.http import url_has_allowed_host_and_scheme
from django.utils.translation import gettext_lazy as _
from django.views import View

from folio.core.forms import SignInForm
from folio.core.remote import RemoteServiceError
from folio.core.session import RemoteSession
from folio.core.session import end_session
from folio.core.session import store_session

logger = logging.getLogger(__name__)


class SignInView(View):
    """Exchange the admin's credentials for a remote session."""

    template_name = "core/sign_in.html"

    def _success_url(self, request) -> str:
        candidate = request.POST.get("next") or request.GET.get("next")
        if candidate and url_has_allowed_host_and_scheme(
            candidate,
            allowed_hosts={request.get_host()},
            require_https=request.is_secure(),
        ):
            return candidate
        return resolve_url(settings.LOGIN_REDIRECT_URL)

    def _render(self, request, form, status=HTTPStatus.OK):
        context = {
            "form": form,
            "next": request.POST.get("next") or request.GET.get("next", ""),
        }
        return render(request, self.template_name, context, status=status)

    def get(self, request, *args, **kwargs):
        if request.remote_session.is_authenticated:
            return redirect(self._success_url(request))
        return self._render(request, SignInForm())

    def post(self, request, *args, **kwargs):
        form = SignInForm(request.POST)
        if not form.is_valid():
            return self._render(request, form, status=HTTPStatus.BAD_REQUEST)

        try:
            session = RemoteSession.sign_in(
                request.remote_session.backend,
                form.cleaned_data["email"],
                form.cleaned_data["password"],
            )
        except RemoteServiceError as exc:
            logger.warning(
                "Sign-in rejected for %s: %s",
                form.cleaned_data["email"],
                exc,
            )
            messages.error(request, exc.message or _("Sign-in failed."))
            return self._render(request, form, status=HTTPStatus.BAD_REQUEST)

        store_session(request, session)
        return redirect(self._success_url(request))


class SignOutView(View):
    def post(self, request, *args, **kwargs):
        end_session(request)
        messages.info(request, _("You have been signed out."))
        return redirect(settings.LOGIN_URL)
