from django.urls import path
from django.views.generic import RedirectView

from folio.core import views

app_name = "core"

urlpatterns = [
    path(
        "",
        RedirectView.as_view(pattern_name="dashboard:home", permanent=False),
        name="admin_root",
    ),
    path("login/", views.SignInView.as_view(), name="sign_in"),
    path("logout/", views.SignOutView.as_view(), name="sign_out"),
]
