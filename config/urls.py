from django.conf import settings
from django.urls import include
from django.urls import path
from django.views import defaults as default_views
from django.views.generic import TemplateView

from folio.showcase.views import HomeView

urlpatterns = [
    # Static pages...
    path("", HomeView.as_view(), name="home"),
    path(
        "about/",
        TemplateView.as_view(template_name="pages/about.html"),
        name="about",
    ),
    path(
        "contact/",
        TemplateView.as_view(template_name="pages/contact.html"),
        name="contact",
    ),
    # Public content...
    path("blog/", include("folio.blog.urls", namespace="blog")),
    path("ios-apps/", include("folio.showcase.urls", namespace="showcase")),
    # Admin area...
    path("admin/", include("folio.core.urls", namespace="core")),
    path("admin/dashboard/", include("folio.dashboard.urls", namespace="dashboard")),
    path(
        "admin/blog/",
        include("folio.blog.admin_urls", namespace="blog_admin"),
    ),
    path(
        "admin/apps/",
        include("folio.showcase.admin_urls", namespace="showcase_admin"),
    ),
]


if settings.DEBUG:
    # This allows the error pages to be debugged during development, just visit
    # these url in browser to see how these error pages look like.
    urlpatterns += [
        path(
            "400/",
            default_views.bad_request,
            kwargs={"exception": Exception("Bad Request!")},
        ),
        path(
            "403/",
            default_views.permission_denied,
            kwargs={"exception": Exception("Permission Denied")},
        ),
        path(
            "404/",
            default_views.page_not_found,
            kwargs={"exception": Exception("Page not Found")},
        ),
        path("500/", default_views.server_error),
    ]
