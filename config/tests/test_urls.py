"""
Ensure the public site and the admin area resolve to the right views.

Error page previews are only routed when DEBUG is on.
"""

from __future__ import annotations

import importlib

from django.test import SimpleTestCase
from django.test import override_settings
from django.urls import Resolver404
from django.urls import clear_url_caches
from django.urls import resolve
from django.urls import reverse


class UrlRoutingTests(SimpleTestCase):
    def _reload_urls(self):
        import config.urls

        clear_url_caches()
        importlib.reload(config.urls)

    def tearDown(self):
        self._reload_urls()
        super().tearDown()

    def test_public_pages(self):
        self.assertEqual(resolve("/").url_name, "home")
        self.assertEqual(resolve("/blog/").namespace, "blog")
        self.assertEqual(resolve("/blog/hello-world/").kwargs, {"slug": "hello-world"})
        self.assertEqual(resolve("/ios-apps/").namespace, "showcase")
        self.assertEqual(resolve("/ios-apps/weather-app/").url_name, "detail")

    def test_admin_pages(self):
        self.assertEqual(reverse("core:sign_in"), "/admin/login/")
        self.assertEqual(reverse("dashboard:home"), "/admin/dashboard/")
        self.assertEqual(
            reverse("blog_admin:update", kwargs={"pk": "42"}),
            "/admin/blog/edit/42/",
        )
        self.assertEqual(
            reverse("showcase_admin:delete", kwargs={"pk": "7"}),
            "/admin/apps/delete/7/",
        )

    @override_settings(DEBUG=True)
    def test_error_previews_with_debug(self):
        self._reload_urls()
        self.assertEqual(resolve("/404/").func.__name__, "page_not_found")

    @override_settings(DEBUG=False)
    def test_no_error_previews_without_debug(self):
        self._reload_urls()
        with self.assertRaises(Resolver404):
            resolve("/404/")
