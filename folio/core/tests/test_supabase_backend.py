"""Tests for the Supabase backend, with HTTP served by httpx.MockTransport."""

import json

import httpx
import pytest

from folio.core.remote.base import RemoteServiceError
from folio.core.remote.supabase import SupabaseBackend

BASE_URL = "https://abcd.supabase.co"
ANON_KEY = "anon-key"


class Recorder:
    """Collects requests and answers them from a handler."""

    def __init__(self, handler):
        self.handler = handler
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


def make_backend(handler) -> tuple[SupabaseBackend, Recorder]:
    recorder = Recorder(handler)
    backend = SupabaseBackend(
        url=BASE_URL,
        anon_key=ANON_KEY,
        transport=httpx.MockTransport(recorder),
    )
    return backend, recorder


class TestConfiguration:
    def test_missing_settings_raise(self, settings):
        settings.SUPABASE_URL = ""
        settings.SUPABASE_ANON_KEY = ""
        with pytest.raises(ValueError, match="SUPABASE_URL"):
            SupabaseBackend()

    def test_reads_settings(self, settings):
        settings.SUPABASE_URL = "https://from-settings.supabase.co/"
        settings.SUPABASE_ANON_KEY = "k"
        backend = SupabaseBackend(transport=httpx.MockTransport(lambda r: None))
        assert backend.base_url == "https://from-settings.supabase.co"


class TestRows:
    def test_select_builds_postgrest_query(self):
        backend, recorder = make_backend(
            lambda request: httpx.Response(200, json=[{"id": "1"}]),
        )

        rows = backend.select(
            "blog_posts",
            filters={"published": True, "slug": "hello"},
            order_by="updated_at",
            descending=True,
            limit=3,
            access_token="user-token",
        )

        assert rows == [{"id": "1"}]
        request = recorder.last
        assert request.method == "GET"
        assert request.url.path == "/rest/v1/blog_posts"
        params = request.url.params
        assert params["select"] == "*"
        assert params["published"] == "eq.true"
        assert params["slug"] == "eq.hello"
        assert params["order"] == "updated_at.desc"
        assert params["limit"] == "3"
        assert request.headers["apikey"] == ANON_KEY
        assert request.headers["authorization"] == "Bearer user-token"

    def test_anonymous_calls_use_anon_key(self):
        backend, recorder = make_backend(lambda request: httpx.Response(200, json=[]))
        backend.select("ios_apps")
        assert recorder.last.headers["authorization"] == f"Bearer {ANON_KEY}"

    def test_null_filter(self):
        backend, recorder = make_backend(lambda request: httpx.Response(200, json=[]))
        backend.select("ios_apps", filters={"icon_url": None})
        assert recorder.last.url.params["icon_url"] == "is.null"

    def test_insert_returns_representation(self):
        def handler(request):
            body = json.loads(request.content)
            return httpx.Response(201, json=[{**body[0], "id": "new-id"}])

        backend, recorder = make_backend(handler)
        row = backend.insert("blog_posts", {"title": "Hi"}, access_token="t")

        assert row == {"title": "Hi", "id": "new-id"}
        assert recorder.last.method == "POST"
        assert recorder.last.headers["prefer"] == "return=representation"

    def test_update_filters_by_id(self):
        backend, recorder = make_backend(
            lambda request: httpx.Response(200, json=[{"id": "7", "title": "New"}]),
        )
        row = backend.update("blog_posts", "7", {"title": "New"}, access_token="t")

        assert row == {"id": "7", "title": "New"}
        assert recorder.last.method == "PATCH"
        assert recorder.last.url.params["id"] == "eq.7"
        assert json.loads(recorder.last.content) == {"title": "New"}

    def test_update_of_missing_row_returns_none(self):
        backend, _ = make_backend(lambda request: httpx.Response(200, json=[]))
        assert backend.update("blog_posts", "404", {"title": "x"}) is None

    def test_delete_filters_by_id(self):
        backend, recorder = make_backend(lambda request: httpx.Response(204))
        backend.delete("ios_apps", "9", access_token="t")
        assert recorder.last.method == "DELETE"
        assert recorder.last.url.params["id"] == "eq.9"

    def test_count_reads_content_range(self):
        backend, recorder = make_backend(
            lambda request: httpx.Response(200, headers={"Content-Range": "0-24/573"}),
        )
        assert backend.count("blog_posts") == 573  # noqa: PLR2004
        assert recorder.last.method == "HEAD"
        assert recorder.last.headers["prefer"] == "count=exact"

    def test_error_response_raises(self):
        backend, _ = make_backend(
            lambda request: httpx.Response(
                401,
                json={"message": "new row violates row-level security policy"},
            ),
        )
        with pytest.raises(RemoteServiceError) as excinfo:
            backend.insert("blog_posts", {"title": "x"})
        assert excinfo.value.status_code == 401  # noqa: PLR2004
        assert "row-level security" in excinfo.value.message
        assert excinfo.value.operation == "insert"

    def test_transport_error_raises(self):
        def handler(request):
            msg = "connection refused"
            raise httpx.ConnectError(msg, request=request)

        backend, _ = make_backend(handler)
        with pytest.raises(RemoteServiceError) as excinfo:
            backend.count("blog_posts")
        assert excinfo.value.status_code is None


class TestObjects:
    def test_upload_posts_bytes_without_upsert(self):
        backend, recorder = make_backend(
            lambda request: httpx.Response(200, json={"Key": "blog_images/a-1.png"}),
        )
        path = backend.upload(
            "blog_images",
            "a-1.png",
            b"\x89PNG",
            content_type="image/png",
            access_token="t",
        )

        assert path == "a-1.png"
        request = recorder.last
        assert request.url.path == "/storage/v1/object/blog_images/a-1.png"
        assert request.headers["content-type"] == "image/png"
        assert request.headers["x-upsert"] == "false"
        assert request.content == b"\x89PNG"

    def test_remove_sends_prefixes(self):
        backend, recorder = make_backend(lambda request: httpx.Response(200, json=[]))
        backend.remove("app-icons", ["a.png", "b.png"], access_token="t")
        assert recorder.last.method == "DELETE"
        assert recorder.last.url.path == "/storage/v1/object/app-icons"
        assert json.loads(recorder.last.content) == {"prefixes": ["a.png", "b.png"]}

    def test_remove_nothing_skips_request(self):
        backend, recorder = make_backend(lambda request: httpx.Response(200, json=[]))
        backend.remove("app-icons", [])
        assert recorder.requests == []

    def test_list_objects(self):
        backend, recorder = make_backend(
            lambda request: httpx.Response(200, json=[{"name": "a.png"}, {"name": "b.png"}]),
        )
        assert backend.list_objects("app_screenshots", limit=2) == ["a.png", "b.png"]
        assert recorder.last.url.path == "/storage/v1/object/list/app_screenshots"

    def test_public_url_round_trip(self):
        backend, _ = make_backend(lambda request: httpx.Response(200))
        url = backend.public_url("app-icons", "weather-app-icon-1.png")
        assert url == (
            f"{BASE_URL}/storage/v1/object/public/app-icons/weather-app-icon-1.png"
        )
        assert backend.path_from_public_url("app-icons", url) == "weather-app-icon-1.png"

    def test_path_from_other_bucket_url_is_none(self):
        backend, _ = make_backend(lambda request: httpx.Response(200))
        url = backend.public_url("blog_images", "a.png")
        assert backend.path_from_public_url("app-icons", url) is None

    def test_path_from_foreign_host_is_none(self):
        backend, _ = make_backend(lambda request: httpx.Response(200))
        assert backend.path_from_public_url("blog_images", "https://cdn.example.com/x/a.png") is None
        lookalike = "https://cdn.example.com/storage/v1/object/public/blog_images/a.png"
        assert backend.path_from_public_url("blog_images", lookalike) is None

    def test_path_from_bare_object_name(self):
        backend, _ = make_backend(lambda request: httpx.Response(200))
        assert backend.path_from_public_url("blog_images", "a.png") == "a.png"


class TestAuth:
    TOKEN_PAYLOAD = {
        "access_token": "access",
        "refresh_token": "refresh",
        "expires_in": 3600,
        "expires_at": 1_900_000_000,
        "user": {"id": "user-1", "email": "admin@example.com"},
    }

    def test_sign_in_password_grant(self):
        backend, recorder = make_backend(
            lambda request: httpx.Response(200, json=self.TOKEN_PAYLOAD),
        )
        tokens = backend.sign_in("admin@example.com", "secret")

        assert tokens.access_token == "access"
        assert tokens.refresh_token == "refresh"
        assert tokens.expires_at == 1_900_000_000  # noqa: PLR2004
        assert tokens.user.email == "admin@example.com"
        assert recorder.last.url.path == "/auth/v1/token"
        assert recorder.last.url.params["grant_type"] == "password"

    def test_bad_credentials(self):
        backend, _ = make_backend(
            lambda request: httpx.Response(
                400,
                json={"error": "invalid_grant", "error_description": "Invalid login credentials"},
            ),
        )
        with pytest.raises(RemoteServiceError, match="Invalid login credentials"):
            backend.sign_in("admin@example.com", "wrong")

    def test_refresh_grant(self):
        backend, recorder = make_backend(
            lambda request: httpx.Response(200, json=self.TOKEN_PAYLOAD),
        )
        backend.refresh("refresh")
        assert recorder.last.url.params["grant_type"] == "refresh_token"
        assert json.loads(recorder.last.content) == {"refresh_token": "refresh"}

    def test_sign_out_sends_bearer(self):
        backend, recorder = make_backend(lambda request: httpx.Response(204))
        backend.sign_out("access")
        assert recorder.last.url.path == "/auth/v1/logout"
        assert recorder.last.headers["authorization"] == "Bearer access"

    def test_get_user(self):
        backend, recorder = make_backend(
            lambda request: httpx.Response(200, json={"id": "user-1", "email": "a@b.c"}),
        )
        user = backend.get_user("access")
        assert user.id == "user-1"
        assert user.email == "a@b.c"
        assert recorder.last.url.path == "/auth/v1/user"
