"""Tests for the in-process remote backend."""

import pytest

from folio.core.remote.base import RemoteServiceError
from folio.core.remote.memory import MemoryBackend

EMAIL = "me@example.com"
PASSWORD = "hunter22"  # noqa: S105


@pytest.fixture
def memory():
    return MemoryBackend(users={EMAIL: PASSWORD})


@pytest.fixture
def token(memory):
    return memory.sign_in(EMAIL, PASSWORD).access_token


class TestRows:
    def test_insert_assigns_server_columns(self, memory, token):
        row = memory.insert("blog_posts", {"title": "A"}, access_token=token)
        assert row["id"]
        assert row["created_at"] == row["updated_at"]
        assert memory.get("blog_posts", row["id"]) == row

    def test_writes_need_a_token(self, memory):
        with pytest.raises(RemoteServiceError) as excinfo:
            memory.insert("blog_posts", {"title": "A"})
        assert excinfo.value.status_code == 401  # noqa: PLR2004

    def test_unknown_table(self, memory, token):
        with pytest.raises(RemoteServiceError) as excinfo:
            memory.select("nope")
        assert excinfo.value.status_code == 404  # noqa: PLR2004

    def test_update_bumps_updated_at_and_keeps_id(self, memory, token):
        row = memory.insert("blog_posts", {"title": "A"}, access_token=token)
        updated = memory.update(
            "blog_posts",
            row["id"],
            {"title": "B", "id": "hijack"},
            access_token=token,
        )
        assert updated["id"] == row["id"]
        assert updated["title"] == "B"
        assert updated["updated_at"] > row["updated_at"]

    def test_update_missing_row(self, memory, token):
        assert memory.update("blog_posts", "missing", {"title": "x"}, access_token=token) is None

    def test_select_filters_orders_and_limits(self, memory, token):
        first = memory.insert("blog_posts", {"title": "A", "published": True}, access_token=token)
        memory.insert("blog_posts", {"title": "B", "published": False}, access_token=token)
        third = memory.insert("blog_posts", {"title": "C", "published": True}, access_token=token)

        rows = memory.select(
            "blog_posts",
            filters={"published": True},
            order_by="created_at",
            descending=True,
        )
        assert [r["id"] for r in rows] == [third["id"], first["id"]]
        assert len(memory.select("blog_posts", limit=1)) == 1

    def test_select_projects_columns(self, memory, token):
        row = memory.insert("ios_apps", {"title": "A", "slug": "a"}, access_token=token)
        assert memory.select("ios_apps", columns="id, slug") == [{"id": row["id"], "slug": "a"}]

    def test_returned_rows_are_copies(self, memory, token):
        row = memory.insert("blog_posts", {"tags": ["a"]}, access_token=token)
        row["tags"].append("b")
        assert memory.get("blog_posts", row["id"])["tags"] == ["a"]

    def test_delete_and_count(self, memory, token):
        row = memory.insert("ios_apps", {"title": "A"}, access_token=token)
        assert memory.count("ios_apps") == 1
        memory.delete("ios_apps", row["id"], access_token=token)
        memory.delete("ios_apps", row["id"], access_token=token)
        assert memory.count("ios_apps") == 0


class TestObjects:
    def test_upload_never_overwrites(self, memory, token):
        memory.upload("app-icons", "a.png", b"1", content_type="image/png", access_token=token)
        with pytest.raises(RemoteServiceError) as excinfo:
            memory.upload("app-icons", "a.png", b"2", content_type="image/png", access_token=token)
        assert excinfo.value.status_code == 409  # noqa: PLR2004
        assert memory.read_object("app-icons", "a.png") == b"1"

    def test_remove_ignores_missing(self, memory, token):
        memory.upload("blog_images", "a.png", b"1", content_type="image/png", access_token=token)
        memory.remove("blog_images", ["a.png", "missing.png"], access_token=token)
        assert memory.list_objects("blog_images") == []

    def test_unknown_bucket(self, memory, token):
        with pytest.raises(RemoteServiceError):
            memory.list_objects("nope")

    def test_public_url_format(self):
        memory = MemoryBackend(base_url="https://x.supabase.co/")
        assert memory.public_url("blog_images", "a b.png") == (
            "https://x.supabase.co/storage/v1/object/public/blog_images/a%20b.png"
        )
        assert memory.path_from_public_url("blog_images", memory.public_url("blog_images", "a b.png")) == "a b.png"


class TestAuth:
    def test_bad_password(self, memory):
        with pytest.raises(RemoteServiceError, match="Invalid login credentials"):
            memory.sign_in(EMAIL, "wrong")

    def test_unknown_user(self, memory):
        with pytest.raises(RemoteServiceError):
            memory.sign_in("nobody@example.com", PASSWORD)

    def test_refresh_rotates_tokens(self, memory):
        tokens = memory.sign_in(EMAIL, PASSWORD)
        fresh = memory.refresh(tokens.refresh_token)
        assert fresh.access_token != tokens.access_token
        assert fresh.user == tokens.user
        with pytest.raises(RemoteServiceError):
            memory.refresh(tokens.refresh_token)

    def test_sign_out_revokes(self, memory):
        tokens = memory.sign_in(EMAIL, PASSWORD)
        assert memory.get_user(tokens.access_token).email == EMAIL
        memory.sign_out(tokens.access_token)
        with pytest.raises(RemoteServiceError):
            memory.get_user(tokens.access_token)
        with pytest.raises(RemoteServiceError):
            memory.insert("blog_posts", {"title": "x"}, access_token=tokens.access_token)
        with pytest.raises(RemoteServiceError):
            memory.refresh(tokens.refresh_token)
