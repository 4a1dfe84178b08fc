import logging
from unittest.mock import patch

import pytest

from folio.blog.models import BlogPost
from folio.blog.services import BlogPostListing
from folio.blog.tests.factories import create_post
from folio.conftest import PNG_BYTES
from folio.content.exceptions import PersistError
from folio.core.constants import RemoteTable
from folio.core.remote import RemoteServiceError


@pytest.fixture
def listing(remote_session):
    return BlogPostListing(remote_session)


class TestFetch:
    def test_most_recently_updated_first(self, listing, remote_session):
        older = create_post(remote_session, title="Older")
        create_post(remote_session, title="Newer")
        remote_session.update(RemoteTable.BLOG_POSTS, older["id"], {"excerpt": "bumped"})

        titles = [post.title for post in listing.fetch()]

        assert titles == ["Older", "Newer"]

    def test_null_tags_become_empty(self, listing, remote_session):
        create_post(remote_session, tags=None)
        assert listing.fetch()[0].tags == []


class TestFilter:
    @pytest.fixture
    def posts(self):
        return [
            BlogPost(id="1", title="SwiftUI tips", excerpt="Layout tricks", published=True),
            BlogPost(id="2", title="Draft notes", excerpt="About Swift concurrency"),
            BlogPost(id="3", title="Launch day", excerpt="It shipped", published=True),
        ]

    def test_all(self, listing, posts):
        assert listing.filter(posts) == posts

    def test_published(self, listing, posts):
        assert [p.id for p in listing.filter(posts, status="published")] == ["1", "3"]

    def test_draft(self, listing, posts):
        assert [p.id for p in listing.filter(posts, status="Draft")] == ["2"]

    def test_search_title_and_excerpt(self, listing, posts):
        assert [p.id for p in listing.filter(posts, search="SWIFT")] == ["1", "2"]

    def test_search_and_status_combine(self, listing, posts):
        assert [p.id for p in listing.filter(posts, search="swift", status="draft")] == ["2"]

    def test_no_match(self, listing, posts):
        assert listing.filter(posts, search="kotlin") == []


class TestDelete:
    def test_deletes_row_and_image(self, listing, remote_session, backend):
        remote_session.upload("blog_images", "cover.png", PNG_BYTES, content_type="image/png")
        url = remote_session.public_url("blog_images", "cover.png")
        row = create_post(remote_session, featured_image=url)

        listing.delete(BlogPost.from_row(row))

        assert remote_session.get(RemoteTable.BLOG_POSTS, row["id"]) is None
        assert backend.list_objects("blog_images") == []

    def test_row_failure_keeps_image(self, listing, remote_session, backend):
        remote_session.upload("blog_images", "cover.png", PNG_BYTES, content_type="image/png")
        url = remote_session.public_url("blog_images", "cover.png")
        row = create_post(remote_session, featured_image=url)

        with (
            patch.object(remote_session, "delete", side_effect=RemoteServiceError("denied")),
            pytest.raises(PersistError),
        ):
            listing.delete(BlogPost.from_row(row))

        assert backend.list_objects("blog_images") == ["cover.png"]

    def test_image_failure_is_only_logged(self, listing, remote_session, caplog):
        url = remote_session.public_url("blog_images", "cover.png")
        row = create_post(remote_session, featured_image=url)

        with (
            patch.object(remote_session, "remove", side_effect=RemoteServiceError("gone")),
            caplog.at_level(logging.WARNING),
        ):
            listing.delete(BlogPost.from_row(row))

        assert remote_session.get(RemoteTable.BLOG_POSTS, row["id"]) is None
        assert "Could not remove" in caplog.text
