import logging
from typing import Any

from django.http import Http404
from django.urls import reverse_lazy
from django.utils.translation import gettext_lazy as _
from django.views.generic import TemplateView

from folio.blog.services import BlogPostController
from folio.blog.services import BlogPostListing
from folio.blog.services import published_post
from folio.blog.services import published_posts
from folio.blog.services import related_posts
from folio.content.views import ContentDeleteView
from folio.content.views import ContentFormView
from folio.content.views import ContentListView
from folio.core.mixins import BreadcrumbMixin
from folio.core.remote import RemoteServiceError

logger = logging.getLogger(__name__)


class BlogPostList(BreadcrumbMixin, TemplateView):
    template_name = "blog/blog_post_list.html"
    breadcrumbs = [
        {
            "name": _("Blog"),
            "url": reverse_lazy("blog:list"),
        },
    ]

    def get_context_data(self, **kwargs: Any) -> dict[str, Any]:
        context = super().get_context_data(**kwargs)
        load_error = None
        blog_posts = []
        try:
            blog_posts = published_posts(self.request.remote_session)
        except RemoteServiceError as exc:
            logger.warning("Could not load published posts: %s", exc)
            load_error = _("The blog is unavailable right now. Please try again later.")
        context.update(
            {
                "section": "blog",
                "page_title": _("Blog"),
                "blog_posts": blog_posts,
                "load_error": load_error,
            },
        )
        return context


class BlogPostDetail(BreadcrumbMixin, TemplateView):
    template_name = "blog/blog_post_detail.html"

    def get(self, request, *args, **kwargs):
        self.object = published_post(request.remote_session, kwargs["slug"])
        if self.object is None:
            raise Http404(_("No published post with that address."))
        return super().get(request, *args, **kwargs)

    def get_breadcrumbs(self):
        breadcrumbs = super().get_breadcrumbs()
        breadcrumbs.append({"name": _("Blog"), "url": reverse_lazy("blog:list")})
        breadcrumbs.append({"name": self.object.title, "url": ""})
        return breadcrumbs

    def get_context_data(self, **kwargs: Any) -> dict[str, Any]:
        context = super().get_context_data(**kwargs)
        blog_post = self.object
        meta_description = (blog_post.excerpt or blog_post.get_content_preview()).strip()
        context.update(
            {
                "section": "blog",
                "blog_post": blog_post,
                "page_title": blog_post.title,
                "meta_description": (meta_description or blog_post.title)[:300],
                "canonical_url": self.request.build_absolute_uri(
                    blog_post.get_absolute_url(),
                ),
                "related_posts": related_posts(self.request.remote_session, blog_post),
            },
        )
        return context


class BlogAdminMixin:
    url_namespace = "blog_admin"
    verbose_name = _("post")
    verbose_name_plural = _("posts")


class BlogPostAdminList(BlogAdminMixin, ContentListView):
    listing_class = BlogPostListing
    template_name = "blog/admin/post_list.html"
    empty_message = _("No posts yet. Write your first one.")
    filtered_empty_message = _("No posts match your filters")


class BlogPostAdminForm(BlogAdminMixin, ContentFormView):
    controller_class = BlogPostController


class BlogPostAdminDelete(BlogAdminMixin, ContentDeleteView):
    controller_class = BlogPostController
    listing_class = BlogPostListing
