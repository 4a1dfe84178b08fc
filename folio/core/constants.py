"""Names shared with the remote data service."""

from django.db import models


class RemoteTable(models.TextChoices):
    """Collections in the remote relational store."""

    BLOG_POSTS = "blog_posts", "Blog posts"
    IOS_APPS = "ios_apps", "iOS apps"


class MediaBucket(models.TextChoices):
    """Public object-storage buckets that hold uploaded media."""

    BLOG_IMAGES = "blog_images", "Blog images"
    APP_SCREENSHOTS = "app_screenshots", "App screenshots"
    APP_ICONS = "app-icons", "App icons"


# Rows are listed most-recently-updated first in the admin area.
UPDATED_AT = "updated_at"
CREATED_AT = "created_at"
