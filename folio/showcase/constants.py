from django.db import models
from django.utils.translation import gettext_lazy as _


class AppStatus(models.TextChoices):
    """Release stage of an app listing, stored verbatim in ``ios_apps.status``."""

    RELEASED = "Released", _("Released")
    IN_DEVELOPMENT = "In development", _("In development")
    PLANNING = "Planning", _("Planning")


FEATURED_APPS_LIMIT = 3
