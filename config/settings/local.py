from .base import *  # noqa: F403
from .base import INSTALLED_APPS
from .base import env

# GENERAL
# ------------------------------------------------------------------------------
# https://docs.djangoproject.com/en/dev/ref/settings/#debug
DEBUG = True
# https://docs.djangoproject.com/en/dev/ref/settings/#secret-key
SECRET_KEY = env(
    "DJANGO_SECRET_KEY",
    default="Gk2rJ4x0bW8Q9d1mVtP7sHnE3cYfL6uZaR5oKqT0iXwNy2jBvC8eD4gM1hS7lF9p",
)
# https://docs.djangoproject.com/en/dev/ref/settings/#allowed-hosts
ALLOWED_HOSTS = ["localhost", "0.0.0.0", "127.0.0.1"]  # noqa: S104

# CACHES
# ------------------------------------------------------------------------------
# https://docs.djangoproject.com/en/dev/ref/settings/#caches
CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "",
    },
}

# REMOTE DATA SERVICE
# ------------------------------------------------------------------------------
# Without Supabase credentials, fall back to the in-process backend so the
# admin area can be exercised offline. Sign in with the configured pair.
if not env("SUPABASE_URL", default=""):
    REMOTE_BACKEND = "memory"
    REMOTE_BACKEND_OPTIONS = {
        "users": {
            env("FOLIO_LOCAL_ADMIN_EMAIL", default="admin@example.com"): env(
                "FOLIO_LOCAL_ADMIN_PASSWORD",
                default="changeme-local-only",
            ),
        },
    }

# STATIC
# ------------------------------------------------------------------------------
STORAGES = {
    "default": {
        "BACKEND": "django.core.files.storage.FileSystemStorage",
    },
    "staticfiles": {
        "BACKEND": "django.contrib.staticfiles.storage.StaticFilesStorage",
    },
}

# WhiteNoise
# ------------------------------------------------------------------------------
# http://whitenoise.evans.io/en/latest/django.html#using-whitenoise-in-development
INSTALLED_APPS = ["whitenoise.runserver_nostatic", *INSTALLED_APPS]

# django-extensions
# ------------------------------------------------------------------------------
# https://django-extensions.readthedocs.io/en/latest/installation_instructions.html#configuration
INSTALLED_APPS += ["django_extensions"]

# Logging
# ------------------------------------------------------------------------------
# Make local development chatty so remote calls show up immediately.
LOGGING["loggers"]["folio"] = {  # noqa: F405
    "handlers": ["console"],
    "level": "DEBUG",
    "propagate": False,
}
