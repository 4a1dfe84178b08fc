"""
With these settings, tests run faster.
"""

from .base import *  # noqa: F403
from .base import TEMPLATES
from .base import env

# GENERAL
# ------------------------------------------------------------------------------
# https://docs.djangoproject.com/en/dev/ref/settings/#secret-key
SECRET_KEY = env(
    "DJANGO_SECRET_KEY",
    default="u3Nq8ZpR1xTbW6yKc0LmDfV9sHjA2gE5oIiQ7rUtC4nYvB8lM1wX6eS3dJ0kP9aF",
)
# https://docs.djangoproject.com/en/dev/ref/settings/#test-runner
TEST_RUNNER = "django.test.runner.DiscoverRunner"
# https://docs.djangoproject.com/en/dev/ref/settings/#allowed-hosts
ALLOWED_HOSTS = ["localhost", "127.0.0.1", "testserver"]

# DATABASES
# ------------------------------------------------------------------------------
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    },
}

# DEBUGGING FOR TEMPLATES
# ------------------------------------------------------------------------------
TEMPLATES[0]["OPTIONS"]["debug"] = True  # type: ignore[index]

# STORAGES
# ------------------------------------------------------------------------------
STORAGES = {
    "default": {
        "BACKEND": "django.core.files.storage.InMemoryStorage",
    },
    "staticfiles": {
        "BACKEND": "django.contrib.staticfiles.storage.StaticFilesStorage",
    },
}

# REMOTE DATA SERVICE
# ------------------------------------------------------------------------------
# Tests never leave the process. The memory backend mirrors Supabase
# semantics, including public URL format.
REMOTE_BACKEND = "memory"
SUPABASE_URL = "https://folio-test.supabase.co"
SUPABASE_ANON_KEY = "anon-test-key"
REMOTE_BACKEND_OPTIONS = {
    "base_url": SUPABASE_URL,
    "users": {"admin@example.com": "correct-horse-battery"},
}
