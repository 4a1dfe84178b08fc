import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from django.urls import reverse

from folio.core.remote.registry import clear_backend_cache
from folio.core.remote.registry import get_remote_backend
from folio.core.session import RemoteSession

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "correct-horse-battery"  # noqa: S105

# Smallest byte strings that pass the image header check.
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 24
JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x00" * 24


@pytest.fixture(autouse=True)
def _fresh_remote_backend():
    """Every test starts with an empty in-process remote service."""
    clear_backend_cache()
    yield
    clear_backend_cache()


@pytest.fixture
def backend():
    return get_remote_backend()


@pytest.fixture
def remote_session(backend) -> RemoteSession:
    return RemoteSession.sign_in(backend, ADMIN_EMAIL, ADMIN_PASSWORD)


@pytest.fixture
def anonymous_session(backend) -> RemoteSession:
    return RemoteSession.anonymous(backend)


@pytest.fixture
def admin_client(client):
    response = client.post(
        reverse("core:sign_in"),
        {"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD},
    )
    assert response.status_code == 302  # noqa: PLR2004
    return client


@pytest.fixture
def png_upload():
    def _make(name: str = "Cover Photo.PNG") -> SimpleUploadedFile:
        return SimpleUploadedFile(name, PNG_BYTES, content_type="image/png")

    return _make
