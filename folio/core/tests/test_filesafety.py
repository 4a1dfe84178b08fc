import pytest

from folio.core.filesafety import detect_image_type
from folio.core.filesafety import is_allowed_image_extension
from folio.core.filesafety import safe_extension
from folio.core.filesafety import sanitize_filename


class TestSanitizeFilename:
    def test_strips_directories(self):
        assert sanitize_filename("../../etc/passwd") == "passwd"

    def test_replaces_unsafe_characters(self):
        assert sanitize_filename("My Screenshot.PNG") == "My_Screenshot.PNG"

    def test_falls_back_when_nothing_usable(self):
        assert sanitize_filename("...") == "image"
        assert sanitize_filename("", fallback="upload") == "upload"


class TestExtensions:
    def test_safe_extension_is_lowercased(self):
        assert safe_extension("Icon.PNG") == ".png"

    def test_safe_extension_missing(self):
        assert safe_extension("README") == ""

    @pytest.mark.parametrize("name", ["a.jpg", "a.JPEG", "a.png", "a.gif", "a.webp"])
    def test_allowed(self, name):
        assert is_allowed_image_extension(name)

    @pytest.mark.parametrize("name", ["a.svg", "a.exe", "a.png.exe", "noext"])
    def test_rejected(self, name):
        assert not is_allowed_image_extension(name)


class TestDetectImageType:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            (b"\x89PNG\r\n\x1a\n\x00\x00\x00\x00", "image/png"),
            (b"\xff\xd8\xff\xe0\x00\x10JFIF\x00", "image/jpeg"),
            (b"GIF89a\x01\x00\x01\x00\x00\x00", "image/gif"),
            (b"RIFF\x24\x00\x00\x00WEBPVP8 ", "image/webp"),
        ],
    )
    def test_known_signatures(self, raw, expected):
        assert detect_image_type(raw) == expected

    def test_webp_marker_needs_riff_prefix(self):
        assert detect_image_type(b"XXXX\x24\x00\x00\x00WEBPVP8 ") is None

    def test_unknown_bytes(self):
        assert detect_image_type(b"MZ\x90\x00\x03\x00\x00\x00") is None
        assert detect_image_type(b"") is None
