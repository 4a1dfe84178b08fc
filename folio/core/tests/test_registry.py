import pytest

from folio.core.remote.memory import MemoryBackend
from folio.core.remote.registry import clear_backend_cache
from folio.core.remote.registry import get_remote_backend
from folio.core.remote.supabase import SupabaseBackend


class TestGetRemoteBackend:
    def test_memory_alias(self):
        backend = get_remote_backend()
        assert isinstance(backend, MemoryBackend)
        assert backend.base_url == "https://folio-test.supabase.co"

    def test_cached_until_cleared(self):
        first = get_remote_backend()
        assert get_remote_backend() is first
        clear_backend_cache()
        assert get_remote_backend() is not first

    def test_supabase_alias(self, settings):
        settings.REMOTE_BACKEND = "supabase"
        settings.REMOTE_BACKEND_OPTIONS = {}
        clear_backend_cache()
        backend = get_remote_backend()
        assert isinstance(backend, SupabaseBackend)
        backend.close()

    def test_dotted_path(self, settings):
        settings.REMOTE_BACKEND = "folio.core.remote.memory.MemoryBackend"
        settings.REMOTE_BACKEND_OPTIONS = {}
        clear_backend_cache()
        assert isinstance(get_remote_backend(), MemoryBackend)

    def test_bad_path(self, settings):
        settings.REMOTE_BACKEND = "folio.core.remote.nope.Backend"
        clear_backend_cache()
        with pytest.raises(ImportError):
            get_remote_backend()

    def test_bad_options(self, settings):
        settings.REMOTE_BACKEND_OPTIONS = {"unexpected": True}
        clear_backend_cache()
        with pytest.raises(RuntimeError, match="Could not instantiate"):
            get_remote_backend()
