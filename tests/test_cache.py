"""
Response Cache and Configuration Tests
"""
import threading

from config import DevelopmentConfig, TestingConfig, get_config
from studykit import create_app
from studykit.services.cache import ResponseCache


class TestResponseCache:
    """Test the artifact cache"""

    def test_get_missing(self):
        cache = ResponseCache()
        assert cache.get("never stored") is None
        assert "never stored" not in cache

    def test_set_and_get(self):
        cache = ResponseCache()
        cache.set("normalized text", {"summary": 1})
        assert cache.get("normalized text") == {"summary": 1}
        assert "normalized text" in cache
        assert len(cache) == 1

    def test_overwrite_same_key(self):
        cache = ResponseCache()
        cache.set("doc", "first")
        cache.set("doc", "second")
        assert cache.get("doc") == "second"
        assert len(cache) == 1

    def test_no_eviction(self):
        cache = ResponseCache()
        for i in range(500):
            cache.set(f"document {i}", i)
        assert len(cache) == 500
        assert cache.get("document 0") == 0

    def test_clear(self):
        cache = ResponseCache()
        cache.set("doc", "artifact")
        cache.clear()
        assert len(cache) == 0

    def test_make_hash_is_stable(self):
        assert ResponseCache.make_hash("abc") == ResponseCache.make_hash("abc")
        assert ResponseCache.make_hash("abc") != ResponseCache.make_hash("abd")
        assert len(ResponseCache.make_hash("")) == 64

    def test_concurrent_writers(self):
        cache = ResponseCache()

        def writer(start):
            for i in range(start, start + 200):
                cache.set(f"doc {i}", i)

        threads = [threading.Thread(target=writer, args=(n * 200,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(cache) == 800

    def test_cache_is_per_app(self, tmp_path):
        overrides = {'TEMP_IMAGES_DIR': str(tmp_path / 'i'), 'TEMP_DOCS_DIR': str(tmp_path / 'd')}
        a = create_app('testing', overrides=overrides)
        b = create_app('testing', overrides=overrides)
        a.extensions['response_cache'].set("doc", "artifact")
        assert len(b.extensions['response_cache']) == 0


class TestConfig:
    """Test configuration selection"""

    def test_get_config(self):
        assert get_config("testing") is TestingConfig
        assert get_config("unknown-env") is DevelopmentConfig

    def test_defaults(self):
        assert TestingConfig.MAX_DOCUMENT_CHARS == 30000
        assert TestingConfig.OCR_MAX_WIDTH == 1024
        assert TestingConfig.OCR_LANG == "eng"

    def test_unknown_config_name_falls_back(self, tmp_path):
        app = create_app('nonexistent', overrides={
            'TEMP_IMAGES_DIR': str(tmp_path / 'i'),
            'TEMP_DOCS_DIR': str(tmp_path / 'd'),
        })
        assert app.config['DEBUG'] is True

    def test_flask_env_selects_config(self, tmp_path, monkeypatch):
        overrides = {'TEMP_IMAGES_DIR': str(tmp_path / 'i'), 'TEMP_DOCS_DIR': str(tmp_path / 'd')}
        monkeypatch.setenv("FLASK_ENV", "development")
        assert create_app(overrides=overrides).config['TESTING'] is False

        monkeypatch.setenv("FLASK_ENV", "testing")
        app = create_app(overrides=overrides)
        assert app.config['TESTING'] is True
        assert app.config['GEMINI_API_KEY'] == "test-gemini-key"
