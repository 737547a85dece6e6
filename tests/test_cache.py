"""Tests for cache.py -- SQLite metadata store with background lookups."""

import threading
import time

import pytest

from media_prettify.cache import MetadataStore
from media_prettify.errors import CacheError
from media_prettify.models import EnrichmentResult
from media_prettify.prettify import prettify


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "metadata.db"


class TestStorage:
    def test_put_and_get(self, db_path):
        store = MetadataStore(db_path)
        store.put("/tv/a.mkv", EnrichmentResult("Show Name", "2010", "Pilot"), "Show Name - 102")
        assert store.get("/tv/a.mkv") == EnrichmentResult("Show Name", "2010", "Pilot")
        store.close()

    def test_get_missing(self, db_path):
        store = MetadataStore(db_path)
        assert store.get("/nope.mkv") is None
        store.close()

    def test_path_identity(self, db_path, tmp_path):
        store = MetadataStore(db_path)
        path = tmp_path / "movie.mkv"
        store.put(path, EnrichmentResult("Movie", "2013"))
        assert store.get(str(path)) == EnrichmentResult("Movie", "2013")
        store.close()

    def test_persists_across_instances(self, db_path):
        store = MetadataStore(db_path)
        store.put("/m.mkv", EnrichmentResult("Movie", "2013"))
        store.close()
        reopened = MetadataStore(db_path)
        assert reopened.get("/m.mkv") == EnrichmentResult("Movie", "2013")
        reopened.close()

    def test_creates_parent_dir(self, tmp_path):
        store = MetadataStore(tmp_path / "nested" / "dir" / "metadata.db")
        assert (tmp_path / "nested" / "dir").is_dir()
        store.close()


class TestRequest:
    def test_without_fetcher_is_noop(self, db_path):
        store = MetadataStore(db_path)
        store.request("/a.mkv", "Show Name - 102")
        assert store.wait() == 0
        assert store.get("/a.mkv") is None
        store.close()

    def test_fetcher_populates_entry(self, db_path):
        calls = []

        def fetcher(search_key):
            calls.append(search_key)
            return EnrichmentResult("Show Name", episode_name="Pilot")

        store = MetadataStore(db_path, fetcher=fetcher)
        store.request("/a.mkv", "Show Name - 102")
        assert store.wait() == 1
        assert calls == ["Show Name - 102"]
        assert store.get("/a.mkv") == EnrichmentResult("Show Name", episode_name="Pilot")
        assert store.is_pending("/a.mkv") is False
        store.close()

    def test_duplicate_request_while_in_flight(self, db_path):
        release = threading.Event()
        calls = []

        def fetcher(search_key):
            calls.append(search_key)
            release.wait(timeout=5)
            return EnrichmentResult("Show Name")

        store = MetadataStore(db_path, fetcher=fetcher)
        store.request("/a.mkv", "Show Name - 102")
        store.request("/a.mkv", "Show Name - 102")
        assert store.is_pending("/a.mkv") is True
        release.set()
        store.wait()
        assert calls == ["Show Name - 102"]
        store.close()

    def test_fetcher_returning_none(self, db_path):
        store = MetadataStore(db_path, fetcher=lambda key: None)
        store.request("/a.mkv", "Unknown")
        store.wait()
        assert store.get("/a.mkv") is None
        assert store.is_pending("/a.mkv") is False
        store.close()

    def test_fetcher_error_is_contained(self, db_path):
        def fetcher(search_key):
            raise RuntimeError("api down")

        store = MetadataStore(db_path, fetcher=fetcher)
        store.request("/a.mkv", "Show Name - 102")
        store.wait()
        assert store.get("/a.mkv") is None
        assert store.is_pending("/a.mkv") is False
        store.close()

    def test_request_after_close_raises(self, db_path):
        store = MetadataStore(db_path, fetcher=lambda key: None)
        store.close()
        with pytest.raises(CacheError, match="closed"):
            store.request("/a.mkv", "Show Name - 102")

    def test_request_while_closing_raises_cache_error(self, db_path):
        release = threading.Event()

        def fetcher(search_key):
            release.wait(timeout=5)
            return None

        store = MetadataStore(db_path, fetcher=fetcher)
        store.request("/a.mkv", "Show Name - 102")
        closer = threading.Thread(target=store.close)
        closer.start()
        for _ in range(500):
            if store._closed:
                break
            time.sleep(0.01)
        with pytest.raises(CacheError):
            store.request("/b.mkv", "Other Show - 101")
        release.set()
        closer.join(timeout=5)
        assert not closer.is_alive()


class TestFinishedLookups:
    def test_finished_lookups_are_released_without_wait(self, db_path):
        store = MetadataStore(db_path, fetcher=lambda key: None)
        for i in range(50):
            store.request(f"/f{i}.mkv", "x")
        store.close()
        assert len(store._futures) == 0

    def test_wait_drains_and_counts(self, db_path):
        store = MetadataStore(db_path, fetcher=lambda key: EnrichmentResult("X"))
        for i in range(20):
            store.request(f"/f{i}.mkv", "x")
        assert store.wait() == 20
        assert len(store._futures) == 0
        assert store.wait() == 0
        store.close()


class TestWithPrettify:
    def test_second_call_is_enriched(self, db_path):
        def fetcher(search_key):
            assert search_key == "Show Name - 102"
            return EnrichmentResult("Show Name", "2010", "Pilot")

        store = MetadataStore(db_path, fetcher=fetcher)
        raw = "Show.Name.S01E02.720p.HDTV.x264.mkv"
        assert prettify(raw, "/tv/a.mkv", store) == "Show Name - 102"
        store.wait()
        assert prettify(raw, "/tv/a.mkv", store) == "Show Name - 102 - Pilot"
        store.close()
