"""
Tests for the namespaced TTL cache used by the player endpoints.
"""

import threading

import pytest

from turf_api import cache


class TestCache:

    def setup_method(self):
        cache.clear()

    def teardown_method(self):
        cache.clear()

    def test_set_get(self):
        key = cache.make_key("players", "summary")
        assert key == "players:summary"
        cache.set(key, [1, 2], ttl_seconds=60)
        assert cache.get(key) == [1, 2]

    def test_zero_ttl_not_cached(self):
        cache.set("players:x", 1, ttl_seconds=0)
        assert cache.get("players:x") is None

    def test_expired_entry_dropped(self, monkeypatch):
        cache.set("players:summary", 1, ttl_seconds=5)
        now = cache.time.time()
        monkeypatch.setattr(cache.time, "time", lambda: now + 10)
        assert cache.get("players:summary") is None

    def test_invalidate_namespace(self):
        cache.set("players:summary", 1)
        cache.set("players:profile:Asha", 2)
        cache.set("other:key", 3)

        assert cache.invalidate("players") == 2
        assert cache.get("players:summary") is None
        assert cache.get("other:key") == 3

    def test_make_key_rejects_blank(self):
        with pytest.raises(ValueError):
            cache.make_key(" ", "x")

    def test_invalidate_while_other_threads_write(self):
        errors = []
        stop = threading.Event()

        def writer(tag):
            i = 0
            while not stop.is_set():
                cache.set(f"players:profile:{tag}-{i}", i)
                i += 1

        threads = [threading.Thread(target=writer, args=(t,)) for t in ("a", "b")]
        for t in threads:
            t.start()
        try:
            for _ in range(500):
                try:
                    cache.invalidate("players")
                except RuntimeError as e:
                    errors.append(str(e))
        finally:
            stop.set()
            for t in threads:
                t.join()

        assert errors == []
