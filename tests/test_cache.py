from __future__ import annotations

import redis

from refdata.core.cache import CacheBackend, ConfigCache, InMemoryCacheBackend


class _BrokenBackend(CacheBackend):
    def get(self, key):
        raise redis.ConnectionError("down")

    def set_if_newer(self, key, payload, version, ttl_seconds):
        raise redis.ConnectionError("down")


def test_in_memory_backend_expires_entries(monkeypatch):
    backend = InMemoryCacheBackend()
    clock = {"now": 100.0}
    monkeypatch.setattr("refdata.core.cache.time.monotonic", lambda: clock["now"])

    assert backend.set_if_newer("config:system.name", "payload", 1, ttl_seconds=10) is True
    assert backend.get("config:system.name") == ("payload", 1)

    clock["now"] = 111.0
    assert backend.get("config:system.name") is None


def test_store_keeps_the_newest_version():
    cache = ConfigCache(InMemoryCacheBackend(), ttl_seconds=60)

    assert cache.store("system.name", "v2", 2) is True
    assert cache.store("system.name", "v1", 1) is False
    assert cache.store("system.name", "v2-again", 2) is False

    assert cache.get("system.name") == "v2"
    assert cache.current_version("system.name") == 2


def test_deleted_marker_reads_as_miss_but_blocks_older_versions():
    cache = ConfigCache(InMemoryCacheBackend(), ttl_seconds=60)
    cache.store("system.name", "v1", 1)

    cache.mark_deleted("system.name", 2)

    assert cache.get("system.name") is None
    assert cache.current_version("system.name") == 2
    assert cache.store("system.name", "v1", 1) is False
    assert cache.store("system.name", "v3", 3) is True
    assert cache.get("system.name") == "v3"


def test_disabled_cache_never_stores():
    backend = InMemoryCacheBackend()
    cache = ConfigCache(backend, ttl_seconds=60, enabled=False)

    assert cache.store("system.name", "payload", 1) is False

    assert cache.get("system.name") is None
    assert cache.current_version("system.name") == 0
    assert backend.get("config:system.name") is None


def test_backend_failures_degrade_to_cache_miss():
    cache = ConfigCache(_BrokenBackend(), ttl_seconds=60)

    assert cache.store("system.name", "payload", 1) is False
    cache.mark_deleted("system.name", 2)
    assert cache.get("system.name") is None
    assert cache.current_version("system.name") == 0
