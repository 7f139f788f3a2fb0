"""配置缓存：使用 Redis 或内存后端缓存系统配置的读取结果。

每个条目携带配置行的版本号，写入只在版本更新时生效：读取方回填的旧快照
不会覆盖写入方提交后写入的新值。删除配置时写入同版本规则的删除标记。
"""

from __future__ import annotations

import threading
import time
from typing import Optional

import redis

from refdata.core.config import get_settings
from refdata.core.constants import CONFIG_CACHE_PREFIX
from refdata.core.logger import logger

# 删除标记：读取时视为未命中
TOMBSTONE = ""


class CacheBackend:
    """缓存后端基类：条目为 ``(payload, version)``。"""

    def get(self, key: str) -> Optional[tuple[str, int]]:  # pragma: no cover - interface definition
        raise NotImplementedError

    def set_if_newer(self, key: str, payload: str, version: int, ttl_seconds: int) -> bool:  # pragma: no cover
        raise NotImplementedError


class RedisCacheBackend(CacheBackend):
    """条目存为 Hash（``payload``/``version``），版本比较借助 WATCH 乐观锁完成。"""

    def __init__(self, url: str) -> None:
        self._client = redis.Redis.from_url(url, decode_responses=True, socket_connect_timeout=1)
        self._client.ping()

    def get(self, key: str) -> Optional[tuple[str, int]]:
        stored = self._client.hgetall(key)
        if not stored:
            return None
        return stored.get("payload", TOMBSTONE), int(stored.get("version", 0))

    def set_if_newer(self, key: str, payload: str, version: int, ttl_seconds: int) -> bool:
        def _apply(pipe: redis.client.Pipeline) -> bool:
            current = pipe.hget(key, "version")
            if current is not None and int(current) >= version:
                return False
            pipe.multi()
            pipe.hset(key, mapping={"payload": payload, "version": str(version)})
            pipe.expire(key, ttl_seconds)
            return True

        return self._client.transaction(_apply, key, value_from_callable=True)


class InMemoryCacheBackend(CacheBackend):
    """内存后端用于测试或缺少 Redis 时的回退实现。"""

    def __init__(self) -> None:
        self._store: dict[str, tuple[str, int, float]] = {}
        self._lock = threading.Lock()

    def _live(self, key: str) -> Optional[tuple[str, int, float]]:
        record = self._store.get(key)
        if record is not None and record[2] < time.monotonic():
            self._store.pop(key, None)
            return None
        return record

    def get(self, key: str) -> Optional[tuple[str, int]]:
        with self._lock:
            record = self._live(key)
            return None if record is None else (record[0], record[1])

    def set_if_newer(self, key: str, payload: str, version: int, ttl_seconds: int) -> bool:
        with self._lock:
            record = self._live(key)
            if record is not None and record[1] >= version:
                return False
            self._store[key] = (payload, version, time.monotonic() + ttl_seconds)
            return True


class ConfigCache:
    """按配置键缓存序列化后的配置内容。"""

    def __init__(self, backend: CacheBackend, *, ttl_seconds: int, enabled: bool = True) -> None:
        self.backend = backend
        self.ttl_seconds = ttl_seconds
        self.enabled = enabled

    @staticmethod
    def _build_key(config_key: str) -> str:
        return f"{CONFIG_CACHE_PREFIX}{config_key}"

    def _read(self, config_key: str) -> Optional[tuple[str, int]]:
        if not self.enabled:
            return None
        try:
            return self.backend.get(self._build_key(config_key))
        except redis.RedisError:
            logger.warning("Config cache read failed for %s", config_key, exc_info=True)
            return None

    def get(self, config_key: str) -> Optional[str]:
        entry = self._read(config_key)
        if entry is None or entry[0] == TOMBSTONE:
            return None
        return entry[0]

    def current_version(self, config_key: str) -> int:
        """缓存中记录的最新版本（含删除标记），没有则为 0。"""
        entry = self._read(config_key)
        return 0 if entry is None else entry[1]

    def store(self, config_key: str, payload: str, version: int) -> bool:
        """仅当 ``version`` 比缓存中的条目更新时写入，返回是否写入。"""
        if not self.enabled:
            return False
        try:
            return self.backend.set_if_newer(self._build_key(config_key), payload, version, self.ttl_seconds)
        except redis.RedisError:
            logger.warning("Config cache write failed for %s", config_key, exc_info=True)
            return False

    def mark_deleted(self, config_key: str, version: int) -> None:
        self.store(config_key, TOMBSTONE, version)


_cache: Optional[ConfigCache] = None


def get_config_cache() -> ConfigCache:
    global _cache
    if _cache is not None:
        return _cache

    settings = get_settings()
    backend: CacheBackend
    if not settings.config_cache_enabled:
        backend = InMemoryCacheBackend()
    else:
        try:
            backend = RedisCacheBackend(settings.redis_url)
            logger.info("Config cache initialized with Redis at %s", settings.redis_url)
        except Exception as exc:  # pragma: no cover - fallback path
            logger.warning("Redis unavailable (%s), falling back to in-memory config cache", exc)
            backend = InMemoryCacheBackend()
    _cache = ConfigCache(
        backend,
        ttl_seconds=settings.config_cache_ttl,
        enabled=settings.config_cache_enabled,
    )
    return _cache


def set_config_cache(cache: Optional[ConfigCache]) -> None:
    """替换全局缓存实例；传入 ``None`` 时下次访问重新按配置初始化。"""
    global _cache
    _cache = cache
