"""
Key-value storage capability used by the correction store and the catalog's
custom-ingredient persistence. Values are JSON strings.
"""

import logging
from typing import Optional, Protocol

from redis.asyncio import Redis as AsyncRedis
from redis.exceptions import RedisError

from .redis_client import get_redis

logger = logging.getLogger("prepline.storage")


class StorageError(Exception):
    """The backing store could not be read or written."""


class KeyValueStore(Protocol):
    async def get(self, key: str) -> Optional[str]: ...

    async def set(self, key: str, value: str) -> None: ...

    async def delete(self, key: str) -> None: ...


class MemoryKeyValueStore:
    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)


class RedisKeyValueStore:
    """
    Redis-backed store. Keys are namespaced with a prefix so several apps
    can share one database.
    """

    def __init__(self, redis: Optional[AsyncRedis] = None, prefix: str = "prepline:"):
        self._redis = redis
        self.prefix = prefix

    async def _client(self) -> AsyncRedis:
        if self._redis is None:
            self._redis = await get_redis()
        return self._redis

    def _key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    async def get(self, key: str) -> Optional[str]:
        try:
            r = await self._client()
            value = await r.get(self._key(key))
        except RedisError as e:
            logger.error(f"Redis read failed for {key}: {e}")
            raise StorageError(str(e)) from e
        if isinstance(value, bytes):
            value = value.decode("utf-8")
        return value

    async def set(self, key: str, value: str) -> None:
        try:
            r = await self._client()
            await r.set(self._key(key), value)
        except RedisError as e:
            logger.error(f"Redis write failed for {key}: {e}")
            raise StorageError(str(e)) from e

    async def delete(self, key: str) -> None:
        try:
            r = await self._client()
            await r.delete(self._key(key))
        except RedisError as e:
            logger.error(f"Redis delete failed for {key}: {e}")
            raise StorageError(str(e)) from e


def build_store(settings) -> KeyValueStore:
    if settings.storage_backend == "redis":
        return RedisKeyValueStore(prefix=settings.storage_prefix)
    return MemoryKeyValueStore()
