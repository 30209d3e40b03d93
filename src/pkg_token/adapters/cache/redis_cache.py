from __future__ import annotations

import logging
from typing import Optional

import redis

from ...domain.exceptions import CacheUnavailableError
from ...domain.ports import ExpiringCache

logger = logging.getLogger(__name__)


class RedisExpiringCache(ExpiringCache):
    """
    ExpiringCache backed by Redis, shared across processes.

    Entries are written with `SET key value EX ttl`; Redis evicts them.
    Any RedisError surfaces as CacheUnavailableError; there is no retry here.
    """

    def __init__(self, client: redis.Redis) -> None:
        self._client = client

    @classmethod
    def from_url(cls, redis_url: str) -> RedisExpiringCache:
        client = redis.Redis.from_url(
            redis_url,
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5,
        )
        return cls(client)

    def get(self, key: str) -> Optional[str]:
        try:
            value = self._client.get(key)
        except redis.RedisError as exc:
            logger.error("Redis GET failed for consumption mark: %s", exc)
            raise CacheUnavailableError(f"Redis GET failed: {exc}") from exc

        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    def put(self, key: str, value: str, ttl_seconds: Optional[int]) -> None:
        if ttl_seconds is not None and ttl_seconds <= 0:
            return

        try:
            if ttl_seconds is None:
                self._client.set(key, value)
            else:
                self._client.set(key, value, ex=ttl_seconds)
        except redis.RedisError as exc:
            logger.error("Redis SET failed for consumption mark: %s", exc)
            raise CacheUnavailableError(f"Redis SET failed: {exc}") from exc
