"""Query-result cache with declared mutation invalidation.

Read queries are cached in Redis as JSON under ``query:<name>[:<arg>]``.
Every catalog mutation names the query families it makes stale in
``INVALIDATES``; after a successful commit the caller runs
``get_cache().invalidate(<mutation>)``.
"""
import json
from typing import Any, Callable, Dict, Optional, Tuple

from redis import Redis
from redis.exceptions import RedisError

from teashop.core.config import settings
from teashop.core.logging import get_logger

logger = get_logger(__name__)

PREFIX = "query"

INVALIDATES: Dict[str, Tuple[str, ...]] = {
    "create_category": ("categories",),
    "update_category": ("categories",),
    "delete_category": ("categories", "products", "product"),
    "create_product": ("products",),
    "update_product": ("products", "product"),
    "delete_product": ("products", "product"),
    "place_order": ("products", "product"),
}


def query_key(name: str, *args: Any) -> str:
    parts = [PREFIX, name] + ["all" if a is None else str(a) for a in args]
    return ":".join(parts)


class QueryCache:
    def __init__(self, client: Optional[Redis], ttl_seconds: int = 300):
        self.client = client
        self.ttl_seconds = ttl_seconds

    def get_or_load(self, key: str, loader: Callable[[], Any]) -> Any:
        if self.client is None:
            return loader()
        try:
            raw = self.client.get(key)
        except RedisError as e:
            logger.warning("cache read failed for %s: %s", key, e)
            return loader()
        if raw is not None:
            return json.loads(raw)
        value = loader()
        try:
            self.client.set(key, json.dumps(value), ex=self.ttl_seconds)
        except RedisError as e:
            logger.warning("cache write failed for %s: %s", key, e)
        return value

    def invalidate(self, mutation: str) -> int:
        families = INVALIDATES[mutation]
        if self.client is None:
            return 0
        removed = 0
        try:
            for family in families:
                base = f"{PREFIX}:{family}"
                keys = [base] + list(self.client.scan_iter(match=f"{base}:*"))
                removed += self.client.delete(*keys)
        except RedisError as e:
            logger.warning("cache invalidation after %s failed: %s", mutation, e)
        return removed


_cache: Optional[QueryCache] = None


def get_cache() -> QueryCache:
    global _cache
    if _cache is None:
        client = Redis.from_url(settings.REDIS_URL, decode_responses=True) if settings.CACHE_ENABLED else None
        _cache = QueryCache(client, ttl_seconds=settings.CACHE_TTL_SECONDS)
    return _cache
