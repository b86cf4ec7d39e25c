import functools
import json
import logging
from datetime import date, datetime
from typing import Any, Callable

import redis

from storefront_admin.core.config import settings

logger = logging.getLogger(__name__)


class CacheEncoder(json.JSONEncoder):
    """JSON encoder that writes datetimes as ISO strings."""

    def default(self, obj):
        if isinstance(obj, (datetime, date)):
            return obj.isoformat()
        return super().default(obj)


class Cache:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._client = None
            cls._instance._ttl = settings.cache.ttl_seconds
            if not settings.cache.enabled:
                logger.info("Cache disabled by configuration")
                return cls._instance
            try:
                cls._instance._client = redis.from_url(
                    settings.cache.redis_url,
                    decode_responses=True,
                    socket_timeout=settings.cache.redis_socket_timeout,
                    socket_connect_timeout=settings.cache.redis_socket_connect_timeout,
                    retry_on_timeout=settings.cache.redis_retry_on_timeout,
                )
                logger.info(f"Redis cache initialized with URL: {settings.cache.redis_url}")
            except redis.RedisError as e:
                logger.warning(f"Failed to initialize Redis cache: {str(e)}. Caching will be disabled.")
                cls._instance._client = None
        return cls._instance

    @property
    def enabled(self) -> bool:
        return self._client is not None

    def _serialize_value(self, value: Any) -> Any:
        """Convert ORM rows to plain dicts so they survive a JSON round trip."""
        if value is None:
            return None
        if hasattr(value, "__table__"):
            return {
                column.name: self._serialize_value(getattr(value, column.name))
                for column in value.__table__.columns
            }
        if isinstance(value, list):
            return [self._serialize_value(item) for item in value]
        if isinstance(value, dict):
            return {k: self._serialize_value(v) for k, v in value.items()}
        return value

    # ------------------------------------------------------------------
    def get(self, key: str):
        if not self.enabled:
            return None

        try:
            val = self._client.get(key)
            if val:
                logger.debug(f"Cache hit for key: {key}")
                return json.loads(val)
            logger.debug(f"Cache miss for key: {key}")
            return None
        except redis.RedisError as e:
            logger.error(f"Error retrieving from cache: {str(e)}")
            return None

    def set(self, key: str, value, ttl: int | None = None):
        if not self.enabled:
            return

        try:
            payload = json.dumps(self._serialize_value(value), cls=CacheEncoder)
            self._client.set(key, payload, ex=ttl or self._ttl)
            logger.debug(f"Set cache for key: {key}, TTL: {ttl or self._ttl}s")
        except (redis.RedisError, TypeError) as e:
            logger.error(f"Error setting cache: {str(e)}")

    def invalidate(self, key_prefix: str):
        if not self.enabled:
            return

        try:
            keys = list(self._client.scan_iter(f"{key_prefix}*"))
            if keys:
                self._client.delete(*keys)
                logger.debug(f"Invalidated {len(keys)} keys with prefix: {key_prefix}")
        except redis.RedisError as e:
            logger.error(f"Error invalidating cache: {str(e)}")

    # ------------------------------------------------------------------
    def cacheable(self, key_builder: Callable, ttl: int | None = None):
        """Decorator for caching service results.

        Domain errors raised by the wrapped call propagate unchanged.
        """

        def decorator(fn):
            @functools.wraps(fn)
            def wrapper(*args, **kwargs):
                if not self.enabled:
                    return fn(*args, **kwargs)

                key = key_builder(*args, **kwargs)
                cached = self.get(key)
                if cached is not None:
                    return cached
                result = fn(*args, **kwargs)
                self.set(key, result, ttl)
                return result

            return wrapper

        return decorator


cache = Cache()
