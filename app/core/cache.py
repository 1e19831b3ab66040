import logging
import pickle
import threading
import time
from dataclasses import dataclass
from functools import wraps
from typing import Any, Callable, Optional, Protocol

from redis import Redis
from redis.exceptions import RedisError

from .config import get_settings

logger = logging.getLogger(__name__)


class CacheBackend(Protocol):
    def get(self, key: str) -> bytes | None:
        ...

    def set(self, key: str, value: bytes, ttl: int) -> None:
        ...

    def clear_namespace(self, namespace: str) -> None:
        ...


class RedisCacheBackend:
    def __init__(self, client: Redis):
        self.client = client

    def get(self, key: str) -> bytes | None:
        return self.client.get(key)

    def set(self, key: str, value: bytes, ttl: int) -> None:
        self.client.setex(key, ttl, value)

    def clear_namespace(self, namespace: str) -> None:
        keys = list(self.client.scan_iter(f"{namespace}:*"))
        if keys:
            self.client.delete(*keys)


@dataclass
class _Entry:
    value: bytes
    expires_at: float


class InMemoryCacheBackend:
    def __init__(self) -> None:
        self._data: dict[str, _Entry] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> bytes | None:
        with self._lock:
            entry = self._data.get(key)
            if entry is None:
                return None
            if entry.expires_at < time.monotonic():
                del self._data[key]
                return None
            return entry.value

    def set(self, key: str, value: bytes, ttl: int) -> None:
        with self._lock:
            self._data[key] = _Entry(value=value, expires_at=time.monotonic() + ttl)

    def clear_namespace(self, namespace: str) -> None:
        prefix = f"{namespace}:"
        with self._lock:
            for key in [key for key in self._data if key.startswith(prefix)]:
                del self._data[key]


class CacheManager:
    def __init__(self) -> None:
        self.backend: CacheBackend | None = None

    def init_backend(self) -> None:
        if self.backend is not None:
            return

        settings = get_settings()
        if settings.REDIS_URL:
            try:
                client = Redis.from_url(settings.REDIS_URL)
                client.ping()
            except (RedisError, OSError) as exc:
                logger.warning("Redis unavailable (%s), caching in memory", exc)
            else:
                self.backend = RedisCacheBackend(client)
                logger.info("Using Redis cache backend")
                return
        self.backend = InMemoryCacheBackend()
        logger.info("Using in-memory cache backend")

    def get_backend(self) -> CacheBackend:
        if self.backend is None:
            self.init_backend()
        assert self.backend is not None
        return self.backend


cache_manager = CacheManager()


def cache(
    namespace: str,
    key_builder: Callable[..., str],
    ttl: Optional[Callable[[], int]] = None,
):
    """Cache a function's pickled result under ``namespace:key_builder(*args)``.

    ``ttl`` is called on every miss so the lifetime follows the current settings.
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(func)
        def wrapper(*args, **kwargs):
            key = f"{namespace}:{key_builder(*args, **kwargs)}"
            backend = cache_manager.get_backend()
            cached_value = backend.get(key)
            if cached_value is not None:
                return pickle.loads(cached_value)

            result = func(*args, **kwargs)
            lifetime = ttl() if ttl else 60
            backend.set(key, pickle.dumps(result), lifetime)
            return result

        return wrapper

    return decorator


def invalidate_cache(namespace: str) -> None:
    cache_manager.get_backend().clear_namespace(namespace)
