# apps/analytics/repositories/cached.py
import logging
import threading
from contextlib import contextmanager
from functools import wraps

from django.conf import settings
from django.core.cache import caches
from django.core.cache.backends.base import DEFAULT_TIMEOUT

from ..keys import build_cache_key

logger = logging.getLogger(__name__)

_MISS = object()

# key -> [lock, holders]; shared by every MetricsCache in the process
_key_locks = {}
_registry_lock = threading.Lock()


@contextmanager
def key_lock(key):
    """Hold a lock owned by ``key`` alone. Entries are dropped once unused."""
    with _registry_lock:
        entry = _key_locks.setdefault(key, [threading.Lock(), 0])
        entry[1] += 1
    try:
        with entry[0]:
            yield
    finally:
        with _registry_lock:
            entry[1] -= 1
            if not entry[1]:
                del _key_locks[key]


class MetricsCache:
    """
    Fetch-or-compute store for derived metrics.

    Values are only ever written after ``compute`` returns, so a failed or
    cancelled computation leaves the key untouched. Backend errors are not
    caught: an unreachable cache is a failure, not a miss.
    """

    def __init__(self, backend, timeout=DEFAULT_TIMEOUT, single_flight=False):
        self.backend = backend
        self.timeout = timeout
        self.single_flight = single_flight

    @classmethod
    def from_settings(cls, **kwargs):
        alias = getattr(settings, 'ANALYTICS_CACHE_ALIAS', 'default')
        kwargs.setdefault('timeout', getattr(settings, 'ANALYTICS_CACHE_TIMEOUT', DEFAULT_TIMEOUT))
        kwargs.setdefault('single_flight', getattr(settings, 'ANALYTICS_CACHE_SINGLE_FLIGHT', False))
        return cls(caches[alias], **kwargs)

    def fetch(self, key, compute):
        value = self.backend.get(key, _MISS)
        if value is not _MISS:
            logger.debug(f"Metrics cache hit: {key}")
            return value
        if not self.single_flight:
            return self._compute_and_store(key, compute)

        with key_lock(key):
            # another thread may have filled it while we waited
            value = self.backend.get(key, _MISS)
            if value is not _MISS:
                return value
            return self._compute_and_store(key, compute)

    def delete(self, key):
        self.backend.delete(key)

    def _compute_and_store(self, key, compute):
        logger.debug(f"Metrics cache miss: {key}")
        value = compute()
        self.backend.set(key, value, self.timeout)
        return value


def cache_metric(metric):
    """
    Memoize an engine method ``(self, subject, start=None, end=None)``
    through ``self.cache`` under the subject's versioned key.
    """
    def decorator(func):
        @wraps(func)
        def wrapper(self, subject, start=None, end=None):
            cache_key = build_cache_key(subject.version, metric, start, end)
            return self.cache.fetch(cache_key, lambda: func(self, subject, start, end))
        return wrapper
    return decorator
