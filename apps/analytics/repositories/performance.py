# apps/analytics/repositories/performance.py
from functools import wraps
import time
import logging

from django.conf import settings

logger = logging.getLogger(__name__)


def monitor_query_performance(func):
    @wraps(func)
    def wrapper(*args, **kwargs):
        start_time = time.monotonic()
        result = func(*args, **kwargs)
        execution_time = time.monotonic() - start_time

        threshold = getattr(settings, 'ANALYTICS_SLOW_QUERY_SECONDS', 1.0)
        if execution_time > threshold:  # Log slow queries
            logger.warning(f"Slow query: {func.__qualname__} took {execution_time:.2f}s")

        return result
    return wrapper
