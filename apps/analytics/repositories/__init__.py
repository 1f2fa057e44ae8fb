from .base import ImpressionStore
from .cached import MetricsCache, cache_metric
from .connection import optimized_analytics_cursor
from .impressions import DjangoImpressionStore
from .performance import monitor_query_performance

__all__ = [
    'ImpressionStore',
    'DjangoImpressionStore',
    'MetricsCache',
    'cache_metric',
    'optimized_analytics_cursor',
    'monitor_query_performance',
]
