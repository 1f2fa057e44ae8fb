# apps/analytics/sparklines.py
import logging

from . import keys
from .dates import coerce_range, iter_dates
from .subjects import resolve_subject

logger = logging.getLogger(__name__)

IMPRESSIONS_LABEL = 'Impressions'
CLICKS_LABEL = 'Clicks'


class SparklineBuilder:
    """
    Dense daily series for charts: one point per calendar day, zeros
    included. Each whole series is cached as a single value.
    """

    def __init__(self, metrics):
        self.metrics = metrics

    @property
    def cache(self):
        return self.metrics.cache

    def impressions(self, target, start, end):
        return self._build(
            target, start, end, keys.SPARKLINE_IMPRESSIONS, IMPRESSIONS_LABEL,
            self.metrics.daily_impressions,
        )

    def clicks(self, target, start, end):
        return self._build(
            target, start, end, keys.SPARKLINE_CLICKS, CLICKS_LABEL,
            self.metrics.daily_clicks,
        )

    def _build(self, target, start, end, metric, label, daily):
        subject = resolve_subject(target)
        start, end = coerce_range(start, end)
        cache_key = keys.build_cache_key(subject.version, metric, start, end)

        def compute():
            logger.debug(f"Building {label.lower()} sparkline for {subject.dimension}={subject.entity_id}")
            return [
                {
                    'label': label,
                    'date': day.isoformat(),
                    'value': daily(subject, day),
                }
                for day in iter_dates(start, end)
            ]

        return self.cache.fetch(cache_key, compute)
