# apps/analytics/metrics.py
"""
Impression and click aggregation.

Every figure is computed from the impression log through an
``ImpressionStore`` and memoized in a ``MetricsCache`` under a key that
embeds the entity's version token. Dropping the cache changes latency,
never results.
"""
from datetime import date
from typing import List, Optional, Tuple

from . import keys
from .dates import DateLike, coerce_date, coerce_range, iter_dates
from .repositories.cached import MetricsCache, cache_metric
from .repositories.impressions import DjangoImpressionStore
from .subjects import resolve_subject


def per_mille(count) -> float:
    return int(count or 0) / 1_000.0


def rate(clicks, impressions) -> float:
    """Click-through rate as a percentage; 0.0 when nothing was displayed."""
    if not impressions:
        return 0.0
    return (clicks / float(impressions)) * 100


class ImpressionMetrics:
    def __init__(self, store, cache):
        self.store = store
        self.cache = cache

    @classmethod
    def from_settings(cls, **cache_options):
        return cls(DjangoImpressionStore(), MetricsCache.from_settings(**cache_options))

    # Impressions

    def total_impressions(self, target, start: DateLike = None, end: DateLike = None) -> int:
        subject = resolve_subject(target)
        if start is not None and end is not None:
            return sum(self.daily_impression_counts(subject, start, end))
        return int(self._total_impressions(subject))

    def daily_impressions(self, target, day: DateLike = None) -> int:
        return int(self._daily_impressions(resolve_subject(target), coerce_date(day)))

    def daily_impression_counts(self, target, start: DateLike, end: DateLike) -> List[int]:
        """Counts for the days that have impressions, oldest first. Empty days are skipped."""
        start, end = coerce_range(start, end)
        return [count for _, count in self._impression_groups(resolve_subject(target), start, end)]

    def daily_impression_series(self, target, start: DateLike, end: DateLike) -> List[Tuple[date, int]]:
        start, end = coerce_range(start, end)
        groups = self._impression_groups(resolve_subject(target), start, end)
        return _fill(groups, start, end)

    def total_impressions_per_mille(self, target) -> float:
        return per_mille(self.total_impressions(target))

    def daily_impressions_per_mille(self, target, day: DateLike = None) -> float:
        return per_mille(self.daily_impressions(target, day))

    # Clicks

    def total_clicks(self, target, start: DateLike = None, end: DateLike = None) -> int:
        subject = resolve_subject(target)
        if start is not None and end is not None:
            return sum(self.daily_click_counts(subject, start, end))
        return int(self._total_clicks(subject))

    def daily_clicks(self, target, day: DateLike = None) -> int:
        return int(self._daily_clicks(resolve_subject(target), coerce_date(day)))

    def daily_click_counts(self, target, start: DateLike, end: DateLike) -> List[int]:
        start, end = coerce_range(start, end)
        return [count for _, count in self._click_groups(resolve_subject(target), start, end)]

    def daily_click_series(self, target, start: DateLike, end: DateLike) -> List[Tuple[date, int]]:
        start, end = coerce_range(start, end)
        groups = self._click_groups(resolve_subject(target), start, end)
        return _fill(groups, start, end)

    def total_clicks_per_mille(self, target) -> float:
        return per_mille(self.total_clicks(target))

    def daily_clicks_per_mille(self, target, day: DateLike = None) -> float:
        return per_mille(self.daily_clicks(target, day))

    # Rates

    def total_click_rate(self, target, start: DateLike = None, end: DateLike = None) -> float:
        subject = resolve_subject(target)
        impressions = self.total_impressions(subject, start, end)
        if not impressions:
            return 0.0
        return rate(self.total_clicks(subject, start, end), impressions)

    def daily_click_rate(self, target, day: DateLike = None) -> float:
        subject = resolve_subject(target)
        day = coerce_date(day)
        impressions = self.daily_impressions(subject, day)
        if not impressions:
            return 0.0
        return rate(self.daily_clicks(subject, day), impressions)

    def daily_click_rates(self, target, start: DateLike, end: DateLike) -> List[float]:
        """
        One rate per calendar day in ``[start, end]``. Both series are
        zero-filled and joined on the date, so a day missing from one of
        them cannot shift the pairing.
        """
        subject = resolve_subject(target)
        impressions = self.daily_impression_series(subject, start, end)
        clicks = dict(self.daily_click_series(subject, start, end))
        return [rate(clicks[day], count) for day, count in impressions]

    def click_rate(self, target, start: DateLike, end: DateLike) -> float:
        subject = resolve_subject(target)
        impressions = sum(self.daily_impression_counts(subject, start, end))
        if not impressions:
            return 0.0
        return rate(sum(self.daily_click_counts(subject, start, end)), impressions)

    # Dates

    def probable_dates_with_impressions(self, target, start: DateLike = None,
                                        end: DateLike = None) -> List[date]:
        """
        Every date between the first and last impression.

        No date with impressions is missed, but days without any may be
        included. One MIN/MAX query, so prefer this over
        ``dates_with_impressions`` on large logs.
        """
        start, end = _bounds(start, end)
        bounds = self._probable_bounds(resolve_subject(target), start, end)
        if not bounds:
            return []
        first, last = (coerce_date(value) for value in bounds)
        return list(iter_dates(first, last))

    def dates_with_impressions(self, target, start: DateLike = None, end: DateLike = None) -> List[date]:
        return self.exact_dates_with_events(target, start, end)

    def dates_with_clicked_impressions(self, target, start: DateLike = None,
                                       end: DateLike = None) -> List[date]:
        return self.exact_dates_with_events(target, start, end, only_clicked=True)

    def exact_dates_with_events(self, target, start: DateLike = None, end: DateLike = None,
                                only_clicked: bool = False) -> List[date]:
        """Exact distinct dates, via a DISTINCT scan."""
        subject = resolve_subject(target)
        start, end = _bounds(start, end)
        if only_clicked:
            values = self._clicked_dates(subject, start, end)
        else:
            values = self._impression_dates(subject, start, end)
        return [coerce_date(value) for value in values]

    # Cached store queries. Values are kept as plain ints, strings and lists.

    @cache_metric(keys.TOTAL_IMPRESSIONS_COUNT)
    def _total_impressions(self, subject, start=None, end=None):
        return self.store.count(subject)

    @cache_metric(keys.DAILY_IMPRESSIONS_COUNT)
    def _daily_impressions(self, subject, start=None, end=None):
        return self.store.count(subject, (start, start))

    @cache_metric(keys.DAILY_IMPRESSIONS_COUNTS)
    def _impression_groups(self, subject, start=None, end=None):
        return _serialize_groups(self.store.group_counts_by_date(subject, (start, end)))

    @cache_metric(keys.TOTAL_CLICKS_COUNT)
    def _total_clicks(self, subject, start=None, end=None):
        return self.store.count(subject, clicked_only=True)

    @cache_metric(keys.DAILY_CLICKS_COUNT)
    def _daily_clicks(self, subject, start=None, end=None):
        return self.store.count(subject, (start, start), clicked_only=True)

    @cache_metric(keys.DAILY_CLICKS_COUNTS)
    def _click_groups(self, subject, start=None, end=None):
        return _serialize_groups(self.store.group_counts_by_date(subject, (start, end), clicked_only=True))

    @cache_metric(keys.PROBABLE_DATES_WITH_IMPRESSIONS)
    def _probable_bounds(self, subject, start=None, end=None):
        found = self.store.min_max_date(subject, _store_range(start, end))
        if found is None:
            return None
        return [found[0].isoformat(), found[1].isoformat()]

    @cache_metric(keys.DATES_WITH_IMPRESSIONS)
    def _impression_dates(self, subject, start=None, end=None):
        return sorted(day.isoformat() for day in self.store.distinct_dates(subject, _store_range(start, end)))

    @cache_metric(keys.DATES_WITH_CLICKED_IMPRESSIONS)
    def _clicked_dates(self, subject, start=None, end=None):
        found = self.store.distinct_dates(subject, _store_range(start, end), clicked_only=True)
        return sorted(day.isoformat() for day in found)


def _bounds(start: DateLike, end: DateLike) -> Tuple[Optional[date], Optional[date]]:
    """No bounds, a single day (start only), or a validated range."""
    if start is None:
        return None, None
    if end is None:
        return coerce_date(start), None
    return coerce_range(start, end)


def _store_range(start: Optional[date], end: Optional[date]):
    if start is None:
        return None
    return (start, end if end is not None else start)


def _serialize_groups(groups) -> List[list]:
    return [[coerce_date(day).isoformat(), int(count)] for day, count in groups]


def _fill(groups, start: date, end: date) -> List[Tuple[date, int]]:
    counts = {coerce_date(day): count for day, count in groups}
    return [(day, counts.get(day, 0)) for day in iter_dates(start, end)]
