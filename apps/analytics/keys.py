# apps/analytics/keys.py
from typing import Optional

from .dates import DateLike, coerce_date

TOTAL_IMPRESSIONS_COUNT = 'total_impressions_count'
DAILY_IMPRESSIONS_COUNT = 'daily_impressions_count'
DAILY_IMPRESSIONS_COUNTS = 'daily_impressions_counts'
TOTAL_CLICKS_COUNT = 'total_clicks_count'
DAILY_CLICKS_COUNT = 'daily_clicks_count'
DAILY_CLICKS_COUNTS = 'daily_clicks_counts'
PROBABLE_DATES_WITH_IMPRESSIONS = 'probable_dates_with_impressions'
DATES_WITH_IMPRESSIONS = 'dates_with_impressions'
DATES_WITH_CLICKED_IMPRESSIONS = 'dates_with_clicked_impressions'
SPARKLINE_IMPRESSIONS = 'sparkline_impressions'
SPARKLINE_CLICKS = 'sparkline_clicks'


def _format(value: DateLike) -> str:
    return coerce_date(value).isoformat()


def build_cache_key(version: str, metric: str, start: Optional[DateLike] = None,
                    end: Optional[DateLike] = None) -> str:
    """
    Key for a derived value.

    No bounds is an all-time metric, ``start`` alone a single day and both
    bounds a range. Range order is the caller's responsibility.
    """
    if start is None and end is not None:
        raise ValueError("A range end needs a range start")
    key = f"{version}/{metric}"
    if start is None:
        return key
    if end is None:
        return f"{key}/{_format(start)}"
    return f"{key}/{_format(start)}-{_format(end)}"
