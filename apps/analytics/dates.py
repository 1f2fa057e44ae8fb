# apps/analytics/dates.py
from datetime import date, datetime, timedelta
from typing import Iterator, Union
from zoneinfo import ZoneInfo

from django.conf import settings
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

from .exceptions import InvalidDateRange

DateLike = Union[date, datetime, str, None]


def reference_timezone() -> ZoneInfo:
    """Zone in which ``displayed_at`` is bucketed into ``displayed_at_date``."""
    return ZoneInfo(getattr(settings, 'ANALYTICS_TIME_ZONE', 'UTC'))


def local_date(value: datetime) -> date:
    if timezone.is_naive(value):
        value = timezone.make_aware(value, reference_timezone())
    return timezone.localtime(value, reference_timezone()).date()


def today() -> date:
    return local_date(timezone.now())


def coerce_date(value: DateLike) -> date:
    """
    Normalise a date-like value to a calendar date.

    ``None`` means today in the reference zone, datetimes are converted to
    the reference zone first and strings must be ISO-8601.
    """
    if value is None:
        return today()
    if isinstance(value, datetime):
        return local_date(value)
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            parsed = parse_date(value)
            if parsed is None:
                moment = parse_datetime(value)
                parsed = local_date(moment) if moment else None
        except ValueError:
            parsed = None
        if parsed is None:
            raise InvalidDateRange(f"Not an ISO-8601 date: {value!r}")
        return parsed
    raise InvalidDateRange(f"Cannot interpret {type(value).__name__} as a date")


def coerce_range(start: DateLike, end: DateLike) -> tuple:
    start_date = coerce_date(start)
    end_date = coerce_date(end)
    if end_date < start_date:
        raise InvalidDateRange(
            f"Range ends before it starts: {start_date.isoformat()} > {end_date.isoformat()}",
            start=start_date,
            end=end_date,
        )
    return start_date, end_date


def iter_dates(start: date, end: date) -> Iterator[date]:
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)

