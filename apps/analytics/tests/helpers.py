import uuid
from collections import Counter
from datetime import datetime, time, timedelta, timezone as dt_timezone

from django.core.cache.backends.locmem import LocMemCache

from apps.analytics.models import Impression
from apps.analytics.repositories.base import ImpressionStore
from apps.analytics.subjects import MetricsSubject


def isolated_cache():
    return LocMemCache(f"analytics-test-{uuid.uuid4()}", {})


def at(day, hour=12):
    return datetime.combine(day, time(hour), tzinfo=dt_timezone.utc)


def make_impressions(day, count, clicked=0, advertiser_id=1, campaign_id=10, property_id=100):
    """``count`` impressions on ``day``, the first ``clicked`` of them clicked."""
    created = []
    for i in range(count):
        displayed_at = at(day, hour=8 + i % 12)
        created.append(Impression.objects.record(
            advertiser_id=advertiser_id,
            campaign_id=campaign_id,
            property_id=property_id,
            displayed_at=displayed_at,
            clicked_at=displayed_at + timedelta(minutes=1) if i < clicked else None,
        ))
    return created


class RecordingStore(ImpressionStore):
    """
    In-memory impression log that counts the queries it answers.

    ``events`` maps a subject's ``entity_id`` to a list of
    ``(displayed_at_date, clicked)`` pairs.
    """

    def __init__(self, events=None):
        self.events = events or {}
        self.calls = Counter()

    def _rows(self, subject, date_range, clicked_only):
        rows = self.events.get(subject.entity_id, [])
        if date_range is not None:
            start, end = date_range
            rows = [row for row in rows if start <= row[0] <= end]
        if clicked_only:
            rows = [row for row in rows if row[1]]
        return rows

    def count(self, subject, date_range=None, clicked_only=False):
        self.calls['count'] += 1
        return len(self._rows(subject, date_range, clicked_only))

    def group_counts_by_date(self, subject, date_range, clicked_only=False):
        self.calls['group_counts_by_date'] += 1
        grouped = Counter(day for day, _ in self._rows(subject, date_range, clicked_only))
        return sorted(grouped.items())

    def min_max_date(self, subject, date_range=None):
        self.calls['min_max_date'] += 1
        days = [day for day, _ in self._rows(subject, date_range, False)]
        if not days:
            return None
        return min(days), max(days)

    def distinct_dates(self, subject, date_range=None, clicked_only=False):
        self.calls['distinct_dates'] += 1
        return {day for day, _ in self._rows(subject, date_range, clicked_only)}


def subject(entity_id=1, version='advertisers.advertiser/1-20240101000000000000', dimension='advertiser_id'):
    return MetricsSubject(dimension, entity_id, version)
