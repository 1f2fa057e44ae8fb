# apps/analytics/repositories/impressions.py
import logging

from django.db.models import Count

from ..dates import coerce_date
from ..models import Impression
from .base import ImpressionStore
from .connection import optimized_analytics_cursor
from .performance import monitor_query_performance
from .query_builder import SQLQueryBuilder

logger = logging.getLogger(__name__)


class DjangoImpressionStore(ImpressionStore):
    """Impression log backed by the ``Impression`` model."""

    def __init__(self, using='default'):
        self.using = using

    def _scope(self, subject, date_range=None, clicked_only=False):
        queryset = Impression.objects.using(self.using).for_subject(subject)
        if date_range is not None:
            queryset = queryset.between(*date_range)
        if clicked_only:
            queryset = queryset.clicked()
        return queryset

    @monitor_query_performance
    def count(self, subject, date_range=None, clicked_only=False):
        return self._scope(subject, date_range, clicked_only).count()

    @monitor_query_performance
    def group_counts_by_date(self, subject, date_range, clicked_only=False):
        rows = (
            self._scope(subject, date_range, clicked_only)
            .order_by()
            .values('displayed_at_date')
            .annotate(total=Count('id'))
            .order_by('displayed_at_date')
        )
        return [(row['displayed_at_date'], row['total']) for row in rows]

    @monitor_query_performance
    def min_max_date(self, subject, date_range=None):
        """One MIN/MAX scan instead of a DISTINCT over every day."""
        builder = SQLQueryBuilder(
            f"SELECT MIN(displayed_at_date), MAX(displayed_at_date) FROM {Impression._meta.db_table}"
        ).add_subject_filter(subject)
        if date_range is not None:
            start, end = date_range
            builder.add_date_range(start.isoformat(), end.isoformat())
        sql, params = builder.build()

        with optimized_analytics_cursor(self.using) as cursor:
            cursor.execute(sql, params)
            row = cursor.fetchone()

        if not row or row[0] is None:
            return None
        # SQLite hands dates back as text
        return coerce_date(row[0]), coerce_date(row[1])

    @monitor_query_performance
    def distinct_dates(self, subject, date_range=None, clicked_only=False):
        return set(
            self._scope(subject, date_range, clicked_only)
            .order_by()
            .values_list('displayed_at_date', flat=True)
            .distinct()
        )
