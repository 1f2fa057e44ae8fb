import logging
from functools import wraps

from django.core.exceptions import ObjectDoesNotExist
from django.db import DatabaseError
from django.http import Http404
from redis.exceptions import RedisError
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from .entities import get_entity
from .exceptions import InvalidDateRange
from .metrics import ImpressionMetrics, per_mille
from .serializers import DateRangeSerializer, MetricsSummarySerializer, SparklinesSerializer
from .sparklines import SparklineBuilder

logger = logging.getLogger(__name__)


class MetricsUnavailable(APIException):
    status_code = 503
    default_detail = 'Analytics storage is unavailable, try again later.'
    default_code = 'metrics_unavailable'


def surface_collaborator_failures(func):
    """Report store and cache outages as 503 instead of empty figures."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except InvalidDateRange as e:
            raise ValidationError({'detail': str(e)})
        except (DatabaseError, RedisError) as e:
            logger.error(f"Analytics collaborator failure in {func.__qualname__}: {e}")
            raise MetricsUnavailable() from e
    return wrapper


class EntityMetricsMixin:
    permission_classes = [IsAuthenticated]

    def get_metrics(self):
        return ImpressionMetrics.from_settings()

    def get_entity(self, kind, pk):
        try:
            return get_entity(kind, pk)
        except LookupError:
            raise Http404(f"Unknown entity kind: {kind}")
        except ObjectDoesNotExist:
            raise Http404(f"No {kind} with id {pk}")

    def get_date_range(self, request):
        serializer = DateRangeSerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        return serializer.validated_data['start'], serializer.validated_data['end']


class EntityMetricsSummaryView(EntityMetricsMixin, APIView):
    """Totals, click-through rate and active dates for one entity."""

    @surface_collaborator_failures
    def get(self, request, kind, pk):
        entity = self.get_entity(kind, pk)
        start, end = self.get_date_range(request)
        metrics = self.get_metrics()

        impressions = metrics.total_impressions(entity, start, end)
        clicks = metrics.total_clicks(entity, start, end)
        data = {
            'entity': kind,
            'entity_id': entity.pk,
            'start': start,
            'end': end,
            'impressions': impressions,
            'clicks': clicks,
            'click_rate': metrics.total_click_rate(entity, start, end),
            'impressions_per_mille': per_mille(impressions),
            'clicks_per_mille': per_mille(clicks),
            'total_impressions': metrics.total_impressions(entity),
            'total_clicks': metrics.total_clicks(entity),
            'total_click_rate': metrics.total_click_rate(entity),
            'probable_dates': metrics.probable_dates_with_impressions(entity, start, end),
        }
        return Response(MetricsSummarySerializer(data).data)


class EntitySparklinesView(EntityMetricsMixin, APIView):
    """Daily impression and click series, one point per day in the window."""

    @surface_collaborator_failures
    def get(self, request, kind, pk):
        entity = self.get_entity(kind, pk)
        start, end = self.get_date_range(request)
        metrics = self.get_metrics()
        sparklines = SparklineBuilder(metrics)

        data = {
            'impressions': sparklines.impressions(entity, start, end),
            'clicks': sparklines.clicks(entity, start, end),
            'click_rates': metrics.daily_click_rates(entity, start, end),
        }
        return Response(SparklinesSerializer(data).data)
