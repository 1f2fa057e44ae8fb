import logging
from datetime import timedelta

from celery import shared_task
from django.conf import settings
from django.db import DatabaseError
from redis.exceptions import RedisError
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from .dates import today
from .entities import entity_model, get_entity
from .metrics import ImpressionMetrics
from .sparklines import SparklineBuilder

logger = logging.getLogger(__name__)

transient = retry_if_exception_type((DatabaseError, RedisError))


@shared_task
@retry(stop=stop_after_attempt(3), wait=wait_exponential(multiplier=1, min=4, max=10),
       retry=transient, reraise=True)
def warm_metrics_cache(kind, pk, days=None):
    """Precompute totals and sparklines for the trailing window of one entity."""
    days = days or settings.ANALYTICS_SPARKLINE_DAYS
    entity = get_entity(kind, pk)
    end = today()
    start = end - timedelta(days=days - 1)

    metrics = ImpressionMetrics.from_settings()
    sparklines = SparklineBuilder(metrics)
    impressions = metrics.total_impressions(entity)
    clicks = metrics.total_clicks(entity)
    sparklines.impressions(entity, start, end)
    sparklines.clicks(entity, start, end)
    metrics.daily_click_rates(entity, start, end)

    logger.info(f"Warmed metrics cache for {kind} {pk}: {impressions} impressions, {clicks} clicks")
    return {
        'entity': kind,
        'entity_id': pk,
        'start': start.isoformat(),
        'end': end.isoformat(),
        'total_impressions': impressions,
        'total_clicks': clicks,
    }


@shared_task
def warm_active_metrics(kind, days=None):
    """Queue a warm-up for every active entity of one kind."""
    ids = list(entity_model(kind).objects.filter(status='active').values_list('pk', flat=True))
    for pk in ids:
        warm_metrics_cache.delay(kind, pk, days)
    logger.info(f"Queued metrics warm-up for {len(ids)} {kind}")
    return {'entity': kind, 'queued': len(ids)}
