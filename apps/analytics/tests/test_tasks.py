from datetime import timedelta
from unittest import mock

from django.core.cache import cache
from django.test import TestCase, override_settings

from apps.advertisers.models import Advertiser
from apps.analytics.dates import today
from apps.analytics.keys import SPARKLINE_IMPRESSIONS, build_cache_key
from apps.analytics.tasks import warm_active_metrics, warm_metrics_cache

from .helpers import make_impressions


@override_settings(ANALYTICS_SPARKLINE_DAYS=5)
class WarmMetricsCacheTest(TestCase):
    def setUp(self):
        cache.clear()
        self.advertiser = Advertiser.objects.create(name='Acme', email='ads@acme.test')
        make_impressions(today() - timedelta(days=1), 4, clicked=2, advertiser_id=self.advertiser.pk)

    def test_warms_sparklines_and_totals(self):
        result = warm_metrics_cache('advertisers', self.advertiser.pk)

        self.assertEqual(result['total_impressions'], 4)
        self.assertEqual(result['total_clicks'], 2)
        end = today()
        start = end - timedelta(days=4)
        self.assertEqual((result['start'], result['end']), (start.isoformat(), end.isoformat()))

        key = build_cache_key(self.advertiser.metrics_subject().version, SPARKLINE_IMPRESSIONS, start, end)
        points = cache.get(key)
        self.assertEqual(len(points), 5)
        self.assertEqual(sum(point['value'] for point in points), 4)

    def test_missing_entity_fails_loudly(self):
        with self.assertRaises(Advertiser.DoesNotExist):
            warm_metrics_cache('advertisers', 9999)

    def test_queues_active_entities(self):
        Advertiser.objects.create(name='Paused', email='p@acme.test', status='paused')
        with mock.patch('apps.analytics.tasks.warm_metrics_cache.delay') as delay:
            result = warm_active_metrics('advertisers', 3)
        self.assertEqual(result['queued'], 1)
        delay.assert_called_once_with('advertisers', self.advertiser.pk, 3)
