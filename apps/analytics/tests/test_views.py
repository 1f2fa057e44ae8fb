from datetime import date, timedelta
from unittest import mock

from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.db import OperationalError
from django.test import override_settings
from rest_framework.test import APITestCase

from apps.advertisers.models import Advertiser
from apps.analytics.dates import today
from apps.campaigns.models import Campaign

from .helpers import make_impressions

JAN_1 = date(2024, 1, 1)
JAN_3 = date(2024, 1, 3)


class EntityMetricsViewTest(APITestCase):
    @classmethod
    def setUpTestData(cls):
        cls.user = get_user_model().objects.create_user(username='analyst', password='secret')
        cls.advertiser = Advertiser.objects.create(name='Acme', email='ads@acme.test')
        cls.campaign = Campaign.objects.create(name='Spring', advertiser=cls.advertiser)
        make_impressions(JAN_1, 3, clicked=1, advertiser_id=cls.advertiser.pk, campaign_id=cls.campaign.pk)
        make_impressions(JAN_3, 2, advertiser_id=cls.advertiser.pk, campaign_id=cls.campaign.pk)

    def setUp(self):
        cache.clear()
        self.client.force_authenticate(self.user)

    def summary_url(self, kind, pk):
        return f'/api/v1/analytics/{kind}/{pk}/summary/'

    def sparklines_url(self, kind, pk):
        return f'/api/v1/analytics/{kind}/{pk}/sparklines/'

    def test_summary(self):
        response = self.client.get(
            self.summary_url('advertisers', self.advertiser.pk), {'start': '2024-01-01', 'end': '2024-01-03'}
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['impressions'], 5)
        self.assertEqual(response.data['clicks'], 1)
        self.assertEqual(response.data['click_rate'], 20.0)
        self.assertEqual(response.data['total_impressions'], 5)
        self.assertEqual(response.data['impressions_per_mille'], 0.005)
        self.assertEqual(response.data['probable_dates'], ['2024-01-01', '2024-01-02', '2024-01-03'])

    def test_summary_for_campaign(self):
        response = self.client.get(
            self.summary_url('campaigns', self.campaign.pk), {'start': '2024-01-03', 'end': '2024-01-03'}
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['impressions'], 2)
        self.assertEqual(response.data['click_rate'], 0.0)

    def test_sparklines(self):
        response = self.client.get(
            self.sparklines_url('advertisers', self.advertiser.pk), {'start': '2024-01-01', 'end': '2024-01-03'}
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual([point['value'] for point in response.data['impressions']], [3, 0, 2])
        self.assertEqual([point['date'] for point in response.data['clicks']],
                         ['2024-01-01', '2024-01-02', '2024-01-03'])
        self.assertEqual(len(response.data['click_rates']), 3)

    @override_settings(ANALYTICS_SPARKLINE_DAYS=7)
    def test_default_window(self):
        response = self.client.get(self.sparklines_url('advertisers', self.advertiser.pk))
        self.assertEqual(response.status_code, 200)
        points = response.data['impressions']
        self.assertEqual(len(points), 7)
        self.assertEqual(points[-1]['date'], today().isoformat())
        self.assertEqual(points[0]['date'], (today() - timedelta(days=6)).isoformat())

    def test_reversed_range_is_a_bad_request(self):
        response = self.client.get(
            self.summary_url('advertisers', self.advertiser.pk), {'start': '2024-01-03', 'end': '2024-01-01'}
        )
        self.assertEqual(response.status_code, 400)

    def test_malformed_date_is_a_bad_request(self):
        response = self.client.get(self.summary_url('advertisers', self.advertiser.pk), {'start': 'soon'})
        self.assertEqual(response.status_code, 400)

    def test_unknown_entity(self):
        self.assertEqual(self.client.get(self.summary_url('advertisers', 9999)).status_code, 404)
        self.assertEqual(self.client.get(self.summary_url('referrals', 1)).status_code, 404)

    def test_store_outage_is_reported_not_zeroed(self):
        with mock.patch(
            'apps.analytics.repositories.impressions.DjangoImpressionStore.group_counts_by_date',
            side_effect=OperationalError('server has gone away'),
        ):
            response = self.client.get(
                self.summary_url('advertisers', self.advertiser.pk), {'start': '2024-01-01', 'end': '2024-01-03'}
            )
        self.assertEqual(response.status_code, 503)

    def test_requires_authentication(self):
        self.client.force_authenticate(None)
        response = self.client.get(self.summary_url('advertisers', self.advertiser.pk))
        self.assertIn(response.status_code, (401, 403))
