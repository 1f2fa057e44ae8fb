from datetime import date, datetime, timedelta, timezone as dt_timezone

from django.core.exceptions import ValidationError
from django.test import TestCase, override_settings

from apps.advertisers.models import Advertiser
from apps.analytics.models import Impression
from apps.analytics.subjects import MetricsSubject, resolve_subject
from apps.campaigns.models import Campaign
from apps.properties.models import Property

from .helpers import at


class ImpressionModelTest(TestCase):
    def record(self, **fields):
        return Impression.objects.record(advertiser_id=1, campaign_id=2, property_id=3, **fields)

    def test_displayed_at_date_is_derived(self):
        impression = self.record(displayed_at=at(date(2024, 1, 1), hour=23))
        self.assertEqual(impression.displayed_at_date, date(2024, 1, 1))

    @override_settings(ANALYTICS_TIME_ZONE='America/New_York')
    def test_displayed_at_date_uses_reference_zone(self):
        # 02:00 UTC on Jan 2 is still Jan 1 in New York
        impression = self.record(displayed_at=datetime(2024, 1, 2, 2, tzinfo=dt_timezone.utc))
        self.assertEqual(impression.displayed_at_date, date(2024, 1, 1))

    def test_mismatched_date_is_rejected(self):
        with self.assertRaises(ValidationError):
            self.record(displayed_at=at(date(2024, 1, 1)), displayed_at_date=date(2024, 1, 5))

    def test_click_before_display_is_rejected(self):
        displayed_at = at(date(2024, 1, 1))
        with self.assertRaises(ValidationError):
            self.record(displayed_at=displayed_at, clicked_at=displayed_at - timedelta(seconds=1))

    def test_mark_clicked_once(self):
        displayed_at = at(date(2024, 1, 1))
        impression = self.record(displayed_at=displayed_at)
        first_click = displayed_at + timedelta(minutes=2)

        self.assertEqual(Impression.objects.mark_clicked(impression.pk, first_click), 1)
        self.assertEqual(Impression.objects.mark_clicked(impression.pk, first_click + timedelta(hours=1)), 0)

        impression.refresh_from_db()
        self.assertEqual(impression.clicked_at, first_click)
        self.assertTrue(impression.clicked)

    def test_mark_clicked_before_display_is_ignored(self):
        displayed_at = at(date(2024, 1, 1))
        impression = self.record(displayed_at=displayed_at)
        self.assertEqual(Impression.objects.mark_clicked(impression.pk, displayed_at - timedelta(hours=1)), 0)

    def test_scopes(self):
        self.record(displayed_at=at(date(2024, 1, 1)), clicked_at=at(date(2024, 1, 1), hour=13))
        self.record(displayed_at=at(date(2024, 1, 2)))
        subject = MetricsSubject('property_id', 3, 'v')
        scope = Impression.objects.for_subject(subject)
        self.assertEqual(scope.on('2024-01-01').count(), 1)
        self.assertEqual(scope.between(date(2024, 1, 1), date(2024, 1, 2)).count(), 2)
        self.assertEqual(scope.clicked().count(), 1)


class EntitySubjectTest(TestCase):
    def setUp(self):
        self.advertiser = Advertiser.objects.create(name='Acme', email='ads@acme.test')

    def test_each_entity_measures_its_own_column(self):
        campaign = Campaign.objects.create(name='Spring', advertiser=self.advertiser)
        prop = Property.objects.create(name='News site')
        self.assertEqual(self.advertiser.metrics_subject().dimension, 'advertiser_id')
        self.assertEqual(campaign.metrics_subject().dimension, 'campaign_id')
        self.assertEqual(prop.metrics_subject().dimension, 'property_id')
        self.assertEqual(resolve_subject(campaign).entity_id, campaign.pk)

    def test_version_token_names_the_row(self):
        token = self.advertiser.metrics_subject().version
        self.assertTrue(token.startswith(f"advertisers.advertiser/{self.advertiser.pk}-"))

    def test_save_and_touch_change_the_version(self):
        first = self.advertiser.metrics_subject().version
        self.advertiser.name = 'Acme Inc'
        self.advertiser.save()
        second = self.advertiser.metrics_subject().version
        self.advertiser.touch_metrics()
        third = self.advertiser.metrics_subject().version

        self.assertNotEqual(first, second)
        self.assertNotEqual(second, third)
        self.advertiser.refresh_from_db()
        self.assertEqual(self.advertiser.metrics_subject().version, third)

    def test_campaign_dates_are_validated(self):
        campaign = Campaign(
            name='Backwards', advertiser=self.advertiser,
            start_date=date(2024, 2, 1), end_date=date(2024, 1, 1),
        )
        with self.assertRaises(ValidationError):
            campaign.full_clean()
