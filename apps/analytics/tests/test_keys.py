from datetime import date, datetime, timezone as dt_timezone

from django.test import SimpleTestCase

from apps.analytics.keys import build_cache_key, TOTAL_IMPRESSIONS_COUNT, DAILY_IMPRESSIONS_COUNTS

VERSION = 'advertisers.advertiser/15-20240101120000000000'


class BuildCacheKeyTest(SimpleTestCase):
    def test_all_time_key_has_no_dates(self):
        self.assertEqual(
            build_cache_key(VERSION, TOTAL_IMPRESSIONS_COUNT),
            f"{VERSION}/total_impressions_count",
        )

    def test_single_day_key(self):
        key = build_cache_key(VERSION, 'daily_clicks_count', date(2024, 1, 3))
        self.assertEqual(key, f"{VERSION}/daily_clicks_count/2024-01-03")

    def test_range_key_is_order_sensitive(self):
        forward = build_cache_key(VERSION, DAILY_IMPRESSIONS_COUNTS, date(2024, 1, 1), date(2024, 1, 3))
        backward = build_cache_key(VERSION, DAILY_IMPRESSIONS_COUNTS, date(2024, 1, 3), date(2024, 1, 1))
        self.assertEqual(forward, f"{VERSION}/daily_impressions_counts/2024-01-01-2024-01-03")
        self.assertNotEqual(forward, backward)

    def test_equivalent_inputs_share_a_key(self):
        as_date = build_cache_key(VERSION, 'm', date(2024, 1, 1), date(2024, 1, 2))
        as_text = build_cache_key(VERSION, 'm', '2024-01-01', '2024-01-02')
        as_datetime = build_cache_key(
            VERSION, 'm',
            datetime(2024, 1, 1, 9, tzinfo=dt_timezone.utc),
            datetime(2024, 1, 2, 23, tzinfo=dt_timezone.utc),
        )
        self.assertEqual(as_date, as_text)
        self.assertEqual(as_date, as_datetime)

    def test_any_difference_changes_the_key(self):
        base = build_cache_key(VERSION, 'daily_impressions_count', date(2024, 1, 1))
        self.assertNotEqual(base, build_cache_key(VERSION, 'daily_clicks_count', date(2024, 1, 1)))
        self.assertNotEqual(base, build_cache_key(VERSION, 'daily_impressions_count', date(2024, 1, 2)))
        self.assertNotEqual(base, build_cache_key(VERSION, 'daily_impressions_count'))
        self.assertNotEqual(base, build_cache_key(VERSION + 'x', 'daily_impressions_count', date(2024, 1, 1)))

    def test_single_day_and_range_keys_differ(self):
        self.assertNotEqual(
            build_cache_key(VERSION, 'm', date(2024, 1, 1)),
            build_cache_key(VERSION, 'm', date(2024, 1, 1), date(2024, 1, 1)),
        )

    def test_end_without_start_is_rejected(self):
        with self.assertRaises(ValueError):
            build_cache_key(VERSION, 'm', None, date(2024, 1, 1))
