from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone
from apps.advertisers.models import Advertiser
from apps.analytics.dates import local_date
from apps.analytics.models import Impression
from apps.campaigns.models import Campaign
from apps.properties.models import Property
import random
from datetime import timedelta


class Command(BaseCommand):
    help = 'Load synthetic impressions for performance testing'

    def add_arguments(self, parser):
        parser.add_argument('--records', type=int, default=100000, help='Number of impressions to create')
        parser.add_argument('--batch_size', type=int, default=10000, help='Batch size for bulk creation')
        parser.add_argument('--days_back', type=int, default=90, help='Days back for data distribution')
        parser.add_argument('--click_rate', type=float, default=0.02, help='Share of impressions that get clicked')
        parser.add_argument('--seed', type=int, default=None, help='Random seed for repeatable data')

    def handle(self, *args, **options):
        records = options['records']
        batch_size = options['batch_size']
        days_back = options['days_back']
        click_rate = options['click_rate']
        if options['seed'] is not None:
            random.seed(options['seed'])

        self.stdout.write(
            self.style.SUCCESS(f'Starting to load {records:,} impressions')
        )

        # 1. Ensure base data exists
        advertiser = self.ensure_advertiser()
        campaigns = self.ensure_campaigns(advertiser)
        properties = self.ensure_properties()

        # 2. Create impressions in batches
        total_created = self.create_impressions_batch(
            advertiser, campaigns, properties, records, batch_size, days_back, click_rate
        )

        # 3. New rows are invisible to cached metrics until the entities are touched
        advertiser.touch_metrics()
        for entity in campaigns + properties:
            entity.touch_metrics()

        self.show_stats(advertiser, total_created)

    def ensure_advertiser(self):
        advertiser, created = Advertiser.objects.get_or_create(
            name='Performance Test Advertiser',
            defaults={
                'email': 'perf@adtech.com',
                'status': 'active'
            }
        )
        if created:
            self.stdout.write(f'Created advertiser: {advertiser.name}')
        return advertiser

    def ensure_campaigns(self, advertiser):
        campaigns = []
        for i in range(5):
            campaign, _ = Campaign.objects.get_or_create(
                advertiser=advertiser,
                name=f'Performance Campaign {i+1}',
                defaults={'status': 'active'}
            )
            campaigns.append(campaign)
        self.stdout.write(f'Ensured {len(campaigns)} campaigns')
        return campaigns

    def ensure_properties(self):
        properties = []
        for i in range(3):
            prop, _ = Property.objects.get_or_create(
                name=f'Performance Property {i+1}',
                defaults={'url': f'https://publisher-{i+1}.example.com'}
            )
            properties.append(prop)
        self.stdout.write(f'Ensured {len(properties)} properties')
        return properties

    def create_impressions_batch(self, advertiser, campaigns, properties, total_records,
                                 batch_size, days_back, click_rate):
        self.stdout.write(f'Creating {total_records:,} impressions in batches of {batch_size:,}')

        base_time = timezone.now() - timedelta(days=days_back)
        total_created = 0
        remaining = total_records

        while remaining > 0:
            impressions_batch = []

            for _ in range(min(batch_size, remaining)):
                # Distribute impressions over time period
                displayed_at = base_time + timedelta(seconds=random.randint(0, days_back * 86400))
                campaign = random.choice(campaigns)
                prop = random.choice(properties)
                clicked_at = None
                if random.random() < click_rate:
                    clicked_at = displayed_at + timedelta(seconds=random.randint(1, 600))

                impressions_batch.append(Impression(
                    advertiser_id=advertiser.pk,
                    campaign_id=campaign.pk,
                    campaign_name=campaign.name,
                    property_id=prop.pk,
                    property_name=prop.name,
                    ip=f'10.0.{random.randint(0, 255)}.{random.randint(1, 254)}',
                    user_agent='load_impressions',
                    payable=random.random() < 0.9,
                    displayed_at=displayed_at,
                    displayed_at_date=local_date(displayed_at),
                    clicked_at=clicked_at,
                ))

            # bulk_create skips save(), so displayed_at_date is set above
            with transaction.atomic():
                Impression.objects.bulk_create(impressions_batch, batch_size=1000)

            total_created += len(impressions_batch)
            remaining -= len(impressions_batch)
            progress = total_created / total_records * 100
            self.stdout.write(f'Progress: {progress:.1f}% ({total_created:,}/{total_records:,})')

        return total_created

    def show_stats(self, advertiser, total_created):
        scope = Impression.objects.for_subject(advertiser.metrics_subject())
        self.stdout.write(self.style.SUCCESS('\nFINAL STATISTICS:'))
        self.stdout.write(f'   Advertiser Impressions: {scope.count():,}')
        self.stdout.write(f'   Advertiser Clicks: {scope.clicked().count():,}')
        self.stdout.write(f'   Records Created: {total_created:,}')
