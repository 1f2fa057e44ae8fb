import uuid

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Impression',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('advertiser_id', models.BigIntegerField()),
                ('campaign_id', models.BigIntegerField()),
                ('campaign_name', models.CharField(max_length=255)),
                ('property_id', models.BigIntegerField()),
                ('property_name', models.CharField(max_length=255)),
                ('ip', models.CharField(max_length=45)),
                ('user_agent', models.TextField(blank=True)),
                ('country_code', models.CharField(blank=True, max_length=2, null=True)),
                ('postal_code', models.CharField(blank=True, max_length=20, null=True)),
                ('latitude', models.DecimalField(blank=True, decimal_places=6, max_digits=9, null=True)),
                ('longitude', models.DecimalField(blank=True, decimal_places=6, max_digits=9, null=True)),
                ('payable', models.BooleanField(default=False)),
                ('reason', models.CharField(blank=True, max_length=255, null=True)),
                ('displayed_at', models.DateTimeField()),
                ('displayed_at_date', models.DateField(blank=True)),
                ('clicked_at', models.DateTimeField(blank=True, null=True)),
                ('fallback_campaign', models.BooleanField(default=False)),
            ],
            options={
                'indexes': [
                    models.Index(fields=['advertiser_id', 'displayed_at_date'], name='impression_advertiser_date'),
                    models.Index(fields=['campaign_id', 'displayed_at_date'], name='impression_campaign_date'),
                    models.Index(fields=['property_id', 'displayed_at_date'], name='impression_property_date'),
                    models.Index(fields=['payable'], name='impression_payable'),
                ],
            },
        ),
    ]
