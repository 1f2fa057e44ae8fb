from django.db import models
from django.core.exceptions import ValidationError

from apps.analytics.subjects import subject_for, touch


class Campaign(models.Model):
    class Meta:
        app_label = 'campaigns'
        indexes = [
            models.Index(fields=['advertiser', 'status'], name='campaign_advertiser_status'),
        ]

    STATUS_CHOICES = [
        ('draft', 'Draft'),
        ('active', 'Active'),
        ('paused', 'Paused'),
        ('stopped', 'Stopped'),
        ('completed', 'Completed')
    ]

    name = models.CharField(max_length=100)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='draft')
    start_date = models.DateField(blank=True, null=True)
    end_date = models.DateField(blank=True, null=True)
    advertiser = models.ForeignKey('advertisers.Advertiser', on_delete=models.CASCADE, related_name='campaigns')
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    def clean(self):
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValidationError("start_date must not be after end_date")

    def metrics_subject(self):
        return subject_for(self, 'campaign_id')

    def touch_metrics(self):
        touch(self)
