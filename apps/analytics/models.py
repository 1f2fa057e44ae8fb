import uuid

from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone

from .dates import coerce_date, local_date


class ImpressionQuerySet(models.QuerySet):
    def for_subject(self, subject):
        return self.filter(**{subject.dimension: subject.entity_id})

    def on(self, day):
        return self.filter(displayed_at_date=coerce_date(day))

    def between(self, start, end):
        return self.filter(displayed_at_date__range=(coerce_date(start), coerce_date(end)))

    def clicked(self):
        return self.filter(clicked_at__isnull=False)


class ImpressionManager(models.Manager.from_queryset(ImpressionQuerySet)):
    def record(self, *, advertiser_id, campaign_id, property_id, displayed_at=None, **fields):
        """Append one impression to the log."""
        fields.setdefault('campaign_name', f"campaign-{campaign_id}")
        fields.setdefault('property_name', f"property-{property_id}")
        fields.setdefault('ip', '0.0.0.0')
        fields.setdefault('user_agent', '')
        impression = self.model(
            advertiser_id=advertiser_id,
            campaign_id=campaign_id,
            property_id=property_id,
            displayed_at=displayed_at or timezone.now(),
            **fields,
        )
        impression.full_clean()
        impression.save(force_insert=True)
        return impression

    def mark_clicked(self, impression_id, clicked_at=None):
        """Stamp the click on an impression once; later clicks are ignored."""
        clicked_at = clicked_at or timezone.now()
        return self.filter(
            pk=impression_id,
            clicked_at__isnull=True,
            displayed_at__lte=clicked_at,
        ).update(clicked_at=clicked_at)


class Impression(models.Model):
    """
    One ad display. Append-only: rows are written by the ad server and by
    click tracking, never by the analytics engine.
    """
    class Meta:
        app_label = 'analytics'
        indexes = [
            models.Index(fields=['advertiser_id', 'displayed_at_date'], name='impression_advertiser_date'),
            models.Index(fields=['campaign_id', 'displayed_at_date'], name='impression_campaign_date'),
            models.Index(fields=['property_id', 'displayed_at_date'], name='impression_property_date'),
            models.Index(fields=['payable'], name='impression_payable'),
        ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    advertiser_id = models.BigIntegerField()
    campaign_id = models.BigIntegerField()
    campaign_name = models.CharField(max_length=255)
    property_id = models.BigIntegerField()
    property_name = models.CharField(max_length=255)
    ip = models.CharField(max_length=45)
    user_agent = models.TextField(blank=True)
    country_code = models.CharField(max_length=2, blank=True, null=True)
    postal_code = models.CharField(max_length=20, blank=True, null=True)
    latitude = models.DecimalField(max_digits=9, decimal_places=6, blank=True, null=True)
    longitude = models.DecimalField(max_digits=9, decimal_places=6, blank=True, null=True)
    payable = models.BooleanField(default=False)
    reason = models.CharField(max_length=255, blank=True, null=True)
    displayed_at = models.DateTimeField()
    displayed_at_date = models.DateField(blank=True)
    clicked_at = models.DateTimeField(blank=True, null=True)
    fallback_campaign = models.BooleanField(default=False)

    objects = ImpressionManager()

    def __str__(self):
        return f"{self.id} @ {self.displayed_at_date}"

    def clean(self):
        if self.displayed_at is None:
            return
        expected = local_date(self.displayed_at)
        if self.displayed_at_date is None:
            self.displayed_at_date = expected
        elif self.displayed_at_date != expected:
            raise ValidationError("displayed_at_date must be the date of displayed_at")
        if self.clicked_at is not None and self.clicked_at < self.displayed_at:
            raise ValidationError("clicked_at cannot precede displayed_at")

    def save(self, *args, **kwargs):
        if self.displayed_at_date is None and self.displayed_at is not None:
            self.displayed_at_date = local_date(self.displayed_at)
        super().save(*args, **kwargs)

    @property
    def clicked(self):
        return self.clicked_at is not None
