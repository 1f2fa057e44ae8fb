from django.db import models

from apps.analytics.subjects import subject_for, touch


class Property(models.Model):
    """A publisher site or app that displays ads."""
    class Meta:
        app_label = 'properties'
        verbose_name_plural = 'properties'

    name = models.CharField(max_length=255)
    url = models.URLField(blank=True)
    status = models.CharField(max_length=20, default='active')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    def metrics_subject(self):
        return subject_for(self, 'property_id')

    def touch_metrics(self):
        touch(self)
