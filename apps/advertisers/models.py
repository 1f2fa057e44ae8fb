from django.db import models

from apps.analytics.subjects import subject_for, touch


class Advertiser(models.Model):
    class Meta:
        app_label = 'advertisers'

    name = models.CharField(max_length=100)
    email = models.EmailField()
    status = models.CharField(max_length=20, default='active')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    def metrics_subject(self):
        return subject_for(self, 'advertiser_id')

    def touch_metrics(self):
        touch(self)
