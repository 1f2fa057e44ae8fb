from datetime import timedelta

from django.conf import settings
from rest_framework import serializers

from .dates import today


class DateRangeSerializer(serializers.Serializer):
    """``?start=&end=`` query parameters; defaults to the trailing sparkline window."""
    start = serializers.DateField(required=False)
    end = serializers.DateField(required=False)

    def validate(self, attrs):
        end = attrs.get('end') or today()
        start = attrs.get('start') or end - timedelta(days=settings.ANALYTICS_SPARKLINE_DAYS - 1)
        if end < start:
            raise serializers.ValidationError({'end': "end must not be before start"})
        attrs['start'] = start
        attrs['end'] = end
        return attrs


class SparklinePointSerializer(serializers.Serializer):
    label = serializers.CharField()
    date = serializers.CharField()
    value = serializers.IntegerField()


class MetricsSummarySerializer(serializers.Serializer):
    entity = serializers.CharField()
    entity_id = serializers.IntegerField()
    start = serializers.DateField()
    end = serializers.DateField()
    impressions = serializers.IntegerField()
    clicks = serializers.IntegerField()
    click_rate = serializers.FloatField()
    impressions_per_mille = serializers.FloatField()
    clicks_per_mille = serializers.FloatField()
    total_impressions = serializers.IntegerField()
    total_clicks = serializers.IntegerField()
    total_click_rate = serializers.FloatField()
    probable_dates = serializers.ListField(child=serializers.DateField())


class SparklinesSerializer(serializers.Serializer):
    impressions = SparklinePointSerializer(many=True)
    clicks = SparklinePointSerializer(many=True)
    click_rates = serializers.ListField(child=serializers.FloatField())
