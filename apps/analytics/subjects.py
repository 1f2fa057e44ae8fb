# apps/analytics/subjects.py
from typing import NamedTuple, Protocol, Union, runtime_checkable

from django.db import models
from django.utils import timezone

VERSION_FORMAT = '%Y%m%d%H%M%S%f'


class MetricsSubject(NamedTuple):
    """What the engine measures: a column of the impression log and a value in it."""
    dimension: str  # advertiser_id, campaign_id or property_id
    entity_id: int
    version: str


@runtime_checkable
class HasImpressionMetrics(Protocol):
    def metrics_subject(self) -> MetricsSubject:
        ...


def version_token(instance: models.Model, stamp_field: str = 'updated_at') -> str:
    """
    Cache version for a model row, e.g. ``advertisers.advertiser/15-20240101120000000000``.

    The stamp changes on every save, so derived values keyed on an older
    token are never read again.
    """
    stamp = getattr(instance, stamp_field, None)
    base = f"{instance._meta.label_lower}/{instance.pk}"
    if stamp is None:
        return f"{base}-new"
    return f"{base}-{stamp.strftime(VERSION_FORMAT)}"


def subject_for(instance: models.Model, dimension: str) -> MetricsSubject:
    return MetricsSubject(dimension, instance.pk, version_token(instance))


def resolve_subject(target: Union[MetricsSubject, HasImpressionMetrics]) -> MetricsSubject:
    if isinstance(target, MetricsSubject):
        return target
    if isinstance(target, HasImpressionMetrics):
        return target.metrics_subject()
    raise TypeError(f"{type(target).__name__} does not expose impression metrics")


def touch(instance: models.Model, stamp_field: str = 'updated_at') -> None:
    """Bump the version stamp without running the model's full save()."""
    now = timezone.now()
    type(instance).objects.filter(pk=instance.pk).update(**{stamp_field: now})
    setattr(instance, stamp_field, now)
