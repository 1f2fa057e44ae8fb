# apps/analytics/entities.py
from django.apps import apps

ENTITY_MODELS = {
    'advertisers': 'advertisers.Advertiser',
    'campaigns': 'campaigns.Campaign',
    'properties': 'properties.Property',
}


def entity_model(kind):
    try:
        return apps.get_model(ENTITY_MODELS[kind])
    except KeyError:
        raise LookupError(f"Unknown entity kind: {kind}") from None


def get_entity(kind, pk):
    return entity_model(kind).objects.get(pk=pk)
