from django.apps import AppConfig


class AdvertisersConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.advertisers'
