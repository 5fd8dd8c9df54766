from django.apps import AppConfig


class MillsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'millpanel.mills'
