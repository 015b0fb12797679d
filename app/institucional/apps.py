from django.apps import AppConfig


class InstitucionalConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'institucional'
    verbose_name = 'Institucional'
