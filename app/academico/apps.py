from django.apps import AppConfig


class AcademicoConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'academico'
    verbose_name = 'Académico'

    def ready(self):
        from . import signals  # noqa: F401
