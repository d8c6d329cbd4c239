from django.apps import AppConfig


class OpdConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'opd'
    verbose_name = 'Outpatient Queue'
