from django.apps import AppConfig


class LabBillingConfig(AppConfig):
    name = 'labbilling'
    default_auto_field = 'django.db.models.BigAutoField'
