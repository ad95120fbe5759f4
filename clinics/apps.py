# clinics/apps.py
from django.apps import AppConfig


class ClinicsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'clinics'
    verbose_name = 'Clinics'

    def ready(self):
        from core.datasource import tables
        from .models import Clinic

        tables.register('clinics', Clinic)
