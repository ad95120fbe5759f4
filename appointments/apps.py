# appointments/apps.py
from django.apps import AppConfig


class AppointmentsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'appointments'

    def ready(self):
        from core.datasource import tables
        from .models import Appointment

        tables.register('appointments', Appointment)
