# patients/apps.py
from django.apps import AppConfig


class PatientsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'patients'

    def ready(self):
        from core.datasource import tables
        from .models import Patient, PatientAssignment

        tables.register('patients', Patient)
        tables.register('patient_assignments', PatientAssignment)
