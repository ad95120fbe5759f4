# procedures/apps.py
from django.apps import AppConfig


class ProceduresConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'procedures'

    def ready(self):
        from core.datasource import tables
        from .models import Procedure

        tables.register('procedures', Procedure)
