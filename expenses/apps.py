# expenses/apps.py
from django.apps import AppConfig


class ExpensesConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'expenses'

    def ready(self):
        from core.datasource import tables
        from .models import Expense

        tables.register('expenses', Expense)
