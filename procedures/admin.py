# procedures/admin.py
from django.contrib import admin

from .models import Procedure


@admin.register(Procedure)
class ProcedureAdmin(admin.ModelAdmin):
    list_display = ['name', 'code', 'category', 'price', 'cost', 'duration']
    list_filter = ['category']
    search_fields = ['name', 'code']
