# patients/admin.py
from django.contrib import admin

from .models import Patient, PatientAssignment


class PatientAssignmentInline(admin.TabularInline):
    model = PatientAssignment
    fk_name = 'patient'
    extra = 0
    fields = ['staff', 'assignment_type', 'is_active', 'assigned_at']
    readonly_fields = ['assigned_at']


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ['name', 'cpf', 'phone', 'source', 'clinic', 'created_at']
    list_filter = ['source', 'clinic']
    search_fields = ['name', 'cpf', 'email', 'phone']
    inlines = [PatientAssignmentInline]
