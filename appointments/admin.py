# appointments/admin.py
from django.contrib import admin

from .models import Appointment


@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    list_display = ['appointment_date', 'appointment_time', 'patient_name', 'procedure_name', 'status', 'amount', 'clinic']
    list_filter = ['status', 'clinic', 'appointment_date']
    search_fields = ['patient_name', 'procedure_name']
    date_hierarchy = 'appointment_date'
