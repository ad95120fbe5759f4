# appointments/views.py
from core.crud import Column, ResourceFormView, ResourceListView
from reports.formatting import format_currency, format_date

from .forms import AppointmentForm
from .models import Appointment
from .repository import AppointmentRepository

STATUS_LABELS = dict(Appointment.STATUS_CHOICES)


def format_time(value):
    return value.strftime('%H:%M') if value else '—'


class AppointmentMixin:
    repository_class = AppointmentRepository
    form_class = AppointmentForm
    url_namespace = 'appointments'
    verbose_name = 'appointment'
    verbose_name_plural = 'appointments'


class AppointmentListView(AppointmentMixin, ResourceListView):
    columns = [
        Column('appointment_date', 'Date', format_date),
        Column('appointment_time', 'Time', format_time),
        Column('patient_name', 'Patient'),
        Column('procedure_name', 'Procedure'),
        Column('status', 'Status', lambda v: STATUS_LABELS.get(v, v)),
        Column('amount', 'Amount', format_currency),
        Column('clinic__name', 'Clinic'),
    ]


class AppointmentFormView(AppointmentMixin, ResourceFormView):
    pass
