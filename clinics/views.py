# clinics/views.py
from core.crud import Column, ResourceFormView, ResourceListView
from reports.formatting import format_date

from .forms import ClinicForm
from .repository import ClinicRepository


class ClinicMixin:
    repository_class = ClinicRepository
    form_class = ClinicForm
    url_namespace = 'clinics'
    verbose_name = 'clinic'
    verbose_name_plural = 'clinics'


class ClinicListView(ClinicMixin, ResourceListView):
    """Admin-only list of clinics"""
    columns = [
        Column('name', 'Name'),
        Column('created_at', 'Created', format_date),
    ]


class ClinicFormView(ClinicMixin, ResourceFormView):
    pass
