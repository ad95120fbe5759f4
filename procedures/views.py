# procedures/views.py
from core.crud import Column, ResourceFormView, ResourceListView
from reports.formatting import format_currency

from .forms import ProcedureForm
from .repository import ProcedureRepository


def format_duration(value):
    return f"{value} min" if value else '—'


def format_optional_currency(value):
    return format_currency(value) if value is not None else '—'


class ProcedureMixin:
    repository_class = ProcedureRepository
    form_class = ProcedureForm
    url_namespace = 'procedures'
    verbose_name = 'procedure'
    verbose_name_plural = 'procedures'


class ProcedureListView(ProcedureMixin, ResourceListView):
    columns = [
        Column('name', 'Name'),
        Column('code', 'Code'),
        Column('category', 'Category'),
        Column('price', 'Price', format_optional_currency),
        Column('cost', 'Cost', format_optional_currency),
        Column('duration', 'Duration', format_duration),
    ]


class ProcedureFormView(ProcedureMixin, ResourceFormView):
    pass
