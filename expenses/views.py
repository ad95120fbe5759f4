# expenses/views.py
from core.crud import Column, ResourceFormView, ResourceListView
from reports.formatting import format_currency, format_date

from .forms import ExpenseForm
from .models import Expense
from .repository import ExpenseRepository

CATEGORY_LABELS = dict(Expense.CATEGORY_CHOICES)


class ExpenseMixin:
    repository_class = ExpenseRepository
    form_class = ExpenseForm
    url_namespace = 'expenses'
    verbose_name = 'expense'
    verbose_name_plural = 'expenses'


class ExpenseListView(ExpenseMixin, ResourceListView):
    columns = [
        Column('date', 'Date', format_date),
        Column('description', 'Description'),
        Column('category', 'Category', lambda v: CATEGORY_LABELS.get(v, '—')),
        Column('supplier', 'Supplier'),
        Column('amount', 'Amount', format_currency),
        Column('is_recurring', 'Recurring', lambda v: 'Yes' if v else 'No'),
        Column('clinic__name', 'Clinic'),
    ]


class ExpenseFormView(ExpenseMixin, ResourceFormView):
    pass
