# expenses/repository.py
from core.repository import Repository


class ExpenseRepository(Repository):
    table = 'expenses'
    module = 'expenses'
    list_fields = (
        'id', 'date', 'description', 'category', 'amount', 'supplier',
        'is_recurring', 'clinic_id', 'clinic__name',
    )
    search_fields = ('description', 'supplier', 'invoice_number', 'category')
    ordering = ('-date',)
