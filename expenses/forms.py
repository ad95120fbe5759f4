# expenses/forms.py
from django import forms

from core.forms import DateInput, ResourceForm
from .models import Expense


class ExpenseForm(ResourceForm):
    class Meta:
        model = Expense
        fields = [
            'clinic', 'description', 'amount', 'date', 'category',
            'supplier', 'payment_method', 'invoice_number', 'is_recurring',
        ]
        widgets = {
            'amount': forms.NumberInput(attrs={'step': '0.01', 'min': '0'}),
            'date': DateInput(),
        }
