# procedures/forms.py
from django import forms

from core.forms import ResourceForm
from .models import Procedure


class ProcedureForm(ResourceForm):
    class Meta:
        model = Procedure
        fields = ['name', 'code', 'category', 'price', 'cost', 'duration', 'description']
        widgets = {
            'price': forms.NumberInput(attrs={'step': '0.01', 'min': '0'}),
            'cost': forms.NumberInput(attrs={'step': '0.01', 'min': '0'}),
            'duration': forms.NumberInput(attrs={'min': '0', 'placeholder': 'Minutes'}),
            'description': forms.Textarea(attrs={'rows': 3}),
        }
