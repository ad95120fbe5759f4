# clinics/forms.py
from django import forms

from core.forms import ResourceForm
from .models import Clinic


class ClinicForm(ResourceForm):
    class Meta:
        model = Clinic
        fields = ['name']
        widgets = {
            'name': forms.TextInput(attrs={'placeholder': 'Clinic name'}),
        }

    def clean_name(self):
        name = ' '.join((self.cleaned_data.get('name') or '').split())
        if len(name) < 2:
            raise forms.ValidationError('Clinic name must be at least 2 characters long.')
        return name
