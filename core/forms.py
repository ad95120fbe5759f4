# core/forms.py
from django import forms

from .validation import sanitize_input

INPUT_CLASS = 'mt-1 block w-full rounded-md border-gray-300 shadow-sm focus:border-primary-500 focus:ring-primary-500'
CHECKBOX_CLASS = 'rounded border-gray-300 text-primary-600 shadow-sm focus:border-primary-500 focus:ring-primary-500'


class ResourceForm(forms.ModelForm):
    """
    Base ModelForm for the resource screens.

    Accepts the caller's ``session`` so clinic choices can be narrowed to the
    clinic a staff member belongs to, styles every widget, and sanitizes all
    free-text input.
    """

    def __init__(self, *args, session=None, **kwargs):
        self.session = session
        super().__init__(*args, **kwargs)

        for field in self.fields.values():
            widget = field.widget
            if isinstance(widget, forms.CheckboxInput):
                widget.attrs.setdefault('class', CHECKBOX_CLASS)
            else:
                widget.attrs.setdefault('class', INPUT_CLASS)

        clinic_field = self.fields.get('clinic')
        if clinic_field is not None and session is not None and session.clinic_id and not session.is_admin:
            clinic_field.queryset = clinic_field.queryset.filter(pk=session.clinic_id)
            clinic_field.initial = session.clinic_id
            clinic_field.required = False
            clinic_field.disabled = True

    def clean(self):
        cleaned_data = super().clean()
        for name, value in list(cleaned_data.items()):
            if isinstance(value, str) and isinstance(self.fields.get(name), forms.CharField):
                cleaned_data[name] = sanitize_input(value)
        return cleaned_data


class DateInput(forms.DateInput):
    input_type = 'date'

    def __init__(self, attrs=None):
        super().__init__(attrs=attrs, format='%Y-%m-%d')


class TimeInput(forms.TimeInput):
    input_type = 'time'
