# patients/forms.py
from django import forms
from django.core.exceptions import ValidationError

from core.forms import INPUT_CLASS, DateInput, ResourceForm
from core.validation import format_cpf, format_phone_number, is_valid_cpf, is_valid_phone_number
from users.models import Role, User

from .models import Patient, PatientAssignment


def clean_name(name, field_name="name"):
    """
    Collapse whitespace and check the length of a person's name.

    Raises:
        ValidationError: If the name is too short or has no letters
    """
    name = ' '.join((name or '').split())
    if len(name) < 2:
        raise ValidationError(f'{field_name.capitalize()} must be at least 2 characters long.')
    if not any(c.isalpha() for c in name):
        raise ValidationError(f'{field_name.capitalize()} must contain at least one letter.')
    return name


class PatientForm(ResourceForm):
    class Meta:
        model = Patient
        fields = [
            'name', 'clinic', 'cpf', 'email', 'phone', 'birth_date',
            'address', 'insurance', 'source', 'notes',
        ]
        widgets = {
            'cpf': forms.TextInput(attrs={'placeholder': '000.000.000-00'}),
            'phone': forms.TextInput(attrs={'placeholder': '(00) 00000-0000'}),
            'birth_date': DateInput(),
            'address': forms.Textarea(attrs={'rows': 2}),
            'notes': forms.Textarea(attrs={'rows': 3}),
        }

    def clean_name(self):
        return clean_name(self.cleaned_data.get('name'))

    def clean_cpf(self):
        cpf = (self.cleaned_data.get('cpf') or '').strip()
        if not is_valid_cpf(cpf):
            raise ValidationError('Please enter a valid CPF.')
        return format_cpf(cpf)

    def clean_phone(self):
        phone = (self.cleaned_data.get('phone') or '').strip()
        if not is_valid_phone_number(phone):
            raise ValidationError('Please enter a valid phone number with area code.')
        return format_phone_number(phone)


class AssignmentForm(forms.Form):
    staff = forms.ModelChoiceField(
        queryset=User.objects.none(),
        widget=forms.Select(attrs={'class': INPUT_CLASS}),
        empty_label='Select a staff member',
    )
    assignment_type = forms.ChoiceField(
        choices=PatientAssignment.TYPE_CHOICES,
        initial=PatientAssignment.PRIMARY_CARE,
        widget=forms.Select(attrs={'class': INPUT_CLASS}),
    )

    def __init__(self, *args, clinic_id=None, exclude_staff=(), **kwargs):
        super().__init__(*args, **kwargs)
        if clinic_id is None:
            return
        self.fields['staff'].queryset = User.objects.filter(
            role__name=Role.CLINIC_STAFF,
            clinic_id=clinic_id,
            is_active=True,
        ).exclude(pk__in=exclude_staff).order_by('first_name', 'username')
