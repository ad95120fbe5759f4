# appointments/forms.py
from django import forms

from core.forms import DateInput, ResourceForm, TimeInput
from patients.models import Patient

from .models import Appointment


class AppointmentForm(ResourceForm):
    class Meta:
        model = Appointment
        fields = [
            'clinic', 'patient', 'patient_name', 'procedure', 'appointment_date', 'appointment_time',
            'status', 'amount', 'payment_method', 'payment_status', 'notes',
        ]
        widgets = {
            'patient_name': forms.TextInput(attrs={'placeholder': 'Used when the patient is not registered'}),
            'appointment_date': DateInput(),
            'appointment_time': TimeInput(),
            'amount': forms.NumberInput(attrs={'step': '0.01', 'min': '0', 'placeholder': 'Procedure price'}),
            'notes': forms.Textarea(attrs={'rows': 3}),
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        patients = Patient.objects.order_by('name')
        if self.session is not None and self.session.clinic_id and not self.session.is_admin:
            patients = patients.filter(clinic_id=self.session.clinic_id)
        self.fields['patient'].queryset = patients
        self.fields['procedure'].queryset = self.fields['procedure'].queryset.order_by('name')

    def clean(self):
        cleaned_data = super().clean()
        if not cleaned_data.get('patient') and not cleaned_data.get('patient_name'):
            self.add_error('patient_name', 'Please choose a patient or enter a name.')
        return cleaned_data
