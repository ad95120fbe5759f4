# appointments/tests.py
from datetime import date
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.test import TestCase
from django.urls import reverse

from clinics.models import Clinic
from core.testing import make_user
from patients.models import Patient
from procedures.models import Procedure
from users.models import Role

from .forms import AppointmentForm
from .models import Appointment
from .views import format_time


class AppointmentModelTest(TestCase):

    def setUp(self):
        self.clinic = Clinic.objects.create(name='Centro')
        self.patient = Patient.objects.create(name='Ana Souza', clinic=self.clinic)
        self.procedure = Procedure.objects.create(name='Limpeza', price=Decimal('180.00'))

    def test_clean_fills_names_and_amount(self):
        appointment = Appointment(
            clinic=self.clinic, patient=self.patient, procedure=self.procedure, appointment_date=date(2024, 3, 1)
        )
        appointment.full_clean()

        self.assertEqual(appointment.patient_name, 'Ana Souza')
        self.assertEqual(appointment.procedure_name, 'Limpeza')
        self.assertEqual(appointment.amount, Decimal('180.00'))

    def test_explicit_amount_wins(self):
        appointment = Appointment(
            clinic=self.clinic, patient=self.patient, procedure=self.procedure,
            appointment_date=date(2024, 3, 1), amount=Decimal('150'),
        )
        appointment.full_clean()
        self.assertEqual(appointment.amount, Decimal('150'))

    def test_patient_from_another_clinic(self):
        other = Clinic.objects.create(name='Sul')
        appointment = Appointment(clinic=other, patient=self.patient, appointment_date=date(2024, 3, 1))
        with self.assertRaises(ValidationError) as ctx:
            appointment.full_clean()
        self.assertIn('patient', ctx.exception.message_dict)

    def test_patient_name_is_required_without_patient(self):
        appointment = Appointment(clinic=self.clinic, appointment_date=date(2024, 3, 1))
        with self.assertRaises(ValidationError):
            appointment.full_clean()

    def test_format_time(self):
        self.assertEqual(format_time(None), '—')


class AppointmentViewsTest(TestCase):

    def setUp(self):
        self.centro = Clinic.objects.create(name='Centro')
        self.sul = Clinic.objects.create(name='Sul')
        self.staff = make_user('staff', Role.CLINIC_STAFF, clinic=self.centro)
        self.patient = Patient.objects.create(name='Ana Souza', clinic=self.centro)
        self.procedure = Procedure.objects.create(name='Limpeza', price=Decimal('180.00'))
        self.client.force_login(self.staff)

    def test_create_with_procedure_price(self):
        response = self.client.post(reverse('appointments:create'), {
            'patient': str(self.patient.pk),
            'procedure': str(self.procedure.pk),
            'appointment_date': '2024-03-01',
            'appointment_time': '14:30',
            'status': Appointment.SCHEDULED,
        })

        self.assertRedirects(response, reverse('appointments:list'), fetch_redirect_response=False)
        appointment = Appointment.objects.get()
        self.assertEqual(appointment.clinic, self.centro)
        self.assertEqual(appointment.amount, Decimal('180.00'))
        self.assertEqual(appointment.patient_name, 'Ana Souza')
        self.assertEqual(appointment.procedure_name, 'Limpeza')

    def test_walk_in_patient_name(self):
        response = self.client.post(reverse('appointments:create'), {
            'patient_name': 'Walk-in',
            'appointment_date': '2024-03-01',
            'status': Appointment.COMPLETED,
            'amount': '90.00',
        })
        self.assertRedirects(response, reverse('appointments:list'), fetch_redirect_response=False)
        self.assertEqual(Appointment.objects.get().patient_name, 'Walk-in')

    def test_changing_procedure_updates_stored_name(self):
        appointment = Appointment.objects.create(
            clinic=self.centro, patient=self.patient, patient_name='Ana Souza',
            procedure=self.procedure, procedure_name='Limpeza', appointment_date=date(2024, 3, 1),
            amount=Decimal('180'),
        )
        whitening = Procedure.objects.create(name='Clareamento', price=Decimal('800'))

        self.client.post(reverse('appointments:update', args=[appointment.pk]), {
            'patient': str(self.patient.pk),
            'procedure': str(whitening.pk),
            'appointment_date': '2024-03-01',
            'status': Appointment.COMPLETED,
            'amount': '800.00',
        })

        appointment.refresh_from_db()
        self.assertEqual(appointment.procedure_name, 'Clareamento')
        self.assertEqual(appointment.status, Appointment.COMPLETED)

    def test_patient_choices_are_scoped(self):
        Patient.objects.create(name='Bruno', clinic=self.sul)
        response = self.client.get(reverse('appointments:create'))
        form = response.context['form']
        self.assertIsInstance(form, AppointmentForm)
        self.assertEqual(list(form.fields['patient'].queryset), [self.patient])

    def test_missing_patient_rerenders(self):
        response = self.client.post(reverse('appointments:create'), {
            'appointment_date': '2024-03-01',
            'status': Appointment.SCHEDULED,
        })
        self.assertEqual(response.status_code, 200)
        self.assertIn('patient_name', response.context['form'].errors)
        self.assertFalse(Appointment.objects.exists())
