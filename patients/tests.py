# patients/tests.py
from django.core.exceptions import ValidationError
from django.test import TestCase
from django.urls import reverse

from clinics.models import Clinic
from core.testing import make_user
from users.models import Role
from users.session import SessionContext

from .forms import AssignmentForm, PatientForm, clean_name
from .models import Patient, PatientAssignment
from .repository import AssignmentRepository


class PatientFormTest(TestCase):

    def setUp(self):
        self.clinic = Clinic.objects.create(name='Centro')

    def test_documents_are_formatted(self):
        form = PatientForm(data={
            'name': '  Ana   Souza ',
            'clinic': str(self.clinic.pk),
            'cpf': '52998224725',
            'phone': '11987654321',
        })
        self.assertTrue(form.is_valid(), form.errors)
        self.assertEqual(form.cleaned_data['name'], 'Ana Souza')
        self.assertEqual(form.cleaned_data['cpf'], '529.982.247-25')
        self.assertEqual(form.cleaned_data['phone'], '(11) 98765-4321')

    def test_invalid_documents(self):
        form = PatientForm(data={'name': 'Ana', 'cpf': '123.456.789-00', 'phone': '1234'})
        self.assertFalse(form.is_valid())
        self.assertIn('cpf', form.errors)
        self.assertIn('phone', form.errors)

    def test_clean_name(self):
        with self.assertRaises(ValidationError):
            clean_name('A')
        with self.assertRaises(ValidationError):
            clean_name('12345')

    def test_staff_sees_only_own_clinic_choice(self):
        Clinic.objects.create(name='Sul')
        staff = make_user('staff', Role.CLINIC_STAFF, clinic=self.clinic)
        form = PatientForm(session=SessionContext.for_user(staff))
        self.assertEqual(list(form.fields['clinic'].queryset), [self.clinic])
        self.assertTrue(form.fields['clinic'].disabled)


class PatientAssignmentTest(TestCase):

    def setUp(self):
        self.centro = Clinic.objects.create(name='Centro')
        self.sul = Clinic.objects.create(name='Sul')
        self.admin = make_user('boss', Role.ADMIN)
        self.dentist = make_user('dentist', Role.CLINIC_STAFF, clinic=self.centro)
        self.outsider = make_user('outsider', Role.CLINIC_STAFF, clinic=self.sul)
        self.patient = Patient.objects.create(name='Ana', clinic=self.centro)
        self.session = SessionContext.for_user(self.admin)
        self.repository = AssignmentRepository()

    def patient_record(self):
        return {'id': self.patient.pk, 'clinic_id': self.patient.clinic_id}

    def test_assign(self):
        result = self.repository.assign(self.session, self.patient_record(), self.dentist.pk, PatientAssignment.SPECIALIST)

        self.assertTrue(result.ok, result.errors)
        assignment = PatientAssignment.objects.get()
        self.assertEqual(assignment.clinic, self.centro)
        self.assertEqual(assignment.assigned_by, self.admin)
        self.assertEqual(len(self.repository.active_for(self.session, self.patient.pk)), 1)

    def test_staff_from_another_clinic_is_rejected(self):
        result = self.repository.assign(self.session, self.patient_record(), self.outsider.pk, PatientAssignment.PRIMARY_CARE)
        self.assertFalse(result.ok)
        self.assertIn('staff', result.errors)

    def test_one_active_assignment_per_staff_member(self):
        self.repository.assign(self.session, self.patient_record(), self.dentist.pk, PatientAssignment.PRIMARY_CARE)
        result = self.repository.assign(self.session, self.patient_record(), self.dentist.pk, PatientAssignment.CONSULTING)
        self.assertFalse(result.ok)
        self.assertEqual(PatientAssignment.objects.count(), 1)

    def test_reassign_after_deactivation(self):
        first = self.repository.assign(self.session, self.patient_record(), self.dentist.pk, PatientAssignment.PRIMARY_CARE)
        self.assertTrue(self.repository.deactivate(self.session, first.record['id']).ok)

        second = self.repository.assign(self.session, self.patient_record(), self.dentist.pk, PatientAssignment.CONSULTING)

        self.assertTrue(second.ok)
        self.assertEqual(PatientAssignment.objects.count(), 2)
        self.assertEqual(PatientAssignment.objects.filter(is_active=True).count(), 1)

    def test_form_offers_only_clinic_staff(self):
        form = AssignmentForm(clinic_id=self.centro.pk)
        self.assertEqual(list(form.fields['staff'].queryset), [self.dentist])
        self.assertFalse(AssignmentForm(clinic_id=None).fields['staff'].queryset.exists())


class PatientViewsTest(TestCase):

    def setUp(self):
        self.centro = Clinic.objects.create(name='Centro')
        self.sul = Clinic.objects.create(name='Sul')
        self.staff = make_user('staff', Role.CLINIC_STAFF, clinic=self.centro)
        self.patient = Patient.objects.create(name='Ana', clinic=self.centro)
        Patient.objects.create(name='Bruno', clinic=self.sul)

    def test_list_is_scoped_and_links_to_assignments(self):
        self.client.force_login(self.staff)
        response = self.client.get(reverse('patients:list'))

        rows = response.context['rows']
        self.assertEqual(len(rows), 1)
        self.assertEqual(rows[0]['actions'][0]['url'], reverse('patients:assignments', args=[self.patient.pk]))

    def test_create_records_creator_and_clinic(self):
        self.client.force_login(self.staff)
        response = self.client.post(reverse('patients:create'), {
            'name': 'Carla', 'clinic': str(self.sul.pk), 'source': 'instagram_ads',
        })
        self.assertRedirects(response, reverse('patients:list'), fetch_redirect_response=False)
        patient = Patient.objects.get(name='Carla')
        self.assertEqual(patient.clinic, self.centro)
        self.assertEqual(patient.created_by, self.staff)

    def test_assign_and_remove_staff(self):
        self.client.force_login(self.staff)
        url = reverse('patients:assignments', args=[self.patient.pk])

        response = self.client.get(url)
        self.assertEqual(list(response.context['form'].fields['staff'].queryset), [self.staff])

        response = self.client.post(url, {'staff': self.staff.pk, 'assignment_type': PatientAssignment.PRIMARY_CARE})
        self.assertRedirects(response, url, fetch_redirect_response=False)
        assignment = PatientAssignment.objects.get()

        response = self.client.post(reverse('patients:deactivate_assignment', args=[assignment.pk]))
        self.assertRedirects(response, url, fetch_redirect_response=False)
        assignment.refresh_from_db()
        self.assertFalse(assignment.is_active)

    def test_read_only_cannot_assign(self):
        self.client.force_login(make_user('viewer', Role.READ_ONLY, clinic=self.centro))
        url = reverse('patients:assignments', args=[self.patient.pk])

        response = self.client.get(url)
        self.assertFalse(response.context['can_write'])

        self.client.post(url, {'staff': self.staff.pk, 'assignment_type': PatientAssignment.PRIMARY_CARE})
        self.assertFalse(PatientAssignment.objects.exists())

    def test_other_clinic_patient_is_not_found(self):
        self.client.force_login(self.staff)
        other = Patient.objects.get(name='Bruno')
        response = self.client.get(reverse('patients:assignments', args=[other.pk]))
        self.assertEqual(response.status_code, 404)
