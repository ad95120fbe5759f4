# core/tests.py
"""
Tests for the data source, the generic repository and CRUD views,
validation helpers, the audit trail and the dashboard
"""
from datetime import date
from decimal import Decimal
from io import StringIO

from django.core.exceptions import ValidationError
from django.core.management import call_command
from django.test import SimpleTestCase, TestCase, override_settings
from django.urls import reverse
from django.utils import timezone

from appointments.models import Appointment
from clinics.models import Clinic
from clinics.repository import ClinicRepository
from expenses.models import Expense
from expenses.repository import ExpenseRepository
from users.models import Role
from users.permissions import AccessDenied
from users.session import SessionContext

from .datasource import (
    BACKEND, INSERT, NOT_FOUND, UPDATE, VALIDATION, DjangoDataSource, Predicate, QueryError,
)
from .models import AuditLog, SystemSetting
from .testing import InMemoryDataSource, make_user
from .validation import (
    format_cpf, format_phone_number, is_valid_cpf, is_valid_phone_number, password_strength_errors,
    sanitize_input, validate_cpf,
)


def session_for(user):
    return SessionContext.for_user(user)


class ValidationTest(SimpleTestCase):

    def test_cpf(self):
        self.assertTrue(is_valid_cpf('529.982.247-25'))
        self.assertTrue(is_valid_cpf('52998224725'))
        self.assertTrue(is_valid_cpf(''))
        self.assertFalse(is_valid_cpf('529.982.247-26'))
        self.assertFalse(is_valid_cpf('111.111.111-11'))
        self.assertFalse(is_valid_cpf('1234'))
        with self.assertRaises(ValidationError):
            validate_cpf('123.456.789-00')

    def test_phone(self):
        self.assertTrue(is_valid_phone_number('(11) 98765-4321'))
        self.assertTrue(is_valid_phone_number('1132654321'))
        self.assertFalse(is_valid_phone_number('98765-4321'))

    def test_display_formats(self):
        self.assertEqual(format_cpf('52998224725'), '529.982.247-25')
        self.assertEqual(format_phone_number('11987654321'), '(11) 98765-4321')
        self.assertEqual(format_phone_number('1132654321'), '(11) 3265-4321')

    def test_sanitize_input(self):
        self.assertEqual(sanitize_input('Ana<script>alert(1)</script>'), 'Ana')
        self.assertEqual(sanitize_input('javascript:go()'), 'go()')
        self.assertEqual(sanitize_input('<b onclick=x>hi</b>'), '<b x>hi</b>')

    def test_password_strength(self):
        self.assertEqual(password_strength_errors('Str0ng!pass'), [])
        self.assertEqual(len(password_strength_errors('weak')), 4)


class DjangoDataSourceTest(TestCase):

    def setUp(self):
        self.source = DjangoDataSource()
        self.clinic = Clinic.objects.create(name='Centro')

    def test_query_with_predicates(self):
        Expense.objects.create(clinic=self.clinic, description='Rent', amount=Decimal('10'), date=date(2024, 1, 5))
        Expense.objects.create(clinic=self.clinic, description='Ads', amount=Decimal('20'), date=date(2024, 2, 5))

        rows = self.source.query('expenses', [
            Predicate.gte('date', date(2024, 1, 1)),
            Predicate.lte('date', date(2024, 1, 31)),
            Predicate.eq('clinic_id', str(self.clinic.pk)),
        ], fields=('description', 'amount'))

        self.assertEqual(rows, [{'description': 'Rent', 'amount': Decimal('10.00')}])

    def test_value_of_wrong_type_matches_nothing(self):
        self.assertEqual(self.source.query('expenses', [Predicate.eq('clinic_id', 'all-of-them')]), [])

    def test_unknown_table_or_field_raises(self):
        with self.assertRaises(QueryError):
            self.source.query('invoices')
        with self.assertRaises(QueryError):
            self.source.query('expenses', [Predicate.eq('no_such_field', 1)])

    def test_unsupported_operator(self):
        with self.assertRaises(ValueError):
            Predicate('amount', 'gt', 1)

    def test_insert_and_update(self):
        result = self.source.write('clinics', INSERT, {'name': 'Norte'})
        self.assertTrue(result.ok)

        result = self.source.write('clinics', UPDATE, {'name': 'Norte 2'}, key=result.record['id'])
        self.assertTrue(result.ok)
        self.assertEqual(Clinic.objects.get(pk=result.record['id']).name, 'Norte 2')

    def test_validation_failure_is_returned(self):
        result = self.source.write('expenses', INSERT, {
            'clinic_id': self.clinic.pk, 'description': 'Bad', 'amount': Decimal('-1'), 'date': date(2024, 1, 1),
        })
        self.assertFalse(result.ok)
        self.assertEqual(result.error_kind, VALIDATION)
        self.assertIn('amount', result.errors)
        self.assertFalse(Expense.objects.exists())

    def test_update_of_missing_row(self):
        result = self.source.write('clinics', UPDATE, {'name': 'X'}, key='00000000-0000-0000-0000-000000000000')
        self.assertEqual(result.error_kind, NOT_FOUND)

    def test_unknown_table_write(self):
        self.assertEqual(self.source.write('invoices', INSERT, {}).error_kind, BACKEND)


class InMemoryDataSourceTest(SimpleTestCase):

    def test_write_then_query(self):
        source = InMemoryDataSource()
        created = source.write('clinics', INSERT, {'name': 'Centro'})
        source.write('clinics', UPDATE, {'name': 'Centro 2'}, key=created.record['id'])
        self.assertEqual(source.query('clinics', [Predicate.eq('name', 'Centro 2')])[0]['id'], created.record['id'])
        self.assertEqual(source.write('clinics', UPDATE, {}, key='missing').error_kind, NOT_FOUND)


class RepositoryTest(TestCase):

    def setUp(self):
        self.centro = Clinic.objects.create(name='Centro')
        self.sul = Clinic.objects.create(name='Sul')
        self.admin = session_for(make_user('boss', Role.ADMIN))
        self.staff = session_for(make_user('staff', Role.CLINIC_STAFF, clinic=self.centro))
        self.viewer = session_for(make_user('viewer', Role.READ_ONLY, clinic=self.centro))
        Expense.objects.create(clinic=self.centro, description='Rent', amount=Decimal('10'), date=date(2024, 1, 5))
        Expense.objects.create(clinic=self.sul, description='Supplies', amount=Decimal('20'), date=date(2024, 1, 6))

    def test_admin_sees_every_clinic(self):
        self.assertEqual(len(ExpenseRepository().list(self.admin)), 2)

    def test_staff_sees_only_own_clinic(self):
        rows = ExpenseRepository().list(self.staff)
        self.assertEqual([r['description'] for r in rows], ['Rent'])

    def test_staff_cannot_fetch_other_clinic_row(self):
        other = Expense.objects.get(description='Supplies')
        self.assertIsNone(ExpenseRepository().get(self.staff, other.pk))

    def test_search(self):
        rows = ExpenseRepository().list(self.admin, search='supp')
        self.assertEqual([r['description'] for r in rows], ['Supplies'])

    def test_staff_writes_into_own_clinic(self):
        result = ExpenseRepository().create(self.staff, {
            'clinic': self.sul, 'description': 'Gloves', 'amount': Decimal('5'), 'date': date(2024, 1, 7),
        })
        self.assertTrue(result.ok)
        expense = Expense.objects.get(description='Gloves')
        self.assertEqual(expense.clinic, self.centro)
        self.assertEqual(expense.created_by.username, 'staff')

    def test_staff_cannot_update_other_clinic_row(self):
        other = Expense.objects.get(description='Supplies')
        result = ExpenseRepository().update(self.staff, other.pk, {'description': 'Hacked'})
        self.assertEqual(result.error_kind, NOT_FOUND)
        other.refresh_from_db()
        self.assertEqual(other.description, 'Supplies')

    def test_read_only_can_list_but_not_write(self):
        self.assertEqual(len(ExpenseRepository().list(self.viewer)), 1)
        with self.assertRaises(AccessDenied):
            ExpenseRepository().create(self.viewer, {'description': 'Nope'})

    def test_staff_without_clinic_is_not_unscoped(self):
        drifter = session_for(make_user('drifter', Role.CLINIC_STAFF))
        rent = Expense.objects.get(description='Rent')

        self.assertEqual(ExpenseRepository().list(drifter), [])
        self.assertIsNone(ExpenseRepository().get(drifter, rent.pk))
        with self.assertRaises(AccessDenied):
            ExpenseRepository().create(drifter, {
                'clinic': self.centro, 'description': 'Gloves', 'amount': Decimal('5'), 'date': date(2024, 1, 7),
            })
        self.assertEqual(Expense.objects.count(), 2)

    def test_admin_only_table_denies_before_validation(self):
        # An invalid payload still gets the access error, not a validation error
        with self.assertRaises(AccessDenied):
            ClinicRepository().create(self.staff, {'name': ''})
        with self.assertRaises(AccessDenied):
            ClinicRepository().list(self.staff)

    def test_failed_write_leaves_data_unchanged(self):
        result = ExpenseRepository().create(self.admin, {
            'clinic': self.centro, 'description': 'Bad', 'amount': Decimal('-3'), 'date': date(2024, 1, 1),
        })
        self.assertFalse(result.ok)
        self.assertEqual(Expense.objects.count(), 2)

    def test_successful_write_is_audited(self):
        result = ExpenseRepository().create(self.admin, {
            'clinic': self.centro, 'description': 'Chair', 'amount': Decimal('300'), 'date': date(2024, 1, 1),
        })
        entry = AuditLog.objects.get(action=AuditLog.CREATE, table='expenses')
        self.assertEqual(entry.object_id, str(result.record['id']))
        self.assertEqual(entry.object_repr, 'Chair')
        self.assertEqual(entry.changes['clinic'], 'Centro')

    def test_repository_over_in_memory_source(self):
        source = InMemoryDataSource({'expenses': [
            {'id': 'a', 'description': 'Rent', 'clinic_id': str(self.centro.pk)},
            {'id': 'b', 'description': 'Ads', 'clinic_id': str(self.sul.pk)},
        ]})
        rows = ExpenseRepository(data_source=source).list(self.staff)
        self.assertEqual([r['id'] for r in rows], ['a'])


class ResourceViewsTest(TestCase):
    """Generic list and form views, exercised through the expenses screens"""

    def setUp(self):
        self.centro = Clinic.objects.create(name='Centro')
        self.sul = Clinic.objects.create(name='Sul')
        self.staff = make_user('staff', Role.CLINIC_STAFF, clinic=self.centro)
        self.viewer = make_user('viewer', Role.READ_ONLY, clinic=self.centro)
        self.expense = Expense.objects.create(
            clinic=self.centro, description='Rent', amount=Decimal('10'), date=date(2024, 1, 5)
        )

    def expense_data(self, **overrides):
        data = {
            'clinic': str(self.sul.pk),
            'description': 'Gloves',
            'amount': '12.50',
            'date': '2024-01-10',
            'category': 'supplies',
        }
        data.update(overrides)
        return data

    def test_list_shows_rows_and_create_button(self):
        self.client.force_login(self.staff)
        response = self.client.get(reverse('expenses:list'))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context['total_count'], 1)
        self.assertTrue(response.context['can_write'])

    def test_read_only_list_hides_write_actions(self):
        self.client.force_login(self.viewer)
        response = self.client.get(reverse('expenses:list'))
        self.assertEqual(response.status_code, 200)
        self.assertFalse(response.context['can_write'])

    def test_create_redirects_to_refetched_list(self):
        self.client.force_login(self.staff)
        response = self.client.post(reverse('expenses:create'), self.expense_data())
        self.assertRedirects(response, reverse('expenses:list'), fetch_redirect_response=False)
        self.assertEqual(Expense.objects.get(description='Gloves').clinic, self.centro)

    def test_update(self):
        self.client.force_login(self.staff)
        url = reverse('expenses:update', args=[self.expense.pk])
        response = self.client.get(url)
        self.assertEqual(response.context['form'].initial['description'], 'Rent')

        response = self.client.post(url, self.expense_data(description='Rent (March)'))
        self.assertRedirects(response, reverse('expenses:list'), fetch_redirect_response=False)
        self.expense.refresh_from_db()
        self.assertEqual(self.expense.description, 'Rent (March)')
        self.assertEqual(Expense.objects.count(), 1)

    def test_invalid_amount_rerenders_form(self):
        self.client.force_login(self.staff)
        response = self.client.post(reverse('expenses:create'), self.expense_data(amount='-5'))
        self.assertEqual(response.status_code, 200)
        self.assertIn('amount', response.context['form'].errors)
        self.assertEqual(Expense.objects.count(), 1)

    def test_read_only_write_is_denied(self):
        self.client.force_login(self.viewer)
        response = self.client.post(reverse('expenses:create'), self.expense_data())
        self.assertRedirects(response, reverse('core:dashboard'), fetch_redirect_response=False)
        self.assertEqual(Expense.objects.count(), 1)

    def test_other_clinic_row_is_not_found(self):
        other = Expense.objects.create(clinic=self.sul, description='Sul', amount=Decimal('1'), date=date(2024, 1, 1))
        self.client.force_login(self.staff)
        response = self.client.get(reverse('expenses:update', args=[other.pk]))
        self.assertEqual(response.status_code, 404)

    def test_staff_cannot_open_admin_screens(self):
        self.client.force_login(self.staff)
        for name in ('clinics:list', 'clinics:create', 'procedures:list'):
            response = self.client.get(reverse(name))
            self.assertRedirects(response, reverse('core:dashboard'), fetch_redirect_response=False)

    def test_free_text_is_sanitized(self):
        self.client.force_login(self.staff)
        self.client.post(reverse('expenses:create'), self.expense_data(description='Tape<script>x()</script>'))
        self.assertTrue(Expense.objects.filter(description='Tape').exists())


@override_settings(REPORT_FETCH_WORKERS=1)
class DashboardViewTest(TestCase):

    def setUp(self):
        self.clinic = Clinic.objects.create(name='Centro')
        self.staff = make_user('staff', Role.CLINIC_STAFF, clinic=self.clinic)

    def test_dashboard_shows_marketing_kpis(self):
        today = timezone.localdate()
        Appointment.objects.create(clinic=self.clinic, patient_name='Ana', appointment_date=today,
                                   amount=Decimal('100'), status=Appointment.COMPLETED)
        Appointment.objects.create(clinic=self.clinic, patient_name='Bia', appointment_date=today,
                                   amount=Decimal('50'), status=Appointment.CANCELED)

        self.client.force_login(self.staff)
        response = self.client.get(reverse('core:dashboard'))

        self.assertEqual(response.status_code, 200)
        summary = response.context['summary']
        self.assertEqual(summary.report.total_revenue, Decimal('150'))
        self.assertEqual(summary.no_show_rate, Decimal('50'))
        labels = [item['label'] for item in response.context['nav_items']]
        self.assertNotIn('Clinics', labels)
        self.assertIn('Reports', labels)

    def test_clinic_name_setting(self):
        SystemSetting.set_setting('clinic_name', 'Sorriso Feliz')
        self.client.force_login(self.staff)
        response = self.client.get(reverse('core:dashboard'))
        self.assertEqual(response.context['CLINIC_NAME'], 'Sorriso Feliz')


class HealthCheckTest(TestCase):

    def test_health_check(self):
        response = self.client.get(reverse('core:health_check'))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['status'], 'ok')


class SystemSettingTest(TestCase):

    def test_choice_setting_falls_back_on_unknown_value(self):
        choices = {'today': 'Today', 'this_month': 'This month'}
        self.assertEqual(SystemSetting.get_choice_setting('reports_default_range', choices, 'this_month'), 'this_month')

        SystemSetting.set_setting('reports_default_range', 'today')
        self.assertEqual(SystemSetting.get_choice_setting('reports_default_range', choices, 'this_month'), 'today')

        SystemSetting.set_setting('reports_default_range', 'last_decade')
        self.assertEqual(SystemSetting.get_choice_setting('reports_default_range', choices, 'this_month'), 'this_month')

    def test_initialize_settings_keeps_existing_values(self):
        SystemSetting.set_setting('clinic_name', 'Sorriso Feliz')

        call_command('initialize_settings', stdout=StringIO())
        self.assertEqual(SystemSetting.get_setting('clinic_name'), 'Sorriso Feliz')
        self.assertEqual(SystemSetting.get_setting('reports_default_range'), 'this_month')

        call_command('initialize_settings', reset=True, stdout=StringIO())
        self.assertEqual(SystemSetting.get_setting('clinic_name'), 'Clinic Dashboard')

    def test_setup_initial_data(self):
        call_command('setup_initial_data', admin_password='Str0ng!pass', stdout=StringIO())
        self.assertEqual(Role.objects.count(), 3)
        self.assertTrue(self.client.login(username='admin', password='Str0ng!pass'))
