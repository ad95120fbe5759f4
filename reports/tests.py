# reports/tests.py
"""
Tests for the report engine, filters, formatting and report views
"""
import json
from datetime import date, datetime, timedelta
from decimal import Decimal
from unittest import mock

from django.test import SimpleTestCase, TestCase, TransactionTestCase, override_settings
from django.urls import reverse
from django.utils import timezone, translation

from appointments.models import Appointment
from campaigns.models import MarketingCampaign
from clinics.models import Clinic
from core.datasource import DjangoDataSource, Predicate
from core.testing import InMemoryDataSource, make_user
from expenses.models import Expense
from patients.models import Patient
from users.models import Role
from users.session import SESSION_CONTEXT_KEY

from .coordinator import RequestGate, report_gate
from .engine import ReportError, ReportService, compute_report
from .fetchers import APPOINTMENTS, PATIENTS
from .filters import FilterContext, preset_range
from .formatting import format_count, format_currency, format_percentage, format_report
from .metrics import EMPTY_REPORT, Report, calculate_marketing_summary, calculate_report, percent, to_decimal

CLINIC_A = '11111111-1111-1111-1111-111111111111'
CLINIC_B = '22222222-2222-2222-2222-222222222222'


def sample_rows():
    return {
        'appointments': [
            {'id': 1, 'amount': Decimal('100'), 'status': 'completed', 'appointment_date': date(2024, 1, 5),
             'procedure_name': 'Cleaning', 'clinic_id': CLINIC_A},
            {'id': 2, 'amount': Decimal('200'), 'status': 'canceled', 'appointment_date': date(2024, 1, 10),
             'procedure_name': 'Whitening', 'clinic_id': CLINIC_A},
            {'id': 3, 'amount': None, 'status': 'scheduled', 'appointment_date': date(2024, 1, 31),
             'procedure_name': '', 'clinic_id': CLINIC_A},
        ],
        'expenses': [
            {'id': 1, 'amount': Decimal('50'), 'date': date(2024, 1, 15), 'clinic_id': CLINIC_A},
        ],
        'patients': [
            {'id': 1, 'created_at': datetime(2024, 1, 2, 9, 0), 'source': 'google_ads', 'clinic_id': CLINIC_A},
            {'id': 2, 'created_at': datetime(2024, 1, 31, 23, 30), 'source': 'referral', 'clinic_id': CLINIC_A},
        ],
        'marketing_campaigns': [
            {'id': 1, 'name': 'January', 'source': 'Google Ads', 'investment': Decimal('100'),
             'messages_received': 10, 'start_date': date(2024, 1, 1), 'clinic_id': CLINIC_A},
        ],
    }


JANUARY = FilterContext(date(2024, 1, 1), date(2024, 1, 31), CLINIC_A)


class MetricCalculatorTest(SimpleTestCase):
    """Pure reductions from rows to a Report"""

    def test_reference_example(self):
        rows = sample_rows()
        report = calculate_report(
            rows['appointments'], rows['expenses'], rows['patients'], rows['marketing_campaigns'],
        )

        self.assertEqual(report.total_revenue, Decimal('300'))
        self.assertEqual(report.total_expenses, Decimal('50'))
        self.assertEqual(report.total_patients, 2)
        self.assertEqual(report.total_appointments, 3)
        self.assertEqual(report.total_investment, Decimal('100'))
        self.assertEqual(report.total_leads, 10)
        self.assertEqual(report.roi, Decimal('200'))
        self.assertEqual(round(report.profit_margin, 2), Decimal('83.33'))

    def test_empty_rows_give_all_zero_report(self):
        report = calculate_report([], [], [], [])
        self.assertEqual(report, EMPTY_REPORT)
        self.assertEqual(report.profit_margin, 0)
        self.assertEqual(report.roi, 0)

    def test_zero_denominators_give_zero(self):
        report = calculate_report([], [{'amount': Decimal('80')}], [], [])
        self.assertEqual(report.profit_margin, 0)
        self.assertEqual(report.roi, 0)
        self.assertEqual(report.profit, Decimal('-80'))

    def test_revenue_without_investment_has_zero_roi(self):
        report = calculate_report([{'amount': Decimal('500')}], [], [], [])
        self.assertEqual(report.roi, 0)
        self.assertEqual(report.profit_margin, Decimal('100'))

    def test_negative_profit_gives_negative_margin(self):
        report = calculate_report([{'amount': Decimal('100')}], [{'amount': Decimal('150')}], [], [])
        self.assertEqual(report.profit_margin, Decimal('-50'))

    def test_missing_investment_and_leads_count_as_zero(self):
        campaigns = [
            {'investment': None, 'messages_received': None},
            {'investment': Decimal('40'), 'messages_received': 4},
        ]
        report = calculate_report([], [], [], campaigns)
        self.assertEqual(report.total_investment, Decimal('40'))
        self.assertEqual(report.total_leads, 4)

    def test_plain_numbers_are_summed_exactly(self):
        self.assertEqual(to_decimal(0.1) + to_decimal(0.2), Decimal('0.3'))
        self.assertEqual(to_decimal('abc'), 0)
        self.assertEqual(percent(1, 0), 0)

    def test_marketing_summary(self):
        rows = sample_rows()
        report = calculate_report(
            rows['appointments'], rows['expenses'], rows['patients'], rows['marketing_campaigns'],
        )
        summary = calculate_marketing_summary(report, rows['appointments'], rows['marketing_campaigns'])

        self.assertEqual(summary.ltv, Decimal('150'))
        self.assertEqual(summary.cac, Decimal('50'))
        self.assertEqual(summary.cost_per_lead, Decimal('10'))
        self.assertEqual(summary.roas, Decimal('3'))
        self.assertEqual(summary.no_show_rate, Decimal('50'))
        self.assertEqual(summary.attendance_rate, Decimal('50'))
        self.assertEqual(summary.net_revenue, Decimal('250'))
        self.assertEqual(summary.investment_by_source, (('Google Ads', Decimal('100')),))
        self.assertEqual(summary.revenue_by_procedure[0], ('Whitening', Decimal('200')))

    def test_marketing_summary_without_visits(self):
        summary = calculate_marketing_summary(EMPTY_REPORT, [], [])
        self.assertEqual(summary.no_show_rate, 0)
        self.assertEqual(summary.ltv, 0)
        self.assertEqual(summary.roas, 0)


class FilterContextTest(SimpleTestCase):

    def setUp(self):
        self.today = date(2024, 3, 20)

    def test_default_is_current_month(self):
        filters = FilterContext.from_query({}, today=self.today)
        self.assertEqual(filters.start_date, date(2024, 3, 1))
        self.assertEqual(filters.end_date, self.today)
        self.assertTrue(filters.is_all_clinics)

    def test_presets(self):
        self.assertEqual(preset_range('today', today=self.today), (self.today, self.today))
        self.assertEqual(preset_range('last_7_days', today=self.today), (date(2024, 3, 13), self.today))
        self.assertEqual(preset_range('last_30_days', today=self.today), (date(2024, 2, 19), self.today))
        self.assertEqual(preset_range('unknown', today=self.today), (date(2024, 3, 1), self.today))

    def test_custom_range_reorders_swapped_bounds(self):
        filters = FilterContext.from_query(
            {'date_range': 'custom', 'start_date': '2024-02-10', 'end_date': '2024-02-01'},
            today=self.today,
        )
        self.assertEqual(filters.start_date, date(2024, 2, 1))
        self.assertEqual(filters.end_date, date(2024, 2, 10))

    def test_open_ended_custom_range(self):
        filters = FilterContext.from_query({'start_date': '2024-02-10'}, today=self.today)
        self.assertEqual(filters.start_date, date(2024, 2, 10))
        self.assertIsNone(filters.end_date)

    def test_unparseable_dates_fall_back_to_preset(self):
        filters = FilterContext.from_query(
            {'date_range': 'custom', 'start_date': 'yesterday', 'end_date': '31/02/2024'},
            today=self.today,
        )
        self.assertEqual(filters.start_date, date(2024, 3, 1))

    def test_edited_dates_override_the_preset(self):
        filters = FilterContext.from_query(
            {'date_range': 'today', 'start_date': '2024-01-01', 'end_date': '2024-01-31'},
            today=self.today,
        )
        self.assertEqual((filters.start_date, filters.end_date), (date(2024, 1, 1), date(2024, 1, 31)))
        self.assertEqual(filters.range_name('today', today=self.today), 'custom')

    def test_dates_matching_the_preset_keep_it(self):
        filters = FilterContext.from_query(
            {'date_range': 'last_7_days', 'start_date': '2024-03-13', 'end_date': '2024-03-20'},
            today=self.today,
        )
        self.assertEqual((filters.start_date, filters.end_date), (date(2024, 3, 13), self.today))
        self.assertEqual(filters.range_name('last_7_days', today=self.today), 'last_7_days')

    def test_range_name_prefers_the_chosen_preset(self):
        # On the first of the month "today" and "this month" cover the same day
        first = date(2024, 3, 1)
        filters = FilterContext.for_range('today', today=first)
        self.assertEqual(filters.range_name('this_month', today=first), 'this_month')
        self.assertEqual(filters.range_name('today', today=first), 'today')
        self.assertEqual(filters.range_name(today=first), 'today')

    def test_all_clinics_and_absent_clinic_are_equal(self):
        self.assertEqual(FilterContext(clinic_id='all'), FilterContext(clinic_id=None))
        self.assertEqual(FilterContext(clinic_id='ALL'), FilterContext())
        self.assertFalse(FilterContext(clinic_id=CLINIC_A).is_all_clinics)

    def test_filters_are_hashable_and_immutable(self):
        self.assertEqual(len({JANUARY, FilterContext(date(2024, 1, 1), date(2024, 1, 31), CLINIC_A)}), 1)
        with self.assertRaises(AttributeError):
            JANUARY.clinic_id = CLINIC_B

    def test_fetcher_predicates(self):
        self.assertEqual(APPOINTMENTS.predicates(JANUARY), [
            Predicate.gte('appointment_date', date(2024, 1, 1)),
            Predicate.lte('appointment_date', date(2024, 1, 31)),
            Predicate.eq('clinic_id', CLINIC_A),
        ])
        self.assertEqual(PATIENTS.predicates(FilterContext()), [])


class ReportServiceTest(SimpleTestCase):
    """Report facade over an in-memory data source"""

    def test_compute_report_filters_by_range_and_clinic(self):
        rows = sample_rows()
        rows['appointments'].append(
            {'id': 4, 'amount': Decimal('999'), 'status': 'completed',
             'appointment_date': date(2024, 2, 1), 'clinic_id': CLINIC_A}
        )
        rows['expenses'].append({'id': 2, 'amount': Decimal('70'), 'date': date(2024, 1, 20), 'clinic_id': CLINIC_B})

        report = compute_report(JANUARY, data_source=InMemoryDataSource(rows))

        self.assertEqual(report.total_revenue, Decimal('300'))
        self.assertEqual(report.total_expenses, Decimal('50'))
        self.assertEqual(report.total_appointments, 3)

    def test_patient_created_late_on_end_date_is_counted(self):
        rows = sample_rows()
        report = ReportService(InMemoryDataSource(rows), max_workers=1).compute_report(JANUARY)
        self.assertEqual(report.total_patients, 2)

    def test_canceled_appointments_count_towards_revenue(self):
        rows = {'appointments': [
            {'amount': Decimal('120'), 'status': 'canceled', 'appointment_date': date(2024, 1, 3), 'clinic_id': CLINIC_A},
        ]}
        report = compute_report(JANUARY, data_source=InMemoryDataSource(rows))
        self.assertEqual(report.total_revenue, Decimal('120'))

    def test_all_clinics_matches_absent_clinic(self):
        data_source = InMemoryDataSource(sample_rows())
        service = ReportService(data_source)
        everything = service.compute_report(FilterContext(date(2024, 1, 1), date(2024, 1, 31), 'all'))
        absent = service.compute_report(FilterContext(date(2024, 1, 1), date(2024, 1, 31)))
        self.assertEqual(everything, absent)

    def test_unknown_clinic_gives_zero_report(self):
        filters = FilterContext(date(2024, 1, 1), date(2024, 1, 31), CLINIC_B)
        report = compute_report(filters, data_source=InMemoryDataSource(sample_rows()))
        self.assertEqual(report, EMPTY_REPORT)

    def test_unbounded_range(self):
        report = compute_report(FilterContext(), data_source=InMemoryDataSource(sample_rows()))
        self.assertEqual(report.total_appointments, 3)

    def test_sequential_and_concurrent_fetches_agree(self):
        rows = sample_rows()
        sequential = ReportService(InMemoryDataSource(rows), max_workers=1).compute_report(JANUARY)
        concurrent = ReportService(InMemoryDataSource(rows), max_workers=4).compute_report(JANUARY)
        self.assertEqual(sequential, concurrent)

    def test_every_table_is_read_once(self):
        data_source = InMemoryDataSource(sample_rows())
        ReportService(data_source, max_workers=4).compute_report(JANUARY)
        self.assertEqual(
            sorted(table for table, _ in data_source.calls),
            ['appointments', 'expenses', 'marketing_campaigns', 'patients'],
        )

    def test_any_failed_fetch_fails_the_report(self):
        for table in ('appointments', 'expenses', 'patients', 'marketing_campaigns'):
            for workers in (1, 4):
                with self.subTest(table=table, workers=workers):
                    service = ReportService(InMemoryDataSource(sample_rows(), failing={table}), max_workers=workers)
                    with self.assertRaises(ReportError) as ctx:
                        service.compute_report(JANUARY)
                    self.assertEqual(ctx.exception.source, table)

    def test_repeated_computation_is_deterministic(self):
        service = ReportService(InMemoryDataSource(sample_rows()))
        self.assertEqual(service.compute_report(JANUARY), service.compute_report(JANUARY))


class RequestGateTest(SimpleTestCase):

    def test_stale_result_is_discarded(self):
        gate = RequestGate()
        first = gate.issue('session')
        second = gate.issue('session')

        self.assertTrue(gate.publish('session', second))
        self.assertFalse(gate.publish('session', first))

    def test_sessions_are_independent(self):
        gate = RequestGate()
        a = gate.issue('a')
        gate.issue('b')
        self.assertTrue(gate.is_current('a', a))

    def test_forget(self):
        gate = RequestGate()
        ticket = gate.issue('a')
        gate.issue('b')
        gate.forget('a', 'missing')
        self.assertNotIn('a', gate)
        self.assertFalse(gate.is_current('a', ticket))
        self.assertEqual(len(gate), 1)

    def test_least_recently_used_keys_are_evicted(self):
        gate = RequestGate(max_keys=2)
        gate.issue('a')
        gate.issue('b')
        gate.issue('a')
        gate.issue('c')

        self.assertEqual(len(gate), 2)
        self.assertIn('a', gate)
        self.assertNotIn('b', gate)


@override_settings(CURRENCY_SYMBOL='R$')
class FormattingTest(SimpleTestCase):

    def test_currency_uses_locale_separators(self):
        with translation.override('pt-br'):
            self.assertEqual(format_currency(Decimal('1234.5')), 'R$ 1.234,50')
            self.assertEqual(format_currency(None), 'R$ 0,00')

    def test_currency_rounds_half_up(self):
        with translation.override('pt-br'):
            self.assertEqual(format_currency(Decimal('0.005')), 'R$ 0,01')
            self.assertEqual(format_currency(Decimal('2.675')), 'R$ 2,68')

    def test_percentage(self):
        with translation.override('pt-br'):
            self.assertEqual(format_percentage(Decimal('250') / Decimal('300') * 100), '83,3%')
            self.assertEqual(format_percentage(Decimal('200')), '200,0%')

    def test_count(self):
        with translation.override('pt-br'):
            self.assertEqual(format_count(12345), '12.345')

    def test_format_report_includes_profit(self):
        with translation.override('pt-br'):
            formatted = format_report(Report(total_revenue=Decimal('300'), total_expenses=Decimal('50')))
        self.assertEqual(formatted['profit'], 'R$ 250,00')
        self.assertEqual(formatted['roi'], '0,0%')


@override_settings(REPORT_FETCH_WORKERS=1)
class ReportViewsTest(TestCase):
    """Report pages against the database"""

    def setUp(self):
        self.clinic = Clinic.objects.create(name='Centro')
        self.other = Clinic.objects.create(name='Zona Sul')
        self.staff = make_user('staff', Role.CLINIC_STAFF, clinic=self.clinic)
        self.admin = make_user('boss', Role.ADMIN)
        self.today = timezone.localdate()

        Appointment.objects.create(clinic=self.clinic, patient_name='Ana', appointment_date=self.today,
                                   amount=Decimal('100'), status=Appointment.COMPLETED)
        Appointment.objects.create(clinic=self.other, patient_name='Bia', appointment_date=self.today,
                                   amount=Decimal('900'))
        Expense.objects.create(clinic=self.clinic, description='Rent', amount=Decimal('40'), date=self.today)
        Patient.objects.create(clinic=self.clinic, name='Ana')
        MarketingCampaign.objects.create(clinic=self.clinic, name='Ads', source='Google Ads',
                                         investment=Decimal('20'), messages_received=5, start_date=self.today)

    def get_data(self, **params):
        response = self.client.get(reverse('reports:data'), params)
        self.assertEqual(response.status_code, 200)
        return json.loads(response.content)

    def test_anonymous_user_is_sent_to_login(self):
        response = self.client.get(reverse('reports:dashboard'))
        self.assertEqual(response.status_code, 302)
        self.assertIn(reverse('users:login'), response['Location'])

    def test_admin_sees_all_clinics(self):
        self.client.force_login(self.admin)
        data = self.get_data()
        self.assertEqual(Decimal(data['report']['total_revenue']), Decimal('1000'))
        self.assertEqual(data['report']['total_appointments'], '2')

    def test_admin_can_filter_by_clinic(self):
        self.client.force_login(self.admin)
        data = self.get_data(clinic=str(self.other.pk))
        self.assertEqual(Decimal(data['report']['total_revenue']), Decimal('900'))

    def test_unknown_clinic_yields_zeros(self):
        self.client.force_login(self.admin)
        for clinic in ('not-a-uuid', '33333333-3333-3333-3333-333333333333'):
            data = self.get_data(clinic=clinic)
            self.assertEqual(Decimal(data['report']['total_revenue']), 0)
            self.assertEqual(data['report']['total_patients'], '0')

    def test_staff_only_sees_own_clinic(self):
        self.client.force_login(self.staff)
        data = self.get_data(clinic=str(self.other.pk))
        self.assertEqual(Decimal(data['report']['total_revenue']), Decimal('100'))
        self.assertEqual(Decimal(data['report']['total_expenses']), Decimal('40'))
        self.assertEqual(data['report']['total_patients'], '1')
        self.assertEqual(data['report']['total_leads'], '5')

    def test_dashboard_page_renders_formatted_report(self):
        self.client.force_login(self.staff)
        with translation.override('pt-br'):
            response = self.client.get(reverse('reports:dashboard'))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context['report'].total_revenue, Decimal('100'))
        self.assertFalse(response.context['report_unavailable'])

    def test_failed_fetch_shows_unavailable_report(self):
        self.client.force_login(self.staff)
        with mock.patch.object(ReportService, 'compute_report', side_effect=ReportError('down')):
            response = self.client.get(reverse('reports:dashboard'))
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.context['report_unavailable'])
        self.assertEqual(response.context['report'], EMPTY_REPORT)

    def test_overtaken_request_answers_conflict(self):
        self.client.force_login(self.staff)
        key = self.client.session.session_key

        def newer_request_arrives(filters):
            report_gate.issue(key)
            return EMPTY_REPORT

        with mock.patch.object(ReportService, 'compute_report', side_effect=newer_request_arrives):
            response = self.client.get(reverse('reports:data'))

        self.assertEqual(response.status_code, 409)
        self.assertEqual(json.loads(response.content), {'stale': True})

    def test_pdf_export(self):
        self.client.force_login(self.staff)
        response = self.client.get(reverse('reports:export_pdf'))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response['Content-Type'], 'application/pdf')

    def test_user_without_role_can_open_reports(self):
        self.client.force_login(make_user('viewer', clinic=self.clinic))
        response = self.client.get(reverse('reports:dashboard'))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context['report'].total_revenue, Decimal('100'))

    def test_staff_without_clinic_sees_no_clinic_data(self):
        self.client.force_login(make_user('drifter', Role.CLINIC_STAFF))
        data = self.get_data(clinic='all')
        self.assertEqual(Decimal(data['report']['total_revenue']), 0)
        self.assertEqual(data['report']['total_patients'], '0')

        response = self.client.get(reverse('reports:dashboard'))
        self.assertEqual(response.context['clinics'], [])

    def test_first_load_selects_the_default_range(self):
        self.client.force_login(self.staff)
        response = self.client.get(reverse('reports:dashboard'))
        self.assertEqual(response.context['date_range'], 'this_month')
        self.assertContains(response, '<option value="this_month" selected>')

    def test_edited_dates_replace_the_submitted_preset(self):
        Appointment.objects.create(clinic=self.clinic, patient_name='Caio', appointment_date=date(2025, 1, 15),
                                   amount=Decimal('70'), status=Appointment.COMPLETED)
        self.client.force_login(self.staff)
        params = {'date_range': 'today', 'start_date': '2025-01-01', 'end_date': '2025-01-31'}

        response = self.client.get(reverse('reports:dashboard'), params)

        filters = response.context['filters']
        self.assertEqual((filters.start_date, filters.end_date), (date(2025, 1, 1), date(2025, 1, 31)))
        self.assertEqual(response.context['date_range'], 'custom')
        self.assertEqual(response.context['report'].total_revenue, Decimal('70'))

        data = self.get_data(**params)
        self.assertEqual(data['filters']['start_date'], '2025-01-01')
        self.assertEqual(data['filters']['end_date'], '2025-01-31')
        self.assertEqual(Decimal(data['report']['total_revenue']), Decimal('70'))

    def test_logout_forgets_report_tickets(self):
        self.client.force_login(self.staff)
        self.get_data()
        key = self.client.session.session_key
        self.assertIn(key, report_gate)

        self.client.post(reverse('users:logout'))
        self.assertNotIn(key, report_gate)

    def test_idle_expiry_forgets_report_tickets(self):
        self.client.force_login(self.staff)
        self.get_data()
        key = self.client.session.session_key
        self.assertIn(key, report_gate)

        session = self.client.session
        context = session[SESSION_CONTEXT_KEY]
        context['last_activity'] = (timezone.now() - timedelta(hours=2)).isoformat()
        session[SESSION_CONTEXT_KEY] = context
        session.save()

        response = self.client.get(reverse('reports:data'))
        self.assertEqual(response.status_code, 302)
        self.assertNotIn(key, report_gate)


class ParallelFetchTest(TransactionTestCase):
    """Fetches on the thread pool read the same committed rows as a sequential run"""

    def setUp(self):
        self.clinic = Clinic.objects.create(name='Centro')
        other = Clinic.objects.create(name='Zona Sul')
        day = date(2024, 1, 10)
        for clinic, amount in ((self.clinic, '150'), (self.clinic, '200'), (other, '900')):
            Appointment.objects.create(clinic=clinic, patient_name='Ana', appointment_date=day,
                                       amount=Decimal(amount), status=Appointment.COMPLETED)
        Expense.objects.create(clinic=self.clinic, description='Rent', amount=Decimal('80'), date=day)
        Expense.objects.create(clinic=other, description='Rent', amount=Decimal('500'), date=day)
        Patient.objects.create(clinic=self.clinic, name='Ana')
        Patient.objects.create(clinic=self.clinic, name='Bia')
        Patient.objects.create(clinic=other, name='Caio')
        MarketingCampaign.objects.create(clinic=self.clinic, name='Ads', source='Google Ads',
                                         investment=Decimal('50'), messages_received=7, start_date=day)

    def test_parallel_fetch_matches_sequential(self):
        filters = FilterContext(clinic_id=str(self.clinic.pk))

        parallel = ReportService(max_workers=4).compute_report(filters)
        sequential = ReportService(max_workers=1).compute_report(filters)

        self.assertEqual(parallel, sequential)
        self.assertEqual(parallel.total_revenue, Decimal('350'))
        self.assertEqual(parallel.total_expenses, Decimal('80'))
        self.assertEqual(parallel.total_patients, 2)
        self.assertEqual(parallel.total_appointments, 2)
        self.assertEqual(parallel.total_leads, 7)

    def test_all_clinics_in_parallel(self):
        report = ReportService(max_workers=4).compute_report(FilterContext())
        self.assertEqual(report.total_revenue, Decimal('1250'))
        self.assertEqual(report.total_patients, 3)
        # The calling thread's connection stays usable after the pool closes its own
        self.assertEqual(Clinic.objects.count(), 2)


class DjangoDataSourceDateTest(TestCase):

    def test_timestamp_range_includes_whole_end_day(self):
        clinic = Clinic.objects.create(name='Centro')
        patient = Patient.objects.create(clinic=clinic, name='Late')
        late = timezone.make_aware(datetime(2024, 1, 31, 23, 30))
        Patient.objects.filter(pk=patient.pk).update(created_at=late)

        rows = DjangoDataSource().query('patients', [
            Predicate.gte('created_at', date(2024, 1, 1)),
            Predicate.lte('created_at', date(2024, 1, 31)),
        ])
        self.assertEqual(len(rows), 1)

        rows = DjangoDataSource().query('patients', [
            Predicate.lte('created_at', date(2024, 1, 31) - timedelta(days=1)),
        ])
        self.assertEqual(rows, [])
