# reports/views.py
import logging
from dataclasses import replace

from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.http import HttpResponse, JsonResponse
from django.shortcuts import redirect
from django.template.loader import render_to_string
from django.utils import timezone
from django.views import View
from django.views.generic import TemplateView

from xhtml2pdf import pisa

from core.datasource import DjangoDataSource, QueryError
from core.models import SystemSetting
from users.permissions import AccessDenied, SessionRequiredMixin, require_session

from .coordinator import gate_key, report_gate
from .engine import ReportError, ReportService
from .filters import ALL_CLINICS, DATE_RANGE_CHOICES, DEFAULT_RANGE, UNASSIGNED_CLINIC, FilterContext
from .formatting import format_report
from .metrics import EMPTY_REPORT

logger = logging.getLogger(__name__)


def default_range():
    """Preset used when the request names none"""
    return SystemSetting.get_choice_setting(
        'reports_default_range', dict(DATE_RANGE_CHOICES), DEFAULT_RANGE
    )


def get_filters(request, session):
    """
    Filter context for a request.

    Non-admins only ever see their own clinic, whatever the query string
    says; one with no clinic sees none.
    """
    filters = FilterContext.from_query(request.GET, default_range=default_range())
    if not session.is_admin:
        filters = replace(filters, clinic_id=session.clinic_id or UNASSIGNED_CLINIC)
    return filters


def clinic_choices(session):
    """Clinics the session may pick in the filter bar"""
    if not session.is_admin:
        return []
    try:
        return DjangoDataSource().query('clinics', fields=('id', 'name'), ordering=('name',))
    except QueryError:
        logger.exception("Could not load clinic choices")
        return []


class ReportFilterMixin:
    """Filter bar context shared by the reports page and the dashboard"""

    def get_filters(self):
        if not hasattr(self, '_filters'):
            self._filters = get_filters(self.request, self.session_context)
        return self._filters

    def get_filter_context(self):
        filters = self.get_filters()
        chosen = self.request.GET.get('date_range') or default_range()
        return {
            'filters': filters,
            'filter_query': filters.to_query(),
            'date_range': filters.range_name(chosen),
            'date_range_choices': DATE_RANGE_CHOICES,
            'clinics': clinic_choices(self.session_context),
            'selected_clinic': str(filters.clinic_id or ALL_CLINICS),
        }


class ReportsView(ReportFilterMixin, SessionRequiredMixin, TemplateView):
    """
    Report dashboard: revenue, expenses, patients, appointments, marketing
    investment and leads for the selected period and clinic.
    """
    template_name = 'reports/reports_dashboard.html'

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context.update(self.get_filter_context())

        filters = self.get_filters()
        report_unavailable = False
        try:
            report = ReportService().compute_report(filters)
        except ReportError as e:
            logger.exception(f"Report failed for {self.session_context.username}: {e.message}")
            messages.error(self.request, 'The report could not be loaded. Please try again.')
            report = EMPTY_REPORT
            report_unavailable = True

        context.update({
            'report': report,
            'formatted': format_report(report),
            'report_unavailable': report_unavailable,
        })
        return context


class ReportDataView(SessionRequiredMixin, View):
    """
    JSON report for the current filters.

    Only the most recent request of a session may publish; an older request
    that finishes later answers 409 with ``{"stale": true}``.
    """

    def get(self, request, *args, **kwargs):
        session = self.session_context
        filters = get_filters(request, session)
        key = gate_key(request, session.user_id)
        ticket = report_gate.issue(key)

        try:
            report = ReportService().compute_report(filters)
        except ReportError as e:
            logger.exception(f"Report data failed for {session.username}: {e.message}")
            if not report_gate.is_current(key, ticket):
                return JsonResponse({'stale': True}, status=409)
            return JsonResponse({'error': 'The report could not be loaded.'}, status=503)

        if not report_gate.publish(key, ticket):
            return JsonResponse({'stale': True}, status=409)

        return JsonResponse({
            'stale': False,
            'filters': filters.to_query(),
            'report': {name: str(value) for name, value in report.to_dict().items()},
            'formatted': format_report(report),
        })


@login_required
def export_reports_pdf(request):
    """Export the report for the current filters to PDF"""
    session = getattr(request, 'session_context', None)
    try:
        require_session(session)
    except AccessDenied:
        messages.error(request, 'Please sign in again to export reports.')
        return redirect('core:dashboard')

    filters = get_filters(request, session)
    try:
        report = ReportService().compute_report(filters)
    except ReportError as e:
        logger.exception(f"PDF export failed: {e.message}")
        messages.error(request, 'The report could not be loaded. Please try again.')
        return redirect('reports:dashboard')

    context = {
        'filters': filters,
        'report': report,
        'formatted': format_report(report),
        'generated_at': timezone.now(),
        'generated_by': session.username,
        'clinic_name': SystemSetting.get_setting('clinic_name', 'Clinic Dashboard'),
    }

    html_string = render_to_string('reports/reports_pdf.html', context)

    response = HttpResponse(content_type='application/pdf')
    filename = f'Report_{filters.start_date or "start"}_{filters.end_date or "end"}.pdf'
    response['Content-Disposition'] = f'inline; filename="{filename}"'

    pisa_status = pisa.CreatePDF(html_string, dest=response)

    if pisa_status.err:
        logger.error(f"PDF generation reported {pisa_status.err} errors")
        messages.error(request, 'Error generating PDF. Please try again.')
        return redirect('reports:dashboard')

    return response
