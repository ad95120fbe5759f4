# core/views.py
import logging

from django.contrib import messages
from django.views.generic import TemplateView

from reports.engine import ReportError, ReportService
from reports.formatting import format_marketing_summary
from reports.metrics import EMPTY_REPORT, MarketingSummary
from reports.views import ReportFilterMixin
from users.permissions import SessionRequiredMixin

logger = logging.getLogger(__name__)


class DashboardView(ReportFilterMixin, SessionRequiredMixin, TemplateView):
    """Marketing performance dashboard for the selected period and clinic"""
    template_name = 'core/dashboard.html'
    # Failing the dashboard check must not redirect back to the dashboard
    denied_url = 'users:login'

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context.update(self.get_filter_context())

        summary_unavailable = False
        try:
            summary = ReportService().compute_marketing(self.get_filters())
        except ReportError as e:
            logger.exception(f"Dashboard metrics failed for {self.session_context.username}: {e.message}")
            messages.error(self.request, 'Dashboard metrics are temporarily unavailable.')
            summary = MarketingSummary(report=EMPTY_REPORT)
            summary_unavailable = True

        context.update({
            'summary': summary,
            'report': summary.report,
            'formatted': format_marketing_summary(summary),
            'summary_unavailable': summary_unavailable,
        })
        return context
