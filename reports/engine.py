# reports/engine.py
"""
Report facade: fans the four fetches out, fans them back in and hands the
rows to the metric calculator. Either every fetch succeeds and a complete
report comes back, or ``ReportError`` is raised.
"""
import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed

from django.conf import settings
from django.db import connection

from core.datasource import DjangoDataSource, QueryError

from .fetchers import CAMPAIGNS, FETCHERS
from .metrics import calculate_marketing_summary, calculate_report

logger = logging.getLogger(__name__)

DEFAULT_FETCH_WORKERS = 4


class ReportError(Exception):
    """A report could not be computed; no partial result exists"""

    def __init__(self, message, filters=None, source=None):
        self.message = message
        self.filters = filters
        self.source = source
        super().__init__(message)


class ReportService:
    """
    Computes reports against a data source.

    With more than one worker the fetches run on a thread pool; with one
    they run in the calling thread.
    """

    def __init__(self, data_source=None, max_workers=None, fetchers=FETCHERS):
        self.data_source = data_source or DjangoDataSource()
        if max_workers is None:
            max_workers = getattr(settings, 'REPORT_FETCH_WORKERS', DEFAULT_FETCH_WORKERS)
        self.max_workers = max(1, int(max_workers))
        self.fetchers = fetchers

    def _run_fetch(self, fetcher, filters, caller):
        try:
            return fetcher.fetch(self.data_source, filters)
        finally:
            # Pool threads open their own connection; release it
            if threading.current_thread() is not caller:
                connection.close()

    def fetch_all(self, filters):
        """
        Run every fetcher and return {name: rows}.

        Raises:
            ReportError: when any fetch fails; pending fetches are cancelled
        """
        if self.max_workers == 1:
            try:
                return {f.name: f.fetch(self.data_source, filters) for f in self.fetchers}
            except QueryError as e:
                raise ReportError(f'Could not load {e.table}.', filters, e.table) from e

        caller = threading.current_thread()
        results = {}
        with ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix='report-fetch') as executor:
            future_to_fetcher = {
                executor.submit(self._run_fetch, fetcher, filters, caller): fetcher
                for fetcher in self.fetchers
            }
            for future in as_completed(future_to_fetcher):
                fetcher = future_to_fetcher[future]
                try:
                    results[fetcher.name] = future.result()
                except QueryError as e:
                    for pending in future_to_fetcher:
                        pending.cancel()
                    raise ReportError(f'Could not load {e.table}.', filters, e.table) from e
        return results

    def compute_report(self, filters):
        rows = self.fetch_all(filters)
        report = calculate_report(
            rows['appointments'], rows['expenses'], rows['patients'], rows['campaigns'],
        )
        logger.info(
            f"Report computed for {filters.start_date}..{filters.end_date} "
            f"clinic={filters.clinic_id or 'all'}: {report.total_appointments} appointments"
        )
        return report

    def compute_marketing(self, filters):
        """Report plus the marketing KPIs, from a single round of fetches"""
        rows = self.fetch_all(filters)
        report = calculate_report(
            rows['appointments'], rows['expenses'], rows['patients'], rows[CAMPAIGNS.name],
        )
        return calculate_marketing_summary(report, rows['appointments'], rows[CAMPAIGNS.name])


def compute_report(filters, data_source=None):
    return ReportService(data_source=data_source).compute_report(filters)
