# reports/formatting.py
"""
Display formatting for report values.

Numbers are rounded half-up to the displayed precision and then rendered
with the active locale's separators (``1.234,56`` under pt-br).
"""
from decimal import ROUND_HALF_UP, Decimal

from django.conf import settings
from django.utils import formats

from .metrics import to_decimal

DEFAULT_CURRENCY_SYMBOL = 'R$'


def quantize(value, places=2):
    exponent = Decimal(1).scaleb(-places)
    return to_decimal(value).quantize(exponent, rounding=ROUND_HALF_UP)


def format_number(value, places=2):
    return formats.number_format(quantize(value, places), decimal_pos=places, use_l10n=True, force_grouping=True)


def format_currency(value):
    """Format an amount with the configured currency symbol, e.g. R$ 1.234,56"""
    symbol = getattr(settings, 'CURRENCY_SYMBOL', DEFAULT_CURRENCY_SYMBOL)
    return f"{symbol} {format_number(value, 2)}"


def format_percentage(value, places=1):
    return f"{format_number(value, places)}%"


def format_count(value):
    return format_number(value or 0, 0)


def format_ratio(value):
    """Multipliers such as ROAS, e.g. 3,25x"""
    return f"{format_number(value, 2)}x"


def format_date(value):
    if not value:
        return '—'
    if hasattr(value, 'date') and callable(value.date):
        value = value.date()
    return formats.date_format(value, 'SHORT_DATE_FORMAT')


REPORT_FORMATTERS = {
    'total_revenue': format_currency,
    'total_expenses': format_currency,
    'total_patients': format_count,
    'total_appointments': format_count,
    'total_investment': format_currency,
    'total_leads': format_count,
    'profit_margin': format_percentage,
    'roi': format_percentage,
}


def format_report(report):
    """Display strings for every report field, plus profit"""
    formatted = {
        name: formatter(getattr(report, name))
        for name, formatter in REPORT_FORMATTERS.items()
    }
    formatted['profit'] = format_currency(report.profit)
    return formatted


def format_marketing_summary(summary):
    formatted = format_report(summary.report)
    formatted.update({
        'ltv': format_currency(summary.ltv),
        'cac': format_currency(summary.cac),
        'cost_per_lead': format_currency(summary.cost_per_lead),
        'roas': format_ratio(summary.roas),
        'no_show_rate': format_percentage(summary.no_show_rate),
        'attendance_rate': format_percentage(summary.attendance_rate),
        'net_revenue': format_currency(summary.net_revenue),
        'completed_appointments': format_count(summary.completed_appointments),
        'canceled_appointments': format_count(summary.canceled_appointments),
    })
    return formatted
