# reports/templatetags/report_filters.py
from django import template

from reports import formatting
from reports.metrics import percent

register = template.Library()


@register.filter
def currency(value):
    """
    Format amount in the configured currency.
    Usage: {{ report.total_revenue|currency }}
    """
    return formatting.format_currency(value)


@register.filter
def percentage(value, places=1):
    """Usage: {{ report.roi|percentage }} or {{ value|percentage:2 }}"""
    try:
        places = int(places)
    except (TypeError, ValueError):
        places = 1
    return formatting.format_percentage(value, places)


@register.filter
def count(value):
    return formatting.format_count(value)


@register.filter
def share_of(value, whole):
    """Percentage of ``whole`` that ``value`` represents, for bar widths"""
    return int(formatting.quantize(percent(value, whole), 0))
