# reports/metrics.py
"""
Pure reductions from fetched rows to report values.

Money is summed as ``Decimal`` and never rounded here; ratios with a zero
denominator are zero.
"""
from collections import OrderedDict
from dataclasses import asdict, dataclass
from decimal import Decimal, InvalidOperation

ZERO = Decimal('0')
HUNDRED = Decimal('100')

COMPLETED = 'completed'
CANCELED = 'canceled'


def to_decimal(value):
    """Missing or unparseable amounts count as zero"""
    if value is None or value == '':
        return ZERO
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return ZERO


def total(rows, field):
    return sum((to_decimal(row.get(field)) for row in rows), ZERO)


def ratio(numerator, denominator):
    numerator = to_decimal(numerator)
    denominator = to_decimal(denominator)
    if denominator == 0:
        return ZERO
    return numerator / denominator


def percent(numerator, denominator):
    return ratio(numerator, denominator) * HUNDRED


@dataclass(frozen=True)
class Report:
    total_revenue: Decimal = ZERO
    total_expenses: Decimal = ZERO
    total_patients: int = 0
    total_appointments: int = 0
    total_investment: Decimal = ZERO
    total_leads: int = 0
    profit_margin: Decimal = ZERO
    roi: Decimal = ZERO

    @property
    def profit(self):
        return self.total_revenue - self.total_expenses

    def to_dict(self):
        return asdict(self)


EMPTY_REPORT = Report()


def calculate_report(appointments, expenses, patients, campaigns):
    """
    Reduce the four row sets into a ``Report``.

    Revenue counts every appointment regardless of status.
    """
    total_revenue = total(appointments, 'amount')
    total_expenses = total(expenses, 'amount')
    total_investment = total(campaigns, 'investment')
    total_leads = int(total(campaigns, 'messages_received'))

    return Report(
        total_revenue=total_revenue,
        total_expenses=total_expenses,
        total_patients=len(patients),
        total_appointments=len(appointments),
        total_investment=total_investment,
        total_leads=total_leads,
        profit_margin=percent(total_revenue - total_expenses, total_revenue),
        roi=percent(total_revenue - total_investment, total_investment),
    )


@dataclass(frozen=True)
class MarketingSummary:
    """Marketing KPIs shown on the dashboard"""
    report: Report
    ltv: Decimal = ZERO
    cac: Decimal = ZERO
    cost_per_lead: Decimal = ZERO
    roas: Decimal = ZERO
    completed_appointments: int = 0
    canceled_appointments: int = 0
    no_show_rate: Decimal = ZERO
    attendance_rate: Decimal = ZERO
    net_revenue: Decimal = ZERO
    investment_by_source: tuple = ()
    revenue_by_procedure: tuple = ()


def group_total(rows, key_field, value_field, default_label):
    """Sum ``value_field`` per ``key_field``, largest first, as (label, total) pairs"""
    groups = OrderedDict()
    for row in rows:
        label = row.get(key_field) or default_label
        groups[label] = groups.get(label, ZERO) + to_decimal(row.get(value_field))
    return tuple(sorted(groups.items(), key=lambda item: item[1], reverse=True))


def calculate_marketing_summary(report, appointments, campaigns):
    completed = sum(1 for a in appointments if a.get('status') == COMPLETED)
    canceled = sum(1 for a in appointments if a.get('status') == CANCELED)
    attended_or_missed = completed + canceled

    return MarketingSummary(
        report=report,
        ltv=ratio(report.total_revenue, report.total_patients),
        cac=ratio(report.total_investment, report.total_patients),
        cost_per_lead=ratio(report.total_investment, report.total_leads),
        roas=ratio(report.total_revenue, report.total_investment),
        completed_appointments=completed,
        canceled_appointments=canceled,
        no_show_rate=percent(canceled, attended_or_missed),
        attendance_rate=percent(completed, attended_or_missed),
        net_revenue=report.profit,
        investment_by_source=group_total(campaigns, 'source', 'investment', 'Other'),
        revenue_by_procedure=group_total(appointments, 'procedure_name', 'amount', 'Not informed'),
    )
