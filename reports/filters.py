# reports/filters.py
"""
Filter context shared by every report query.
"""
from dataclasses import dataclass
from datetime import date, datetime, timedelta

ALL_CLINICS = 'all'
# Clinic filter of a non-admin with no clinic; matches no rows
UNASSIGNED_CLINIC = 'unassigned'

TODAY = 'today'
LAST_7_DAYS = 'last_7_days'
LAST_30_DAYS = 'last_30_days'
THIS_MONTH = 'this_month'
CUSTOM = 'custom'

DATE_RANGE_CHOICES = [
    (TODAY, 'Today'),
    (LAST_7_DAYS, 'Last 7 days'),
    (LAST_30_DAYS, 'Last 30 days'),
    (THIS_MONTH, 'This month'),
    (CUSTOM, 'Custom range'),
]

DEFAULT_RANGE = THIS_MONTH


def preset_range(name, today=None):
    """
    Calculate start and end dates for a predefined range

    Unknown names fall back to the current month.

    Returns:
        Tuple of (start_date, end_date)
    """
    today = today or date.today()

    if name == TODAY:
        return today, today
    if name == LAST_7_DAYS:
        return today - timedelta(days=7), today
    if name == LAST_30_DAYS:
        return today - timedelta(days=30), today
    return today.replace(day=1), today


def parse_date(value):
    if not value:
        return None
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(str(value).strip(), '%Y-%m-%d').date()
    except ValueError:
        return None


def normalize_clinic(clinic_id):
    """"all", blank and None all mean no clinic filter"""
    if clinic_id is None:
        return None
    clinic_id = str(clinic_id).strip()
    if not clinic_id or clinic_id.lower() == ALL_CLINICS:
        return None
    return clinic_id


@dataclass(frozen=True)
class FilterContext:
    """
    Date range (inclusive) and optional clinic that parameterize a report.

    Either bound may be None, meaning unbounded on that side.
    """
    start_date: date = None
    end_date: date = None
    clinic_id: str = None

    def __post_init__(self):
        object.__setattr__(self, 'clinic_id', normalize_clinic(self.clinic_id))

    @property
    def is_all_clinics(self):
        return self.clinic_id is None

    @classmethod
    def for_range(cls, name, clinic_id=None, today=None):
        start_date, end_date = preset_range(name, today=today)
        return cls(start_date, end_date, clinic_id)

    @classmethod
    def from_query(cls, params, default_range=DEFAULT_RANGE, today=None):
        """
        Build a filter from GET parameters.

        ``date_range`` selects a preset; ``custom`` (or explicit
        ``start_date``/``end_date`` without a preset) uses the given dates.
        Explicit dates that differ from the named preset's own range were
        edited by hand and also count as custom. Unparseable dates fall back
        to the preset and swapped bounds are reordered.
        """
        range_name = params.get('date_range') or ''
        clinic_id = params.get('clinic')
        start = parse_date(params.get('start_date'))
        end = parse_date(params.get('end_date'))

        if range_name and range_name != CUSTOM and (start or end):
            preset = cls.for_range(range_name, clinic_id, today=today)
            if (start, end) == (preset.start_date, preset.end_date):
                return preset
            range_name = CUSTOM

        if range_name == CUSTOM or (not range_name and (start or end)):
            if start is None and end is None:
                return cls.for_range(default_range, clinic_id, today=today)
            if start and end and start > end:
                start, end = end, start
            return cls(start, end, clinic_id)

        return cls.for_range(range_name or default_range, clinic_id, today=today)

    def range_name(self, preferred=None, today=None):
        """
        The preset whose dates this filter covers, ``preferred`` first, or
        ``custom`` when none does.
        """
        names = [name for name, _ in DATE_RANGE_CHOICES if name != CUSTOM]
        if preferred in names:
            names.remove(preferred)
            names.insert(0, preferred)
        for name in names:
            if preset_range(name, today=today) == (self.start_date, self.end_date):
                return name
        return CUSTOM

    def to_query(self):
        params = {}
        if self.start_date:
            params['start_date'] = self.start_date.isoformat()
        if self.end_date:
            params['end_date'] = self.end_date.isoformat()
        params['clinic'] = self.clinic_id or ALL_CLINICS
        return params
