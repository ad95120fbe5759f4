# reports/fetchers.py
"""
The four independent reads behind a report.

Each fetcher turns a ``FilterContext`` into predicates on its table's date
column (and clinic column when a clinic is selected) and returns raw rows.
"""
from core.datasource import Predicate


class Fetcher:
    def __init__(self, name, table, date_field, fields, clinic_field='clinic_id'):
        self.name = name
        self.table = table
        self.date_field = date_field
        self.fields = tuple(fields)
        self.clinic_field = clinic_field

    def __repr__(self):
        return f"<Fetcher {self.name}>"

    def predicates(self, filters):
        predicates = []
        if filters.start_date is not None:
            predicates.append(Predicate.gte(self.date_field, filters.start_date))
        if filters.end_date is not None:
            predicates.append(Predicate.lte(self.date_field, filters.end_date))
        if not filters.is_all_clinics:
            predicates.append(Predicate.eq(self.clinic_field, filters.clinic_id))
        return predicates

    def fetch(self, data_source, filters):
        return data_source.query(self.table, self.predicates(filters), fields=self.fields)


APPOINTMENTS = Fetcher(
    'appointments', 'appointments', 'appointment_date',
    ['id', 'amount', 'status', 'appointment_date', 'procedure_name', 'clinic_id'],
)
EXPENSES = Fetcher(
    'expenses', 'expenses', 'date',
    ['id', 'amount', 'category', 'date', 'clinic_id'],
)
# created_at is a timestamp; the data source compares its calendar date
PATIENTS = Fetcher(
    'patients', 'patients', 'created_at',
    ['id', 'source', 'created_at', 'clinic_id'],
)
CAMPAIGNS = Fetcher(
    'campaigns', 'marketing_campaigns', 'start_date',
    ['id', 'name', 'source', 'investment', 'messages_received', 'start_date', 'clinic_id'],
)

FETCHERS = (APPOINTMENTS, EXPENSES, PATIENTS, CAMPAIGNS)
