# core/repository.py
"""
Generic resource repository behind every CRUD screen.

Each screen subclasses ``Repository`` with its table name, module label
and list configuration; the shared code applies the role checks, the clinic
scoping for non-admin sessions, and the insert-or-update write path.
"""
import logging

from django.dispatch import Signal

from users.permissions import AccessDenied, require_role, require_session, require_write

from .datasource import (
    DjangoDataSource, INSERT, NOT_FOUND, UPDATE, Predicate, WriteResult, tables,
)

logger = logging.getLogger(__name__)

# Sent after a successful write with sender=<Repository class>, session, table,
# operation, record and fields
resource_written = Signal()

PAST_TENSE = {
    INSERT: 'created',
    UPDATE: 'updated',
}


class Repository:
    table = None
    module = None
    # When set, every read and write requires exactly this role
    required_role = None
    list_fields = None
    search_fields = ()
    ordering = ()
    # Column holding the tenant; None for tables shared by all clinics
    clinic_field = 'clinic_id'

    def __init__(self, data_source=None):
        self.data_source = data_source or DjangoDataSource()

    @property
    def model(self):
        return tables.get(self.table)

    # Access checks

    def check_read(self, session):
        if self.required_role:
            require_role(session, self.required_role, self.module)
        else:
            require_session(session)

    def check_write(self, session):
        if self.required_role:
            require_role(session, self.required_role, self.module)
            return
        require_write(session, self.module)
        if self.is_scoped(session) and session.is_unassigned:
            raise AccessDenied('Your account is not assigned to a clinic.', self.module)

    def is_scoped(self, session):
        """Non-admins only reach their own clinic's rows of clinic-owned tables"""
        return bool(self.clinic_field and not session.is_admin)

    def sees_no_rows(self, session):
        return self.is_scoped(session) and session.is_unassigned

    def scope_predicates(self, session):
        if self.is_scoped(session):
            return [Predicate.eq(self.clinic_field, session.clinic_id)]
        return []

    # Reads

    def list(self, session, filters=None, search=None, ordering=None):
        """
        Return the rows this session may see.

        Args:
            session: SessionContext of the caller
            filters: Dict of field -> value equality filters
            search: Free text matched against ``search_fields``
            ordering: Override for the default ordering
        """
        self.check_read(session)
        if self.sees_no_rows(session):
            return []
        predicates = self.scope_predicates(session)
        predicates += [Predicate.eq(name, value) for name, value in (filters or {}).items()]
        records = self.data_source.query(
            self.table,
            predicates,
            fields=self.list_fields,
            ordering=ordering or self.ordering,
        )
        return self.search(records, search)

    def search(self, records, term):
        term = (term or '').strip().lower()
        if not term:
            return records
        return [
            record for record in records
            if any(term in str(record.get(name) or '').lower() for name in self.search_fields)
        ]

    def get(self, session, pk):
        self.check_read(session)
        if self.sees_no_rows(session):
            return None
        predicates = self.scope_predicates(session) + [Predicate.eq('id', pk)]
        records = self.data_source.query(self.table, predicates)
        return records[0] if records else None

    # Writes

    def create(self, session, fields):
        self.check_write(session)
        fields = self.prepare(session, dict(fields), creating=True)
        result = self.data_source.write(self.table, INSERT, fields)
        return self._finish(session, INSERT, result, fields)

    def update(self, session, pk, fields):
        self.check_write(session)
        if self.get(session, pk) is None:
            return WriteResult.failure(NOT_FOUND, 'This record does not exist or is not accessible.')
        fields = self.prepare(session, dict(fields), creating=False)
        result = self.data_source.write(self.table, UPDATE, fields, key=pk)
        return self._finish(session, UPDATE, result, fields)

    def save(self, session, fields, pk=None):
        """Insert when there is no editing target, update otherwise"""
        if pk is None:
            return self.create(session, fields)
        return self.update(session, pk, fields)

    def prepare(self, session, fields, creating):
        """
        Adjust form data before it is written.

        Non-admins always write into their own clinic, and new
        rows record who created them.
        """
        if self.is_scoped(session):
            fields.pop(self.clinic_field.replace('_id', ''), None)
            fields[self.clinic_field] = session.clinic_id
        if creating and self.has_field('created_by'):
            fields.setdefault('created_by_id', session.user_id)
        return fields

    def has_field(self, name):
        model = self.model
        if model is None:
            return False
        return any(f.name == name for f in model._meta.concrete_fields)

    def form_initial(self, record):
        """Translate a stored row into ModelForm initial data"""
        initial = dict(record)
        model = self.model
        if model is not None:
            for f in model._meta.concrete_fields:
                if f.is_relation and f.attname in record:
                    initial[f.name] = record[f.attname]
        return initial

    def _finish(self, session, operation, result, fields):
        if result.ok:
            logger.info(f"{session.username} {PAST_TENSE[operation]} {self.table} {result.record.get('id')}")
            resource_written.send(
                sender=self.__class__,
                session=session,
                table=self.table,
                operation=operation,
                record=result.record,
                fields=fields,
            )
        else:
            logger.info(f"{operation} on {self.table} by {session.username} failed: {result.error_kind}")
        return result
