# core/testing.py
"""
In-memory data source for tests that exercise the reports engine and the
repositories without a database.
"""
import threading
import uuid
from datetime import date, datetime

from .datasource import EQ, GTE, INSERT, LTE, UPDATE, NOT_FOUND, QueryError, WriteResult


def _comparable(stored, value):
    # A timestamp compared with a plain date compares calendar dates
    if isinstance(stored, datetime) and isinstance(value, date) and not isinstance(value, datetime):
        return stored.date(), value
    return stored, value


def matches(row, predicate):
    stored = row.get(predicate.field)
    if predicate.operator == EQ:
        return stored is not None and str(stored) == str(predicate.value)
    if stored is None:
        return False
    stored, value = _comparable(stored, predicate.value)
    if predicate.operator == GTE:
        return stored >= value
    if predicate.operator == LTE:
        return stored <= value
    return False


class InMemoryDataSource:
    """
    Dict-of-lists stand-in for ``DjangoDataSource``.

    Tables named in ``failing`` raise ``QueryError`` on every read, and
    ``calls`` records each query for assertions on the fetch plan.
    """

    def __init__(self, rows=None, failing=()):
        self.rows = {table: [dict(r) for r in records] for table, records in (rows or {}).items()}
        self.failing = set(failing)
        self.calls = []
        self._lock = threading.Lock()

    def query(self, table, predicates=(), fields=None, ordering=None):
        with self._lock:
            self.calls.append((table, tuple(predicates)))
        if table in self.failing:
            raise QueryError(table, 'connection reset')

        records = [r for r in self.rows.get(table, []) if all(matches(r, p) for p in predicates)]
        if fields:
            records = [{name: r.get(name) for name in fields} for r in records]
        else:
            records = [dict(r) for r in records]
        for name in reversed(ordering or ()):
            key = name.lstrip('-')
            records.sort(key=lambda r: str(r.get(key) or ''), reverse=name.startswith('-'))
        return records

    def write(self, table, operation, fields, key=None):
        rows = self.rows.setdefault(table, [])
        if operation == INSERT:
            record = dict(fields)
            record.setdefault('id', str(uuid.uuid4()))
            rows.append(record)
            return WriteResult.success(dict(record))
        if operation == UPDATE:
            for record in rows:
                if str(record.get('id')) == str(key):
                    record.update(fields)
                    return WriteResult.success(dict(record))
            return WriteResult.failure(NOT_FOUND, f'No row with id {key}.')
        raise ValueError(f"Unsupported write operation '{operation}'")


def make_user(username, role_name=None, clinic=None, **extra):
    """Create a user with the given role (created on demand) and clinic"""
    from users.models import Role, User

    role = None
    if role_name:
        role, _ = Role.objects.get_or_create(name=role_name)
    return User.objects.create_user(
        username=username,
        password='Str0ng!pass',
        role=role,
        clinic=clinic,
        **extra
    )
