# core/datasource.py
"""
Row-level data access used by the reports engine and the resource screens.

Callers never touch the ORM directly: reads go through ``query()`` with
equality/range predicates and writes through ``write()``, which reports
success or a typed failure instead of raising. ``DjangoDataSource`` is the
production implementation; each app registers its tables in ``AppConfig.ready``.
"""
import logging
from dataclasses import dataclass, field
from datetime import date, datetime

from django.core.exceptions import FieldDoesNotExist, FieldError, ValidationError
from django.db import DatabaseError, IntegrityError, models, transaction

logger = logging.getLogger(__name__)

EQ = 'eq'
GTE = 'gte'
LTE = 'lte'

OPERATORS = {
    EQ: 'exact',
    GTE: 'gte',
    LTE: 'lte',
}

INSERT = 'insert'
UPDATE = 'update'

# Write failure kinds
VALIDATION = 'validation'
INTEGRITY = 'integrity'
NOT_FOUND = 'not_found'
BACKEND = 'backend'


class QueryError(Exception):
    """A read could not be served by the backend."""

    def __init__(self, table, message):
        self.table = table
        self.message = message
        super().__init__(f"{table}: {message}")


@dataclass(frozen=True)
class Predicate:
    field: str
    operator: str
    value: object

    def __post_init__(self):
        if self.operator not in OPERATORS:
            raise ValueError(f"Unsupported operator '{self.operator}'")

    @classmethod
    def eq(cls, field_name, value):
        return cls(field_name, EQ, value)

    @classmethod
    def gte(cls, field_name, value):
        return cls(field_name, GTE, value)

    @classmethod
    def lte(cls, field_name, value):
        return cls(field_name, LTE, value)


@dataclass(frozen=True)
class WriteResult:
    """Outcome of a single insert or update"""
    ok: bool
    record: dict = None
    error_kind: str = None
    message: str = ''
    errors: dict = field(default_factory=dict)

    @classmethod
    def success(cls, record):
        return cls(ok=True, record=record)

    @classmethod
    def failure(cls, error_kind, message, errors=None):
        return cls(ok=False, error_kind=error_kind, message=message, errors=errors or {})


class TableRegistry:
    """Maps logical table names to Django models"""

    def __init__(self):
        self._models = {}

    def register(self, table, model):
        self._models[table] = model

    def get(self, table):
        return self._models.get(table)

    def __contains__(self, table):
        return table in self._models

    def tables(self):
        return sorted(self._models)


tables = TableRegistry()


def model_to_record(instance):
    """Flatten a model instance into the same shape ``values()`` returns"""
    return {
        f.attname: getattr(instance, f.attname)
        for f in instance._meta.concrete_fields
    }


class DjangoDataSource:
    """
    ORM-backed implementation of the query/write capability.

    Filtering, ordering and tenant restriction all happen in the database;
    the caller only ever receives lists of plain dicts.
    """

    def __init__(self, registry=None):
        self.registry = registry or tables

    def model_for(self, table):
        model = self.registry.get(table)
        if model is None:
            raise QueryError(table, 'Unknown table')
        return model

    def _lookup(self, model, predicate):
        """
        Build the ORM lookup for a predicate.

        Range predicates that compare a timestamp column against a plain date
        compare calendar dates, so an end date includes that whole day.
        """
        lookup = predicate.field
        value = predicate.value
        if predicate.operator in (GTE, LTE) and isinstance(value, date) and not isinstance(value, datetime):
            try:
                model_field = model._meta.get_field(predicate.field)
            except FieldDoesNotExist:
                model_field = None
            if isinstance(model_field, models.DateTimeField):
                lookup = f"{lookup}__date"
        return f"{lookup}__{OPERATORS[predicate.operator]}"

    def query(self, table, predicates=(), fields=None, ordering=None):
        """
        Return matching rows of ``table`` as dicts.

        A predicate value that cannot be converted to the column type (e.g. a
        clinic id that is not a UUID) matches nothing rather than failing.

        Raises:
            QueryError: unknown table/field or a database error
        """
        model = self.model_for(table)

        try:
            lookups = {self._lookup(model, p): p.value for p in predicates}
            queryset = model.objects.filter(**lookups)
            if ordering:
                queryset = queryset.order_by(*ordering)
            return list(queryset.values(*(fields or ())))
        except (ValidationError, ValueError) as e:
            logger.debug(f"Predicate values do not match {table} column types: {e}")
            return []
        except (FieldError, DatabaseError) as e:
            logger.error(f"Query on {table} failed: {e}")
            raise QueryError(table, str(e)) from e

    def write(self, table, operation, fields, key=None):
        """
        Insert or update one row.

        Never raises for data problems: validation, integrity and backend
        errors come back as a failed ``WriteResult``.
        """
        try:
            model = self.model_for(table)
        except QueryError as e:
            return WriteResult.failure(BACKEND, e.message)

        if operation == INSERT:
            instance = model(**fields)
        elif operation == UPDATE:
            try:
                instance = model.objects.get(pk=key)
            except (model.DoesNotExist, ValidationError, ValueError):
                return WriteResult.failure(NOT_FOUND, f'No {model._meta.verbose_name} with id {key}.')
            for name, value in fields.items():
                setattr(instance, name, value)
        else:
            raise ValueError(f"Unsupported write operation '{operation}'")

        try:
            instance.full_clean()
            with transaction.atomic():
                instance.save()
        except ValidationError as e:
            errors = e.message_dict if hasattr(e, 'error_dict') else {'__all__': e.messages}
            return WriteResult.failure(VALIDATION, 'Please correct the errors below.', errors)
        except IntegrityError as e:
            logger.warning(f"Integrity error writing {table}: {e}")
            return WriteResult.failure(INTEGRITY, 'This record conflicts with existing data.')
        except DatabaseError as e:
            logger.exception(f"Database error writing {table}")
            return WriteResult.failure(BACKEND, 'The record could not be saved. Please try again.')

        return WriteResult.success(model_to_record(instance))
