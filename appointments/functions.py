"""
Database functions used by the appointment queries.

SQLite's built-in ``LOWER()`` only folds ASCII letters, so every new
SQLite connection gets a ``PY_LOWER()`` function backed by
``str.lower``.  :class:`UnicodeLower` calls it there and plain
``LOWER()`` on MySQL and PostgreSQL.
"""
from __future__ import annotations

from django.db.backends.signals import connection_created
from django.db.models import CharField, Func


def _py_lower(value):
    return value.lower() if value is not None else None


def register_sqlite_functions(sender, connection, **kwargs) -> None:
    if connection.vendor == 'sqlite':
        connection.connection.create_function('PY_LOWER', 1, _py_lower, deterministic=True)


class UnicodeLower(Func):
    function = 'LOWER'
    output_field = CharField()

    def as_sqlite(self, compiler, connection, **extra_context):
        return super().as_sql(compiler, connection, function='PY_LOWER', **extra_context)


def connect_signals() -> None:
    connection_created.connect(register_sqlite_functions, dispatch_uid='appointments.sqlite_functions')
