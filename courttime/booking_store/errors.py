"""
CourtTime Booking Store - Storage Error Classification
======================================================
Turns "relation does not exist" database errors into
ConfigurationNotProvisioned so the rules engine can degrade instead of
failing the booking.

Recognised:
    PostgreSQL  SQLSTATE 42P01 (undefined_table), via pgcode / sqlstate
                on the driver error Django chains as __cause__
    SQLite      "no such table: <name>"

Every other database error propagates unchanged.
"""

from __future__ import annotations

import functools
import re
from typing import Optional

from django.db import DatabaseError, connection, transaction

from courttime.rules_engine.exceptions import ConfigurationNotProvisioned

UNDEFINED_TABLE_SQLSTATE = "42P01"

_PG_RELATION = re.compile(r'relation "([^"]+)" does not exist')
_SQLITE_TABLE = re.compile(r"no such table: ([\w.]+)")


def _error_chain(exc: BaseException):
    seen = set()
    while exc is not None and id(exc) not in seen:
        seen.add(id(exc))
        yield exc
        exc = exc.__cause__ or exc.__context__


def is_missing_relation(exc: BaseException) -> bool:
    for err in _error_chain(exc):
        code = getattr(err, "pgcode", None) or getattr(err, "sqlstate", None)
        if code == UNDEFINED_TABLE_SQLSTATE:
            return True
        if _SQLITE_TABLE.search(str(err)):
            return True
    return False


def missing_relation_name(exc: BaseException) -> Optional[str]:
    for err in _error_chain(exc):
        text = str(err)
        match = _PG_RELATION.search(text) or _SQLITE_TABLE.search(text)
        if match:
            return match.group(1)
    return None


def classify_storage_error(exc: BaseException) -> BaseException:
    """
    ConfigurationNotProvisioned for a missing relation,
    otherwise the original error.
    """
    if is_missing_relation(exc):
        return ConfigurationNotProvisioned(
            relation=missing_relation_name(exc) or "",
            cause=exc,
        )
    return exc


def translate_storage_errors(func):
    """
    Re-raise missing-relation errors from func as ConfigurationNotProvisioned.

    Inside a caller's atomic block the read runs in its own savepoint, so
    a failed statement is rolled back and the outer transaction stays
    usable for the booking write that follows.
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            if connection.in_atomic_block:
                with transaction.atomic():
                    return func(*args, **kwargs)
            return func(*args, **kwargs)
        except DatabaseError as exc:
            classified = classify_storage_error(exc)
            if classified is exc:
                raise
            raise classified from exc

    return wrapper
