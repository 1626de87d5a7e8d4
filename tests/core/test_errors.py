import sqlite3

import pytest
from sqlalchemy.exc import IntegrityError

from app.core.errors import (
    CHECK_VIOLATION,
    FOREIGN_KEY_VIOLATION,
    UNIQUE_VIOLATION,
    Conflict,
    integrity_kind,
)


class DriverError(Exception):
    """Stands in for a psycopg error carrying a SQLSTATE"""

    def __init__(self, sqlstate, message="constraint violated"):
        super().__init__(message)
        self.sqlstate = sqlstate


def wrap(orig):
    return IntegrityError("INSERT INTO events ...", {}, orig)


@pytest.mark.parametrize("sqlstate, kind", [
    ("23505", UNIQUE_VIOLATION),
    ("23514", CHECK_VIOLATION),
    ("23503", FOREIGN_KEY_VIOLATION),
    ("23502", None),
])
def test_integrity_kind_from_sqlstate(sqlstate, kind):
    assert integrity_kind(wrap(DriverError(sqlstate))) == kind


@pytest.mark.parametrize("message, kind", [
    ("UNIQUE constraint failed: events.user_id", UNIQUE_VIOLATION),
    ("CHECK constraint failed: ck_events_date_order", CHECK_VIOLATION),
    ("FOREIGN KEY constraint failed", FOREIGN_KEY_VIOLATION),
    ("NOT NULL constraint failed: events.title", None),
])
def test_integrity_kind_from_sqlite_message(message, kind):
    assert integrity_kind(wrap(sqlite3.IntegrityError(message))) == kind


def test_error_envelope():
    assert Conflict("You are already hosting an event").to_dict() == {
        "error": {"kind": "conflict", "message": "You are already hosting an event"}
    }
    assert Conflict.status_code == 409
