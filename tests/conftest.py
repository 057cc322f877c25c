from dataclasses import dataclass, field
from types import SimpleNamespace
from typing import Optional

import pytest

from db.connection import Database

DATE_OID = 1082
TIMESTAMPTZ_OID = 1184
TIME_OID = 1083
INT_OID = 23
TEXT_OID = 25


@dataclass
class FakeResponse:
    rows: list = field(default_factory=list)
    columns: Optional[list] = None
    rowcount: int = -1

    @property
    def description(self):
        if self.columns is None:
            return None
        return [SimpleNamespace(name=name, type_code=oid) for name, oid in self.columns]


def rows_response(rows, columns=None):
    """A SELECT response; columns default to the first row's keys typed as int."""
    if columns is None:
        columns = [(name, INT_OID) for name in (rows[0] if rows else {})]
    return FakeResponse(rows=rows, columns=columns, rowcount=len(rows))


def count_response(total):
    return FakeResponse(rows=[{"total": total}], columns=[("total", 20)], rowcount=1)


def write_response(rowcount):
    return FakeResponse(rowcount=rowcount)


class FakeCursor:
    def __init__(self, connection):
        self.connection = connection
        self.description = None
        self.rowcount = -1
        self._rows = []

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def execute(self, sql, params=None):
        self.connection.executed.append((sql, params))
        response = self.connection.responses.pop(0) if self.connection.responses else FakeResponse()
        if isinstance(response, Exception):
            raise response
        self.description = response.description
        self.rowcount = response.rowcount
        self._rows = response.rows

    def fetchall(self):
        return list(self._rows)


class FakeConnection:
    """Stands in for a psycopg2 connection; replies with queued responses in order."""

    def __init__(self, responses=None):
        self.responses = list(responses or [])
        self.executed = []
        self.commits = 0
        self.rollbacks = 0
        self.closed = 0

    def cursor(self, cursor_factory=None):
        return FakeCursor(self)

    def commit(self):
        self.commits += 1

    def rollback(self):
        self.rollbacks += 1

    def close(self):
        self.closed = 1


@pytest.fixture
def fake_conn():
    return FakeConnection()


@pytest.fixture
def database(fake_conn):
    return Database(fake_conn)
