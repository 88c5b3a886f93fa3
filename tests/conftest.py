from contextlib import asynccontextmanager

import pytest


class FakeCursor:
    def __init__(self, conn, row_factory=None):
        self.conn = conn
        self.row_factory = row_factory
        self.rowcount = -1

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False

    async def execute(self, query, params=None):
        self.conn.executed.append((query, params))
        if self.conn.fail_at is not None and len(self.conn.executed) == self.conn.fail_at:
            raise self.conn.error
        self.rowcount = self.conn.rowcount

    async def fetchall(self):
        return list(self.conn.rows)


class FakeTransaction:
    def __init__(self, conn):
        self.conn = conn

    async def __aenter__(self):
        self.conn.events.append("begin")
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.conn.events.append("commit" if exc_type is None else "rollback")
        return False


class FakeConnection:
    """Records executed statements and transaction events."""

    def __init__(self, rows=None, rowcount=1, fail_at=None, error=None):
        self.rows = rows or []
        self.rowcount = rowcount
        self.fail_at = fail_at
        self.error = error
        self.executed = []
        self.events = []

    def cursor(self, row_factory=None):
        return FakeCursor(self, row_factory=row_factory)

    def transaction(self):
        return FakeTransaction(self)


class FakePool:
    def __init__(self, conn):
        self.conn = conn
        self.checkouts = 0

    @asynccontextmanager
    async def connection(self):
        self.checkouts += 1
        self.conn.events.append("checkout")
        try:
            yield self.conn
        finally:
            self.conn.events.append("checkin")


@pytest.fixture
def fake_conn():
    return FakeConnection()


@pytest.fixture
def fake_pool(fake_conn):
    return FakePool(fake_conn)
