from __future__ import annotations

import threading
import time

import mysql.connector
import pytest

from library_kiosk.core import messages
from library_kiosk.core.exceptions import BackendError
from library_kiosk.database import connection as connection_module
from library_kiosk.database.connection import DatabaseConnection, DBConfig
from library_kiosk.database.mysql_base import db_cursor, escape_like, placeholders
from library_kiosk.database.schema import escape_identifier, schema_statements


class FakePool:
    created = 0

    def __init__(self, **kwargs):
        type(self).created += 1
        self.kwargs = kwargs

    def get_connection(self):
        return object()


@pytest.fixture
def fake_pool(monkeypatch):
    FakePool.created = 0
    monkeypatch.setattr(connection_module.pooling, "MySQLConnectionPool", FakePool)
    return FakePool


def config() -> DBConfig:
    return DBConfig.from_dict({"host": "db", "port": "3307", "database": "library_system"})


def test_schema_and_pool_are_initialized_once(monkeypatch, fake_pool):
    calls = []
    monkeypatch.setattr(connection_module, "apply_schema", lambda cfg: calls.append(cfg))

    conn = DatabaseConnection(config())
    conn.connect()
    conn.connect()

    assert len(calls) == 1
    assert fake_pool.created == 1
    assert conn.schema_ready


def test_failed_schema_attempt_is_retried(monkeypatch, fake_pool):
    attempts = []

    def flaky(cfg):
        attempts.append(cfg)
        if len(attempts) == 1:
            raise mysql.connector.Error("server gone away")

    monkeypatch.setattr(connection_module, "apply_schema", flaky)
    conn = DatabaseConnection(config())

    with pytest.raises(mysql.connector.Error):
        conn.connect()
    assert not conn.schema_ready

    conn.connect()
    assert len(attempts) == 2
    assert conn.schema_ready


def test_concurrent_first_requests_share_one_schema_init(monkeypatch, fake_pool):
    calls = []

    def slow_apply(cfg):
        time.sleep(0.05)
        calls.append(cfg)

    monkeypatch.setattr(connection_module, "apply_schema", slow_apply)
    conn = DatabaseConnection(config())

    threads = [threading.Thread(target=conn.connect) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(calls) == 1
    assert fake_pool.created == 1


def test_db_config_from_dict_defaults():
    cfg = DBConfig.from_dict({})
    assert (cfg.host, cfg.port, cfg.user, cfg.database) == ("127.0.0.1", 3306, "root", "library_system")
    assert config().port == 3307


def test_get_instance_is_process_wide():
    DatabaseConnection.reset_instance()
    try:
        first = DatabaseConnection.get_instance(config())
        assert DatabaseConnection.get_instance(DBConfig.from_dict({})) is first
    finally:
        DatabaseConnection.reset_instance()


class FakeCursor:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.closed = False

    def execute(self, sql, params=None):
        if self.fail:
            raise mysql.connector.Error("syntax error")

    def close(self):
        self.closed = True


class FakeConnection:
    def __init__(self, cursor: FakeCursor):
        self._cursor = cursor
        self.committed = False
        self.rolled_back = False
        self.closed = False

    def cursor(self, dictionary=True):
        return self._cursor

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


class FakeFactory:
    def __init__(self, conn=None, error=None):
        self._conn = conn
        self._error = error

    def connect(self):
        if self._error:
            raise self._error
        return self._conn


def test_db_cursor_commits_and_closes():
    conn = FakeConnection(FakeCursor())
    with db_cursor(FakeFactory(conn)) as (_, cur):
        cur.execute("SELECT 1")
    assert conn.committed and conn.closed and not conn.rolled_back


def test_db_cursor_wraps_driver_errors_and_rolls_back():
    conn = FakeConnection(FakeCursor(fail=True))
    with pytest.raises(BackendError, match="syntax error"):
        with db_cursor(FakeFactory(conn)) as (_, cur):
            cur.execute("SELEC 1")
    assert conn.rolled_back and conn.closed and not conn.committed


def test_db_cursor_reports_unreachable_database():
    with pytest.raises(BackendError) as excinfo:
        with db_cursor(FakeFactory(error=mysql.connector.Error("refused"))):
            pass
    assert str(excinfo.value) == messages.DATABASE_UNAVAILABLE


def test_sql_helpers():
    assert escape_like("50%_a\\b") == "50\\%\\_a\\\\b"
    assert placeholders(3) == "%s,%s,%s"
    assert escape_identifier("lib`rary") == "`lib``rary`"


def test_schema_has_unique_daily_entry_and_cascade():
    statements = "\n".join(schema_statements("library_system"))
    assert "CREATE DATABASE IF NOT EXISTS `library_system`" in statements
    assert "UNIQUE KEY" in statements
    assert "ON DELETE CASCADE" in statements
