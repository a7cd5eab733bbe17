from __future__ import annotations

from types import SimpleNamespace

import pytest

from library_kiosk.container import build_container
from library_kiosk.core.enums import StoreBackend
from library_kiosk.core.exceptions import ConfigurationError
from library_kiosk.database.connection import DatabaseConnection
from library_kiosk.settings import get_settings_module
from library_kiosk.store import build_record_store


@pytest.mark.parametrize(
    "value,expected",
    [("", StoreBackend.MYSQL), ("MySQL", StoreBackend.MYSQL), ("sheets", StoreBackend.SHEETS), (" Google ", StoreBackend.SHEETS)],
)
def test_backend_parse(value, expected):
    assert StoreBackend.parse(value) is expected


def test_unknown_backend_is_rejected():
    with pytest.raises(ValueError):
        StoreBackend.parse("mongo")


def test_sheets_store_is_built_lazily_without_credentials():
    store = build_record_store(backend="sheets", sheets_config={})
    assert store.backend is StoreBackend.SHEETS


def test_mysql_store_does_not_connect_at_build_time():
    DatabaseConnection.reset_instance()
    try:
        store = build_record_store(backend="mysql", db_config={"host": "db.invalid"})
        assert store.backend is StoreBackend.MYSQL
        assert not DatabaseConnection.get_instance(None).schema_ready
    finally:
        DatabaseConnection.reset_instance()


@pytest.mark.parametrize(
    "env,module",
    [
        ("production", "library_kiosk.settings.production"),
        ("testing", "library_kiosk.settings.testing"),
        ("anything", "library_kiosk.settings.development"),
    ],
)
def test_settings_module_selection(monkeypatch, env, module):
    monkeypatch.setenv("APP_ENV", env)
    assert get_settings_module() == module


def test_container_rejects_unknown_timezone(memory_store):
    settings = SimpleNamespace(LIBRARY_TIMEZONE="Mars/Olympus")
    with pytest.raises(ConfigurationError):
        build_container(settings, store=memory_store)


def test_container_accepts_configured_timezone(memory_store):
    container = build_container(SimpleNamespace(LIBRARY_TIMEZONE="UTC"), store=memory_store)
    assert container.attendance_service.now().utcoffset().total_seconds() == 0
