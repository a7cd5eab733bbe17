from __future__ import annotations

import importlib

import pytest

from library_kiosk.container import build_container
from library_kiosk.core import messages
from library_kiosk.core.constants import ADMIN_SESSION_COOKIE
from library_kiosk.core.enums import StoreBackend
from library_kiosk.core.exceptions import BackendError
from library_kiosk.main import create_app
from library_kiosk.store.base import RecordStore


def make_client(monkeypatch, store):
    monkeypatch.setenv("APP_ENV", "testing")
    settings = importlib.import_module("library_kiosk.settings.testing")
    app = create_app(build_container(settings, store=store))
    return app.test_client()


@pytest.fixture
def client(monkeypatch, memory_store):
    return make_client(monkeypatch, memory_store)


def login(client, password="test-admin"):
    return client.post("/admin/login", json={"password": password})


def test_checkin_then_list_current_month(client):
    resp = client.post("/attendance", json={"studentCode": "19311", "purposes": ["อ่านหนังสือ", "ยืมหนังสือ"]})
    assert resp.status_code == 200
    assert resp.get_json() == {"success": True}

    resp = client.get("/attendance")
    assert resp.status_code == 200
    data = resp.get_json()
    assert [r["studentCode"] for r in data["records"]] == ["19311"]
    assert data["records"][0]["purposes"] == ["อ่านหนังสือ", "ยืมหนังสือ"]
    assert data["stats"]["totalRecords"] == 1
    assert data["stats"]["purposeCounts"] == {"อ่านหนังสือ": 1, "ยืมหนังสือ": 1}


def test_checkin_accepts_single_purpose_field(client):
    assert client.post("/attendance", json={"studentCode": "19312", "purpose": "A"}).status_code == 200
    records = client.get("/attendance?search=19312").get_json()["records"]
    assert records[0]["purposes"] == ["A"]


@pytest.mark.parametrize(
    "body",
    [
        {},
        {"studentCode": "19311"},
        {"studentCode": "", "purposes": ["A"]},
        {"studentCode": "19311", "purposes": ["  "]},
    ],
)
def test_checkin_with_missing_fields_is_400(client, body):
    resp = client.post("/attendance", json=body)
    assert resp.status_code == 400
    assert resp.get_json() == {"error": messages.MISSING_FIELDS}


def test_checkin_for_unknown_student_is_404(client):
    resp = client.post("/attendance", json={"studentCode": "99999", "purposes": ["A"]})
    assert resp.status_code == 404
    assert resp.get_json() == {"error": messages.UNKNOWN_STUDENT}


def test_listing_other_month_is_empty(client):
    client.post("/attendance", json={"studentCode": "19311", "purposes": ["A"]})
    data = client.get("/attendance?month=1999-01").get_json()
    assert data == {"records": [], "stats": {"totalRecords": 0, "uniqueStudents": 0, "purposeCounts": {}}}


def test_delete_attendance(client, attendance_table):
    client.post("/attendance", json={"studentCode": "19311", "purposes": ["A"]})
    entry_id = attendance_table.rows[0]["id"]

    assert client.delete(f"/attendance/{entry_id}").get_json() == {"success": True}
    assert client.delete(f"/attendance/{entry_id}").status_code == 200
    assert attendance_table.rows == []

    resp = client.delete("/attendance/abc")
    assert resp.status_code == 400
    assert resp.get_json() == {"error": messages.INVALID_ID}


def test_student_lookup(client):
    resp = client.get("/students/19311")
    assert resp.status_code == 200
    assert resp.get_json()["student"]["firstName"] == "Somchai"

    resp = client.get("/students/00000")
    assert resp.status_code == 404
    assert resp.get_json() == {"error": messages.STUDENT_NOT_FOUND}


def test_admin_routes_require_login(client):
    for path in ("/admin/students", "/admin/students/codes", "/admin/students/classrooms"):
        resp = client.get(path)
        assert resp.status_code == 401
        assert resp.get_json() == {"error": messages.ADMIN_REQUIRED}
    assert client.post("/admin/students/import", json={"rows": []}).status_code == 401


def test_admin_login_session_and_logout(client):
    assert client.get("/admin/session").get_json() == {"authenticated": False}

    resp = login(client, "wrong")
    assert resp.status_code == 401
    assert resp.get_json() == {"error": messages.ADMIN_PASSWORD_INVALID}

    resp = login(client, "")
    assert resp.status_code == 400

    resp = login(client)
    assert resp.status_code == 200
    cookie = resp.headers["Set-Cookie"]
    assert cookie.startswith(f"{ADMIN_SESSION_COOKIE}=test-session")
    assert "HttpOnly" in cookie
    assert "SameSite=Lax" in cookie
    assert client.get("/admin/session").get_json() == {"authenticated": True}

    client.post("/admin/logout")
    assert client.get("/admin/session").get_json() == {"authenticated": False}


def test_admin_roster_management(client):
    login(client)

    page = client.get("/admin/students", query_string={"classLevel": "ม.1", "limit": 1, "page": 2}).get_json()
    assert page["total"] == 2
    assert [s["studentCode"] for s in page["students"]] == ["19312"]

    resp = client.post(
        "/admin/students/import",
        json={"rows": [{"studentCode": "30001", "firstName": "Mali", "lastName": "Dee", "classLevel": "ม.3", "room": "2"}]},
    )
    assert resp.get_json() == {"processed": 1}
    assert "30001" in client.get("/admin/students/codes").get_json()["codes"]
    assert {"classLevel": "ม.3", "room": "2"} in client.get("/admin/students/classrooms").get_json()["classRooms"]

    resp = client.post("/admin/students/delete", json={"codes": ["30001"]})
    assert resp.get_json() == {"success": True, "removed": 1}
    assert client.get("/students/30001").status_code == 404

    assert client.post("/admin/students/import", json={}).status_code == 400


def test_health_ok(client):
    assert client.get("/health").get_json() == {"status": "ok", "backend": "sheets"}


def test_health_reports_backend_failure(monkeypatch, student_repo, attendance_repo):
    def down():
        raise BackendError("spreadsheet unreachable")

    store = RecordStore(backend=StoreBackend.SHEETS, students=student_repo, attendance=attendance_repo, health_check=down)
    resp = make_client(monkeypatch, store).get("/health")
    assert resp.status_code == 500
    assert resp.get_json() == {"status": "error", "message": "spreadsheet unreachable"}


def test_backend_failure_during_request_is_500(monkeypatch, memory_store, students_table):
    def broken_read():
        raise BackendError(messages.SHEETS_UNAVAILABLE)

    monkeypatch.setattr(students_table, "read", broken_read)
    resp = make_client(monkeypatch, memory_store).get("/students/19311")
    assert resp.status_code == 500
    assert resp.get_json() == {"error": messages.SHEETS_UNAVAILABLE}


def test_health_reports_unexpected_failure_as_json(monkeypatch, student_repo, attendance_repo):
    def crash():
        raise RuntimeError("socket closed")

    store = RecordStore(backend=StoreBackend.MYSQL, students=student_repo, attendance=attendance_repo, health_check=crash)
    resp = make_client(monkeypatch, store).get("/health")
    assert resp.status_code == 500
    assert resp.get_json() == {"status": "error", "message": "socket closed"}
