from __future__ import annotations

from flask import Flask, jsonify, request

from ..access.decorators import admin_required
from ..common.http import error_response, json_body, json_errors
from ..core import messages
from ..container import Container
from .model import StudentImportRow


def _int_arg(name: str, default: int | None) -> int | None:
    raw = request.args.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def register(app: Flask, container: Container) -> None:
    directory = container.student_directory
    require_admin = admin_required(container.admin_access)

    @app.route("/students/<student_code>", methods=["GET"], endpoint="student_detail")
    @json_errors
    def student_detail(student_code: str):
        student = directory.find_by_code(student_code)
        if not student:
            return error_response(messages.STUDENT_NOT_FOUND, 404)
        return jsonify({"student": student.to_dict()})

    @app.route("/admin/students", methods=["GET"], endpoint="admin_students")
    @require_admin
    @json_errors
    def admin_students():
        page = directory.list_students(
            search=request.args.get("search"),
            class_level=request.args.get("classLevel"),
            # Absent -> any room; present but empty -> students without a room.
            room=request.args.get("room"),
            page=_int_arg("page", 1),
            limit=_int_arg("limit", None),
        )
        return jsonify(page.to_dict())

    @app.route("/admin/students/import", methods=["POST"], endpoint="admin_students_import")
    @require_admin
    @json_errors
    def admin_students_import():
        rows = json_body().get("rows")
        if not isinstance(rows, list):
            return error_response(messages.MISSING_FIELDS, 400)

        parsed = [StudentImportRow.from_mapping(r) for r in rows if isinstance(r, dict)]
        processed = directory.bulk_upsert(parsed)
        return jsonify({"processed": processed})

    @app.route("/admin/students/delete", methods=["POST"], endpoint="admin_students_delete")
    @require_admin
    @json_errors
    def admin_students_delete():
        codes = json_body().get("codes")
        if not isinstance(codes, list):
            return error_response(messages.MISSING_FIELDS, 400)

        removed = directory.delete_by_codes([str(c) for c in codes if c is not None])
        return jsonify({"success": True, "removed": removed})

    @app.route("/admin/students/codes", methods=["GET"], endpoint="admin_student_codes")
    @require_admin
    @json_errors
    def admin_student_codes():
        return jsonify({"codes": directory.list_codes()})

    @app.route("/admin/students/classrooms", methods=["GET"], endpoint="admin_student_classrooms")
    @require_admin
    @json_errors
    def admin_student_classrooms():
        return jsonify({"classRooms": [c.to_dict() for c in directory.list_class_rooms()]})
