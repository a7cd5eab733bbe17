from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import error_response, json_body, json_errors
from ..core import messages
from ..container import Container


def _purposes_from_body(body: dict) -> list[str]:
    """``purposes: [...]``, or the legacy single ``purpose`` field."""

    purposes = body.get("purposes")
    if isinstance(purposes, (list, tuple)):
        return [str(p) for p in purposes if p is not None]
    if isinstance(purposes, str):
        return [purposes]
    purpose = body.get("purpose")
    if purpose is not None:
        return [str(purpose)]
    return []


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    @app.route("/attendance", methods=["GET"], endpoint="attendance_list")
    @json_errors
    def attendance_list():
        listing = service.list_visits(
            month=request.args.get("month"),
            search=request.args.get("search"),
        )
        return jsonify(listing.to_dict())

    @app.route("/attendance", methods=["POST"], endpoint="attendance_create")
    @json_errors
    def attendance_create():
        body = json_body()
        student_code = str(body.get("studentCode") or "").strip()
        purposes = _purposes_from_body(body)
        if not student_code or not any(p.strip() for p in purposes):
            return error_response(messages.MISSING_FIELDS, 400)

        service.record_visit(student_code, purposes)
        return jsonify({"success": True})

    @app.route("/attendance/<entry_id>", methods=["DELETE"], endpoint="attendance_delete")
    @json_errors
    def attendance_delete(entry_id: str):
        service.delete_visit(entry_id)
        return jsonify({"success": True})
