from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import as_date, as_datetime, as_enum, as_int, json_body, require_field
from ..container import Container
from ..core.enums import AttendanceStatus, CheckMethod


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/check-in", methods=["POST"], endpoint="attendance_check_in")
    def check_in():
        data = json_body()
        record = container.attendance_service.check_in(
            as_int(require_field(data, "employee_id"), "employee_id"),
            work_date=as_date(data["date"], "date") if data.get("date") else None,
            now=as_datetime(data.get("time"), "time"),
            method=as_enum(CheckMethod, data.get("method") or "web", "method"),
            status=as_enum(AttendanceStatus, data["status"], "status") if data.get("status") else None,
            note=data.get("note"),
        )
        return jsonify({"attendance": record.to_dict()}), 201

    @app.route("/api/attendance/check-out", methods=["PUT"], endpoint="attendance_check_out")
    def check_out():
        data = json_body()
        break_minutes = data.get("break_minutes")
        record = container.attendance_service.check_out(
            as_int(require_field(data, "employee_id"), "employee_id"),
            work_date=as_date(data["date"], "date") if data.get("date") else None,
            now=as_datetime(data.get("time"), "time"),
            method=as_enum(CheckMethod, data.get("method") or "web", "method"),
            break_minutes=as_int(break_minutes, "break_minutes") if break_minutes is not None else None,
        )
        return jsonify({"attendance": record.to_dict()})

    @app.route("/api/attendance/<int:employee_id>/summary", methods=["GET"], endpoint="attendance_summary")
    def summary(employee_id: int):
        start = as_date(require_field(request.args, "start"), "start")
        end = as_date(require_field(request.args, "end"), "end")
        result = container.attendance_service.summarize(employee_id, start, end)
        return jsonify({"summary": result.to_dict()})

    @app.route("/api/attendance/<int:employee_id>/history", methods=["GET"], endpoint="attendance_history")
    def history(employee_id: int):
        limit = as_int(request.args.get("limit", 30), "limit")
        rows = container.attendance_service.history(employee_id, limit=limit)
        return jsonify({"attendance": [r.to_dict() for r in rows]})
