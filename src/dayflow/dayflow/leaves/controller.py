from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import as_date, as_enum, as_int, json_body, require_field
from ..container import Container
from ..core.enums import LeaveType


def register(app: Flask, container: Container) -> None:
    @app.route("/api/leaves", methods=["POST"], endpoint="leaves_apply")
    def apply_leave():
        data = json_body()
        req = container.leave_service.apply(
            as_int(require_field(data, "employee_id"), "employee_id"),
            as_enum(LeaveType, require_field(data, "leave_type"), "leave_type"),
            as_date(require_field(data, "start_date"), "start_date"),
            as_date(require_field(data, "end_date"), "end_date"),
            half_day=bool(data.get("half_day", False)),
            reason=data.get("reason") or "",
        )
        return jsonify({"leave": req.to_dict()}), 201

    @app.route("/api/leaves/<int:employee_id>/balance", methods=["GET"], endpoint="leaves_balance")
    def check_balance(employee_id: int):
        result = container.leave_service.check_balance(
            employee_id,
            as_enum(LeaveType, require_field(request.args, "leave_type"), "leave_type"),
            request.args.get("days", "0"),
        )
        return jsonify({"balance": result.to_dict()})

    @app.route("/api/leaves/<int:request_id>/approve", methods=["PUT"], endpoint="leaves_approve")
    def approve(request_id: int):
        data = json_body()
        req = container.leave_service.approve(request_id, as_int(require_field(data, "approver_id"), "approver_id"))
        return jsonify({"leave": req.to_dict()})

    @app.route("/api/leaves/<int:request_id>/reject", methods=["PUT"], endpoint="leaves_reject")
    def reject(request_id: int):
        data = json_body()
        req = container.leave_service.reject(
            request_id,
            as_int(require_field(data, "approver_id"), "approver_id"),
            data.get("reason") or "",
        )
        return jsonify({"leave": req.to_dict()})

    @app.route("/api/leaves/<int:request_id>/cancel", methods=["PUT"], endpoint="leaves_cancel")
    def cancel(request_id: int):
        data = json_body()
        req = container.leave_service.cancel(request_id, as_int(require_field(data, "employee_id"), "employee_id"))
        return jsonify({"leave": req.to_dict()})

    @app.route("/api/leaves/<int:employee_id>/summary", methods=["GET"], endpoint="leaves_summary")
    def yearly_summary(employee_id: int):
        year = as_int(require_field(request.args, "year"), "year")
        rows = container.leave_service.yearly_summary(employee_id, year)
        return jsonify({"year": year, "summary": [r.to_dict() for r in rows]})

    @app.route("/api/leaves/<int:employee_id>", methods=["GET"], endpoint="leaves_list")
    def list_leaves(employee_id: int):
        rows = container.leave_service.list_for_employee(employee_id)
        return jsonify({"count": len(rows), "leaves": [r.to_dict() for r in rows]})
