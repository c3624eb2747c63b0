from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import as_date, as_enum, as_int, json_body, require_field
from ..container import Container
from ..core.enums import PaymentStatus
from .model import PayPeriod


def _period(data) -> PayPeriod:
    return PayPeriod(
        start_date=as_date(require_field(data, "start_date"), "start_date"),
        end_date=as_date(require_field(data, "end_date"), "end_date"),
    )


def register(app: Flask, container: Container) -> None:
    @app.route("/api/payroll/generate", methods=["POST"], endpoint="payroll_generate")
    def generate():
        data = json_body()
        processed_by = data.get("processed_by")
        record = container.payroll_service.generate(
            as_int(require_field(data, "employee_id"), "employee_id"),
            _period(data),
            processed_by=as_int(processed_by, "processed_by") if processed_by is not None else None,
        )
        return jsonify({"payroll": record.to_dict()}), 201

    @app.route("/api/payroll/preview", methods=["POST"], endpoint="payroll_preview")
    def preview():
        data = json_body()
        breakdown = container.payroll_service.preview(
            as_int(require_field(data, "employee_id"), "employee_id"),
            _period(data),
        )
        return jsonify({"payroll": breakdown.to_dict()})

    @app.route("/api/payroll/<int:payroll_id>/status", methods=["PUT"], endpoint="payroll_status")
    def update_status(payroll_id: int):
        data = json_body()
        record = container.payroll_service.update_payment_status(
            payroll_id,
            as_enum(PaymentStatus, require_field(data, "payment_status"), "payment_status"),
        )
        return jsonify({"payroll": record.to_dict()})

    @app.route("/api/payroll/payslips/<int:employee_id>", methods=["GET"], endpoint="payroll_payslips")
    def payslips(employee_id: int):
        rows = container.payroll_service.payslips(employee_id)
        return jsonify({"count": len(rows), "payslips": [r.to_dict() for r in rows]})

    @app.route("/api/payroll/stats", methods=["GET"], endpoint="payroll_stats")
    def stats():
        totals = container.payroll_service.period_totals(
            as_date(require_field(request.args, "start_date"), "start_date"),
            as_date(require_field(request.args, "end_date"), "end_date"),
        )
        return jsonify({"stats": totals.to_dict()})
