from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import as_int, json_body, require_field
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/employee-codes", methods=["POST"], endpoint="employee_codes_issue")
    def issue():
        data = json_body()
        code = container.sequence_issuer.issue(
            str(require_field(data, "company")),
            str(require_field(data, "first_name")),
            str(require_field(data, "last_name")),
            as_int(require_field(data, "join_year"), "join_year"),
        )
        return jsonify({"employee_code": code}), 201
