from __future__ import annotations

import logging
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional, TypeVar

from flask import Flask, jsonify, request

from ..core.exceptions import ConflictError, DomainError, NotFoundError, StateError, ValidationError
from .datetime_utils import parse_iso_date, parse_iso_datetime, to_local_naive

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)

STATUS_BY_KIND = {
    ValidationError.kind: 422,
    NotFoundError.kind: 404,
    ConflictError.kind: 409,
    StateError.kind: 409,
}


def error_payload(code: str, message: str) -> dict:
    return {"error": {"code": code, "message": message}}


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(exc: DomainError):
        status = STATUS_BY_KIND.get(exc.kind, 400)
        logger.info("request rejected", extra={"path": request.path, "kind": exc.kind, "detail": exc.message})
        return jsonify(error_payload(exc.kind, exc.message)), status


def json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def require_field(data: dict, name: str) -> Any:
    value = data.get(name)
    if value is None or value == "":
        raise ValidationError(f"{name} is required")
    return value


def as_int(value: Any, name: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be an integer")


def as_date(value: Any, name: str) -> date:
    try:
        return parse_iso_date(str(value))
    except ValueError:
        raise ValidationError(f"{name} must be a date (YYYY-MM-DD)")


def as_datetime(value: Optional[str], name: str) -> Optional[datetime]:
    if not value:
        return None
    try:
        parsed = parse_iso_datetime(str(value))
    except ValueError:
        raise ValidationError(f"{name} must be an ISO datetime")
    return to_local_naive(parsed)


def as_enum(enum_cls: type[E], value: Any, name: str) -> E:
    try:
        return enum_cls(str(value).lower())
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(f"{name} must be one of: {allowed}")
