"""Shared Flask helpers: auth decorators and domain-error responses."""

from __future__ import annotations

import csv
import io
from functools import wraps
from typing import Any, Optional

from flask import current_app, jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DomainError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ConflictError, 409),
    (InvalidStateError, 422),
)


def error_response(e: DomainError):
    for exc_type, status in _STATUS_BY_ERROR:
        if isinstance(e, exc_type):
            return jsonify({"message": str(e)}), status
    return jsonify({"message": str(e)}), 400


def internal_error(action: str):
    current_app.logger.exception("Unexpected error while %s", action)
    return jsonify({"message": "Internal server error"}), 500


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"message": "Unauthorized - please log in"}), 401
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"message": "Unauthorized - please log in"}), 401
        if session.get("role") != Role.ADMIN.value:
            return jsonify({"message": "Access denied - Admin only"}), 403
        return view(*args, **kwargs)

    return wrapper


def current_user_id() -> int:
    return int(session["user_id"])


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def optional_int(value: Any) -> Optional[int]:
    if value is None or str(value).strip() == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid number: {value!r}")


def csv_response(rows: list[dict], *, fieldnames: list[str], filename: str):
    """Write report rows to a CSV download (UTF-8 with BOM so Excel detects it)."""
    out = io.StringIO()
    writer = csv.DictWriter(out, fieldnames=fieldnames)
    writer.writeheader()
    for row in rows:
        writer.writerow(row)

    csv_bytes = out.getvalue().encode("utf-8-sig")
    return current_app.response_class(
        csv_bytes,
        mimetype="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
