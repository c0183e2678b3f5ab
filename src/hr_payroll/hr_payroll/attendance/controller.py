from __future__ import annotations

from datetime import date
from typing import Any, Optional

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date, parse_iso_datetime
from ..common.http import (
    admin_required,
    csv_response,
    current_user_id,
    error_response,
    internal_error,
    json_body,
    login_required,
    optional_int,
)
from ..core.exceptions import DomainError, ValidationError
from ..container import Container

EXPORT_FIELDS = [
    "employee",
    "email",
    "date",
    "status",
    "clock_in",
    "clock_out",
    "total_hours",
    "regular_hours",
    "overtime_hours",
]


def _parse_instant(value: Any, field_name: str):
    if value in (None, ""):
        return None
    try:
        return parse_iso_datetime(str(value))
    except ValueError:
        raise ValidationError(f"Invalid {field_name}")


def _parse_range() -> tuple[Optional[date], Optional[date]]:
    start_s = request.args.get("startDate")
    end_s = request.args.get("endDate")
    if not start_s or not end_s:
        return None, None
    try:
        return parse_iso_date(start_s[:10]), parse_iso_date(end_s[:10])
    except ValueError:
        raise ValidationError("Dates must be YYYY-MM-DD")


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    @app.route("/api/attendance/clock-in", methods=["POST"], endpoint="attendance_clock_in")
    @login_required
    def clock_in():
        try:
            body = json_body()
            record = service.clock_in(
                current_user_id(),
                status=body.get("status"),
                clock_in_time=_parse_instant(body.get("clockInTime"), "clockInTime"),
            )
            return jsonify({"message": f"Clocked in as {record.status.value}", "attendance": record.to_dict()}), 201
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error("clocking in")

    @app.route("/api/attendance/clock-out", methods=["POST"], endpoint="attendance_clock_out")
    @login_required
    def clock_out():
        try:
            body = json_body()
            record = service.clock_out(
                current_user_id(),
                clock_out_time=_parse_instant(body.get("clockOutTime"), "clockOutTime"),
            )
            return jsonify({"message": "Clocked out successfully", "attendance": record.to_dict()}), 200
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error("clocking out")

    @app.route("/api/attendance", methods=["POST"], endpoint="attendance_mark")
    @login_required
    def mark_attendance():
        try:
            body = json_body()
            record = service.legacy_mark(
                current_user_id(),
                status=body.get("status"),
                clock_in_time=_parse_instant(body.get("clockInTime"), "clockInTime"),
            )
            return jsonify({"message": f"Attendance marked as {record.status.value}", "attendance": record.to_dict()}), 200
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error("marking attendance")

    @app.route("/api/attendance/today", methods=["GET"], endpoint="attendance_today")
    @login_required
    def today():
        try:
            record = service.get_today(current_user_id())
            return jsonify(record.to_dict() if record else {}), 200
        except Exception:
            return internal_error("fetching today's attendance")

    @app.route("/api/attendance", methods=["GET"], endpoint="attendance_history")
    @login_required
    def history():
        try:
            records = service.list_for_user(current_user_id())
            return jsonify({"count": len(records), "attendance": [r.to_dict() for r in records]}), 200
        except Exception:
            return internal_error("fetching attendance")

    @app.route("/api/attendance/admin-attendance", methods=["GET"], endpoint="attendance_admin_list")
    @admin_required
    def admin_attendance():
        try:
            start, end = _parse_range()
            rows = service.list_all(start=start, end=end, user_id=optional_int(request.args.get("employeeId")))
            return jsonify({"attendanceRecords": [r.to_dict() for r in rows]}), 200
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error("fetching attendance records")

    @app.route("/api/attendance/export.csv", methods=["GET"], endpoint="attendance_export")
    @admin_required
    def export_attendance():
        try:
            start, end = _parse_range()
            rows = service.export_rows(start=start, end=end)
            filename = f"attendance-{date.today().isoformat()}.csv"
            return csv_response(rows, fieldnames=EXPORT_FIELDS, filename=filename)
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error("exporting attendance")
