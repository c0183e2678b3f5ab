from __future__ import annotations

from datetime import date

from flask import Flask, jsonify, request

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
from ..core.exceptions import DomainError
from ..container import Container

EXPORT_FIELDS = [
    "employee",
    "email",
    "position",
    "period",
    "basic_salary",
    "regular_hours",
    "overtime_hours",
    "regular_pay",
    "overtime_pay",
    "gross_pay",
    "paye",
    "nhif",
    "nssf",
    "total_deductions",
    "net_pay",
    "status",
]


def _period_filter() -> tuple:
    year = optional_int(request.args.get("year"))
    month = optional_int(request.args.get("month"))
    if year is None or month is None:
        return None, None
    return year, month


def register(app: Flask, container: Container) -> None:
    service = container.payroll_service

    @app.route("/api/payroll/current-month-projection", methods=["GET"], endpoint="payroll_projection")
    @login_required
    def current_month_projection():
        try:
            return jsonify(service.current_month_projection(current_user_id())), 200
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error("calculating salary projection")

    @app.route("/api/payroll/my-payrolls", methods=["GET"], endpoint="payroll_mine")
    @login_required
    def my_payrolls():
        try:
            year, month = _period_filter()
            records = service.list_for_employee(current_user_id(), year=year, month=month)
            return jsonify({"count": len(records), "payrolls": [r.to_dict() for r in records]}), 200
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error("fetching payroll records")

    @app.route("/api/payroll/my-payroll/<int:payroll_id>", methods=["GET"], endpoint="payroll_mine_detail")
    @login_required
    def my_payroll(payroll_id: int):
        try:
            record = service.get_for_employee(user_id=current_user_id(), payroll_id=payroll_id)
            return jsonify(record.to_dict()), 200
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error("fetching payroll record")

    @app.route("/api/payroll/generate", methods=["POST"], endpoint="payroll_generate")
    @admin_required
    def generate():
        try:
            body = json_body()
            result = service.generate_for_month(
                month=body.get("month"),
                year=body.get("year"),
                actor_id=current_user_id(),
            )
            return (
                jsonify(
                    {
                        "message": f"Generated payroll for {result.generated} employees",
                        "generated": result.generated,
                        "total_employees": result.total_employees,
                        "errors": result.errors,
                    }
                ),
                201,
            )
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error("generating payroll")

    @app.route("/api/payroll/all", methods=["GET"], endpoint="payroll_all")
    @admin_required
    def all_payrolls():
        try:
            year, month = _period_filter()
            records = service.list_payrolls(
                year=year,
                month=month,
                status=request.args.get("status") or None,
                user_id=optional_int(request.args.get("employeeId")),
            )
            return jsonify({"count": len(records), "payrolls": [r.to_dict() for r in records]}), 200
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error("fetching all payroll records")

    @app.route("/api/payroll/<int:payroll_id>/status", methods=["PATCH"], endpoint="payroll_update_status")
    @admin_required
    def update_status(payroll_id: int):
        try:
            record = service.update_status(
                payroll_id=payroll_id,
                status=json_body().get("status"),
                actor_id=current_user_id(),
            )
            return jsonify({"message": f"Payroll status updated to {record.status.value}", "payroll": record.to_dict()}), 200
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error("updating payroll status")

    @app.route("/api/payroll/<int:payroll_id>", methods=["DELETE"], endpoint="payroll_delete")
    @admin_required
    def delete(payroll_id: int):
        try:
            record = service.delete(payroll_id)
            name = record.employee_name or f"employee {record.user_id}"
            return jsonify({"message": f"Payroll record for {name} deleted successfully"}), 200
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error("deleting payroll record")

    @app.route("/api/payroll/export.csv", methods=["GET"], endpoint="payroll_export")
    @admin_required
    def export_payroll():
        try:
            year, month = _period_filter()
            rows = service.export_rows(year=year, month=month)
            filename = f"payroll-{year or 'all'}-{month or 'months'}-{date.today().isoformat()}.csv"
            return csv_response(rows, fieldnames=EXPORT_FIELDS, filename=filename)
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error("exporting payroll")
