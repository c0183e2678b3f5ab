from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import admin_required, current_user_id, error_response, internal_error, login_required
from ..core.exceptions import DomainError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.dashboard_service

    @app.route("/api/admin/dashboard-stats", methods=["GET"], endpoint="admin_dashboard_stats")
    @admin_required
    def admin_dashboard_stats():
        try:
            return jsonify(service.admin_stats()), 200
        except Exception:
            return internal_error("building admin dashboard stats")

    @app.route("/api/employee/dashboard-stats", methods=["GET"], endpoint="employee_dashboard_stats")
    @login_required
    def employee_dashboard_stats():
        try:
            return jsonify(service.employee_stats(current_user_id())), 200
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error("building employee dashboard stats")

    @app.route("/api/employee/recent-attendance", methods=["GET"], endpoint="employee_recent_attendance")
    @login_required
    def recent_attendance():
        try:
            items = service.recent_attendance(current_user_id(), limit=request.args.get("limit"))
            return jsonify({"attendance": items}), 200
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error("fetching recent attendance")

    @app.route("/api/employee/leave-history", methods=["GET"], endpoint="employee_leave_history")
    @login_required
    def leave_history():
        try:
            history = container.leave_service.history(
                current_user_id(), page=request.args.get("page"), limit=request.args.get("limit")
            )
            return jsonify(history), 200
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error("fetching leave history")
