from __future__ import annotations

from datetime import timedelta

from flask import Flask, jsonify, session

from ..common.http import (
    admin_required,
    current_user_id,
    error_response,
    internal_error,
    json_body,
    login_required,
)
from ..core.constants import DEFAULT_SESSION_DAYS
from ..core.exceptions import DomainError
from ..container import Container

_EDITABLE_FIELDS = (
    "full_name",
    "email",
    "position",
    "phone_number",
    "basic_salary",
    "employee_status",
    "department_name",
)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/login", methods=["POST"], endpoint="login")
    def login():
        body = json_body()
        try:
            s_user = container.auth_service.authenticate(body.get("email", ""), body.get("password", ""))

            session.clear()
            session.permanent = bool(body.get("rememberMe"))
            app.permanent_session_lifetime = timedelta(days=DEFAULT_SESSION_DAYS)

            session["user_id"] = s_user.user_id
            session["name"] = s_user.full_name
            session["role"] = s_user.role.value

            app.logger.info("User %s logged in", s_user.user_id)
            return (
                jsonify(
                    {
                        "user_id": s_user.user_id,
                        "full_name": s_user.full_name,
                        "email": s_user.email,
                        "role": s_user.role.value,
                        "employee_status": s_user.employee_status.value,
                    }
                ),
                200,
            )
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error("logging in")

    @app.route("/api/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"message": "Logout successfully"}), 200

    @app.route("/api/auth/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        try:
            employee = container.user_service.get_employee(current_user_id())
            return jsonify({"success": True, "user": employee.to_dict()}), 200
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error("loading the current user")

    @app.route("/api/employees", methods=["GET"], endpoint="employees_list")
    @login_required
    def list_employees():
        try:
            employees = container.user_service.list_employees()
            return jsonify([e.to_dict() for e in employees]), 200
        except Exception:
            return internal_error("listing employees")

    @app.route("/api/employees", methods=["POST"], endpoint="employees_create")
    @admin_required
    def create_employee():
        body = json_body()
        try:
            employee = container.user_service.register_employee(
                actor_id=current_user_id(),
                full_name=body.get("full_name"),
                email=body.get("email"),
                password=body.get("password"),
                position=body.get("position"),
                phone_number=body.get("phone_number"),
                basic_salary=body.get("basic_salary"),
                employee_status=body.get("employee_status") or "Active",
                role=body.get("role") or "employee",
                department_name=body.get("department_name"),
            )
            return jsonify({"message": "Employee registered successfully", "user": employee.to_dict()}), 201
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error("registering employee")

    @app.route("/api/employees/<int:user_id>", methods=["GET"], endpoint="employees_detail")
    @login_required
    def get_employee(user_id: int):
        try:
            return jsonify(container.user_service.get_employee(user_id).to_dict()), 200
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error("fetching employee")

    @app.route("/api/employees/<int:user_id>", methods=["PUT"], endpoint="employees_update")
    @admin_required
    def update_employee(user_id: int):
        body = json_body()
        changes = {k: body[k] for k in _EDITABLE_FIELDS if k in body}
        try:
            employee = container.user_service.update_employee(
                actor_id=current_user_id(), user_id=user_id, changes=changes
            )
            return jsonify({"message": "Employee updated successfully", "user": employee.to_dict()}), 200
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error("updating employee")

    @app.route("/api/employees/<int:user_id>", methods=["DELETE"], endpoint="employees_delete")
    @admin_required
    def delete_employee(user_id: int):
        try:
            container.user_service.delete_employee(actor_id=current_user_id(), user_id=user_id)
            return jsonify({"message": "User deleted successfully"}), 200
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error("deleting employee")
