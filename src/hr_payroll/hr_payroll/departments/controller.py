from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import admin_required, current_user_id, error_response, internal_error, json_body, login_required
from ..core.exceptions import DomainError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.department_service

    @app.route("/api/departments", methods=["GET"], endpoint="departments_list")
    @login_required
    def list_departments():
        try:
            departments = service.list_departments()
            return jsonify({"departments": [d.to_dict() for d in departments]}), 200
        except Exception:
            return internal_error("listing departments")

    @app.route("/api/departments", methods=["POST"], endpoint="departments_create")
    @admin_required
    def create_department():
        body = json_body()
        try:
            department = service.create(
                actor_id=current_user_id(), name=body.get("name"), description=body.get("description")
            )
            return jsonify({"message": "Department created successfully", "department": department.to_dict()}), 201
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error("creating department")

    @app.route("/api/departments/<int:dept_id>", methods=["DELETE"], endpoint="departments_delete")
    @admin_required
    def delete_department(dept_id: int):
        try:
            service.delete(actor_id=current_user_id(), dept_id=dept_id)
            return jsonify({"message": "Department deleted successfully"}), 200
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error("deleting department")
