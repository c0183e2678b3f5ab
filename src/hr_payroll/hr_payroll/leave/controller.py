from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import admin_required, current_user_id, error_response, internal_error, json_body, login_required
from ..core.exceptions import DomainError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.leave_service

    @app.route("/api/leave", methods=["GET"], endpoint="leave_types_list")
    @login_required
    def list_leave_types():
        try:
            types = service.list_types()
            return (
                jsonify(
                    {
                        "message": "All leave types retrieved successfully",
                        "count": len(types),
                        "leaveTypes": [t.to_dict() for t in types],
                    }
                ),
                200,
            )
        except Exception:
            return internal_error("retrieving leave types")

    @app.route("/api/leave/<int:leave_type_id>", methods=["POST"], endpoint="leave_apply")
    @login_required
    def apply(leave_type_id: int):
        try:
            result = service.apply(user_id=current_user_id(), leave_type_id=leave_type_id)
            if result.action == "removed":
                return (
                    jsonify(
                        {
                            "message": result.message,
                            "action": result.action,
                            "requestId": result.request.leave_request_id,
                        }
                    ),
                    200,
                )
            return (
                jsonify({"message": result.message, "action": result.action, "request": result.request.to_dict()}),
                201,
            )
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error("applying for leave")

    @app.route("/api/leave/my-leaves", methods=["GET"], endpoint="leave_mine")
    @login_required
    def my_leaves():
        try:
            leaves = service.list_for_user(current_user_id())
            return (
                jsonify(
                    {
                        "message": "Leave requests retrieved successfully",
                        "count": len(leaves),
                        "leaves": [r.to_dict() for r in leaves],
                    }
                ),
                200,
            )
        except Exception:
            return internal_error("retrieving leave requests")

    @app.route("/api/admin/leave", methods=["GET"], endpoint="admin_leave_list")
    @admin_required
    def list_leave_requests():
        try:
            return jsonify({"leaveRequests": [r.to_dict() for r in service.list_all()]}), 200
        except Exception:
            return internal_error("listing leave requests")

    @app.route("/api/admin/leave", methods=["POST"], endpoint="admin_leave_type_create")
    @admin_required
    def create_leave_type():
        body = json_body()
        try:
            leave_type = service.create_type(
                actor_id=current_user_id(),
                name=body.get("name"),
                description=body.get("description"),
                max_days=body.get("maxDays"),
                requires_approval=body.get("requiresApproval", True),
            )
            return jsonify({"message": "Leave created successfully", "leave": leave_type.to_dict()}), 201
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error("creating leave type")

    @app.route("/api/admin/leave/<int:leave_type_id>", methods=["DELETE"], endpoint="admin_leave_type_delete")
    @admin_required
    def delete_leave_type(leave_type_id: int):
        try:
            service.delete_type(actor_id=current_user_id(), leave_type_id=leave_type_id)
            return jsonify({"message": "Leave type deleted successfully"}), 200
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error("deleting leave type")

    @app.route(
        "/api/admin/leave/toggle-leave/<int:leave_request_id>", methods=["PATCH"], endpoint="admin_leave_toggle"
    )
    @admin_required
    def toggle_leave(leave_request_id: int):
        try:
            leave = service.toggle_decision(admin_id=current_user_id(), leave_request_id=leave_request_id)
            return (
                jsonify({"message": f"Leave {leave.status.value.lower()} successfully", "leave": leave.to_dict()}),
                200,
            )
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error("toggling leave status")
