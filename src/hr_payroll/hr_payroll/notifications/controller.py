from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import admin_required, current_user_id, error_response, internal_error, json_body, login_required
from ..core.exceptions import DomainError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.notification_service

    @app.route("/api/notifications", methods=["GET"], endpoint="notifications_list")
    @login_required
    def list_notifications():
        try:
            items = service.list_for_user(current_user_id())
            return (
                jsonify(
                    {
                        "message": "Notifications retrieved successfully",
                        "count": len(items),
                        "notifications": [n.to_dict() for n in items],
                    }
                ),
                200,
            )
        except Exception:
            return internal_error("retrieving notifications")

    @app.route("/api/notifications/unread-count", methods=["GET"], endpoint="notifications_unread_count")
    @login_required
    def unread_count():
        try:
            return jsonify({"unreadCount": service.unread_count(current_user_id())}), 200
        except Exception:
            return internal_error("counting unread notifications")

    @app.route("/api/notifications/<int:notification_id>/read", methods=["PATCH"], endpoint="notifications_mark_read")
    @login_required
    def mark_read(notification_id: int):
        try:
            item = service.mark_read(user_id=current_user_id(), notification_id=notification_id)
            return jsonify({"message": "Notification marked as read", "notification": item.to_dict()}), 200
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error("marking notification as read")

    @app.route("/api/notifications/mark-all-read", methods=["PATCH"], endpoint="notifications_mark_all_read")
    @login_required
    def mark_all_read():
        try:
            count = service.mark_all_read(user_id=current_user_id())
            return jsonify({"message": "All notifications marked as read", "modifiedCount": count}), 200
        except Exception:
            return internal_error("marking all notifications as read")

    @app.route("/api/notifications/send", methods=["POST"], endpoint="notifications_send")
    @admin_required
    def send():
        try:
            body = json_body()
            count = service.send(
                sender_id=current_user_id(),
                recipients=body.get("recipients"),
                title=body.get("title"),
                message=body.get("message"),
                type=body.get("type") or "system",
            )
            return jsonify({"message": "Notifications sent successfully", "recipientCount": count}), 201
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error("sending notifications")
