from __future__ import annotations

from flask import Flask, request

from ..auth.guards import current_employee
from ..common.http import ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    prefix = app.config["API_PREFIX"] + "/notifications"
    guards = container.guards
    service = container.notification_service

    @app.route(prefix, methods=["GET"], endpoint="notifications_list")
    @guards.login_required
    def list_notifications():
        data = service.list_for_user(
            current_employee().user_id,
            unread=request.args.get("unread"),
            limit=request.args.get("limit"),
        )
        return ok(data)

    @app.route(f"{prefix}/<int:notification_id>/read", methods=["PATCH"], endpoint="notifications_read")
    @guards.login_required
    def mark_read(notification_id: int):
        service.mark_read(notification_id, current_employee().user_id)
        return ok(message="Notification marked as read")
