from __future__ import annotations

from flask import Flask, request

from ..auth.guards import current_employee
from ..common.http import json_body, ok
from ..common.pagination import page_request
from ..container import Container
from ..core.constants import ALL_LEAVES_PAGE_SIZE, MY_LEAVES_PAGE_SIZE
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    prefix = app.config["API_PREFIX"] + "/leaves"
    guards = container.guards
    service = container.leave_service

    @app.route(prefix, methods=["POST"], endpoint="leaves_create")
    @guards.login_required
    def create_leave():
        leave = service.create(current_employee(), json_body())
        return ok({"leave": leave.to_dict()}, "Leave request submitted successfully", 201)

    @app.route(f"{prefix}/my-leaves", methods=["GET"], endpoint="leaves_mine")
    @guards.login_required
    def my_leaves():
        args = request.args
        page = page_request(args.get("page"), args.get("limit"), default_limit=MY_LEAVES_PAGE_SIZE)
        return ok(service.my_leaves(current_employee(), page=page, status=args.get("status")))

    @app.route(f"{prefix}/all", methods=["GET"], endpoint="leaves_all")
    @guards.roles_required(Role.HR, Role.MANAGER)
    def all_leaves():
        args = request.args
        page = page_request(args.get("page"), args.get("limit"), default_limit=ALL_LEAVES_PAGE_SIZE)
        return ok(service.all_leaves(page=page, status=args.get("status"), employee_id=args.get("employeeId")))

    @app.route(f"{prefix}/stats", methods=["GET"], endpoint="leaves_stats")
    @guards.roles_required(Role.HR, Role.MANAGER)
    def leave_stats():
        return ok(service.stats())

    @app.route(f"{prefix}/<int:request_id>/status", methods=["PATCH"], endpoint="leaves_decide")
    @guards.roles_required(Role.HR, Role.MANAGER)
    def decide(request_id: int):
        leave = service.decide(current_employee(), request_id, json_body())
        return ok({"leave": leave.to_dict()}, f"Leave request {leave.status.value.lower()} successfully")

    @app.route(f"{prefix}/<int:request_id>", methods=["DELETE"], endpoint="leaves_delete")
    @guards.login_required
    def delete_leave(request_id: int):
        service.delete(current_employee(), request_id)
        return ok(message="Leave request deleted successfully")
