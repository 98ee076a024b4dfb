from __future__ import annotations

from flask import Flask, request

from ..common.http import json_body, ok
from ..common.pagination import page_request
from ..container import Container
from ..core.constants import EMPLOYEES_PAGE_SIZE
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    prefix = app.config["API_PREFIX"] + "/employees"
    guards = container.guards
    service = container.employee_service

    @app.route(prefix, methods=["GET"], endpoint="employees_list")
    @guards.roles_required(Role.HR, Role.MANAGER)
    def list_employees():
        args = request.args
        page = page_request(args.get("page"), args.get("limit"), default_limit=EMPLOYEES_PAGE_SIZE)
        data = service.list_employees(
            page=page,
            search=args.get("search"),
            department=args.get("department"),
            status=args.get("status"),
        )
        return ok(data)

    @app.route(f"{prefix}/stats", methods=["GET"], endpoint="employees_stats")
    @guards.roles_required(Role.HR, Role.MANAGER)
    def employee_stats():
        return ok(service.stats())

    @app.route(prefix, methods=["POST"], endpoint="employees_create")
    @guards.roles_required(Role.HR)
    def create_employee():
        employee = service.create_employee(json_body())
        return ok({"employee": employee.to_dict()}, "Employee created successfully", 201)

    @app.route(f"{prefix}/<int:user_id>", methods=["GET"], endpoint="employees_get")
    @guards.login_required
    def get_employee(user_id: int):
        return ok({"employee": service.get(user_id).to_dict()})

    @app.route(f"{prefix}/<int:user_id>", methods=["PUT"], endpoint="employees_update")
    @guards.roles_required(Role.HR, Role.MANAGER)
    def update_employee(user_id: int):
        employee = service.update_employee(user_id, json_body())
        return ok({"employee": employee.to_dict()}, "Employee updated successfully")

    @app.route(f"{prefix}/<int:user_id>", methods=["DELETE"], endpoint="employees_delete")
    @guards.roles_required(Role.HR)
    def delete_employee(user_id: int):
        service.deactivate(user_id)
        return ok(message="Employee deactivated successfully")
