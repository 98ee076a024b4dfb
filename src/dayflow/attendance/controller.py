from __future__ import annotations

from flask import Flask, request

from ..auth.guards import current_employee
from ..common.http import json_body, ok
from ..common.pagination import page_request
from ..container import Container
from ..core.constants import ALL_ATTENDANCE_PAGE_SIZE, MY_ATTENDANCE_PAGE_SIZE
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    prefix = app.config["API_PREFIX"] + "/attendance"
    guards = container.guards
    service = container.attendance_service

    @app.route(f"{prefix}/check-in", methods=["POST"], endpoint="attendance_check_in")
    @guards.login_required
    def check_in():
        body = json_body()
        record = service.check_in(current_employee(), latitude=body.get("latitude"), longitude=body.get("longitude"))
        return ok({"attendance": record.to_dict()}, "Checked in successfully")

    @app.route(f"{prefix}/check-out", methods=["POST"], endpoint="attendance_check_out")
    @guards.login_required
    def check_out():
        body = json_body()
        record = service.check_out(current_employee(), latitude=body.get("latitude"), longitude=body.get("longitude"))
        return ok({"attendance": record.to_dict()}, "Checked out successfully")

    @app.route(f"{prefix}/my-attendance", methods=["GET"], endpoint="attendance_mine")
    @guards.login_required
    def my_attendance():
        args = request.args
        page = page_request(args.get("page"), args.get("limit"), default_limit=MY_ATTENDANCE_PAGE_SIZE)
        data = service.my_attendance(
            current_employee(),
            page=page,
            start_date=args.get("startDate"),
            end_date=args.get("endDate"),
        )
        return ok(data)

    @app.route(f"{prefix}/my-today", methods=["GET"], endpoint="attendance_my_today")
    @guards.login_required
    def my_today():
        record = service.my_today(current_employee())
        return ok({"attendance": record.to_dict() if record else None})

    @app.route(f"{prefix}/all", methods=["GET"], endpoint="attendance_all")
    @guards.roles_required(Role.HR, Role.MANAGER)
    def all_attendance():
        args = request.args
        page = page_request(args.get("page"), args.get("limit"), default_limit=ALL_ATTENDANCE_PAGE_SIZE)
        data = service.all_attendance(
            page=page,
            start_date=args.get("startDate"),
            end_date=args.get("endDate"),
            employee_id=args.get("employeeId"),
            status=args.get("status"),
        )
        return ok(data)

    @app.route(f"{prefix}/today", methods=["GET"], endpoint="attendance_today")
    @guards.roles_required(Role.HR, Role.MANAGER)
    def today():
        return ok(service.today_overview())

    @app.route(f"{prefix}/mark-leave", methods=["POST"], endpoint="attendance_mark_leave")
    @guards.roles_required(Role.HR, Role.MANAGER)
    def mark_leave():
        service.mark_leave(json_body())
        return ok(message="Leave marked successfully")
