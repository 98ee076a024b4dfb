from __future__ import annotations

from flask import Flask, request

from ..auth.guards import current_employee
from ..common.http import json_body, ok
from ..common.pagination import page_request
from ..container import Container
from ..core.constants import ALL_PAYROLL_PAGE_SIZE, MY_PAYROLL_PAGE_SIZE
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    prefix = app.config["API_PREFIX"] + "/payroll"
    guards = container.guards
    service = container.payroll_service

    @app.route(f"{prefix}/my-payroll", methods=["GET"], endpoint="payroll_mine")
    @guards.login_required
    def my_payroll():
        args = request.args
        page = page_request(args.get("page"), args.get("limit"), default_limit=MY_PAYROLL_PAGE_SIZE)
        return ok(service.my_payroll(current_employee(), page=page, month=args.get("month")))

    @app.route(f"{prefix}/all", methods=["GET"], endpoint="payroll_all")
    @guards.roles_required(Role.HR)
    def all_payrolls():
        args = request.args
        page = page_request(args.get("page"), args.get("limit"), default_limit=ALL_PAYROLL_PAGE_SIZE)
        data = service.all_payrolls(
            page=page,
            month=args.get("month"),
            employee_id=args.get("employeeId"),
            status=args.get("status"),
        )
        return ok(data)

    @app.route(prefix, methods=["POST"], endpoint="payroll_create")
    @guards.roles_required(Role.HR)
    def create_payroll():
        record = service.create(json_body())
        return ok({"payroll": record.to_dict()}, "Payroll created successfully", 201)

    @app.route(f"{prefix}/<int:payroll_id>", methods=["GET"], endpoint="payroll_get")
    @guards.login_required
    def get_payroll(payroll_id: int):
        return ok({"payroll": service.get(current_employee(), payroll_id).to_dict()})

    @app.route(f"{prefix}/<int:payroll_id>", methods=["PUT"], endpoint="payroll_update")
    @guards.roles_required(Role.HR)
    def update_payroll(payroll_id: int):
        record = service.update(payroll_id, json_body())
        return ok({"payroll": record.to_dict()}, "Payroll updated successfully")

    @app.route(f"{prefix}/<int:payroll_id>/process-payment", methods=["POST"], endpoint="payroll_pay")
    @guards.roles_required(Role.HR)
    def process_payment(payroll_id: int):
        record = service.process_payment(payroll_id, json_body())
        return ok({"payroll": record.to_dict()}, "Payment processed successfully")

    @app.route(f"{prefix}/<int:payroll_id>/payslip", methods=["GET"], endpoint="payroll_payslip")
    @guards.login_required
    def payslip(payroll_id: int):
        return ok({"payslip": service.payslip(current_employee(), payroll_id)})
