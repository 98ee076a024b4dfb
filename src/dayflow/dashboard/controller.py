from __future__ import annotations

import csv
import io

from flask import Flask, request

from ..auth.guards import current_employee
from ..common.http import ok
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import ValidationError
from .service import REPORT_COLUMNS


def register(app: Flask, container: Container) -> None:
    prefix = app.config["API_PREFIX"] + "/dashboard"
    guards = container.guards
    service = container.dashboard_service

    def _write_report_csv(*, report: dict, filename: str):
        """Write report rows to a CSV attachment; nested fields are left out."""
        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=REPORT_COLUMNS[report["type"]], extrasaction="ignore")
        writer.writeheader()
        for row in report["data"]:
            writer.writerow(row)

        csv_bytes = out.getvalue().encode("utf-8-sig")
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route(f"{prefix}/employee", methods=["GET"], endpoint="dashboard_employee")
    @guards.login_required
    def employee_dashboard():
        return ok(service.employee_dashboard(current_employee()))

    @app.route(f"{prefix}/admin", methods=["GET"], endpoint="dashboard_admin")
    @guards.roles_required(Role.HR, Role.MANAGER)
    def admin_dashboard():
        return ok(service.admin_dashboard())

    @app.route(f"{prefix}/reports", methods=["GET"], endpoint="dashboard_reports")
    @guards.roles_required(Role.HR, Role.MANAGER)
    def reports():
        args = request.args
        fmt = (args.get("format") or "json").lower()
        if fmt not in ("json", "csv"):
            raise ValidationError("format must be one of: json, csv")

        report = service.report(
            args.get("type"),
            start_date=args.get("startDate"),
            end_date=args.get("endDate"),
            employee_id=args.get("employeeId"),
            department=args.get("department"),
        )
        if fmt == "csv":
            stamp = container.clock.today().strftime("%Y%m%d")
            return _write_report_csv(report=report, filename=f"{report['type']}_report_{stamp}.csv")
        return ok(report)
