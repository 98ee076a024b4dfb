from __future__ import annotations

from flask import Flask

from ..common.http import json_body, ok
from ..container import Container
from .guards import current_employee


def register(app: Flask, container: Container) -> None:
    prefix = app.config["API_PREFIX"] + "/auth"
    guards = container.guards
    auth = container.auth_service

    @app.route(f"{prefix}/signup", methods=["POST"], endpoint="auth_signup")
    def signup():
        body = json_body()
        result = auth.register(
            employee_id=body.get("employeeId"),
            name=body.get("name"),
            email=body.get("email"),
            password=body.get("password"),
            role=body.get("role"),
            department=body.get("department"),
            position=body.get("position"),
        )
        return ok(result.to_dict(), "User registered successfully", 201)

    @app.route(f"{prefix}/login", methods=["POST"], endpoint="auth_login")
    def login():
        body = json_body()
        result = auth.login(email=body.get("email"), password=body.get("password"), role=body.get("role"))
        return ok(result.to_dict(), "Login successful")

    @app.route(f"{prefix}/refresh-token", methods=["POST"], endpoint="auth_refresh")
    def refresh_token():
        access_token = auth.refresh(json_body().get("refreshToken"))
        return ok({"accessToken": access_token}, "Token refreshed successfully")

    @app.route(f"{prefix}/logout", methods=["POST"], endpoint="auth_logout")
    @guards.login_required
    def logout():
        auth.logout(current_employee())
        return ok(message="Logout successful")

    @app.route(f"{prefix}/profile", methods=["GET"], endpoint="auth_profile")
    @guards.login_required
    def profile():
        return ok({"user": current_employee().to_dict()})

    @app.route(f"{prefix}/profile", methods=["PUT"], endpoint="auth_update_profile")
    @guards.login_required
    def update_profile():
        updated = container.employee_service.update_profile(current_employee(), json_body())
        return ok({"user": updated.to_dict()}, "Profile updated successfully")
