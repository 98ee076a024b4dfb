"""JSON envelope helpers and application-wide error handlers."""
from __future__ import annotations

import logging
from typing import Any, Optional

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException, NotFound

from ..core.exceptions import DomainError

logger = logging.getLogger(__name__)


def ok(data: Any = None, message: Optional[str] = None, status: int = 200):
    body: dict = {"success": True}
    if message:
        body["message"] = message
    if data is not None:
        body["data"] = data
    return jsonify(body), status


def fail(message: str, status: int, **extra):
    body = {
        "success": False,
        "status": "fail" if 400 <= status < 500 else "error",
        "message": message,
    }
    body.update(extra)
    return jsonify(body), status


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        logger.info("%s %s -> %s: %s", request.method, request.path, e.status_code, e.message)
        return fail(e.message, e.status_code)

    @app.errorhandler(NotFound)
    def handle_not_found(e: NotFound):
        return fail(f"Route not found - {request.path}", 404)

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return fail(e.description or e.name, e.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        if bool(app.config.get("DEBUG", False)):
            return fail("Something went wrong", 500, error=repr(e))
        return fail("Something went wrong", 500)
