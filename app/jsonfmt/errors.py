"""Typed action errors and the JSON error envelope."""

from __future__ import annotations

from typing import Any

from flask import Flask, g, jsonify
from werkzeug.exceptions import HTTPException

STATUS_BY_CODE = {
    "BAD_REQUEST": 400,
    "UNAUTHORIZED": 401,
    "FORBIDDEN": 403,
    "NOT_FOUND": 404,
    "METHOD_NOT_ALLOWED": 405,
    "PAYLOAD_TOO_LARGE": 413,
    "INTERNAL_SERVER_ERROR": 500,
}


class ActionError(Exception):
    """User-facing failure with a machine-readable code."""

    def __init__(self, code: str, message: str, issues: list[str] | None = None) -> None:
        if code not in STATUS_BY_CODE:
            raise ValueError(f"Unknown action error code: {code!r}")
        self.code = code
        self.message = message
        self.issues = issues or []
        super().__init__(message)

    @property
    def status_code(self) -> int:
        return STATUS_BY_CODE[self.code]

    def to_dict(self) -> dict[str, Any]:
        err: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.issues:
            err["issues"] = list(self.issues)
        return {"success": False, "error": err}


def bad_request(issues: list[str]) -> ActionError:
    return ActionError("BAD_REQUEST", issues[0] if len(issues) == 1 else "Invalid input.", issues=issues)


def _http_code(status: int) -> str:
    for code, st in STATUS_BY_CODE.items():
        if st == status:
            return code
    return "BAD_REQUEST" if status < 500 else "INTERNAL_SERVER_ERROR"


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ActionError)
    def _action_error(e: ActionError):
        if e.status_code >= 500:
            app.logger.error("%s: %s (request_id=%s)", e.code, e.message, getattr(g, "request_id", None))
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(HTTPException)
    def _http_error(e: HTTPException):
        status = e.code or 500
        err = ActionError(_http_code(status), e.description or e.name)
        return jsonify(err.to_dict()), status

    @app.errorhandler(Exception)
    def _unhandled(e: Exception):
        # Ensure stack trace shows in logs.
        app.logger.exception("Unhandled error (request_id=%s)", getattr(g, "request_id", None))
        err = ActionError("INTERNAL_SERVER_ERROR", "Something went wrong.")
        return jsonify(err.to_dict()), 500
