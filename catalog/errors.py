import logging
from typing import Any, Dict, List

from flask import request
from werkzeug.exceptions import HTTPException, BadRequest, UnsupportedMediaType

from .metrics import record_validation_issues

logger = logging.getLogger(__name__)


# -----------------------------
# Application errors
# -----------------------------

class ValidationError(Exception):
    """One or more field constraints failed; rendered as 400 with every issue."""

    status_code = 400

    def __init__(self, issues: List[Dict[str, Any]]):
        super().__init__(f"{len(issues)} validation issue(s)")
        self.issues = issues


class NotFoundError(Exception):
    """No record matches the requested id; rendered as 404 with a fixed message."""

    status_code = 404

    def __init__(self, message: str = "Movie not found"):
        super().__init__(message)
        self.message = message


# -----------------------------
# JSON error handlers
# -----------------------------

def install_json_error_handlers(app):
    @app.errorhandler(ValidationError)
    def handle_validation(e: ValidationError):
        record_validation_issues(e.issues)
        return {"error": e.issues}, e.status_code

    @app.errorhandler(NotFoundError)
    def handle_not_found(e: NotFoundError):
        return {"message": e.message}, e.status_code

    @app.errorhandler(HTTPException)
    def handle_http(e: HTTPException):
        return {
            "error": {
                "status": e.code,
                "code": e.name.replace(" ", "_").upper(),
                "message": e.description
            }
        }, e.code

    @app.errorhandler(Exception)
    def handle_generic(e: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        # Avoid leaking details in production responses
        return {
            "error": {
                "status": 500,
                "code": "INTERNAL_SERVER_ERROR",
                "message": "Internal Server Error"
            }
        }, 500


# -----------------------------
# Request helpers
# -----------------------------

def expect_json():
    if request.method in {"POST", "PUT", "PATCH"}:
        ctype = request.headers.get("Content-Type", "")
        if "application/json" not in ctype:
            raise UnsupportedMediaType("Use Content-Type: application/json")

def read_json() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    if data is None:
        raise BadRequest("Invalid or missing JSON body")
    if not isinstance(data, dict):
        raise BadRequest("JSON body must be an object")
    return data
