# Overview: Service error taxonomy and the Flask handlers that render it as JSON.

"""
Service Errors

Every failure a service can report maps to one stable, machine-readable
kind. Routes never build error payloads for these themselves; the handlers
registered here turn them into {"error": ..., "kind": ...} responses.

StoreFailure is opaque to the caller: the message it carries is logged
server-side, the response only says an internal error occurred.
"""

from flask import jsonify, request, current_app
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import RequestEntityTooLarge


class ServiceError(Exception):
    """Base for all errors surfaced to API callers."""
    kind = "service_error"
    status_code = 500

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.message, "kind": self.kind}


class Unauthenticated(ServiceError):
    """Bad or missing credentials / caller identity."""
    kind = "unauthenticated"
    status_code = 401


class PermissionDenied(ServiceError):
    """Caller's role does not allow the operation."""
    kind = "permission_denied"
    status_code = 403


class NotFound(ServiceError):
    """Referenced record does not exist (or is outside the caller's scope)."""
    kind = "not_found"
    status_code = 404


class ValidationError(ServiceError):
    """Missing required field or otherwise unusable input."""
    kind = "validation_error"
    status_code = 400


class StoreFailure(ServiceError):
    """Underlying database or blob store failed."""
    kind = "store_failure"
    status_code = 500

    def to_dict(self) -> dict:
        return {"error": "Internal server error", "kind": self.kind}


def _store_failure_response(exc: Exception, message: str):
    current_app.logger.error(
        "Store failure during %s %s: %s", request.method, request.path, message,
        exc_info=exc,
    )
    return jsonify(StoreFailure(message).to_dict()), StoreFailure.status_code


def register_error_handlers(app) -> None:
    @app.errorhandler(ServiceError)
    def handle_service_error(exc: ServiceError):
        if isinstance(exc, StoreFailure):
            from .extensions import db
            db.session.rollback()
            return _store_failure_response(exc.__cause__ or exc, exc.message)
        return jsonify(exc.to_dict()), exc.status_code

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(exc: SQLAlchemyError):
        from .extensions import db
        db.session.rollback()
        return _store_failure_response(exc, f"{type(exc).__name__}: {exc}")

    @app.errorhandler(RequestEntityTooLarge)
    def handle_too_large(exc: RequestEntityTooLarge):
        err = ValidationError("Upload too large")
        return jsonify(err.to_dict()), 413
