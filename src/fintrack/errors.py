"""Domain error taxonomy and its JSON rendering."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from flask import Flask, jsonify
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)


class FinTrackError(Exception):
    """Base class for business-rule failures surfaced to API callers."""

    status_code = 500
    code = "internal_error"

    def __init__(self, message: str, *, errors: Mapping[str, list[str]] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.errors = dict(errors) if errors else {}

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.code, "message": self.message}
        if self.errors:
            payload["errors"] = self.errors
        return payload


class ValidationError(FinTrackError):
    """Missing or malformed input."""

    status_code = 400
    code = "validation_error"


class InsufficientBalance(FinTrackError):
    """An expense would take the account below zero."""

    status_code = 400
    code = "insufficient_balance"


class Unauthorized(FinTrackError):
    status_code = 401
    code = "unauthorized"


class Forbidden(FinTrackError):
    """The caller is authenticated but does not own the resource."""

    status_code = 403
    code = "forbidden"


class NotFound(FinTrackError):
    status_code = 404
    code = "not_found"


class Conflict(FinTrackError):
    """The request clashes with existing state (e.g. a duplicate budget)."""

    status_code = 409
    code = "conflict"


class InternalError(FinTrackError):
    status_code = 500
    code = "internal_error"


def error_response(error: FinTrackError):
    """Return a Flask ``(response, status)`` pair for a domain error."""

    return jsonify(error.to_dict()), error.status_code


def register_error_handlers(app: Flask) -> None:
    """Render every failure as a JSON body with the mapped status code."""

    @app.errorhandler(FinTrackError)
    def _handle_domain_error(error: FinTrackError):
        if error.status_code >= 500:
            logger.error("Request failed: %s", error.message)
        return error_response(error)

    @app.errorhandler(HTTPException)
    def _handle_http_error(error: HTTPException):
        payload = {
            "error": (error.name or "error").lower().replace(" ", "_"),
            "message": error.description,
        }
        return jsonify(payload), error.code or 500

    @app.errorhandler(SQLAlchemyError)
    def _handle_database_error(error: SQLAlchemyError):
        logger.exception("Persistence failure")
        return error_response(InternalError("A database error occurred."))

    @app.errorhandler(Exception)
    def _handle_unexpected(error: Exception):
        logger.exception("Unhandled error")
        return error_response(InternalError("An unexpected error occurred."))
