"""Centralized error handling rendering the JSON response envelope.

Every failure leaves the API as::

    {"status": "error", "message": "...", "errors": {...}}

where ``errors`` is only present for validation failures.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from flask import Flask, Response, current_app, jsonify
from marshmallow import ValidationError as MarshmallowValidationError
from sqlalchemy.exc import OperationalError
from werkzeug.exceptions import HTTPException

from tokengate.core.logger import ensure_request_id

log = logging.getLogger(__name__)

GENERIC_INTERNAL_MESSAGE = "Internal server error"


def envelope(
    *,
    status: str,
    message: str,
    data: Any = None,
    errors: Any = None,
) -> dict[str, Any]:
    """
    Build the response envelope shared by success and error responses.

    :param status: ``"success"`` or ``"error"``.
    :param message: Human-readable summary safe for clients.
    :param data: Optional payload; omitted when ``None``.
    :param errors: Optional error details; omitted when ``None``.
    :returns: Envelope dictionary.
    :rtype: dict
    """
    body: dict[str, Any] = {"status": status, "message": message}
    if data is not None:
        body["data"] = data
    if errors is not None:
        body["errors"] = errors
    return body


def _error_response(status_code: int, message: str, errors: Any = None) -> tuple[Response, int]:
    return jsonify(envelope(status="error", message=message, errors=errors)), status_code


class APIError(Exception):
    """
    Represent an error with a fixed HTTP status and a client-safe message.

    Parameters
    ----------
    message : str
        Human-readable description presented to clients.
    status_code : int, optional
        HTTP status code to return. Defaults to ``400``.
    errors : Any, optional
        Optional structured details (e.g., validation messages) included in
        the envelope's ``errors`` member.
    """

    status_code: int = HTTPStatus.BAD_REQUEST

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        errors: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = int(status_code)
        self.errors = errors

    def to_envelope(self) -> dict[str, Any]:
        """Serialize the error into the response envelope."""
        return envelope(status="error", message=self.message, errors=self.errors)


class BadRequest(APIError):
    """400 for malformed input."""

    status_code = HTTPStatus.BAD_REQUEST

    def __init__(self, message: str = "Validation failed", errors: Any = None) -> None:
        super().__init__(message, errors=errors)


class Unauthorized(APIError):
    """401 when authentication fails."""

    status_code = HTTPStatus.UNAUTHORIZED

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)


class Forbidden(APIError):
    """403 when authorization denies access."""

    status_code = HTTPStatus.FORBIDDEN

    def __init__(self, message: str = "Forbidden") -> None:
        super().__init__(message)


class NotFound(APIError):
    """404 when resources are missing."""

    status_code = HTTPStatus.NOT_FOUND

    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message)


class Conflict(APIError):
    """409 for uniqueness collisions."""

    status_code = HTTPStatus.CONFLICT

    def __init__(self, message: str = "Conflict") -> None:
        super().__init__(message)


class InternalError(APIError):
    """500 raised deliberately for failures that must not leak details."""

    status_code = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(self, message: str = GENERIC_INTERNAL_MESSAGE) -> None:
        super().__init__(message)


def init_app(app: Flask) -> None:
    """
    Attach JSON error handlers to the Flask app.

    Notes
    -----
    - Every handled error is rendered with the response envelope.
    - Service-layer errors are translated by
      :meth:`tokengate.services._shared.base.BaseService.translate_exceptions`.
    - 5xx are logged with ``exc_info``; 4xx as warnings.
    - Unexpected errors surface their message only when
      ``EXPOSE_INTERNAL_ERRORS`` is enabled.
    """
    from tokengate.services._shared.base import BaseService
    from tokengate.services._shared.errors import ServiceError

    @app.errorhandler(APIError)
    def handle_api_error(err: APIError):
        if err.status_code >= 500:
            log.error(
                "APIError: status=%s msg=%s request_id=%s",
                err.status_code,
                err.message,
                ensure_request_id(),
                exc_info=err.__cause__ is not None,
            )
        else:
            log.warning(
                "APIError: status=%s msg=%s request_id=%s",
                err.status_code,
                err.message,
                ensure_request_id(),
            )
        return jsonify(err.to_envelope()), err.status_code

    @app.errorhandler(ServiceError)
    def handle_service_error(err: ServiceError):
        return handle_api_error(BaseService.translate_exceptions(err))

    @app.errorhandler(MarshmallowValidationError)
    def handle_validation_error(err: MarshmallowValidationError):
        log.warning("ValidationError: request_id=%s", ensure_request_id())
        return _error_response(HTTPStatus.BAD_REQUEST, "Validation failed", err.messages)

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = int(err.code or HTTPStatus.INTERNAL_SERVER_ERROR)
        if status == HTTPStatus.NOT_FOUND:
            message = "Route not found"
        elif status == HTTPStatus.TOO_MANY_REQUESTS:
            message = "Too many requests, please try again later."
        else:
            message = (err.description or HTTPStatus(status).phrase).strip()
        level = log.error if status >= 500 else log.warning
        level("HTTPException: status=%s detail=%s", status, message)
        return _error_response(status, message)

    @app.errorhandler(OperationalError)
    def handle_operational_error(err: OperationalError):
        # E.g., transient DB connectivity, deadlocks, etc.
        log.error("OperationalError: request_id=%s", ensure_request_id(), exc_info=True)
        return _error_response(HTTPStatus.SERVICE_UNAVAILABLE, "Service temporarily unavailable")

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception):
        log.error("Unhandled exception: request_id=%s", ensure_request_id(), exc_info=True)
        message = GENERIC_INTERNAL_MESSAGE
        if current_app.config.get("EXPOSE_INTERNAL_ERRORS"):
            message = str(err) or GENERIC_INTERNAL_MESSAGE
        return _error_response(HTTPStatus.INTERNAL_SERVER_ERROR, message)
