"""
Common API utilities for consistent response formatting across all controllers.
"""

import logging
from contextlib import contextmanager
from typing import Any, Iterator, Optional

from flask import jsonify
from werkzeug.exceptions import HTTPException

from barbershop.core.exceptions import (
    ConflictError,
    NoOpError,
    NotFoundError,
    SchedulingError,
    StorageError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Checked in order; subclasses map through their base
ERROR_STATUS_CODES = (
    (ValidationError, 400),
    (NoOpError, 400),
    (NotFoundError, 404),
    (ConflictError, 409),
    (StorageError, 503),
)


def api_response(
    success: bool, message: str, data: Optional[Any] = None, status_code: int = 200
) -> tuple:
    """
    Standardized API response format for all endpoints.

    Args:
        success: Whether the operation was successful
        message: Human-readable message about the operation
        data: Optional data payload
        status_code: HTTP status code

    Returns:
        Tuple of (json_response, status_code)
    """
    response = {"success": success, "message": message}

    if data is not None:
        response["data"] = data

    return jsonify(response), status_code


def status_for(error: SchedulingError) -> int:
    for error_type, status_code in ERROR_STATUS_CODES:
        if isinstance(error, error_type):
            return status_code
    return 500


def error_response(error: SchedulingError) -> tuple:
    from barbershop.schemas.dtos import ErrorResponse

    body = ErrorResponse.from_exception(error)
    data = {"error": body.error}
    if body.details:
        data.update(body.details)
    return api_response(False, body.message, data, status_for(error))


def register_error_handlers(app) -> None:
    """Marshal scheduling errors into JSON responses for every blueprint."""

    @app.errorhandler(SchedulingError)
    def handle_scheduling_error(error: SchedulingError):
        status_code = status_for(error)
        log = logger.error if status_code >= 500 else logger.info
        log(
            "Request failed",
            extra={"context": {"error": error.code, "message": error.message}},
        )
        return error_response(error)

    @app.errorhandler(Exception)
    def handle_unexpected_error(error: Exception):
        if isinstance(error, HTTPException):
            return api_response(False, error.description, status_code=error.code)
        logger.error(
            "Unhandled error",
            extra={"context": {"error": str(error)}},
            exc_info=True,
        )
        return api_response(False, "Internal server error", status_code=500)


@contextmanager
def booking_service_scope() -> Iterator[Any]:
    """Yield a BookingService bound to a fresh session, closing it afterwards."""
    from barbershop.db.session import get_db
    from barbershop.services.booking_service import BookingService

    with get_db() as db:
        yield BookingService.from_session(db)
