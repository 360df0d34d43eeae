# booking_engine/core/errors.py
"""
Domain errors raised by the availability and booking services.

Every error carries a stable ``code`` so a booking UI can tell
"pick another time" (conflict) from "contact the business" (quota/config)
from "fix your input" (validation).
"""
import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class BookingEngineError(Exception):
    """Base class for all domain errors"""

    code = "BOOKING_ERROR"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, **details: Any):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> Dict[str, Any]:
        data = {"success": False, "error": self.code, "message": self.message}
        data.update(self.details)
        return data


class ConfigError(BookingEngineError):
    """Establishment configuration is malformed (e.g. working hours start >= end)"""

    code = "CONFIGURATION_ERROR"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class ConflictError(BookingEngineError):
    """The slot is no longer bookable at commit time"""

    code = "SLOT_UNAVAILABLE"
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, reason: str, message: Optional[str] = None):
        super().__init__(
            message or f"The selected time is no longer available ({reason}). Please pick another time.",
            reason=reason,
        )
        self.reason = reason


class QuotaError(BookingEngineError):
    """The establishment's plan monthly appointment limit is reached"""

    code = "APPOINTMENT_LIMIT_REACHED"
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY

    def __init__(self, limit: int, message: Optional[str] = None):
        super().__init__(
            message or "Monthly appointment limit of the plan reached. Please contact the establishment.",
            limit=limit,
        )
        self.limit = limit


class ValidationError(BookingEngineError):
    """Malformed request input (bad date/time, unknown service, missing field)"""

    code = "VALIDATION_ERROR"
    status_code = status.HTTP_400_BAD_REQUEST


class InvalidTransitionError(ValidationError):
    """Appointment status change not allowed from the current status"""

    code = "INVALID_STATUS_TRANSITION"

    def __init__(self, from_status: str, event: str):
        super().__init__(
            f"Cannot apply '{event}' to an appointment in status '{from_status}'",
            from_status=from_status,
            event=event,
        )


async def booking_engine_error_handler(request: Request, exc: BookingEngineError):
    correlation_id = getattr(request.state, "correlation_id", "unknown")
    if isinstance(exc, ConfigError):
        logger.error(
            f"Establishment configuration error: {exc.message}",
            extra={"correlation_id": correlation_id},
        )
    else:
        logger.info(
            f"{exc.code}: {exc.message}",
            extra={"correlation_id": correlation_id},
        )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    error = ValidationError(
        "Invalid request data",
        errors=[
            {"loc": [str(part) for part in e.get("loc", ())], "msg": e.get("msg")}
            for e in exc.errors()
        ],
    )
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


def register_exception_handlers(app: FastAPI) -> None:
    """Map domain errors to HTTP responses"""
    app.add_exception_handler(BookingEngineError, booking_engine_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
