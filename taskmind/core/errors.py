"""Domain exceptions and error classification for the HTTP surface."""

from enum import Enum

from pydantic import BaseModel, ValidationError

from taskmind.core.config import constants


class NotFoundError(KeyError):
    """A task, streak, or daily summary does not exist for the given key."""

    def __str__(self) -> str:
        # KeyError repr-quotes its message
        return str(self.args[0]) if self.args else ""


class AlreadyCompletedError(ValueError):
    """The task was already completed for this calendar day."""


class ValidationFailureError(ValueError):
    """Malformed identifier, date, or missing required field."""


class CascadeError(RuntimeError):
    """A best-effort correction of a streak or daily summary failed."""


class ErrorCategory(Enum):
    """Categories of errors surfaced to callers."""

    NOT_FOUND = "not_found"
    ALREADY_COMPLETED = "already_completed"
    VALIDATION_FAILED = "validation_failed"
    UNKNOWN = "unknown"


class ErrorSeverity(Enum):
    """Severity levels for errors."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ErrorCode:
    """Error codes for specific error conditions."""

    ERR_NOT_FOUND = "ERR_NOT_FOUND"
    ERR_ALREADY_COMPLETED = "ERR_ALREADY_COMPLETED"
    ERR_VALIDATION_FAILED = "ERR_VALIDATION_FAILED"
    ERR_UNKNOWN = "ERR_UNKNOWN"


class ErrorResponse(BaseModel):
    """Structured error response with user-friendly messaging."""

    code: str
    message: str
    suggestion: str
    severity: ErrorSeverity


def classify_error(exception: Exception) -> ErrorCategory:
    """Map an exception raised by the service layer to its category."""
    if isinstance(exception, NotFoundError):
        return ErrorCategory.NOT_FOUND
    if isinstance(exception, AlreadyCompletedError):
        return ErrorCategory.ALREADY_COMPLETED
    if isinstance(exception, ValidationFailureError | ValidationError):
        return ErrorCategory.VALIDATION_FAILED
    return ErrorCategory.UNKNOWN


def classify_error_with_response(exception: Exception) -> tuple[int, ErrorResponse]:
    """Classify an error and return the HTTP status with a structured response.

    Args:
        exception: The exception raised during request handling

    Returns:
        Tuple of (http_status_code, ErrorResponse)
    """
    category = classify_error(exception)

    if category == ErrorCategory.NOT_FOUND:
        return constants.HTTP_NOT_FOUND, ErrorResponse(
            code=ErrorCode.ERR_NOT_FOUND,
            message=str(exception) or "Not found.",
            suggestion="Refresh your task list and try again.",
            severity=ErrorSeverity.LOW,
        )

    if category == ErrorCategory.ALREADY_COMPLETED:
        return constants.HTTP_BAD_REQUEST, ErrorResponse(
            code=ErrorCode.ERR_ALREADY_COMPLETED,
            message=str(exception) or "Already marked for today.",
            suggestion="Fetch the task's streak to see its current state.",
            severity=ErrorSeverity.LOW,
        )

    if category == ErrorCategory.VALIDATION_FAILED:
        return constants.HTTP_BAD_REQUEST, ErrorResponse(
            code=ErrorCode.ERR_VALIDATION_FAILED,
            message=str(exception) or "Invalid request.",
            suggestion="Check the identifiers and dates in your request.",
            severity=ErrorSeverity.LOW,
        )

    return constants.HTTP_SERVER_ERROR, ErrorResponse(
        code=ErrorCode.ERR_UNKNOWN,
        message="An unexpected error occurred.",
        suggestion="Please try again later. If the problem persists, contact support.",
        severity=ErrorSeverity.HIGH,
    )
