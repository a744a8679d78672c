"""
Error Handling System

Two error kinds leave the operation layer:

- BadInputError: a missing or invalid request parameter, or an input buffer
  the engine cannot read. Always caller-fixable. HTTP 400.
- ProcessingError: the image engine failed while transforming an image that
  passed validation. The engine's message is kept as-is. HTTP 500.

Both carry a standardized ErrorCode so clients can branch on it.
"""
from enum import Enum
from typing import Any, Dict, Optional
from fastapi import HTTPException, status


class ErrorCode(str, Enum):
    """Standardized error codes for the entire application."""

    # Validation errors (VAL_xxx)
    VAL_MISSING_PARAMETER = "VAL_001"
    VAL_INVALID_PARAMETER = "VAL_002"
    VAL_UNREADABLE_IMAGE = "VAL_003"
    VAL_EMPTY_BODY = "VAL_004"
    VAL_BODY_TOO_LARGE = "VAL_005"

    # Operation catalog errors (OP_xxx)
    OP_NOT_FOUND = "OP_001"

    # Processing errors (PROC_xxx)
    PROC_ENGINE_FAILURE = "PROC_001"


class ServiceError(HTTPException):
    """
    Base class for business logic errors.

    Converted by the exception handler to a JSON response:

    {
        "code": "VAL_001",
        "message": "Missing required param: height or width",
        "details": {"operation": "crop"}
    }
    """

    def __init__(
        self,
        status_code: int,
        code: ErrorCode,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            status_code=status_code,
            detail={
                "code": code.value,
                "message": message,
                "details": details or {}
            }
        )
        self.code = code
        self.message = message
        self.details = details or {}

    @property
    def http_status(self) -> int:
        return self.status_code

    def __str__(self) -> str:
        return self.message


class BadInputError(ServiceError):
    """Caller-fixable validation failure, raised before the engine runs."""


class ProcessingError(ServiceError):
    """The image engine failed during transformation."""


def bad_input_error(code: ErrorCode, message: str, details: Optional[Dict[str, Any]] = None) -> BadInputError:
    """Create a validation error (400 Bad Request)."""
    return BadInputError(status.HTTP_400_BAD_REQUEST, code, message, details)


def missing_param_error(message: str, details: Optional[Dict[str, Any]] = None) -> BadInputError:
    """Shorthand for the most common validation failure."""
    return bad_input_error(ErrorCode.VAL_MISSING_PARAMETER, message, details)


def processing_error(message: str, details: Optional[Dict[str, Any]] = None) -> ProcessingError:
    """Create an engine failure error (500 Internal Server Error)."""
    return ProcessingError(
        status.HTTP_500_INTERNAL_SERVER_ERROR, ErrorCode.PROC_ENGINE_FAILURE, message, details
    )


def not_found_error(code: ErrorCode, message: str, details: Optional[Dict[str, Any]] = None) -> ServiceError:
    """Create a not-found error (404 Not Found)."""
    return ServiceError(status.HTTP_404_NOT_FOUND, code, message, details)


def payload_too_large_error(message: str, details: Optional[Dict[str, Any]] = None) -> ServiceError:
    """Create a request-size error (413 Content Too Large)."""
    return ServiceError(413, ErrorCode.VAL_BODY_TOO_LARGE, message, details)
