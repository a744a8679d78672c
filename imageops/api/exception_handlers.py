"""
FastAPI exception handlers for structured error logging.

ServiceErrors are rendered as {"error": {"code", "message", "details"},
"status_code"} so clients can branch on the error code.
"""

from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from imageops.core.errors import ErrorCode, ServiceError, bad_input_error
from imageops.core.logging_config import get_logger


logger = get_logger(__name__)


def _client_host(request: Request) -> str:
    return request.client.host if request.client else "unknown"


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    """Render a classified service error.

    Client errors are logged as warnings, engine failures as errors.
    """
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        "service_error",
        method=request.method,
        path=str(request.url.path),
        status_code=exc.status_code,
        code=exc.code.value,
        error_message=exc.message,
        client_host=_client_host(request),
    )

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": exc.detail,
            "status_code": exc.status_code,
        },
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle framework HTTP exceptions (unknown routes, wrong methods)."""
    logger.warning(
        "http_exception",
        method=request.method,
        path=str(request.url.path),
        status_code=exc.status_code,
        detail=exc.detail,
        client_host=_client_host(request),
    )

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": exc.detail,
            "status_code": exc.status_code,
        },
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render query-string validation failures as a VAL_002 bad-input error.

    Malformed parameters are caller-fixable like every other bad input, so
    they share the 400 envelope and error code.
    """
    errors = exc.errors()
    fields = [".".join(str(part) for part in error["loc"]) for error in errors]
    first = errors[0] if errors else {"msg": "Invalid request parameters"}

    error = bad_input_error(
        ErrorCode.VAL_INVALID_PARAMETER,
        f"{fields[0]}: {first['msg']}" if fields else first["msg"],
        details={"fields": fields},
    )
    return await service_error_handler(request, error)


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions with structured logging."""
    logger.error(
        "unhandled_exception",
        method=request.method,
        path=str(request.url.path),
        error_type=type(exc).__name__,
        error_message=str(exc),
        client_host=_client_host(request),
        exc_info=True,
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal server error",
            "status_code": 500,
        },
    )
