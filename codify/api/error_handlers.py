"""Error Handlers — map exceptions to the JSON error envelope.

Invariants:
    - CodifyError → exc.http_status with exc.to_response()
      (not_found 404, conflict 409, invalid_operation 422, unauthorized 401,
      storage 503)
    - RequestValidationError → 400, one details entry per offending field
    - Anything else → 500 with a fixed message; internals stay in the log
    - StorageFailure is logged at ERROR with its cause; expected domain
      outcomes (404/409/422/401) at INFO
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from codify.core.errors import CodifyError, ErrorSeverity, StorageFailure

logger = logging.getLogger(__name__)


def _envelope(code: str, message: str, category: str, severity: ErrorSeverity,
              **fields) -> dict:
    return {
        "error": {
            "code": code,
            "message": message,
            "category": category,
            "severity": severity.value,
            **fields,
        },
    }


async def handle_codify_error(request: Request, exc: CodifyError) -> JSONResponse:
    extra = {
        "error_code": exc.code,
        "path": request.url.path,
        "user_id": exc.context.user_id,
        "project_id": exc.context.project_id,
    }
    if isinstance(exc, StorageFailure):
        logger.error(
            f"{exc.message} (cause: {exc.cause!r})",
            extra={**extra, "operation": exc.operation},
        )
    else:
        logger.info(f"{exc.kind.value}: {exc.message}", extra=extra)
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


async def handle_validation_error(
    request: Request, exc: RequestValidationError,
) -> JSONResponse:
    details = [
        {
            "field": ".".join(str(part) for part in err["loc"]),
            "message": err["msg"],
            "type": err["type"],
        }
        for err in exc.errors()
    ]
    logger.info(
        f"Rejected payload ({len(details)} field error(s))",
        extra={"path": request.url.path, "error_code": "VALIDATION_ERROR"},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_envelope(
            "VALIDATION_ERROR", "Invalid request data", "validation",
            ErrorSeverity.WARNING, details=details,
        ),
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled {type(exc).__name__}",
        extra={"path": request.url.path},
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_envelope(
            "INTERNAL_ERROR", "An unexpected error occurred", "internal",
            ErrorSeverity.CRITICAL,
        ),
    )


def register_error_handlers(app: FastAPI) -> None:
    """Attach all handlers; called once from main.py after routers."""
    app.add_exception_handler(CodifyError, handle_codify_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
