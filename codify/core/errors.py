"""Error Hierarchy — typed, categorized exceptions for every Codify failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Exactly four domain kinds: not_found, conflict, invalid_operation, storage
    - StorageFailure always carries the original driver exception as `cause`
    - to_response() produces the REST envelope; no driver details leak into it

Design Decisions:
    - Single hierarchy with CodifyError base: FastAPI global handler catches all
    - http_status travels with the error but is only read by api/error_handlers.py
    - UnauthorizedActorError subclasses InvalidOperationError: same kind, 401 status
    - StorageFailure → 503 (retryable store condition); 500 is reserved for
      the unhandled-exception catch-all in api/error_handlers.py
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """Error kinds exposed by the core."""
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    INVALID_OPERATION = "invalid_operation"
    STORAGE = "storage"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    user_id: int | None = None
    project_id: int | None = None
    debug_info: dict[str, Any] | None = None


class CodifyError(Exception):
    """Base exception for all Codify errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    @property
    def kind(self) -> ErrorCategory:
        return self.category

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "user_id": self.context.user_id,
                    "project_id": self.context.project_id,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class NotFoundError(CodifyError):
    """Referenced user, project, technology or favorite edge is absent."""
    def __init__(
        self, resource_type: str, resource_id: object, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class ConflictError(CodifyError):
    """Duplicate favorite edge or duplicate email."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, context, 409,
        )


class InvalidOperationError(CodifyError):
    """Operation is structurally forbidden (self-reference, wrong actor)."""
    def __init__(
        self,
        message: str,
        code: str = "INVALID_OPERATION",
        context: ErrorContext | None = None,
        http_status: int = 422,
    ):
        super().__init__(
            message, code, ErrorCategory.INVALID_OPERATION,
            ErrorSeverity.WARNING, context, http_status,
        )


class UnauthorizedActorError(InvalidOperationError):
    """Requester is not the subject or owner the operation requires."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(message, "UNAUTHORIZED_ACTOR", context, 401)


# ─── Infrastructure Errors (500-level) ──────────────────────────

class StorageFailure(CodifyError):
    """Connection, transaction or statement error from the underlying store."""
    def __init__(
        self,
        message: str,
        operation: str,
        cause: BaseException | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Database {operation} failed: {message}",
            "STORAGE_FAILURE", ErrorCategory.STORAGE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
        self.cause = cause
