"""Error Hierarchy — typed, categorized exceptions for every Pet Provider failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Only four caller-facing kinds exist: UnsupportedResource, MissingField,
      InvalidValue, StorageFailure
    - Validation errors (400-level) are recoverable by correcting input
    - UnsupportedResource is a caller programming error: never retryable
    - StorageFailure (503) surfaces engine failures as-is, no retry is attempted
    - to_response() produces the REST envelope

Design Decisions:
    - Single hierarchy with PetProviderError base: FastAPI global handler catches all
      (ADR: uniform error shape)
    - ErrorContext as dataclass: rich observability without coupling to logging framework
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
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    UNSUPPORTED_RESOURCE = "unsupported_resource"
    STORAGE = "storage"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    uri: str | None = None
    operation: str | None = None
    user_message: str | None = None
    debug_info: dict[str, Any] | None = None


class PetProviderError(Exception):
    """Base exception for all Pet Provider errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
        retryable: bool = False,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status
        self.retryable = retryable

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.context.user_message or self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "retryable": self.retryable,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "uri": self.context.uri,
                    "operation": self.context.operation,
                },
            }
        }


# ─── Caller Errors (400-level) ──────────────────────────────────

class UnsupportedResourceError(PetProviderError):
    """Identifier does not match any registered route, or the operation
    is not allowed on the matched route (e.g. insert on an item)."""
    def __init__(
        self, uri: str, operation: str = "match",
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.uri = uri
        ctx.operation = operation
        super().__init__(
            f"{operation.capitalize()} is not supported for URI '{uri}'",
            "UNSUPPORTED_RESOURCE", ErrorCategory.UNSUPPORTED_RESOURCE,
            ErrorSeverity.ERROR, ctx, 400,
        )
        self.uri = uri
        self.operation = operation


class ValidationError(PetProviderError):
    """Proposed field set violates an entity invariant."""
    def __init__(
        self, message: str, code: str, field: str,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, code, ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )
        self.field = field

    def to_response(self) -> dict:
        response = super().to_response()
        response["error"]["field"] = self.field
        return response


class MissingFieldError(ValidationError):
    """A field required on create was absent from the field set."""
    def __init__(self, field: str, context: ErrorContext | None = None):
        super().__init__(
            f"Pet requires a {field}", "MISSING_FIELD", field, context,
        )


class InvalidValueError(ValidationError):
    """A field was present with an illegal value."""
    def __init__(
        self, field: str, reason: str | None = None,
        context: ErrorContext | None = None,
    ):
        message = f"Pet requires valid {field}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, "INVALID_VALUE", field, context)
        self.reason = reason


# ─── Infrastructure Errors (500-level) ──────────────────────────

class StorageFailureError(PetProviderError):
    """Storage engine rejected or failed the operation."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.operation = operation
        super().__init__(
            f"Storage {operation} failed: {message}",
            "STORAGE_FAILURE", ErrorCategory.STORAGE,
            ErrorSeverity.CRITICAL, ctx, 503,
        )
        self.operation = operation
