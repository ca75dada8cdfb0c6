"""Error Hierarchy — typed, categorized exceptions for all catalog failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Input errors (400-level) are the caller's fault; never retried automatically
    - to_response() produces the envelope consumed by the external transport
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with CatalogError base: one handler can catch all (ADR: uniform error shape)
    - ErrorContext as dataclass: rich observability without coupling to logging framework
    - http_status kept on each error as a hint for the transport layer, which lives outside this package
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
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    entity_id: str | None = None
    entity_ref: str | None = None
    user_message: str | None = None
    debug_info: dict[str, Any] | None = None


class CatalogError(Exception):
    """Base exception for all catalog errors."""

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

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.context.user_message or self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "entity_id": self.context.entity_id,
                    "entity_ref": self.context.entity_ref,
                },
            }
        }


# ─── Input Errors (400-level) ───────────────────────────────────

class MalformedCursorError(CatalogError):
    """Pagination cursor could not be decoded."""
    def __init__(self, reason: str, context: ErrorContext | None = None):
        super().__init__(
            f"Malformed after cursor, {reason}",
            "MALFORMED_CURSOR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.reason = reason


class InvalidFilterError(CatalogError):
    """Filter tree has an unrecognized shape."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"Invalid filter: {message}",
            "INVALID_FILTER", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )


class InvalidEntityRefError(CatalogError):
    """Entity reference string could not be parsed."""
    def __init__(self, ref: str, reason: str, context: ErrorContext | None = None):
        super().__init__(
            f"Invalid entity reference '{ref}': {reason}",
            "INVALID_ENTITY_REF", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.ref = ref


class InvalidFieldsError(CatalogError):
    """Field projection request is empty or malformed."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"Invalid fields: {message}",
            "INVALID_FIELDS", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )


class EntityNotFoundError(CatalogError):
    """Entity reference does not resolve to a live entity."""
    def __init__(self, entity_ref: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.entity_ref = entity_ref
        super().__init__(
            f"No such entity {entity_ref}",
            "ENTITY_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, ctx, 404,
        )
        self.entity_ref = entity_ref


class UnsupportedOperationError(CatalogError):
    """Write-style operation invoked on the read-oriented catalog."""
    def __init__(self, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"{operation} is not supported by the catalog read path; "
            "use the ingestion pipeline instead",
            "UNSUPPORTED_OPERATION", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 501,
        )
        self.operation = operation


# ─── Internal Errors (500-level) ────────────────────────────────

class DeserializationError(CatalogError):
    """Stored entity document could not be parsed."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"Corrupt stored entity: {message}",
            "DESERIALIZATION_ERROR", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, context, 500,
        )


class DatabaseError(CatalogError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
