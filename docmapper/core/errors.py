"""Error Hierarchy — typed, categorized exceptions for all docmapper failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Caller errors (schema, validation, filter, connection) are raised to the caller
    - StoreCommitError is raised by the store but never escapes a Model write
    - to_dict() produces a stable envelope for logging and API layers

Design Decisions:
    - Single hierarchy with DocMapperError base: one except clause catches all
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and caller handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    SCHEMA = "schema"
    VALIDATION = "validation"
    QUERY = "query"
    STORE = "store"
    CONNECTION = "connection"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    collection: str | None = None
    operation: str | None = None
    document_id: str | None = None
    debug_info: dict[str, Any] | None = None


class DocMapperError(Exception):
    """Base exception for all docmapper errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()

    def to_dict(self) -> dict:
        """Convert to a standardized error envelope."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "collection": self.context.collection,
                    "operation": self.context.operation,
                    "document_id": self.context.document_id,
                    "debug_info": self.context.debug_info,
                },
            }
        }


# ─── Caller Errors ──────────────────────────────────────────────

class SchemaDefinitionError(DocMapperError):
    """A field descriptor was declared with an unsupported type."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "SCHEMA_DEFINITION_ERROR", ErrorCategory.SCHEMA,
            ErrorSeverity.CRITICAL, context,
        )


class SchemaValidationError(DocMapperError):
    """Document failed schema validation. Carries every collected message."""
    def __init__(self, errors: list[str], context: ErrorContext | None = None):
        super().__init__(
            f"Validation failed: {', '.join(errors)}",
            "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context,
        )
        self.errors = list(errors)


class InvalidFilterError(DocMapperError):
    """Filter expression could not be interpreted."""
    def __init__(self, message: str, path: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INVALID_FILTER", ErrorCategory.QUERY,
            ErrorSeverity.ERROR, context,
        )
        self.path = path


class InvalidUpdateError(DocMapperError):
    """Update expression could not be interpreted."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INVALID_UPDATE", ErrorCategory.QUERY,
            ErrorSeverity.ERROR, context,
        )


class StoreNotConnectedError(DocMapperError):
    """An operation needed the store before connect() was called."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Not connected to the document store. Call connect() first.",
            "STORE_NOT_CONNECTED", ErrorCategory.CONNECTION,
            ErrorSeverity.CRITICAL, context,
        )


# ─── Store Errors ───────────────────────────────────────────────

class StoreError(DocMapperError):
    """Store operation failed. Reads surface this unmodified."""
    def __init__(
        self, message: str, operation: str, context: ErrorContext | None = None,
        code: str = "STORE_ERROR",
    ):
        super().__init__(
            f"Store {operation} failed: {message}",
            code, ErrorCategory.STORE,
            ErrorSeverity.CRITICAL, context,
        )
        self.operation = operation


class StoreCommitError(StoreError):
    """A write or batch commit failed; no write of the batch was applied."""
    def __init__(self, message: str, operation: str = "commit", context: ErrorContext | None = None):
        super().__init__(message, operation, context, code="STORE_COMMIT_ERROR")

