"""Error Hierarchy — typed, categorized exceptions for all journal backend failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are recoverable; infrastructure errors (500-level) are critical
    - to_response() produces the REST error envelope
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with JournalError base: FastAPI global handler catches all (ADR: uniform error shape)
    - ErrorContext as dataclass: rich observability without coupling to logging framework
    - Entry ownership failures are NOT errors: the entry path returns a soft
      {success: false, authorise: false} result so existence never leaks to non-owners
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
    EXTERNAL_API = "external_api"
    INTERNAL = "internal"
    CONFLICT = "conflict"
    AUTHENTICATION = "authentication"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    user_id: str | None = None
    resource: str | None = None
    resource_id: str | None = None
    debug_info: dict[str, Any] | None = None


class JournalError(Exception):
    """Base exception for all journal backend errors."""

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
        error = {
            "code": self.code,
            "message": self.message,
            "category": self.category.value,
            "severity": self.severity.value,
            "timestamp": self.context.timestamp.isoformat(),
            "context": {
                "resource": self.context.resource,
                "resource_id": self.context.resource_id,
            },
        }
        field = getattr(self, "field", None)
        if field:
            error["field"] = field
        return {"error": error}


# ─── Domain Errors (400-level) ──────────────────────────────────

class InvalidInputError(JournalError):
    """Missing, empty or malformed parameter."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.field = field


class InvalidTypeError(InvalidInputError):
    """Catalog item type is not in the whitelist for its kind."""
    def __init__(
        self, item_type: str, kind: str, item_name: str | None = None,
        context: ErrorContext | None = None,
    ):
        target = f" for {kind} '{item_name}'" if item_name else ""
        super().__init__(
            f"Type '{item_type}'{target} is invalid", "type", context,
        )
        self.code = "INVALID_TYPE"
        self.item_type = item_type


class LinkRuleViolationError(JournalError):
    """Entry link does not go from an Unpleasant entry to a Pleasant one."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "LINK_RULE_VIOLATION", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 400,
        )
        self.field = "linked_entry"


class DuplicateNameError(JournalError):
    """Catalog item name already used by another item of the same kind."""
    def __init__(self, name: str, kind: str, context: ErrorContext | None = None):
        super().__init__(
            f"{kind.capitalize()} name '{name}' is already in use",
            "DUPLICATE_NAME", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )
        self.name = name
        self.kind = kind


class ResourceAlreadyExistsError(JournalError):
    """Resource with the same identity already exists."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' already exists",
            "RESOURCE_EXISTS", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )


class ResourceNotFoundError(JournalError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class ConcurrencyError(JournalError):
    """Concurrent modification detected."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CONCURRENCY_CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )


class MissingIdentityError(JournalError):
    """Request arrived without an authenticated subject."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "No authenticated user on the request, authorisation denied",
            "UNAUTHENTICATED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(JournalError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class UpstreamServiceError(JournalError):
    """External collaborator (identity lookup, cipher) failed."""
    def __init__(self, service: str, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"{service} error: {message}",
            "UPSTREAM_ERROR", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.service = service
