"""Error Hierarchy - typed, categorized exceptions for every Workboard failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Each taxonomy entry (NotFound, Forbidden, InvalidInput, InvalidDependencySet,
      SelfDependency, DependencyNotSatisfied, InvalidTeamMember, Conflict) is its own class
      with a stable code
    - to_response() produces the REST envelope
    - Messages never carry store internals

Design Decisions:
    - Single hierarchy with WorkboardError base: the FastAPI global handler catches all
    - ErrorContext as dataclass: observability fields without coupling to logging
"""

from dataclasses import dataclass, field
from enum import Enum
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
    AUTHORIZATION = "authorization"
    AUTHENTICATION = "authentication"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    INTERNAL = "internal"
    CONFLICT = "conflict"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    principal_id: str | None = None
    project_id: str | None = None
    task_id: str | None = None


class WorkboardError(Exception):
    """Base exception for all Workboard errors."""

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
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "project_id": self.context.project_id,
                    "task_id": self.context.task_id,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class ResourceNotFoundError(WorkboardError):
    """Requested id does not resolve."""
    def __init__(
        self, resource_type: str, resource_id: object, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = str(resource_id)


class ForbiddenError(WorkboardError):
    """Authorization Engine denied the action."""
    def __init__(self, message: str, action: str, context: ErrorContext | None = None):
        super().__init__(
            message, "FORBIDDEN", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, context, 403,
        )
        self.action = action


class NotAuthenticatedError(WorkboardError):
    """No usable identity was attached to the request."""
    def __init__(self, message: str = "Authentication required", context: ErrorContext | None = None):
        super().__init__(
            message, "NOT_AUTHENTICATED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class InvalidInputError(WorkboardError):
    """Missing or malformed field."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INVALID_INPUT", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.field = field


class InvalidDependencySetError(WorkboardError):
    """Some dependency ids do not resolve to tasks of the owning project."""
    def __init__(self, invalid_ids: list[str], context: ErrorContext | None = None):
        super().__init__(
            "One or more specified dependencies are invalid or not part of this project",
            "INVALID_DEPENDENCY_SET", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.invalid_ids = invalid_ids


class SelfDependencyError(WorkboardError):
    """A task listed itself as a dependency."""
    def __init__(self, task_id: object, context: ErrorContext | None = None):
        super().__init__(
            "A task cannot depend on itself",
            "SELF_DEPENDENCY", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 400,
        )
        self.task_id = str(task_id)


class DependencyNotSatisfiedError(WorkboardError):
    """Completion attempted while a dependency is not completed."""
    def __init__(self, pending_ids: list[str], context: ErrorContext | None = None):
        super().__init__(
            f"Cannot complete task: {len(pending_ids)} dependency task(s) not yet completed",
            "DEPENDENCY_NOT_SATISFIED", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 409,
        )
        self.pending_ids = pending_ids


class InvalidTeamMemberError(WorkboardError):
    """Some proposed team member ids do not resolve to users."""
    def __init__(self, invalid_ids: list[str], context: ErrorContext | None = None):
        super().__init__(
            "One or more specified team members are invalid",
            "INVALID_TEAM_MEMBER", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.invalid_ids = invalid_ids


class ConflictError(WorkboardError):
    """Unique constraint would be violated."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(WorkboardError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
