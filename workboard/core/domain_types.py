"""Domain Types - rich types that replace bare primitives across the codebase.

Invariants:
    - UserId wraps the principal UUID, ConnectionId the live connection token
    - All valid states encoded as str Enums - no raw string matching
    - Principal is immutable and never built from credentials by the core

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: values are what the store persists and what clients see
"""

from dataclasses import dataclass
from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", UUID)
ConnectionId = NewType("ConnectionId", str)


# ─── Limits ──────────────────────────────────────────────────────

PROJECT_NAME_MAX_LENGTH = 100
PROJECT_DESCRIPTION_MAX_LENGTH = 500
TASK_TITLE_MAX_LENGTH = 100
COMMENT_TEXT_MAX_LENGTH = 2000


# ─── Enums ───────────────────────────────────────────────────────

class Role(str, Enum):
    """Principal role claim supplied by the identity collaborator."""
    USER = "user"
    MANAGER = "manager"
    ADMIN = "admin"


class TaskStatus(str, Enum):
    """Task workflow states. Only the edge into COMPLETED is guarded."""
    OPEN = "open"
    IN_PROGRESS = "inProgress"
    COMPLETED = "completed"


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Action(str, Enum):
    """Every action the Authorization Engine decides on."""
    PROJECT_READ = "project:read"
    PROJECT_CREATE = "project:create"
    PROJECT_UPDATE = "project:update"
    PROJECT_DELETE = "project:delete"
    PROJECT_REASSIGN_LEAD = "project:reassign_lead"
    TASK_READ = "task:read"
    TASK_COMMENT = "task:comment"
    TASK_CREATE = "task:create"
    TASK_UPDATE = "task:update"
    TASK_DELETE = "task:delete"
    COMMENT_DELETE = "comment:delete"
    REPORT_READ = "report:read"
    USER_MANAGE_ROLE = "user:manage_role"


class LiveEvent(str, Enum):
    """Event names published on the live channel."""
    PROJECT_UPDATED = "project_updated"
    PROJECT_DELETED = "project_deleted"
    NEW_TASK = "new_task"
    TASK_UPDATED = "task_updated"
    TASK_DELETED = "task_deleted"
    NEW_COMMENT = "new_comment"
    COMMENT_DELETED = "comment_deleted"
    TASK_UPDATED_COMMENTS = "task_updated_comments"
    NOTIFICATION = "notification"


class ScopeKind(str, Enum):
    PROJECT = "project"
    TASK = "task"
    USER = "user"


# ─── Identity Context ────────────────────────────────────────────

@dataclass(frozen=True)
class Principal:
    """Authenticated actor attached to every orchestrator call."""
    id: UserId
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN
