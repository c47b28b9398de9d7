"""Authorization Engine - pure decision function over (principal, resource, action).

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - Admin role is allowed every action on every resource (evaluated first)
    - Exactly one predicate per Action in _DECISION_TABLE; an unknown action is denied
    - authorize() turns every deny into ForbiddenError, never a silent no-op

Design Decisions:
    - Resources are frozen snapshots (ProjectRef, TaskRef, CommentRef) built by services,
      so the engine never sees ORM objects or a session
    - Tagged decision table instead of role checks at each call site
"""

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from uuid import UUID

from workboard.core.domain_types import Action, Principal, Role
from workboard.core.errors import ForbiddenError, ErrorContext


class Decision(str, Enum):
    ALLOW = "allow"
    DENY = "deny"


# ─── Resource snapshots ──────────────────────────────────────────

@dataclass(frozen=True)
class ProjectRef:
    project_id: UUID | None
    lead_manager_id: UUID | None
    team_member_ids: frozenset[UUID] = frozenset()

    def is_member(self, user_id: UUID) -> bool:
        return user_id == self.lead_manager_id or user_id in self.team_member_ids


@dataclass(frozen=True)
class TaskRef:
    task_id: UUID
    project: ProjectRef
    assignee_id: UUID | None = None


@dataclass(frozen=True)
class CommentRef:
    comment_id: UUID
    task: TaskRef
    author_id: UUID


# No resource (project creation, reports, user administration)
NO_RESOURCE = ProjectRef(project_id=None, lead_manager_id=None)

Resource = ProjectRef | TaskRef | CommentRef


# ─── Predicates ──────────────────────────────────────────────────

def _project_of(resource: Resource) -> ProjectRef | None:
    if isinstance(resource, ProjectRef):
        return resource
    if isinstance(resource, TaskRef):
        return resource.project
    if isinstance(resource, CommentRef):
        return resource.task.project
    return None


def _is_project_member(principal: Principal, resource: Resource) -> bool:
    project = _project_of(resource)
    return project is not None and project.is_member(principal.id)


def _is_project_lead(principal: Principal, resource: Resource) -> bool:
    project = _project_of(resource)
    return project is not None and project.lead_manager_id == principal.id


def _can_create_project(principal: Principal, resource: Resource) -> bool:
    return principal.role in (Role.MANAGER, Role.ADMIN)


def _can_update_task(principal: Principal, resource: Resource) -> bool:
    if _is_project_lead(principal, resource):
        return True
    return isinstance(resource, TaskRef) and resource.assignee_id == principal.id


def _can_delete_comment(principal: Principal, resource: Resource) -> bool:
    if _is_project_lead(principal, resource):
        return True
    return isinstance(resource, CommentRef) and resource.author_id == principal.id


def _admin_only(principal: Principal, resource: Resource) -> bool:
    return False


_Predicate = Callable[[Principal, Resource], bool]

_DECISION_TABLE: dict[Action, _Predicate] = {
    Action.PROJECT_READ: _is_project_member,
    Action.PROJECT_CREATE: _can_create_project,
    Action.PROJECT_UPDATE: _is_project_lead,
    Action.PROJECT_DELETE: _is_project_lead,
    Action.PROJECT_REASSIGN_LEAD: _admin_only,
    Action.TASK_READ: _is_project_member,
    Action.TASK_COMMENT: _is_project_member,
    Action.TASK_CREATE: _is_project_lead,
    Action.TASK_DELETE: _is_project_lead,
    Action.TASK_UPDATE: _can_update_task,
    Action.COMMENT_DELETE: _can_delete_comment,
    Action.REPORT_READ: _can_create_project,
    Action.USER_MANAGE_ROLE: _admin_only,
}


def can_access(principal: Principal, resource: Resource, action: Action) -> Decision:
    """Decide whether principal may perform action on resource."""
    if principal.role == Role.ADMIN:
        return Decision.ALLOW
    predicate = _DECISION_TABLE.get(action)
    if predicate is None:
        return Decision.DENY
    return Decision.ALLOW if predicate(principal, resource) else Decision.DENY


def authorize(principal: Principal, resource: Resource, action: Action) -> None:
    """Raise ForbiddenError unless can_access allows."""
    if can_access(principal, resource, action) is Decision.ALLOW:
        return
    project = _project_of(resource)
    ctx = ErrorContext(
        principal_id=str(principal.id),
        project_id=str(project.project_id) if project and project.project_id else None,
        task_id=_task_id_of(resource),
    )
    raise ForbiddenError(_deny_message(action), action.value, ctx)


def _task_id_of(resource: Resource) -> str | None:
    if isinstance(resource, TaskRef):
        return str(resource.task_id)
    if isinstance(resource, CommentRef):
        return str(resource.task.task_id)
    return None


_DENY_MESSAGES = {
    Action.PROJECT_READ: "Not authorized to access this project",
    Action.PROJECT_CREATE: "Users are not authorized to create projects",
    Action.PROJECT_UPDATE: "Not authorized to update this project",
    Action.PROJECT_DELETE: "Not authorized to delete this project",
    Action.PROJECT_REASSIGN_LEAD: "Only administrators can change the project lead manager",
    Action.TASK_READ: "Not authorized to access this task",
    Action.TASK_COMMENT: "Not authorized to comment on this task",
    Action.TASK_CREATE: "Not authorized to create tasks for this project",
    Action.TASK_UPDATE: "Not authorized to update this task",
    Action.TASK_DELETE: "Not authorized to delete this task",
    Action.COMMENT_DELETE: "Not authorized to delete this comment",
    Action.REPORT_READ: "Not authorized to access reports",
    Action.USER_MANAGE_ROLE: "Only administrators can change user roles",
}


def _deny_message(action: Action) -> str:
    return _DENY_MESSAGES.get(action, "Not authorized")
