"""Live Access - authorization for joining live scopes.

Invariants:
    - project:{id} requires project:read, task:{id} requires task:read
    - user:{id} is joinable only by that user (notification hints are recipient-only)
    - A connection is only driven by the principal that opened it
"""

from sqlalchemy.ext.asyncio import AsyncSession

from workboard.core.authorization import authorize
from workboard.core.domain_types import Action, Principal, ScopeKind
from workboard.core.errors import ErrorContext, ForbiddenError
from workboard.core.scopes import Scope
from workboard.infrastructure.broadcast import LiveConnection
from workboard.repositories.project_repository import ProjectRepository
from workboard.repositories.task_repository import TaskRepository
from workboard.services.entity_views import project_ref, task_ref
from workboard.services.project_workflow import load_project
from workboard.services.task_workflow import load_task


def require_connection_owner(principal: Principal, connection: LiveConnection) -> None:
    if connection.principal.id != principal.id:
        raise ForbiddenError(
            "Not authorized to use this live connection",
            "live:connection",
            ErrorContext(principal_id=str(principal.id)),
        )


class LiveAccess:
    def __init__(self, db: AsyncSession):
        self.projects = ProjectRepository(db)
        self.tasks = TaskRepository(db)

    async def authorize_scope(self, principal: Principal, scope: Scope) -> None:
        match scope.kind:
            case ScopeKind.PROJECT:
                project = await load_project(self.projects, scope.resource_id)
                authorize(principal, project_ref(project), Action.PROJECT_READ)
            case ScopeKind.TASK:
                task = await load_task(self.tasks, scope.resource_id)
                project = await load_project(self.projects, task.project_id)
                authorize(principal, task_ref(task, project), Action.TASK_READ)
            case ScopeKind.USER:
                if scope.resource_id != principal.id:
                    raise ForbiddenError(
                        "Not authorized to follow another user's notifications",
                        "live:user_scope",
                        ErrorContext(principal_id=str(principal.id)),
                    )
