"""Workflow Orchestrator - the entry points collaborators call.

Invariants:
    - Every mutation runs authorize -> validate -> commit -> notify/broadcast
    - Notification and broadcast failures never surface to the caller
    - Taxonomy errors surface with no partial state mutation

Design Decisions:
    - Facade over ProjectWorkflow / TaskWorkflow / CommentWorkflow: one object per
      request, built around the request's session
    - Dispatcher and hub are injected, not looked up globally
"""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from workboard.core.domain_types import Principal
from workboard.infrastructure.broadcast import BroadcastHub
from workboard.schemas.project import ProjectCreate, ProjectResponse, ProjectUpdate
from workboard.schemas.task import (
    CommentResponse, TaskCreate, TaskFilter, TaskResponse, TaskUpdate,
)
from workboard.services.comment_workflow import CommentWorkflow
from workboard.services.notification_dispatcher import NotificationDispatcher
from workboard.services.project_workflow import ProjectWorkflow
from workboard.services.task_workflow import TaskWorkflow


class WorkflowOrchestrator:
    def __init__(
        self,
        db: AsyncSession,
        dispatcher: NotificationDispatcher,
        hub: BroadcastHub | None = None,
    ):
        self.projects = ProjectWorkflow(db, dispatcher, hub)
        self.tasks = TaskWorkflow(db, dispatcher, hub)
        self.comments = CommentWorkflow(db, dispatcher, hub)

    # -- Projects ------------------------------------------------------------------

    async def create_project(
        self, principal: Principal, body: ProjectCreate,
    ) -> ProjectResponse:
        return await self.projects.create(principal, body)

    async def update_project(
        self, principal: Principal, project_id: UUID, body: ProjectUpdate,
    ) -> ProjectResponse:
        return await self.projects.update(principal, project_id, body)

    async def delete_project(self, principal: Principal, project_id: UUID) -> None:
        await self.projects.delete(principal, project_id)

    async def get_project(
        self, principal: Principal, project_id: UUID,
    ) -> ProjectResponse:
        return await self.projects.get(principal, project_id)

    async def list_projects(self, principal: Principal) -> list[ProjectResponse]:
        return await self.projects.list_visible(principal)

    # -- Tasks ---------------------------------------------------------------------

    async def create_task(
        self, principal: Principal, project_id: UUID, body: TaskCreate,
    ) -> TaskResponse:
        return await self.tasks.create(principal, project_id, body)

    async def update_task(
        self, principal: Principal, task_id: UUID, body: TaskUpdate,
    ) -> TaskResponse:
        return await self.tasks.update(principal, task_id, body)

    async def delete_task(self, principal: Principal, task_id: UUID) -> None:
        await self.tasks.delete(principal, task_id)

    async def get_task(self, principal: Principal, task_id: UUID) -> TaskResponse:
        return await self.tasks.get(principal, task_id)

    async def get_project_tasks(
        self, principal: Principal, project_id: UUID, task_filter: TaskFilter | None = None,
    ) -> list[TaskResponse]:
        return await self.tasks.list_for_project(
            principal, project_id, task_filter or TaskFilter(),
        )

    # -- Comments ------------------------------------------------------------------

    async def add_comment(
        self, principal: Principal, task_id: UUID, text: str,
    ) -> CommentResponse:
        return await self.comments.add(principal, task_id, text)

    async def delete_comment(
        self, principal: Principal, task_id: UUID, comment_id: UUID,
    ) -> None:
        await self.comments.delete(principal, task_id, comment_id)
