"""Task Workflow - create, update, delete and read tasks inside a project.

Invariants:
    - Strict order per mutation: authorize -> validate -> commit -> notify -> broadcast
    - Every write of a dependency set goes through DependencyValidator first
    - The completion gate runs whenever the requested status is completed,
      against the effective set (new set if supplied, else the current one)
    - Updates are partial: only fields present in TaskUpdate.model_fields_set change
    - Deleting a task drops the dependency edges other tasks hold on it

Design Decisions:
    - Assignee must be an existing user but need not be a project member
    - Status transitions are otherwise free (completed -> open is allowed)
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from workboard.core.authorization import authorize
from workboard.core.domain_types import Action, LiveEvent, Principal, TaskStatus
from workboard.core.errors import ErrorContext, InvalidInputError, ResourceNotFoundError
from workboard.core.notification_messages import (
    assigned_to_task, task_link, task_status_changed,
)
from workboard.core.scopes import project_scope, task_scope
from workboard.infrastructure.broadcast import BroadcastHub
from workboard.models.task import Task
from workboard.repositories.project_repository import ProjectRepository
from workboard.repositories.task_repository import TaskQuery, TaskRepository
from workboard.repositories.user_repository import UserRepository
from workboard.schemas.task import TaskCreate, TaskFilter, TaskResponse, TaskUpdate
from workboard.services import live_events
from workboard.services.dependency_validator import DependencyValidator
from workboard.services.entity_views import project_ref, task_ref, task_view, to_payload
from workboard.services.notification_dispatcher import NotificationDispatcher
from workboard.services.project_workflow import load_project

logger = logging.getLogger(__name__)


async def load_task(tasks: TaskRepository, task_id: UUID) -> Task:
    task = await tasks.get(task_id)
    if task is None:
        raise ResourceNotFoundError("Task", task_id, ErrorContext(task_id=str(task_id)))
    return task


class TaskWorkflow:
    """Task lifecycle with dependency enforcement and assignee notifications."""

    def __init__(
        self,
        db: AsyncSession,
        dispatcher: NotificationDispatcher,
        hub: BroadcastHub | None = None,
    ):
        self.db = db
        self.dispatcher = dispatcher
        self.hub = hub
        self.projects = ProjectRepository(db)
        self.tasks = TaskRepository(db)
        self.users = UserRepository(db)
        self.validator = DependencyValidator(self.tasks)

    # -- Reads -----------------------------------------------------------------

    async def get(self, principal: Principal, task_id: UUID) -> TaskResponse:
        task = await load_task(self.tasks, task_id)
        project = await load_project(self.projects, task.project_id)
        authorize(principal, task_ref(task, project), Action.TASK_READ)
        return task_view(task)

    async def list_for_project(
        self, principal: Principal, project_id: UUID, task_filter: TaskFilter,
    ) -> list[TaskResponse]:
        project = await load_project(self.projects, project_id)
        authorize(principal, project_ref(project), Action.TASK_READ)
        query = TaskQuery(
            status=task_filter.status,
            priority=task_filter.priority,
            assignee_id=task_filter.assignee_id,
            due_on=task_filter.due_date,
            sort_by=task_filter.sort_by,
            descending=task_filter.order == "desc",
        )
        tasks = await self.tasks.list_for_project(project_id, query)
        return [task_view(t) for t in tasks]

    # -- Mutations ---------------------------------------------------------------

    async def create(
        self, principal: Principal, project_id: UUID, body: TaskCreate,
    ) -> TaskResponse:
        project = await load_project(self.projects, project_id)
        authorize(principal, project_ref(project), Action.TASK_CREATE)
        if body.assignee_id is not None:
            await self._require_user(body.assignee_id)
        dependencies = await self.validator.validate(
            None, project.id, body.dependency_ids, body.status,
        )

        task = Task(
            title=body.title,
            description=body.description,
            status=body.status.value,
            priority=body.priority.value,
            due_date=body.due_date,
            project_id=project.id,
            created_by_id=principal.id,
            assignee_id=body.assignee_id,
        )
        task.set_dependencies(dep.id for dep in dependencies)
        await self.tasks.create(task)
        await self.db.commit()
        logger.info(
            f"Task created: {task.title}",
            extra={"task_id": task.id, "project_id": project.id},
        )

        if task.assignee_id and task.assignee_id != principal.id:
            await self.dispatcher.notify(
                task.assignee_id,
                assigned_to_task(task.title, project.name),
                task_link(task.id),
            )

        task = await load_task(self.tasks, task.id)
        view = task_view(task)
        await live_events.publish(
            self.hub, [project_scope(project.id)], LiveEvent.NEW_TASK, to_payload(view),
        )
        return view

    async def update(
        self, principal: Principal, task_id: UUID, body: TaskUpdate,
    ) -> TaskResponse:
        task = await load_task(self.tasks, task_id)
        project = await load_project(self.projects, task.project_id)
        authorize(principal, task_ref(task, project), Action.TASK_UPDATE)
        fields = body.model_fields_set

        requested_status = body.status if "status" in fields else None
        replace_dependencies = (
            "dependency_ids" in fields and body.dependency_ids is not None
        )
        dependencies = None
        if replace_dependencies or requested_status == TaskStatus.COMPLETED:
            effective = body.dependency_ids if replace_dependencies else task.dependency_ids
            dependencies = await self.validator.validate(
                task.id, project.id, effective, requested_status,
            )
        if "assignee_id" in fields and body.assignee_id is not None:
            await self._require_user(body.assignee_id)

        old_status = task.status
        old_assignee = task.assignee_id
        if body.title is not None:
            task.title = body.title
        if "description" in fields:
            task.description = body.description
        if requested_status is not None:
            task.status = requested_status.value
        if body.priority is not None:
            task.priority = body.priority.value
        if "due_date" in fields:
            task.due_date = body.due_date
        if "assignee_id" in fields:
            task.assignee_id = body.assignee_id
        if replace_dependencies:
            task.set_dependencies(dep.id for dep in dependencies)
        await self.tasks.save(task)
        await self.db.commit()
        logger.info("Task updated", extra={"task_id": task.id, "project_id": project.id})

        if task.assignee_id and task.assignee_id != old_assignee and task.assignee_id != principal.id:
            await self.dispatcher.notify(
                task.assignee_id,
                assigned_to_task(task.title, project.name),
                task_link(task.id),
            )
        if task.status != old_status:
            recipients = {task.created_by_id, task.assignee_id, project.lead_manager_id}
            recipients -= {None, principal.id}
            await self.dispatcher.notify_many(
                sorted(recipients, key=str),
                task_status_changed(task.title, task.status, project.name),
                task_link(task.id),
            )

        task = await load_task(self.tasks, task.id)
        view = task_view(task)
        await live_events.publish(
            self.hub, [project_scope(project.id), task_scope(task.id)],
            LiveEvent.TASK_UPDATED, to_payload(view),
        )
        return view

    async def delete(self, principal: Principal, task_id: UUID) -> None:
        task = await load_task(self.tasks, task_id)
        project = await load_project(self.projects, task.project_id)
        authorize(principal, task_ref(task, project), Action.TASK_DELETE)

        await self.tasks.delete(task)
        await self.db.commit()
        logger.info("Task deleted", extra={"task_id": task_id, "project_id": project.id})

        payload = {"task_id": str(task_id), "project_id": str(project.id)}
        await live_events.publish(
            self.hub, [project_scope(project.id), task_scope(task_id)],
            LiveEvent.TASK_DELETED, payload,
        )
        await live_events.close_scopes(self.hub, [task_scope(task_id)])

    async def _require_user(self, user_id: UUID) -> None:
        if await self.users.get(user_id) is None:
            raise InvalidInputError(f"Assignee '{user_id}' does not exist", "assignee_id")
