"""Comment Workflow - add and delete task comments.

Invariants:
    - Any project member may comment; author, project lead or admin may delete
    - Comment text is non-empty after stripping
    - The task creator and assignee are notified of a new comment, never the commenter
    - new_comment/comment_deleted go to the task scope, task_updated_comments
      (full ordered comment list) to the project scope
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from workboard.core.authorization import authorize
from workboard.core.domain_types import Action, LiveEvent, Principal
from workboard.core.errors import ErrorContext, InvalidInputError, ResourceNotFoundError
from workboard.core.notification_messages import new_comment, task_link
from workboard.core.scopes import project_scope, task_scope
from workboard.infrastructure.broadcast import BroadcastHub
from workboard.models.task import Task
from workboard.repositories.project_repository import ProjectRepository
from workboard.repositories.task_repository import TaskRepository
from workboard.repositories.user_repository import UserRepository
from workboard.schemas.task import CommentResponse
from workboard.services import live_events
from workboard.services.entity_views import (
    comment_ref, comment_view, task_ref, to_payload,
)
from workboard.services.notification_dispatcher import NotificationDispatcher
from workboard.services.project_workflow import load_project
from workboard.services.task_workflow import load_task

logger = logging.getLogger(__name__)


class CommentWorkflow:
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

    async def add(
        self, principal: Principal, task_id: UUID, text: str,
    ) -> CommentResponse:
        text = (text or "").strip()
        if not text:
            raise InvalidInputError("Comment text is required", "text")
        task = await load_task(self.tasks, task_id)
        project = await load_project(self.projects, task.project_id)
        authorize(principal, task_ref(task, project), Action.TASK_COMMENT)

        author = await self.users.get(principal.id)
        author_name = author.full_name if author else "A team member"
        comment = await self.tasks.add_comment(task, principal.id, text)
        view = comment_view(comment)
        await self.db.commit()
        logger.info(
            "Comment added", extra={"task_id": task.id, "principal_id": principal.id},
        )

        recipients = {task.created_by_id, task.assignee_id} - {None, principal.id}
        await self.dispatcher.notify_many(
            sorted(recipients, key=str),
            new_comment(task.title, project.name, author_name),
            task_link(task.id),
        )

        task = await load_task(self.tasks, task.id)
        await live_events.publish(
            self.hub, [task_scope(task.id)], LiveEvent.NEW_COMMENT, to_payload(view),
        )
        await self._publish_comment_list(task)
        return view

    async def delete(
        self, principal: Principal, task_id: UUID, comment_id: UUID,
    ) -> None:
        task = await load_task(self.tasks, task_id)
        project = await load_project(self.projects, task.project_id)
        comment = next((c for c in task.comments if c.id == comment_id), None)
        if comment is None:
            raise ResourceNotFoundError(
                "Comment", comment_id, ErrorContext(task_id=str(task_id)),
            )
        authorize(principal, comment_ref(comment, task, project), Action.COMMENT_DELETE)

        await self.tasks.delete_comment(task, comment)
        await self.db.commit()
        logger.info(
            "Comment deleted", extra={"task_id": task_id, "principal_id": principal.id},
        )

        task = await load_task(self.tasks, task_id)
        await live_events.publish(
            self.hub, [task_scope(task_id)], LiveEvent.COMMENT_DELETED,
            {"task_id": str(task_id), "comment_id": str(comment_id)},
        )
        await self._publish_comment_list(task)

    async def _publish_comment_list(self, task: Task) -> None:
        payload = {
            "task_id": str(task.id),
            "comments": [to_payload(comment_view(c)) for c in task.comments],
        }
        await live_events.publish(
            self.hub, [project_scope(task.project_id)],
            LiveEvent.TASK_UPDATED_COMMENTS, payload,
        )
