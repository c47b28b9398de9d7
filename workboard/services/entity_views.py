"""Entity Views - ORM entities to response schemas and live payloads.

Invariants:
    - Views are built from post-commit entity state only
    - to_payload() output is JSON-ready (UUIDs and datetimes as strings)
"""

from pydantic import BaseModel

from workboard.core.authorization import CommentRef, ProjectRef, TaskRef
from workboard.models.comment import TaskComment
from workboard.models.notification import Notification
from workboard.models.project import Project
from workboard.models.task import Task
from workboard.schemas.notification import NotificationResponse
from workboard.schemas.project import ProjectResponse
from workboard.schemas.task import CommentResponse, TaskResponse


def progress_percent(total: int, completed: int) -> float:
    if total == 0:
        return 0.0
    return round(completed / total * 100, 2)


def project_view(project: Project, total: int, completed: int) -> ProjectResponse:
    return ProjectResponse(
        id=project.id,
        name=project.name,
        description=project.description,
        lead_manager_id=project.lead_manager_id,
        created_by_id=project.created_by_id,
        team_member_ids=project.team_member_ids,
        total_tasks=total,
        completed_tasks=completed,
        progress=progress_percent(total, completed),
        created_at=project.created_at,
        updated_at=project.updated_at,
    )


def task_view(task: Task) -> TaskResponse:
    return TaskResponse.model_validate(task)


def comment_view(comment: TaskComment) -> CommentResponse:
    return CommentResponse.model_validate(comment)


def notification_view(notification: Notification) -> NotificationResponse:
    return NotificationResponse.model_validate(notification)


def to_payload(view: BaseModel) -> dict:
    return view.model_dump(mode="json")


# --- Authorization snapshots ----------------------------------------------------

def project_ref(project: Project) -> ProjectRef:
    return ProjectRef(
        project_id=project.id,
        lead_manager_id=project.lead_manager_id,
        team_member_ids=frozenset(project.team_member_ids),
    )


def task_ref(task: Task, project: Project) -> TaskRef:
    return TaskRef(
        task_id=task.id, project=project_ref(project), assignee_id=task.assignee_id,
    )


def comment_ref(comment: TaskComment, task: Task, project: Project) -> CommentRef:
    return CommentRef(
        comment_id=comment.id, task=task_ref(task, project), author_id=comment.author_id,
    )
