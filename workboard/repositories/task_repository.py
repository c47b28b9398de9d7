"""Task Repository - task rows, dependency edges, comments and report aggregates.

Invariants:
    - find_in_project() only returns tasks whose project_id matches (scoped resolution)
    - delete_by_project() removes the project's tasks, their comments and every
      dependency edge touching them
    - remove_dependency_references() drops edges pointing at a task about to be deleted
    - Every Task query loads dependencies and comments explicitly and refreshes identity-map
      copies, so no view ever triggers a lazy load

Design Decisions:
    - Bulk deletes for the cascade instead of per-row ORM deletes: SQLite does not
      enforce ON DELETE CASCADE without a pragma, so child rows are removed explicitly
"""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from uuid import UUID

from sqlalchemy import case, delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from workboard.core.domain_types import TaskPriority, TaskStatus
from workboard.models.comment import TaskComment
from workboard.models.project import Project
from workboard.models.task import Task, TaskDependency
from workboard.models.user import User


@dataclass(frozen=True)
class TaskQuery:
    """Filters and ordering for listing a project's tasks."""
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    assignee_id: UUID | None = None
    due_on: date | None = None
    sort_by: str = "created_at"
    descending: bool = True


_PRIORITY_RANK = case(
    (Task.priority == TaskPriority.LOW.value, 0),
    (Task.priority == TaskPriority.MEDIUM.value, 1),
    (Task.priority == TaskPriority.HIGH.value, 2),
    else_=1,
)

_SORT_COLUMNS = {
    "created_at": Task.created_at,
    "due_date": Task.due_date,
    "priority": _PRIORITY_RANK,
    "status": Task.status,
    "title": Task.title,
}

_TASK_LOADERS = (selectinload(Task.dependency_links), selectinload(Task.comments))


class TaskRepository:
    """TaskStore over SQLAlchemy."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # -- Reads -----------------------------------------------------------------

    async def get(self, task_id: UUID) -> Task | None:
        result = await self.db.execute(
            select(Task)
            .where(Task.id == task_id)
            .options(*_TASK_LOADERS)
            .execution_options(populate_existing=True),
        )
        return result.scalar_one_or_none()

    async def find_in_project(
        self, task_ids: Sequence[UUID], project_id: UUID,
    ) -> list[Task]:
        if not task_ids:
            return []
        result = await self.db.execute(
            select(Task)
            .where(Task.id.in_(set(task_ids)))
            .where(Task.project_id == project_id)
            .options(*_TASK_LOADERS)
            .execution_options(populate_existing=True),
        )
        return list(result.scalars().all())

    async def list_ids_for_project(self, project_id: UUID) -> list[UUID]:
        result = await self.db.execute(
            select(Task.id).where(Task.project_id == project_id),
        )
        return list(result.scalars().all())

    async def list_for_project(
        self, project_id: UUID, query: TaskQuery,
    ) -> list[Task]:
        stmt = (
            select(Task)
            .where(Task.project_id == project_id)
            .options(*_TASK_LOADERS)
            .execution_options(populate_existing=True)
        )
        if query.status:
            stmt = stmt.where(Task.status == query.status.value)
        if query.priority:
            stmt = stmt.where(Task.priority == query.priority.value)
        if query.assignee_id:
            stmt = stmt.where(Task.assignee_id == query.assignee_id)
        if query.due_on:
            start = datetime.combine(query.due_on, time.min, tzinfo=timezone.utc)
            stmt = stmt.where(Task.due_date >= start).where(
                Task.due_date < start + timedelta(days=1),
            )
        column = _SORT_COLUMNS.get(query.sort_by, Task.created_at)
        stmt = stmt.order_by(column.desc() if query.descending else column.asc())
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    # -- Writes ----------------------------------------------------------------

    async def create(self, task: Task) -> Task:
        self.db.add(task)
        await self.db.flush()
        return task

    async def save(self, task: Task) -> Task:
        await self.db.flush()
        return task

    async def delete(self, task: Task) -> None:
        await self.remove_dependency_references(task.id)
        await self.db.delete(task)
        await self.db.flush()

    async def remove_dependency_references(self, task_id: UUID) -> None:
        await self.db.execute(
            delete(TaskDependency).where(TaskDependency.depends_on_id == task_id),
        )

    async def delete_by_project(self, project_id: UUID) -> int:
        """Delete every task of a project. Returns the number of tasks removed."""
        owned = select(Task.id).where(Task.project_id == project_id)
        await self.db.execute(
            delete(TaskDependency).where(or_(
                TaskDependency.task_id.in_(owned),
                TaskDependency.depends_on_id.in_(owned),
            )),
        )
        await self.db.execute(
            delete(TaskComment).where(TaskComment.task_id.in_(owned)),
        )
        result = await self.db.execute(
            delete(Task).where(Task.project_id == project_id),
        )
        return result.rowcount or 0

    # -- Comments --------------------------------------------------------------

    async def add_comment(
        self, task: Task, author_id: UUID, text: str,
    ) -> TaskComment:
        comment = TaskComment(task_id=task.id, author_id=author_id, text=text)
        task.comments.append(comment)
        await self.db.flush()
        return comment

    async def delete_comment(self, task: Task, comment: TaskComment) -> None:
        task.comments.remove(comment)
        await self.db.flush()

    # -- Report aggregates -----------------------------------------------------

    async def completed_per_project(
        self, created_from: datetime | None, created_to: datetime | None,
    ) -> list[tuple[UUID, str, int]]:
        stmt = (
            select(Project.id, Project.name, func.count(Task.id))
            .select_from(Task)
            .join(Project, Project.id == Task.project_id)
            .where(Task.status == TaskStatus.COMPLETED.value)
        )
        if created_from:
            stmt = stmt.where(Task.created_at >= created_from)
        if created_to:
            stmt = stmt.where(Task.created_at <= created_to)
        stmt = stmt.group_by(Project.id, Project.name).order_by(Project.name)
        result = await self.db.execute(stmt)
        return [(row[0], row[1], int(row[2])) for row in result.all()]

    async def workload_per_assignee(self) -> list[tuple[UUID, str, int, int]]:
        open_count = func.sum(case((Task.status == TaskStatus.OPEN.value, 1), else_=0))
        in_progress_count = func.sum(
            case((Task.status == TaskStatus.IN_PROGRESS.value, 1), else_=0),
        )
        stmt = (
            select(User.id, User.full_name, open_count, in_progress_count)
            .select_from(Task)
            .join(User, User.id == Task.assignee_id)
            .where(Task.status.in_([
                TaskStatus.OPEN.value, TaskStatus.IN_PROGRESS.value,
            ]))
            .group_by(User.id, User.full_name)
            .order_by(User.full_name)
        )
        result = await self.db.execute(stmt)
        return [
            (row[0], row[1], int(row[2] or 0), int(row[3] or 0))
            for row in result.all()
        ]
