"""Project Repository - project rows, roster association and task counters.

Invariants:
    - Unique-name violations surface as ConflictError, never as a raw IntegrityError
    - list_visible_to() for non-admins returns projects the user leads or belongs to
"""

import logging
from uuid import UUID

from sqlalchemy import case, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from workboard.core.domain_types import TaskStatus
from workboard.core.errors import ConflictError
from workboard.models.project import Project, project_members
from workboard.models.task import Task

logger = logging.getLogger(__name__)


class ProjectRepository:
    """ProjectStore over SQLAlchemy."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, project_id: UUID) -> Project | None:
        result = await self.db.execute(
            select(Project)
            .where(Project.id == project_id)
            .execution_options(populate_existing=True),
        )
        return result.scalar_one_or_none()

    async def get_by_name(self, name: str) -> Project | None:
        result = await self.db.execute(
            select(Project).where(Project.name == name),
        )
        return result.scalar_one_or_none()

    async def list_all(self) -> list[Project]:
        result = await self.db.execute(
            select(Project).order_by(Project.created_at.desc()),
        )
        return list(result.scalars().all())

    async def list_visible_to(self, user_id: UUID) -> list[Project]:
        member_of = select(project_members.c.project_id).where(
            project_members.c.user_id == user_id,
        )
        result = await self.db.execute(
            select(Project)
            .where(or_(
                Project.lead_manager_id == user_id,
                Project.id.in_(member_of),
            ))
            .order_by(Project.created_at.desc()),
        )
        return list(result.scalars().all())

    async def create(self, project: Project) -> Project:
        self.db.add(project)
        await self._flush_or_conflict(project.name)
        return project

    async def save(self, project: Project) -> Project:
        await self._flush_or_conflict(project.name)
        return project

    async def delete(self, project: Project) -> None:
        await self.db.delete(project)
        await self.db.flush()

    async def count_tasks(self, project_id: UUID) -> tuple[int, int]:
        """Return (total, completed) task counts for a project."""
        result = await self.db.execute(
            select(
                func.count(Task.id),
                func.sum(case(
                    (Task.status == TaskStatus.COMPLETED.value, 1), else_=0,
                )),
            ).where(Task.project_id == project_id),
        )
        total, completed = result.one()
        return int(total or 0), int(completed or 0)

    async def _flush_or_conflict(self, name: str) -> None:
        try:
            await self.db.flush()
        except IntegrityError:
            await self.db.rollback()
            logger.warning("Project name conflict on flush: %s", name)
            raise ConflictError(f"A project named '{name}' already exists")
