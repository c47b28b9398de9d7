"""Reports - aggregate task views for managers and admins.

Invariants:
    - Every report requires report:read (manager or admin)
    - created_from/created_to bound task creation time, both inclusive
"""

from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from workboard.core.authorization import NO_RESOURCE, authorize
from workboard.core.domain_types import Action, Principal
from workboard.core.errors import InvalidInputError
from workboard.repositories.task_repository import TaskRepository
from workboard.schemas.report import CompletedTasksReport, WorkloadReport


class ReportService:
    def __init__(self, db: AsyncSession):
        self.tasks = TaskRepository(db)

    async def completed_per_project(
        self,
        principal: Principal,
        created_from: datetime | None = None,
        created_to: datetime | None = None,
    ) -> list[CompletedTasksReport]:
        authorize(principal, NO_RESOURCE, Action.REPORT_READ)
        if created_from and created_to and created_from > created_to:
            raise InvalidInputError("created_from must not be after created_to", "created_from")
        rows = await self.tasks.completed_per_project(created_from, created_to)
        return [
            CompletedTasksReport(project_id=pid, project_name=name, completed_tasks=count)
            for pid, name, count in rows
        ]

    async def team_workload(self, principal: Principal) -> list[WorkloadReport]:
        authorize(principal, NO_RESOURCE, Action.REPORT_READ)
        rows = await self.tasks.workload_per_assignee()
        return [
            WorkloadReport(
                user_id=uid, full_name=name,
                open_tasks=open_count, in_progress_tasks=in_progress,
                total_tasks=open_count + in_progress,
            )
            for uid, name, open_count, in_progress in rows
        ]
