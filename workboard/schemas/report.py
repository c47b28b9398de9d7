"""Report Schemas - aggregate views for managers and admins."""

from uuid import UUID

from pydantic import BaseModel


class CompletedTasksReport(BaseModel):
    """Completed task count for one project."""
    project_id: UUID
    project_name: str
    completed_tasks: int


class WorkloadReport(BaseModel):
    """Open and in-progress task counts for one assignee."""
    user_id: UUID
    full_name: str
    open_tasks: int
    in_progress_tasks: int
    total_tasks: int
