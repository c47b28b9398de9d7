"""Project Routes - project CRUD plus the project's task collection.

Invariants:
    - Every route resolves the Principal first (401 before any lookup)
    - Routes only translate HTTP <-> orchestrator calls
"""

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from workboard.api.dependencies import get_orchestrator, get_principal
from workboard.core.domain_types import Principal, TaskPriority, TaskStatus
from workboard.schemas.project import ProjectCreate, ProjectResponse, ProjectUpdate
from workboard.schemas.task import TaskCreate, TaskFilter, TaskResponse
from workboard.services.workflow_orchestrator import WorkflowOrchestrator

router = APIRouter(prefix="/api/v1/projects", tags=["projects"])


@router.post("", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
async def create_project(
    body: ProjectCreate,
    principal: Principal = Depends(get_principal),
    orchestrator: WorkflowOrchestrator = Depends(get_orchestrator),
):
    return await orchestrator.create_project(principal, body)


@router.get("", response_model=list[ProjectResponse])
async def list_projects(
    principal: Principal = Depends(get_principal),
    orchestrator: WorkflowOrchestrator = Depends(get_orchestrator),
):
    return await orchestrator.list_projects(principal)


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(
    project_id: UUID,
    principal: Principal = Depends(get_principal),
    orchestrator: WorkflowOrchestrator = Depends(get_orchestrator),
):
    return await orchestrator.get_project(principal, project_id)


@router.patch("/{project_id}", response_model=ProjectResponse)
async def update_project(
    project_id: UUID,
    body: ProjectUpdate,
    principal: Principal = Depends(get_principal),
    orchestrator: WorkflowOrchestrator = Depends(get_orchestrator),
):
    return await orchestrator.update_project(principal, project_id, body)


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_project(
    project_id: UUID,
    principal: Principal = Depends(get_principal),
    orchestrator: WorkflowOrchestrator = Depends(get_orchestrator),
):
    await orchestrator.delete_project(principal, project_id)


# --- Tasks of a project ---------------------------------------------------------

@router.get("/{project_id}/tasks", response_model=list[TaskResponse])
async def list_project_tasks(
    project_id: UUID,
    status_filter: TaskStatus | None = Query(None, alias="status"),
    priority: TaskPriority | None = Query(None),
    assignee_id: UUID | None = Query(None),
    due_date: date | None = Query(None),
    sort_by: str = Query("created_at", pattern=r"^(created_at|due_date|priority|status|title)$"),
    order: str = Query("desc", pattern=r"^(asc|desc)$"),
    principal: Principal = Depends(get_principal),
    orchestrator: WorkflowOrchestrator = Depends(get_orchestrator),
):
    task_filter = TaskFilter(
        status=status_filter, priority=priority, assignee_id=assignee_id,
        due_date=due_date, sort_by=sort_by, order=order,
    )
    return await orchestrator.get_project_tasks(principal, project_id, task_filter)


@router.post(
    "/{project_id}/tasks", response_model=TaskResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_task(
    project_id: UUID,
    body: TaskCreate,
    principal: Principal = Depends(get_principal),
    orchestrator: WorkflowOrchestrator = Depends(get_orchestrator),
):
    return await orchestrator.create_task(principal, project_id, body)
