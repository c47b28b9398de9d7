"""Task Routes - single-task reads and mutations, comments."""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from workboard.api.dependencies import get_orchestrator, get_principal
from workboard.core.domain_types import Principal
from workboard.schemas.task import CommentCreate, CommentResponse, TaskResponse, TaskUpdate
from workboard.services.workflow_orchestrator import WorkflowOrchestrator

router = APIRouter(prefix="/api/v1/tasks", tags=["tasks"])


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(
    task_id: UUID,
    principal: Principal = Depends(get_principal),
    orchestrator: WorkflowOrchestrator = Depends(get_orchestrator),
):
    return await orchestrator.get_task(principal, task_id)


@router.patch("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: UUID,
    body: TaskUpdate,
    principal: Principal = Depends(get_principal),
    orchestrator: WorkflowOrchestrator = Depends(get_orchestrator),
):
    return await orchestrator.update_task(principal, task_id, body)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(
    task_id: UUID,
    principal: Principal = Depends(get_principal),
    orchestrator: WorkflowOrchestrator = Depends(get_orchestrator),
):
    await orchestrator.delete_task(principal, task_id)


@router.post(
    "/{task_id}/comments", response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_comment(
    task_id: UUID,
    body: CommentCreate,
    principal: Principal = Depends(get_principal),
    orchestrator: WorkflowOrchestrator = Depends(get_orchestrator),
):
    return await orchestrator.add_comment(principal, task_id, body.text)


@router.delete(
    "/{task_id}/comments/{comment_id}", status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_comment(
    task_id: UUID,
    comment_id: UUID,
    principal: Principal = Depends(get_principal),
    orchestrator: WorkflowOrchestrator = Depends(get_orchestrator),
):
    await orchestrator.delete_comment(principal, task_id, comment_id)
