"""Task Schemas - task bodies, comment bodies, filters and views.

Invariants:
    - TaskCreate.title: 1-100 chars, stripped, non-empty
    - TaskUpdate is partial: the service applies only model_fields_set;
      an explicit assignee_id of null unassigns
    - CommentCreate.text is non-empty after stripping
    - TaskResponse.comments are in creation order

Design Decisions:
    - Literal for sort fields over str enum: Pydantic handles validation natively
"""

from datetime import date, datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from workboard.core.domain_types import (
    COMMENT_TEXT_MAX_LENGTH, TASK_TITLE_MAX_LENGTH, TaskPriority, TaskStatus,
)


def _strip_required(v: str | None, name: str) -> str | None:
    if v is None:
        return v
    v = v.strip()
    if not v:
        raise ValueError(f"{name} cannot be empty or whitespace")
    return v


class TaskCreate(BaseModel):
    """Task creation inside a project."""
    title: str = Field(min_length=1, max_length=TASK_TITLE_MAX_LENGTH)
    description: str | None = None
    status: TaskStatus = TaskStatus.OPEN
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: datetime | None = None
    assignee_id: UUID | None = None
    dependency_ids: list[UUID] = Field(default_factory=list)

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        return _strip_required(v, "title")


class TaskUpdate(BaseModel):
    """Partial task update."""
    title: str | None = Field(None, min_length=1, max_length=TASK_TITLE_MAX_LENGTH)
    description: str | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    due_date: datetime | None = None
    assignee_id: UUID | None = None
    dependency_ids: list[UUID] | None = None

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str | None) -> str | None:
        return _strip_required(v, "title")


class TaskFilter(BaseModel):
    """Filters and ordering for a project's task list."""
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    assignee_id: UUID | None = None
    due_date: date | None = None
    sort_by: Literal["created_at", "due_date", "priority", "status", "title"] = "created_at"
    order: Literal["asc", "desc"] = "desc"


class CommentCreate(BaseModel):
    text: str = Field(min_length=1, max_length=COMMENT_TEXT_MAX_LENGTH)

    @field_validator("text")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return _strip_required(v, "text")


class CommentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    task_id: UUID
    author_id: UUID
    text: str
    created_at: datetime


class TaskResponse(BaseModel):
    """Task view with dependency ids and comments."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    description: str | None = None
    status: TaskStatus
    priority: TaskPriority
    due_date: datetime | None = None
    project_id: UUID
    created_by_id: UUID
    assignee_id: UUID | None = None
    dependency_ids: list[UUID] = []
    comments: list[CommentResponse] = []
    created_at: datetime
    updated_at: datetime
