"""Project Schemas - request bodies and views for project endpoints.

Invariants:
    - ProjectCreate.name: 1-100 chars, stripped, non-empty; description max 500
    - ProjectUpdate is partial: only fields present in model_fields_set are applied
    - ProjectResponse.progress is completed/total * 100 rounded to 2 decimals (0.0 when empty)

Design Decisions:
    - team_member_ids as a list on the wire, reconciled as a set by the service
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from workboard.core.domain_types import (
    PROJECT_DESCRIPTION_MAX_LENGTH, PROJECT_NAME_MAX_LENGTH,
)


def _strip_name(v: str | None) -> str | None:
    if v is None:
        return v
    v = v.strip()
    if not v:
        raise ValueError("name cannot be empty or whitespace")
    return v


class ProjectCreate(BaseModel):
    """Project creation - lead defaults to the creator."""
    name: str = Field(min_length=1, max_length=PROJECT_NAME_MAX_LENGTH)
    description: str | None = Field(None, max_length=PROJECT_DESCRIPTION_MAX_LENGTH)
    lead_manager_id: UUID | None = None
    team_member_ids: list[UUID] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return _strip_name(v)


class ProjectUpdate(BaseModel):
    """Partial project update. Omitted fields stay unchanged."""
    name: str | None = Field(None, min_length=1, max_length=PROJECT_NAME_MAX_LENGTH)
    description: str | None = Field(None, max_length=PROJECT_DESCRIPTION_MAX_LENGTH)
    lead_manager_id: UUID | None = None
    team_member_ids: list[UUID] | None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str | None) -> str | None:
        return _strip_name(v)


class ProjectResponse(BaseModel):
    """Project view with task progress."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    description: str | None = None
    lead_manager_id: UUID
    created_by_id: UUID
    team_member_ids: list[UUID]
    total_tasks: int = 0
    completed_tasks: int = 0
    progress: float = 0.0
    created_at: datetime
    updated_at: datetime
