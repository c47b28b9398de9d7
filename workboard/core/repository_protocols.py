"""Boundary Protocols - contracts between core and the Entity Store shell.

Invariants:
    - Core NEVER imports from the shell; dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Store methods never commit; the caller owns the unit of work

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - *Like protocols describe entity shapes so core and services can be typed
      without importing ORM classes
"""

from collections.abc import Sequence
from datetime import datetime
from typing import Protocol
from uuid import UUID


class UserLike(Protocol):
    id: UUID
    full_name: str
    email: str
    role: str


class ProjectLike(Protocol):
    id: UUID
    name: str
    description: str | None
    lead_manager_id: UUID
    created_by_id: UUID

    @property
    def team_member_ids(self) -> list[UUID]: ...


class CommentLike(Protocol):
    id: UUID
    task_id: UUID
    author_id: UUID
    text: str
    created_at: datetime


class TaskLike(Protocol):
    id: UUID
    title: str
    status: str
    project_id: UUID
    created_by_id: UUID
    assignee_id: UUID | None

    @property
    def dependency_ids(self) -> list[UUID]: ...


class NotificationLike(Protocol):
    id: UUID
    recipient_id: UUID
    message: str
    link: str | None
    read: bool


class UserStore(Protocol):
    """Contract for user lookups - implemented by repositories/."""
    async def get(self, user_id: UUID) -> UserLike | None: ...
    async def find_many(self, user_ids: Sequence[UUID]) -> list[UserLike]: ...
    async def list_all(self) -> list[UserLike]: ...


class ProjectStore(Protocol):
    """Contract for project persistence - implemented by repositories/."""
    async def get(self, project_id: UUID) -> ProjectLike | None: ...
    async def get_by_name(self, name: str) -> ProjectLike | None: ...
    async def delete(self, project: ProjectLike) -> None: ...
    async def count_tasks(self, project_id: UUID) -> tuple[int, int]: ...


class TaskStore(Protocol):
    """Contract for task persistence - implemented by repositories/."""
    async def get(self, task_id: UUID) -> TaskLike | None: ...
    async def find_in_project(
        self, task_ids: Sequence[UUID], project_id: UUID,
    ) -> list[TaskLike]: ...
    async def list_ids_for_project(self, project_id: UUID) -> list[UUID]: ...
    async def delete_by_project(self, project_id: UUID) -> int: ...
    async def remove_dependency_references(self, task_id: UUID) -> None: ...


class NotificationStore(Protocol):
    """Contract for notification persistence - implemented by repositories/."""
    async def create(
        self, recipient_id: UUID, message: str, link: str | None,
    ) -> NotificationLike: ...
    async def get(self, notification_id: UUID) -> NotificationLike | None: ...
    async def list_recent(
        self, recipient_id: UUID, limit: int,
    ) -> list[NotificationLike]: ...
    async def mark_all_read(self, recipient_id: UUID) -> int: ...
    async def delete(self, notification: NotificationLike) -> None: ...
