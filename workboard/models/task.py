"""Task ORM - unit of work inside a project, with dependency edges and comments.

Invariants:
    - project_id and created_by_id are immutable after creation
    - status in TaskStatus values, priority in TaskPriority values
    - dependencies never include the task itself and always share its project_id
      (enforced by DependencyValidator before every write)
    - comments are returned in creation order

Design Decisions:
    - TaskDependency is a mapped edge row (task_id -> depends_on_id), not a self-referential
      Task collection: loading a task loads its own edges and never another Task
    - Edges are weak references, deleting a task removes the edges that point at it
    - lazy="selectin" on dependency_links/comments: the async session never lazy-loads
"""

import uuid
from collections.abc import Iterable
from datetime import datetime, timezone

from sqlalchemy import String, Text, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from workboard.core.domain_types import TaskPriority, TaskStatus
from workboard.db.base import Base


class TaskDependency(Base):
    """Dependency edge - task_id cannot complete before depends_on_id."""
    __tablename__ = "task_dependencies"

    task_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("tasks.id", ondelete="CASCADE"), primary_key=True,
    )
    depends_on_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("tasks.id", ondelete="CASCADE"), primary_key=True,
    )


class Task(Base):
    """Task entity - workflow status, assignee, dependency set, comments."""
    __tablename__ = "tasks"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=TaskStatus.OPEN.value,
    )
    priority: Mapped[str] = mapped_column(
        String(20), nullable=False, default=TaskPriority.MEDIUM.value,
    )
    due_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    project_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    created_by_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), nullable=False,
    )
    assignee_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), nullable=True, index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    dependency_links: Mapped[list[TaskDependency]] = relationship(
        TaskDependency,
        primaryjoin=lambda: Task.id == TaskDependency.task_id,
        foreign_keys=lambda: [TaskDependency.task_id],
        cascade="all, delete-orphan", lazy="selectin",
        order_by=lambda: TaskDependency.depends_on_id,
    )
    comments: Mapped[list["TaskComment"]] = relationship(
        "TaskComment", back_populates="task",
        cascade="all, delete-orphan", lazy="selectin",
        order_by="TaskComment.created_at",
    )

    @property
    def dependency_ids(self) -> list[uuid.UUID]:
        return [link.depends_on_id for link in self.dependency_links]

    def set_dependencies(self, dependency_ids: Iterable[uuid.UUID]) -> None:
        """Replace the edge set, keeping rows for ids that stay."""
        wanted = list(dict.fromkeys(dependency_ids))
        kept = [link for link in self.dependency_links if link.depends_on_id in wanted]
        present = {link.depends_on_id for link in kept}
        self.dependency_links = kept + [
            TaskDependency(depends_on_id=dep_id)
            for dep_id in wanted if dep_id not in present
        ]
