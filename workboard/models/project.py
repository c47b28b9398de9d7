"""Project ORM - aggregate root that exclusively owns its tasks.

Invariants:
    - name is unique (max 100 chars), description max 500 chars
    - lead_manager_id is exactly one user and is always in team_members
    - created_by_id is immutable after creation
    - Deleting a project is a two-step store operation: tasks first, then the project row

Design Decisions:
    - project_members association table instead of an array column: set-membership
      queries (projects visible to a user) stay a plain join
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Table
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from workboard.db.base import Base


project_members = Table(
    "project_members",
    Base.metadata,
    Column(
        "project_id", UUID(as_uuid=True),
        ForeignKey("projects.id", ondelete="CASCADE"), primary_key=True,
    ),
    Column(
        "user_id", UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"), primary_key=True,
    ),
)


class Project(Base):
    """Project entity - roster, lead manager, owned tasks."""
    __tablename__ = "projects"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    lead_manager_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), nullable=False,
    )
    created_by_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), nullable=False,
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
    team_members: Mapped[list["User"]] = relationship(
        "User", secondary=project_members, lazy="selectin",
    )

    @property
    def team_member_ids(self) -> list[uuid.UUID]:
        return sorted((u.id for u in self.team_members), key=str)
