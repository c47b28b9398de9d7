"""Dependency Validator - resolves a proposed dependency set and enforces its rules.

Invariants:
    - Resolution is scoped to the owning project (find_in_project)
    - Validation fully precedes any write: a rejected set is never partially applied
    - Returns the resolved tasks in the caller's order (duplicates collapsed)

Design Decisions:
    - Thin async shell over core/enforce_dependencies.py: IO here, rules there
"""

import logging
from collections.abc import Iterable
from uuid import UUID

from workboard.core.domain_types import TaskStatus
from workboard.core.enforce_dependencies import (
    DependencySnapshot,
    normalize_dependency_ids,
    validate_dependency_set,
)
from workboard.core.repository_protocols import TaskLike, TaskStore

logger = logging.getLogger(__name__)


class DependencyValidator:
    """Checks dependency sets against the project's task universe."""

    def __init__(self, tasks: TaskStore):
        self.tasks = tasks

    async def validate(
        self,
        task_id: UUID | None,
        project_id: UUID,
        proposed: Iterable[UUID],
        requested_status: TaskStatus | None,
    ) -> list[TaskLike]:
        """Raise the first violation, else return the resolved dependency tasks."""
        dep_ids = normalize_dependency_ids(proposed)
        found = await self.tasks.find_in_project(dep_ids, project_id)
        by_id = {t.id: t for t in found}
        resolved = {
            t.id: DependencySnapshot(t.id, t.project_id, TaskStatus(t.status))
            for t in found
        }
        error = validate_dependency_set(
            task_id, project_id, dep_ids, resolved, requested_status,
        )
        if error:
            logger.info(
                f"Dependency set rejected: {error.code}",
                extra={"project_id": project_id, "task_id": task_id},
            )
            raise error
        return [by_id[dep_id] for dep_id in dep_ids]
