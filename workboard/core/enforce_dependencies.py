"""Dependency Enforcement - pure checks over a proposed task dependency set.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - Return a taxonomy error on violation, None on success
    - Check order: resolution -> self-reference -> completion gate
    - Only one-hop cycles (self-reference) are rejected; multi-hop cycles are not detected

Design Decisions:
    - The caller resolves ids against the store and passes the resolved snapshots in,
      so a rejected set is never partially applied
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from uuid import UUID

from workboard.core.domain_types import TaskStatus
from workboard.core.errors import (
    DependencyNotSatisfiedError,
    InvalidDependencySetError,
    SelfDependencyError,
    WorkboardError,
)


@dataclass(frozen=True)
class DependencySnapshot:
    """What the validator needs to know about one resolved dependency."""
    task_id: UUID
    project_id: UUID
    status: TaskStatus


def normalize_dependency_ids(raw_ids: Iterable[UUID]) -> list[UUID]:
    """Collapse duplicates, keep first-seen order."""
    seen: dict[UUID, None] = {}
    for dep_id in raw_ids:
        seen.setdefault(dep_id, None)
    return list(seen)


def check_resolved(
    proposed: list[UUID],
    resolved: Mapping[UUID, DependencySnapshot],
    project_id: UUID,
) -> InvalidDependencySetError | None:
    """Every proposed id must resolve to a task of the owning project."""
    invalid = [
        str(dep_id) for dep_id in proposed
        if dep_id not in resolved or resolved[dep_id].project_id != project_id
    ]
    if invalid:
        return InvalidDependencySetError(invalid)
    return None


def check_self_dependency(
    task_id: UUID | None, proposed: Iterable[UUID],
) -> SelfDependencyError | None:
    """A task never lists itself as a dependency."""
    if task_id is not None and task_id in set(proposed):
        return SelfDependencyError(task_id)
    return None


def check_completion_gate(
    requested_status: TaskStatus | None,
    dependencies: Iterable[DependencySnapshot],
) -> DependencyNotSatisfiedError | None:
    """Completion requires every dependency to be completed already."""
    if requested_status != TaskStatus.COMPLETED:
        return None
    pending = [
        str(dep.task_id) for dep in dependencies
        if dep.status != TaskStatus.COMPLETED
    ]
    if pending:
        return DependencyNotSatisfiedError(pending)
    return None


# --- Composite validator ------------------------------------------------------

def validate_dependency_set(
    task_id: UUID | None,
    project_id: UUID,
    proposed: list[UUID],
    resolved: Mapping[UUID, DependencySnapshot],
    requested_status: TaskStatus | None,
) -> WorkboardError | None:
    """Run every dependency check in order, return the first violation."""
    return (
        check_resolved(proposed, resolved, project_id)
        or check_self_dependency(task_id, proposed)
        or check_completion_gate(
            requested_status, [resolved[dep_id] for dep_id in proposed],
        )
    )
