"""Membership Reconciliation - pure set arithmetic for project roster changes.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - The lead manager is always in the finalized member set
    - added = new - old, removed = old - new (after the lead is forced in)
    - The acting principal never appears in notify_added / notify_removed
    - Output order is deterministic (sorted by id string)
"""

from collections.abc import Iterable
from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class MembershipChange:
    """Finalized roster plus the events the dispatcher needs."""
    members: frozenset[UUID]
    added: tuple[UUID, ...]
    removed: tuple[UUID, ...]
    notify_added: tuple[UUID, ...]
    notify_removed: tuple[UUID, ...]

    @property
    def changed(self) -> bool:
        return bool(self.added or self.removed)


def _ordered(ids: Iterable[UUID]) -> tuple[UUID, ...]:
    return tuple(sorted(ids, key=str))


def reconcile_members(
    old_members: Iterable[UUID],
    new_members: Iterable[UUID],
    lead_manager_id: UUID,
    actor_id: UUID,
) -> MembershipChange:
    """Compute the finalized roster and the added/removed differences."""
    old = set(old_members)
    new = set(new_members)
    new.add(lead_manager_id)

    added = _ordered(new - old)
    removed = _ordered(old - new)
    return MembershipChange(
        members=frozenset(new),
        added=added,
        removed=removed,
        notify_added=tuple(m for m in added if m != actor_id),
        notify_removed=tuple(m for m in removed if m != actor_id),
    )


def find_unresolved(requested: Iterable[UUID], resolved: Iterable[UUID]) -> list[str]:
    """Ids the caller asked for that the user store did not return."""
    known = set(resolved)
    return [str(uid) for uid in _ordered(set(requested)) if uid not in known]
