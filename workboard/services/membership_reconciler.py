"""Membership Reconciler - resolves a proposed roster and computes its differences.

Invariants:
    - Every requested id must resolve to a user, else InvalidTeamMemberError
    - requested=None means "keep the current roster" (plus the lead)
    - Returned users are exactly the finalized member set

Design Decisions:
    - Thin async shell over core/reconcile_membership.py
"""

from collections.abc import Iterable
from uuid import UUID

from workboard.core.errors import InvalidTeamMemberError
from workboard.core.reconcile_membership import (
    MembershipChange, find_unresolved, reconcile_members,
)
from workboard.core.repository_protocols import UserLike, UserStore


class MembershipReconciler:
    def __init__(self, users: UserStore):
        self.users = users

    async def reconcile(
        self,
        old_members: Iterable[UUID],
        requested: Iterable[UUID] | None,
        lead_manager_id: UUID,
        actor_id: UUID,
    ) -> tuple[MembershipChange, list[UserLike]]:
        old = set(old_members)
        wanted = set(old if requested is None else requested)
        wanted.add(lead_manager_id)

        found = await self.users.find_many(list(wanted))
        unresolved = find_unresolved(wanted, (u.id for u in found))
        if unresolved:
            raise InvalidTeamMemberError(unresolved)

        change = reconcile_members(old, wanted, lead_manager_id, actor_id)
        users = sorted(
            (u for u in found if u.id in change.members), key=lambda u: str(u.id),
        )
        return change, users
