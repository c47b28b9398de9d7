"""Live Scopes - naming and parsing of fan-out groups.

Invariants:
    - A scope string is always "<kind>:<uuid>" with kind in ScopeKind
    - parse_scope never raises anything but InvalidInputError
"""

from dataclasses import dataclass
from uuid import UUID

from workboard.core.domain_types import ScopeKind
from workboard.core.errors import InvalidInputError


@dataclass(frozen=True)
class Scope:
    kind: ScopeKind
    resource_id: UUID

    def __str__(self) -> str:
        return f"{self.kind.value}:{self.resource_id}"


def project_scope(project_id: UUID) -> str:
    return str(Scope(ScopeKind.PROJECT, project_id))


def task_scope(task_id: UUID) -> str:
    return str(Scope(ScopeKind.TASK, task_id))


def user_scope(user_id: UUID) -> str:
    return str(Scope(ScopeKind.USER, user_id))


def parse_scope(raw: str) -> Scope:
    """Parse "project:{id}" / "task:{id}" / "user:{id}" into a Scope."""
    kind_text, sep, id_text = raw.partition(":")
    if not sep:
        raise InvalidInputError(f"Malformed scope '{raw}'", "scope")
    try:
        kind = ScopeKind(kind_text)
        resource_id = UUID(id_text)
    except ValueError:
        raise InvalidInputError(f"Malformed scope '{raw}'", "scope")
    return Scope(kind, resource_id)
