"""Live Events - best-effort publishing of post-commit state changes.

Invariants:
    - Called only after the triggering commit succeeded
    - Never raises: a failed publish is logged and absorbed
    - hub=None disables live delivery (CLI/tests without a hub)
"""

import logging
from collections.abc import Iterable

from workboard.core.domain_types import LiveEvent
from workboard.infrastructure.broadcast import BroadcastHub

logger = logging.getLogger(__name__)


async def publish(
    hub: BroadcastHub | None, scopes: Iterable[str], event: LiveEvent, payload: object,
) -> int:
    """Publish one event to each scope. Returns total deliveries."""
    if hub is None:
        return 0
    delivered = 0
    for scope in scopes:
        try:
            delivered += await hub.publish(scope, event.value, payload)
        except Exception as e:
            logger.warning(
                f"Live publish failed: {e}",
                extra={"scope": scope, "event": event.value},
            )
    return delivered


async def close_scopes(hub: BroadcastHub | None, scopes: Iterable[str]) -> None:
    """Drop subscribers of scopes whose resource was deleted."""
    if hub is None:
        return
    for scope in scopes:
        try:
            await hub.close_scope(scope)
        except Exception as e:
            logger.warning(f"Closing live scope failed: {e}", extra={"scope": scope})


async def revoke(
    hub: BroadcastHub | None, principal_id, scopes: list[str],
) -> None:
    """Remove a user's connections from scopes they may no longer read."""
    if hub is None or not scopes:
        return
    try:
        await hub.revoke(principal_id, scopes)
    except Exception as e:
        logger.warning(
            f"Revoking live scopes failed: {e}", extra={"principal_id": principal_id},
        )
