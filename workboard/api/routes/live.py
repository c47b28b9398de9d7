"""Live Routes - SSE stream plus scope join/leave for the Broadcast Fan-out.

Invariants:
    - GET /stream opens one connection, emits `connected` first, then queued events
    - The connection is disconnected on every stream exit (client gone, shutdown, error)
    - Each connection is auto-subscribed to the owner's user:{id} scope
    - Join requires read access to the scope's resource and ownership of the connection

Design Decisions:
    - StreamingResponse for SSE: event generator yields formatted SSE lines
    - Keep-alive comment lines so idle proxies do not drop the stream
"""

import json
import logging
from collections.abc import AsyncIterator

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from workboard.api.dependencies import get_broadcast_hub, get_live_access, get_principal
from workboard.config import get_settings
from workboard.core.domain_types import ConnectionId, Principal
from workboard.core.scopes import parse_scope, user_scope
from workboard.infrastructure.broadcast import KEEPALIVE, BroadcastHub, LiveConnection
from workboard.schemas.live import SubscriptionRequest, SubscriptionResponse
from workboard.services.live_access import LiveAccess, require_connection_owner

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/live", tags=["live"])

# SSE headers prevent proxy/browser buffering of streamed events.
_SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "X-Accel-Buffering": "no",
    "Connection": "keep-alive",
}

_KEEPALIVE_LINE = ": keep-alive\n\n"


def sse_line(event: dict) -> str:
    """Format event as SSE data line."""
    return f"data: {json.dumps(event, ensure_ascii=False)}\n\n"


async def live_event_stream(
    hub: BroadcastHub, connection: LiveConnection, keepalive_seconds: float,
) -> AsyncIterator[str]:
    """SSE lines for one connection. Always disconnects on exit."""
    try:
        yield sse_line({
            "type": "connected",
            "data": {
                "connection_id": connection.id,
                "scopes": sorted(await hub.scopes_of(connection.id)),
            },
        })
        async for item in hub.iter_events(connection, keepalive_seconds):
            if item is KEEPALIVE:
                yield _KEEPALIVE_LINE
                continue
            yield sse_line(item)
    finally:
        await hub.disconnect(connection.id)


@router.get("/stream")
async def stream(
    principal: Principal = Depends(get_principal),
    hub: BroadcastHub = Depends(get_broadcast_hub),
):
    connection = await hub.connect(principal)
    await hub.join(connection.id, user_scope(principal.id))
    return StreamingResponse(
        live_event_stream(hub, connection, get_settings().live_keepalive_seconds),
        media_type="text/event-stream",
        headers=_SSE_HEADERS,
    )


@router.post("/{connection_id}/subscriptions", response_model=SubscriptionResponse)
async def join_scope(
    connection_id: str,
    body: SubscriptionRequest,
    principal: Principal = Depends(get_principal),
    hub: BroadcastHub = Depends(get_broadcast_hub),
    access: LiveAccess = Depends(get_live_access),
):
    connection = await hub.get_connection(ConnectionId(connection_id))
    require_connection_owner(principal, connection)
    scope = parse_scope(body.scope)
    await access.authorize_scope(principal, scope)
    await hub.join(connection.id, str(scope))
    return SubscriptionResponse(
        connection_id=connection.id, scopes=sorted(await hub.scopes_of(connection.id)),
    )


@router.delete(
    "/{connection_id}/subscriptions/{scope}", response_model=SubscriptionResponse,
)
async def leave_scope(
    connection_id: str,
    scope: str,
    principal: Principal = Depends(get_principal),
    hub: BroadcastHub = Depends(get_broadcast_hub),
):
    connection = await hub.get_connection(ConnectionId(connection_id))
    require_connection_owner(principal, connection)
    await hub.leave(connection.id, str(parse_scope(scope)))
    return SubscriptionResponse(
        connection_id=connection.id, scopes=sorted(await hub.scopes_of(connection.id)),
    )
