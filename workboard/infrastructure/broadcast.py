"""Broadcast Fan-out - ephemeral scope-keyed subscription groups for live clients.

Invariants:
    - The subscription table and connection registry are only touched under self._lock
    - publish() delivers to connections subscribed at publish time; nothing is replayed
    - A connection may be in any number of scopes; disconnect() removes it from all of them
    - Delivery never blocks a publisher: a full connection queue drops the event (logged)
    - publish() never raises for delivery problems
    - A keep-alive timeout in iter_events never consumes a queued event

Design Decisions:
    - Explicit component created per app (app.state) and injected into the orchestrator,
      not a process-global registry
    - Recipients snapshotted under the lock, enqueued outside it
    - Bounded asyncio.Queue per connection: a slow reader cannot grow memory unbounded
"""

import asyncio
import logging
import uuid
from collections.abc import AsyncIterator, Iterable
from dataclasses import dataclass, field
from uuid import UUID

from workboard.core.domain_types import ConnectionId, Principal
from workboard.core.errors import ResourceNotFoundError

logger = logging.getLogger(__name__)

_CLOSE = object()
KEEPALIVE = object()


@dataclass(eq=False)
class LiveConnection:
    """One connected live client, owned by the principal that opened it."""
    id: ConnectionId
    principal: Principal
    queue: asyncio.Queue
    scopes: set[str] = field(default_factory=set)
    closed: bool = False

    def offer(self, item: object) -> bool:
        """Enqueue without waiting. Returns False when the queue is full."""
        try:
            self.queue.put_nowait(item)
            return True
        except asyncio.QueueFull:
            return False

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        if not self.offer(_CLOSE):
            # make room for the close marker
            self.queue.get_nowait()
            self.queue.put_nowait(_CLOSE)


class BroadcastHub:
    """Scope-keyed fan-out with a lock-guarded subscription table."""

    def __init__(self, queue_size: int = 100):
        self._queue_size = queue_size
        self._lock = asyncio.Lock()
        self._connections: dict[ConnectionId, LiveConnection] = {}
        self._scopes: dict[str, set[ConnectionId]] = {}

    # -- Connection lifecycle ----------------------------------------------------

    async def connect(self, principal: Principal) -> LiveConnection:
        connection = LiveConnection(
            id=ConnectionId(uuid.uuid4().hex),
            principal=principal,
            queue=asyncio.Queue(maxsize=self._queue_size),
        )
        async with self._lock:
            self._connections[connection.id] = connection
        logger.info(
            "Live connection opened",
            extra={"connection_id": connection.id, "principal_id": principal.id},
        )
        return connection

    async def disconnect(self, connection_id: ConnectionId) -> None:
        """Remove a connection from every scope it held. Idempotent."""
        async with self._lock:
            connection = self._connections.pop(connection_id, None)
            if connection is None:
                return
            for scope in connection.scopes:
                self._discard(scope, connection_id)
            connection.scopes.clear()
        connection.close()
        logger.info("Live connection closed", extra={"connection_id": connection_id})

    async def get_connection(self, connection_id: ConnectionId) -> LiveConnection:
        async with self._lock:
            connection = self._connections.get(connection_id)
        if connection is None:
            raise ResourceNotFoundError("Connection", connection_id)
        return connection

    # -- Membership ------------------------------------------------------------------

    async def join(self, connection_id: ConnectionId, scope: str) -> None:
        async with self._lock:
            connection = self._connections.get(connection_id)
            if connection is None:
                raise ResourceNotFoundError("Connection", connection_id)
            connection.scopes.add(scope)
            self._scopes.setdefault(scope, set()).add(connection_id)
        logger.debug(
            "Joined scope", extra={"connection_id": connection_id, "scope": scope},
        )

    async def leave(self, connection_id: ConnectionId, scope: str) -> bool:
        """Leave one scope. Returns False when the connection was not in it."""
        async with self._lock:
            connection = self._connections.get(connection_id)
            if connection is None or scope not in connection.scopes:
                return False
            connection.scopes.discard(scope)
            self._discard(scope, connection_id)
        return True

    async def revoke(self, principal_id: UUID, scopes: Iterable[str]) -> int:
        """Drop every connection of principal_id from the given scopes."""
        removed = 0
        targets = set(scopes)
        async with self._lock:
            for connection in self._connections.values():
                if connection.principal.id != principal_id:
                    continue
                for scope in targets & connection.scopes:
                    connection.scopes.discard(scope)
                    self._discard(scope, connection.id)
                    removed += 1
        if removed:
            logger.info(
                "Revoked %d live subscription(s)", removed,
                extra={"principal_id": principal_id},
            )
        return removed

    async def close_scope(self, scope: str) -> int:
        """Remove every subscriber from a scope whose resource no longer exists."""
        async with self._lock:
            members = self._scopes.pop(scope, set())
            for connection_id in members:
                connection = self._connections.get(connection_id)
                if connection is not None:
                    connection.scopes.discard(scope)
        return len(members)

    # -- Delivery --------------------------------------------------------------------

    async def publish(self, scope: str, event_name: str, payload: object) -> int:
        """Deliver an event to the current subscribers of scope. Returns delivered count."""
        async with self._lock:
            recipients = [
                self._connections[cid]
                for cid in self._scopes.get(scope, ())
                if cid in self._connections
            ]
        event = {"type": event_name, "scope": scope, "data": payload}
        delivered = 0
        for connection in recipients:
            if connection.closed:
                continue
            if connection.offer(event):
                delivered += 1
            else:
                logger.warning(
                    "Live queue full, event dropped",
                    extra={
                        "connection_id": connection.id,
                        "scope": scope, "event": event_name,
                    },
                )
        return delivered

    async def iter_events(
        self, connection: LiveConnection, keepalive_seconds: float,
    ) -> AsyncIterator[object]:
        """Yield queued events until the connection closes.

        Yields KEEPALIVE when nothing arrived within keepalive_seconds.
        """
        while True:
            try:
                async with asyncio.timeout(keepalive_seconds):
                    item = await connection.queue.get()
            except TimeoutError:
                yield KEEPALIVE
                continue
            if item is _CLOSE:
                return
            yield item

    # -- Introspection ---------------------------------------------------------------

    async def subscribers_of(self, scope: str) -> set[ConnectionId]:
        async with self._lock:
            return set(self._scopes.get(scope, ()))

    async def scopes_of(self, connection_id: ConnectionId) -> set[str]:
        async with self._lock:
            connection = self._connections.get(connection_id)
            return set(connection.scopes) if connection else set()

    async def stats(self) -> dict[str, int]:
        async with self._lock:
            return {"connections": len(self._connections), "scopes": len(self._scopes)}

    async def close(self) -> None:
        """Close every connection (shutdown)."""
        async with self._lock:
            connections = list(self._connections.values())
            self._connections.clear()
            self._scopes.clear()
        for connection in connections:
            connection.scopes.clear()
            connection.close()

    def _discard(self, scope: str, connection_id: ConnectionId) -> None:
        members = self._scopes.get(scope)
        if members is None:
            return
        members.discard(connection_id)
        if not members:
            del self._scopes[scope]
