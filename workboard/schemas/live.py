"""Live Schemas - subscription bodies for the live channel.

Invariants:
    - scope is "<kind>:<uuid>"; malformed scopes are rejected by core/scopes.parse_scope
"""

from pydantic import BaseModel, Field


class SubscriptionRequest(BaseModel):
    scope: str = Field(min_length=3, max_length=100)


class SubscriptionResponse(BaseModel):
    """Scopes the connection holds after the change."""
    connection_id: str
    scopes: list[str]
