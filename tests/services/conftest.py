"""Service test fixtures - hub, dispatcher and orchestrator over the test DB.

Invariants:
    - The orchestrator shares the test_db session; notifications use their own sessions
    - The hub is a real BroadcastHub so tests can subscribe and observe events
"""

import pytest
from sqlalchemy import select

from workboard.core.domain_types import Principal
from workboard.infrastructure.broadcast import BroadcastHub
from workboard.models.notification import Notification
from workboard.schemas.project import ProjectCreate
from workboard.services.notification_dispatcher import NotificationDispatcher
from workboard.services.workflow_orchestrator import WorkflowOrchestrator


@pytest.fixture
def hub():
    return BroadcastHub()


@pytest.fixture
def dispatcher(test_session_factory, hub):
    return NotificationDispatcher(test_session_factory, hub)


@pytest.fixture
def orchestrator(test_db, dispatcher, hub):
    return WorkflowOrchestrator(test_db, dispatcher, hub)


@pytest.fixture
async def launch(orchestrator, people):
    """Project "Launch" led by lead, with alice and bob on the team."""
    return await orchestrator.create_project(
        people.lead.principal,
        ProjectCreate(name="Launch", team_member_ids=[people.alice.id, people.bob.id]),
    )


@pytest.fixture
def notifications_for(test_session_factory):
    """Fetch stored notification messages for a user, oldest first."""
    async def _fetch(user_id):
        async with test_session_factory() as db:
            result = await db.execute(
                select(Notification)
                .where(Notification.recipient_id == user_id)
                .order_by(Notification.created_at),
            )
            return [n.message for n in result.scalars().all()]
    return _fetch


@pytest.fixture
def subscribe(hub):
    """Open a live connection for a principal already joined to scopes."""
    async def _subscribe(principal: Principal, *scopes: str):
        connection = await hub.connect(principal)
        for scope in scopes:
            await hub.join(connection.id, scope)
        return connection
    return _subscribe
