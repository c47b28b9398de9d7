"""API Dependencies - principal extraction and per-request service wiring.

Invariants:
    - Principal comes only from the trusted X-Principal-Id / X-Principal-Role headers
      set by the upstream identity collaborator; missing or malformed -> 401
    - The BroadcastHub is the one on app.state; routes never build their own
    - The NotificationDispatcher persists through db_manager sessions, never the
      request session

Design Decisions:
    - db_manager read at call time (module attribute) so tests can swap it
"""

from uuid import UUID

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

import workboard.infrastructure.database as db_module
from workboard.config import get_settings
from workboard.core.domain_types import Principal, Role, UserId
from workboard.core.errors import NotAuthenticatedError
from workboard.infrastructure.broadcast import BroadcastHub
from workboard.infrastructure.database import get_db
from workboard.services.live_access import LiveAccess
from workboard.services.notification_dispatcher import NotificationDispatcher
from workboard.services.notification_inbox import NotificationInbox
from workboard.services.reports import ReportService
from workboard.services.user_directory import UserDirectory
from workboard.services.workflow_orchestrator import WorkflowOrchestrator


async def get_principal(
    x_principal_id: str | None = Header(None),
    x_principal_role: str | None = Header(None),
) -> Principal:
    if not x_principal_id or not x_principal_role:
        raise NotAuthenticatedError()
    try:
        return Principal(id=UserId(UUID(x_principal_id)), role=Role(x_principal_role))
    except ValueError:
        raise NotAuthenticatedError("Malformed identity headers")


def get_broadcast_hub(request: Request) -> BroadcastHub:
    return request.app.state.broadcast_hub


def _manager_session():
    if not db_module.db_manager:
        raise RuntimeError("Database not initialized")
    return db_module.db_manager.session()


def get_notification_dispatcher(
    hub: BroadcastHub = Depends(get_broadcast_hub),
) -> NotificationDispatcher:
    return NotificationDispatcher(_manager_session, hub)


def get_orchestrator(
    db: AsyncSession = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
    hub: BroadcastHub = Depends(get_broadcast_hub),
) -> WorkflowOrchestrator:
    return WorkflowOrchestrator(db, dispatcher, hub)


def get_inbox(db: AsyncSession = Depends(get_db)) -> NotificationInbox:
    return NotificationInbox(db, get_settings().notification_list_limit)


def get_report_service(db: AsyncSession = Depends(get_db)) -> ReportService:
    return ReportService(db)


def get_user_directory(db: AsyncSession = Depends(get_db)) -> UserDirectory:
    return UserDirectory(db)


def get_live_access(db: AsyncSession = Depends(get_db)) -> LiveAccess:
    return LiveAccess(db)
