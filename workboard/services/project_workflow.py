"""Project Workflow - create, update, delete and read projects.

Invariants:
    - Strict order per mutation: authorize -> validate -> commit -> notify -> broadcast
    - lead_manager_id is in the team after every create/update
    - Lead reassignment is admin-only; the new lead must be a manager or admin
    - Cascade delete runs as two commits: tasks first, then the project row.
      A failure between them leaves an empty project that a retry deletes
    - Removed members lose live subscriptions to the project and its tasks

Design Decisions:
    - Views re-read the project after commit (populate_existing) so the
      response reflects stored state, not the in-memory request copy
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from workboard.core.authorization import NO_RESOURCE, authorize
from workboard.core.domain_types import Action, LiveEvent, Principal, Role
from workboard.core.errors import (
    ConflictError, ErrorContext, ForbiddenError, InvalidInputError,
    ResourceNotFoundError,
)
from workboard.core.notification_messages import (
    PROJECTS_LINK, added_to_project, project_link, removed_from_project,
)
from workboard.core.scopes import project_scope, task_scope
from workboard.infrastructure.broadcast import BroadcastHub
from workboard.models.project import Project
from workboard.repositories.project_repository import ProjectRepository
from workboard.repositories.task_repository import TaskRepository
from workboard.repositories.user_repository import UserRepository
from workboard.schemas.project import ProjectCreate, ProjectResponse, ProjectUpdate
from workboard.services import live_events
from workboard.services.entity_views import project_ref, project_view, to_payload
from workboard.services.membership_reconciler import MembershipReconciler
from workboard.services.notification_dispatcher import NotificationDispatcher

logger = logging.getLogger(__name__)

_LEAD_ROLES = (Role.MANAGER.value, Role.ADMIN.value)


async def load_project(projects: ProjectRepository, project_id: UUID) -> Project:
    project = await projects.get(project_id)
    if project is None:
        raise ResourceNotFoundError(
            "Project", project_id, ErrorContext(project_id=str(project_id)),
        )
    return project


class ProjectWorkflow:
    """Project lifecycle with roster reconciliation and cascade delete."""

    def __init__(
        self,
        db: AsyncSession,
        dispatcher: NotificationDispatcher,
        hub: BroadcastHub | None = None,
    ):
        self.db = db
        self.dispatcher = dispatcher
        self.hub = hub
        self.projects = ProjectRepository(db)
        self.tasks = TaskRepository(db)
        self.users = UserRepository(db)
        self.membership = MembershipReconciler(self.users)

    # -- Reads -----------------------------------------------------------------

    async def get(self, principal: Principal, project_id: UUID) -> ProjectResponse:
        project = await load_project(self.projects, project_id)
        authorize(principal, project_ref(project), Action.PROJECT_READ)
        return await self._view(project)

    async def list_visible(self, principal: Principal) -> list[ProjectResponse]:
        """Admins see every project; others see projects they lead or belong to."""
        if principal.is_admin:
            projects = await self.projects.list_all()
        else:
            projects = await self.projects.list_visible_to(principal.id)
        return [await self._view(p) for p in projects]

    # -- Mutations ---------------------------------------------------------------

    async def create(self, principal: Principal, body: ProjectCreate) -> ProjectResponse:
        authorize(principal, NO_RESOURCE, Action.PROJECT_CREATE)
        lead_id = body.lead_manager_id or principal.id
        if lead_id != principal.id and not principal.is_admin:
            raise ForbiddenError(
                "Only administrators can assign another lead manager",
                Action.PROJECT_REASSIGN_LEAD.value,
                ErrorContext(principal_id=str(principal.id)),
            )
        await self._require_lead_candidate(lead_id)
        if await self.projects.get_by_name(body.name):
            raise ConflictError(f"A project named '{body.name}' already exists")

        change, members = await self.membership.reconcile(
            set(), body.team_member_ids, lead_id, principal.id,
        )
        project = Project(
            name=body.name,
            description=body.description,
            lead_manager_id=lead_id,
            created_by_id=principal.id,
            team_members=members,
        )
        await self.projects.create(project)
        await self.db.commit()
        logger.info(
            f"Project created: {project.name}",
            extra={"project_id": project.id, "principal_id": principal.id},
        )

        await self.dispatcher.notify_many(
            change.notify_added, added_to_project(project.name), project_link(project.id),
        )
        project = await load_project(self.projects, project.id)
        return await self._view(project)

    async def update(
        self, principal: Principal, project_id: UUID, body: ProjectUpdate,
    ) -> ProjectResponse:
        project = await load_project(self.projects, project_id)
        ref = project_ref(project)
        authorize(principal, ref, Action.PROJECT_UPDATE)
        fields = body.model_fields_set

        lead_id = project.lead_manager_id
        if (
            "lead_manager_id" in fields
            and body.lead_manager_id is not None
            and body.lead_manager_id != project.lead_manager_id
        ):
            authorize(principal, ref, Action.PROJECT_REASSIGN_LEAD)
            await self._require_lead_candidate(body.lead_manager_id)
            lead_id = body.lead_manager_id

        if body.name is not None and body.name != project.name:
            existing = await self.projects.get_by_name(body.name)
            if existing is not None and existing.id != project.id:
                raise ConflictError(f"A project named '{body.name}' already exists")

        requested = body.team_member_ids if "team_member_ids" in fields else None
        change, members = await self.membership.reconcile(
            project.team_member_ids, requested, lead_id, principal.id,
        )

        if body.name is not None:
            project.name = body.name
        if "description" in fields:
            project.description = body.description
        project.lead_manager_id = lead_id
        if change.changed:
            project.team_members = members
        await self.projects.save(project)
        await self.db.commit()
        logger.info(
            f"Project updated (+{len(change.added)}/-{len(change.removed)} members)",
            extra={"project_id": project.id, "principal_id": principal.id},
        )

        await self.dispatcher.notify_many(
            change.notify_added, added_to_project(project.name), project_link(project.id),
        )
        await self.dispatcher.notify_many(
            change.notify_removed, removed_from_project(project.name), PROJECTS_LINK,
        )
        if change.removed:
            await self._revoke_live_access(project.id, change.removed)

        project = await load_project(self.projects, project.id)
        view = await self._view(project)
        await live_events.publish(
            self.hub, [project_scope(project.id)], LiveEvent.PROJECT_UPDATED,
            to_payload(view),
        )
        return view

    async def delete(self, principal: Principal, project_id: UUID) -> None:
        project = await load_project(self.projects, project_id)
        authorize(principal, project_ref(project), Action.PROJECT_DELETE)

        task_ids = await self.tasks.list_ids_for_project(project_id)
        removed = await self.tasks.delete_by_project(project_id)
        await self.db.commit()
        logger.info(
            f"Deleted {removed} task(s) of project",
            extra={"project_id": project_id, "principal_id": principal.id},
        )

        await self.projects.delete(project)
        await self.db.commit()
        logger.info("Project deleted", extra={"project_id": project_id})

        await live_events.publish(
            self.hub, [project_scope(project_id)], LiveEvent.PROJECT_DELETED,
            {"project_id": str(project_id)},
        )
        await live_events.close_scopes(
            self.hub, [project_scope(project_id)] + [task_scope(t) for t in task_ids],
        )

    # -- Helpers -------------------------------------------------------------------

    async def _require_lead_candidate(self, user_id: UUID) -> None:
        user = await self.users.get(user_id)
        if user is None or user.role not in _LEAD_ROLES:
            raise InvalidInputError(
                "Lead manager must be an existing manager or admin",
                "lead_manager_id",
            )

    async def _revoke_live_access(
        self, project_id: UUID, user_ids: tuple[UUID, ...],
    ) -> None:
        task_ids = await self.tasks.list_ids_for_project(project_id)
        scopes = [project_scope(project_id)] + [task_scope(t) for t in task_ids]
        for user_id in user_ids:
            await live_events.revoke(self.hub, user_id, scopes)

    async def _view(self, project: Project) -> ProjectResponse:
        total, completed = await self.projects.count_tasks(project.id)
        return project_view(project, total, completed)
