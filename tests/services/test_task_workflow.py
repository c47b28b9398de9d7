"""Tests for task workflow through WorkflowOrchestrator.

Tests cover:
    - Completion gate: a task completes only after every dependency completed
    - Dependency sets: self reference, unknown ids, other projects' tasks
    - Partial updates: unset fields stay, explicit null unassigns
    - Role rules: lead creates/deletes, assignee updates, plain members read only
    - Notifications: new assignee, status change to creator/assignee/lead minus actor
    - Deleting a task drops the edges other tasks held on it
    - Tasks on either end of an edge stay readable and updatable
    - Filtering and ordering of a project's task list, every sort field
    - Live events: new_task, task_updated, task_deleted
"""

from typing import get_args
from uuid import uuid4

import pytest

from tests.services.helpers import drain, make_task
from workboard.core.domain_types import LiveEvent, TaskStatus
from workboard.core.errors import (
    DependencyNotSatisfiedError, ForbiddenError, InvalidDependencySetError,
    InvalidInputError, SelfDependencyError,
)
from workboard.core.notification_messages import assigned_to_task, task_status_changed
from workboard.core.scopes import project_scope, task_scope
from workboard.schemas.project import ProjectCreate
from workboard.schemas.task import TaskFilter, TaskUpdate


# ─── Completion gate ─────────────────────────────────────────────

async def test_task_completes_only_after_dependencies(orchestrator, people, launch):
    lead = people.lead.principal
    t1 = await make_task(orchestrator, lead, launch.id, "T1")
    t2 = await make_task(orchestrator, lead, launch.id, "T2", dependency_ids=[t1.id])
    assert t2.dependency_ids == [t1.id]

    with pytest.raises(DependencyNotSatisfiedError) as exc_info:
        await orchestrator.update_task(lead, t2.id, TaskUpdate(status="completed"))
    assert exc_info.value.pending_ids == [str(t1.id)]
    assert (await orchestrator.get_task(lead, t2.id)).status == TaskStatus.OPEN

    await orchestrator.update_task(lead, t1.id, TaskUpdate(status="completed"))
    done = await orchestrator.update_task(lead, t2.id, TaskUpdate(status="completed"))
    assert done.status == TaskStatus.COMPLETED


async def test_gate_applies_on_create(orchestrator, people, launch):
    lead = people.lead.principal
    t1 = await make_task(orchestrator, lead, launch.id, "T1")
    with pytest.raises(DependencyNotSatisfiedError):
        await make_task(
            orchestrator, lead, launch.id, "T2",
            status="completed", dependency_ids=[t1.id],
        )
    assert len(await orchestrator.get_project_tasks(lead, launch.id)) == 1


async def test_gate_uses_new_dependency_set(orchestrator, people, launch):
    lead = people.lead.principal
    t1 = await make_task(orchestrator, lead, launch.id, "T1")
    t2 = await make_task(orchestrator, lead, launch.id, "T2", dependency_ids=[t1.id])
    done = await orchestrator.update_task(
        lead, t2.id, TaskUpdate(status="completed", dependency_ids=[]),
    )
    assert done.status == TaskStatus.COMPLETED
    assert done.dependency_ids == []


async def test_in_progress_does_not_need_dependencies(orchestrator, people, launch):
    lead = people.lead.principal
    t1 = await make_task(orchestrator, lead, launch.id, "T1")
    t2 = await make_task(orchestrator, lead, launch.id, "T2", dependency_ids=[t1.id])
    moved = await orchestrator.update_task(lead, t2.id, TaskUpdate(status="inProgress"))
    assert moved.status == TaskStatus.IN_PROGRESS


# ─── Dependency sets ─────────────────────────────────────────────

async def test_task_cannot_depend_on_itself(orchestrator, people, launch):
    lead = people.lead.principal
    t1 = await make_task(orchestrator, lead, launch.id, "T1")
    with pytest.raises(SelfDependencyError):
        await orchestrator.update_task(lead, t1.id, TaskUpdate(dependency_ids=[t1.id]))


async def test_unknown_dependency_rejected(orchestrator, people, launch):
    with pytest.raises(InvalidDependencySetError):
        await make_task(
            orchestrator, people.lead.principal, launch.id, "T1",
            dependency_ids=[uuid4()],
        )


async def test_dependency_from_other_project_rejected(orchestrator, people, launch):
    lead = people.lead.principal
    other = await orchestrator.create_project(lead, ProjectCreate(name="Other"))
    foreign = await make_task(orchestrator, lead, other.id, "Foreign")
    with pytest.raises(InvalidDependencySetError) as exc_info:
        await make_task(
            orchestrator, lead, launch.id, "T1", dependency_ids=[foreign.id],
        )
    assert exc_info.value.invalid_ids == [str(foreign.id)]


async def test_duplicate_dependency_ids_collapse(orchestrator, people, launch):
    lead = people.lead.principal
    t1 = await make_task(orchestrator, lead, launch.id, "T1")
    t2 = await make_task(
        orchestrator, lead, launch.id, "T2", dependency_ids=[t1.id, t1.id],
    )
    assert t2.dependency_ids == [t1.id]


async def test_deleting_task_drops_edges_on_it(orchestrator, people, launch):
    lead = people.lead.principal
    t1 = await make_task(orchestrator, lead, launch.id, "T1")
    t2 = await make_task(orchestrator, lead, launch.id, "T2", dependency_ids=[t1.id])
    await orchestrator.delete_task(lead, t1.id)

    reloaded = await orchestrator.get_task(lead, t2.id)
    assert reloaded.dependency_ids == []
    done = await orchestrator.update_task(lead, t2.id, TaskUpdate(status="completed"))
    assert done.status == TaskStatus.COMPLETED


async def test_single_field_update_on_either_end_of_an_edge(orchestrator, people, launch):
    lead = people.lead.principal
    t1 = await make_task(orchestrator, lead, launch.id, "T1")
    t2 = await make_task(orchestrator, lead, launch.id, "T2", dependency_ids=[t1.id])

    upstream = await orchestrator.update_task(lead, t1.id, TaskUpdate(priority="high"))
    downstream = await orchestrator.update_task(lead, t2.id, TaskUpdate(priority="low"))

    assert upstream.dependency_ids == []
    assert upstream.priority.value == "high"
    assert downstream.dependency_ids == [t1.id]
    assert downstream.priority.value == "low"


async def test_list_tasks_with_dependency_chain(orchestrator, people, launch):
    lead = people.lead.principal
    t1 = await make_task(orchestrator, lead, launch.id, "T1")
    t2 = await make_task(orchestrator, lead, launch.id, "T2", dependency_ids=[t1.id])
    t3 = await make_task(orchestrator, lead, launch.id, "T3", dependency_ids=[t2.id])
    await orchestrator.update_task(lead, t1.id, TaskUpdate(title="T1 revised"))

    listed = await orchestrator.get_project_tasks(
        people.alice.principal, launch.id, TaskFilter(sort_by="title", order="asc"),
    )

    assert [(t.title, t.dependency_ids) for t in listed] == [
        ("T1 revised", []), ("T2", [t1.id]), ("T3", [t2.id]),
    ]
    assert (await orchestrator.get_task(lead, t3.id)).dependency_ids == [t2.id]


# ─── Partial updates ─────────────────────────────────────────────

async def test_update_changes_only_given_fields(orchestrator, people, launch):
    lead = people.lead.principal
    task = await make_task(
        orchestrator, lead, launch.id, "Write docs",
        description="API guide", assignee_id=people.alice.id,
    )
    updated = await orchestrator.update_task(lead, task.id, TaskUpdate(priority="high"))
    assert updated.priority.value == "high"
    assert updated.title == "Write docs"
    assert updated.description == "API guide"
    assert updated.assignee_id == people.alice.id


async def test_explicit_null_unassigns(orchestrator, people, launch):
    lead = people.lead.principal
    task = await make_task(
        orchestrator, lead, launch.id, "Write docs", assignee_id=people.alice.id,
    )
    updated = await orchestrator.update_task(lead, task.id, TaskUpdate(assignee_id=None))
    assert updated.assignee_id is None


async def test_unknown_assignee_rejected(orchestrator, people, launch):
    with pytest.raises(InvalidInputError) as exc_info:
        await make_task(
            orchestrator, people.lead.principal, launch.id, "Write docs",
            assignee_id=uuid4(),
        )
    assert exc_info.value.field == "assignee_id"


async def test_assignee_need_not_be_member(orchestrator, people, launch):
    task = await make_task(
        orchestrator, people.lead.principal, launch.id, "Review", assignee_id=people.carol.id,
    )
    assert task.assignee_id == people.carol.id


# ─── Role rules ──────────────────────────────────────────────────

async def test_member_cannot_create_task(orchestrator, people, launch):
    with pytest.raises(ForbiddenError):
        await make_task(orchestrator, people.alice.principal, launch.id, "Sneaky")


async def test_assignee_updates_own_task(orchestrator, people, launch):
    task = await make_task(
        orchestrator, people.lead.principal, launch.id, "Write docs",
        assignee_id=people.alice.id,
    )
    updated = await orchestrator.update_task(
        people.alice.principal, task.id, TaskUpdate(status="inProgress"),
    )
    assert updated.status == TaskStatus.IN_PROGRESS
    with pytest.raises(ForbiddenError):
        await orchestrator.update_task(
            people.bob.principal, task.id, TaskUpdate(status="completed"),
        )


async def test_member_cannot_delete_task(orchestrator, people, launch):
    task = await make_task(
        orchestrator, people.lead.principal, launch.id, "Write docs",
        assignee_id=people.alice.id,
    )
    with pytest.raises(ForbiddenError):
        await orchestrator.delete_task(people.alice.principal, task.id)


async def test_outsider_cannot_list_tasks(orchestrator, people, launch):
    with pytest.raises(ForbiddenError):
        await orchestrator.get_project_tasks(people.carol.principal, launch.id)


# ─── Notifications ───────────────────────────────────────────────

async def test_assignee_notified_on_create(orchestrator, people, launch, notifications_for):
    task = await make_task(
        orchestrator, people.lead.principal, launch.id, "Write docs",
        assignee_id=people.alice.id,
    )
    messages = await notifications_for(people.alice.id)
    assert messages[-1] == assigned_to_task("Write docs", "Launch")
    assert task.assignee_id == people.alice.id


async def test_self_assignment_not_notified(orchestrator, people, launch, notifications_for):
    await make_task(
        orchestrator, people.lead.principal, launch.id, "Plan", assignee_id=people.lead.id,
    )
    assert await notifications_for(people.lead.id) == []


async def test_reassignment_notifies_new_assignee(
    orchestrator, people, launch, notifications_for,
):
    lead = people.lead.principal
    task = await make_task(
        orchestrator, lead, launch.id, "Write docs", assignee_id=people.alice.id,
    )
    await orchestrator.update_task(lead, task.id, TaskUpdate(assignee_id=people.bob.id))
    assert (await notifications_for(people.bob.id))[-1] == assigned_to_task(
        "Write docs", "Launch",
    )


async def test_status_change_notifies_everyone_but_actor(
    orchestrator, people, launch, notifications_for,
):
    task = await make_task(
        orchestrator, people.lead.principal, launch.id, "Write docs",
        assignee_id=people.alice.id,
    )
    alice_before = await notifications_for(people.alice.id)

    await orchestrator.update_task(
        people.alice.principal, task.id, TaskUpdate(status="inProgress"),
    )

    expected = task_status_changed("Write docs", "inProgress", "Launch")
    # lead is both creator and project lead: one notice
    assert await notifications_for(people.lead.id) == [expected]
    assert await notifications_for(people.alice.id) == alice_before


async def test_unchanged_status_sends_nothing(
    orchestrator, people, launch, notifications_for,
):
    task = await make_task(orchestrator, people.lead.principal, launch.id, "Write docs")
    await orchestrator.update_task(
        people.admin.principal, task.id, TaskUpdate(status="open"),
    )
    assert await notifications_for(people.lead.id) == []


# ─── Listing ─────────────────────────────────────────────────────

async def test_filter_and_sort_project_tasks(orchestrator, people, launch):
    lead = people.lead.principal
    await make_task(orchestrator, lead, launch.id, "Bravo", assignee_id=people.alice.id)
    await make_task(orchestrator, lead, launch.id, "Alpha", assignee_id=people.alice.id)
    await make_task(orchestrator, lead, launch.id, "Charlie", priority="high")

    mine = await orchestrator.get_project_tasks(
        people.alice.principal, launch.id,
        TaskFilter(assignee_id=people.alice.id, sort_by="title", order="asc"),
    )
    assert [t.title for t in mine] == ["Alpha", "Bravo"]

    urgent = await orchestrator.get_project_tasks(
        lead, launch.id, TaskFilter(priority="high"),
    )
    assert [t.title for t in urgent] == ["Charlie"]


async def test_every_sort_field_lists_tasks(orchestrator, people, launch):
    lead = people.lead.principal
    await make_task(orchestrator, lead, launch.id, "Bravo", priority="low")
    await make_task(orchestrator, lead, launch.id, "Alpha", priority="high")

    for field in get_args(TaskFilter.model_fields["sort_by"].annotation):
        listed = await orchestrator.get_project_tasks(
            lead, launch.id, TaskFilter(sort_by=field, order="asc"),
        )
        assert {t.title for t in listed} == {"Alpha", "Bravo"}

    by_priority = await orchestrator.get_project_tasks(
        lead, launch.id, TaskFilter(sort_by="priority", order="desc"),
    )
    assert [t.title for t in by_priority] == ["Alpha", "Bravo"]


# ─── Live events ─────────────────────────────────────────────────

async def test_task_events_reach_subscribers(orchestrator, people, launch, subscribe, hub):
    lead = people.lead.principal
    board = await subscribe(people.alice.principal, project_scope(launch.id))

    task = await make_task(orchestrator, lead, launch.id, "Write docs")
    detail = await subscribe(people.bob.principal, task_scope(task.id))
    await orchestrator.update_task(lead, task.id, TaskUpdate(title="Write guides"))
    await orchestrator.delete_task(lead, task.id)

    assert [e["type"] for e in drain(board)] == [
        LiveEvent.NEW_TASK.value, LiveEvent.TASK_UPDATED.value, LiveEvent.TASK_DELETED.value,
    ]
    detail_events = drain(detail)
    assert detail_events[0]["data"]["title"] == "Write guides"
    assert detail_events[1]["type"] == LiveEvent.TASK_DELETED.value
    assert await hub.scopes_of(detail.id) == set()
