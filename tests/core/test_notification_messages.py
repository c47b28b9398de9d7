"""Notification Messages - tests for pure text and link builders."""

from uuid import uuid4

from workboard.core.notification_messages import (
    added_to_project, assigned_to_task, new_comment, project_link,
    removed_from_project, task_link, task_status_changed,
)


def test_links_are_client_paths():
    uid = uuid4()
    assert project_link(uid) == f"/projects/{uid}"
    assert task_link(uid) == f"/tasks/{uid}"


def test_membership_messages():
    assert added_to_project("Launch") == 'You have been added to the project: "Launch"'
    assert removed_from_project("Launch") == 'You have been removed from the project: "Launch"'


def test_task_messages_name_task_and_project():
    assert assigned_to_task("T1", "Launch") == (
        'You have been assigned to the task: "T1" in project "Launch"'
    )
    assert task_status_changed("T1", "completed", "Launch") == (
        'Task "T1" status changed to "completed" in project "Launch"'
    )
    assert new_comment("T1", "Launch", "Ada Lovelace").endswith("by Ada Lovelace")
