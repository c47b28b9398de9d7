"""Notification Messages - pure builders for notification text and links.

Invariants:
    - All functions are PURE
    - Links are client-side paths, never absolute URLs
"""

from uuid import UUID


def project_link(project_id: UUID) -> str:
    return f"/projects/{project_id}"


def task_link(task_id: UUID) -> str:
    return f"/tasks/{task_id}"


PROJECTS_LINK = "/projects"


def added_to_project(project_name: str) -> str:
    return f'You have been added to the project: "{project_name}"'


def removed_from_project(project_name: str) -> str:
    return f'You have been removed from the project: "{project_name}"'


def assigned_to_task(task_title: str, project_name: str) -> str:
    return (
        f'You have been assigned to the task: "{task_title}" '
        f'in project "{project_name}"'
    )


def task_status_changed(task_title: str, status: str, project_name: str) -> str:
    return (
        f'Task "{task_title}" status changed to "{status}" '
        f'in project "{project_name}"'
    )


def new_comment(task_title: str, project_name: str, author_name: str) -> str:
    return (
        f'New comment on task "{task_title}" in project "{project_name}" '
        f"by {author_name}"
    )
