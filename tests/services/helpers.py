"""Service test helpers - drain live queues and create tasks tersely."""

from workboard.schemas.task import TaskCreate


def drain(connection) -> list[dict]:
    events = []
    while not connection.queue.empty():
        events.append(connection.queue.get_nowait())
    return events


async def make_task(orchestrator, principal, project_id, title, **fields):
    return await orchestrator.create_task(
        principal, project_id, TaskCreate(title=title, **fields),
    )
