"""ORM Models - SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Project is the aggregate root for Tasks; Task owns its TaskComments

Design Decisions:
    - One file per entity
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from workboard.models.user import User  # noqa: F401
from workboard.models.project import Project, project_members  # noqa: F401
from workboard.models.task import Task, TaskDependency  # noqa: F401
from workboard.models.comment import TaskComment  # noqa: F401
from workboard.models.notification import Notification  # noqa: F401
