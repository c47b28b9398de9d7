"""SQLAlchemy Declarative Base - shared base class for all ORM models.

Invariants:
    - All models and association tables register on Base.metadata
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all Workboard ORM models."""
    pass
